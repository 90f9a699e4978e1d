"""Classify a line of runner output and decode it into one record."""

from __future__ import annotations

from typing import TYPE_CHECKING

from phpunit_events.parsers.escape import EscapeCodec
from phpunit_events.parsers.recognizers import default_recognizers
from phpunit_events.parsers.service_messages import ServiceMessageDecoder

if TYPE_CHECKING:
    from phpunit_events.core.models import DecodedRecord
    from phpunit_events.parsers.recognizers import LineRecognizer


class OutputParser:
    """Decode runner output one line at a time.

    Service messages are tried first, then each recognizer in order. A line
    nothing recognizes decodes to ``None``.
    """

    def __init__(
        self,
        decoder: ServiceMessageDecoder | None = None,
        recognizers: list[LineRecognizer] | None = None,
    ) -> None:
        self.decoder = decoder or ServiceMessageDecoder(EscapeCodec())
        self.recognizers = recognizers if recognizers is not None else default_recognizers()

    def parse(self, line: str) -> DecodedRecord | None:
        """Decode a single line.

        Raises:
            MalformedLineError: If a line is claimed by the service-message
                marker or a recognizer but cannot be decoded.
        """
        if self.decoder.is_service_message(line):
            return self.decoder.decode(line)

        for recognizer in self.recognizers:
            if recognizer.is_match(line):
                return recognizer.parse(line)
        return None
