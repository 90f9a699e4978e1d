"""TeamCity service-message escaping.

Values inside a service message use ``|`` as an escape character::

    ||  ->  |
    |'  ->  '
    |n  ->  newline
    |r  ->  carriage return
    |]  ->  ]
    |[  ->  [

Both directions are applied in a single pass so that, for example, an
escaped pipe followed by ``n`` (``||n``) never turns into a newline.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Any, Callable

SINGLE_QUOTE_PLACEHOLDER = "%%%SINGLE_QUOTE%%%"

_ESCAPES = {
    "|": "||",
    "'": "|'",
    "\n": "|n",
    "\r": "|r",
    "]": "|]",
    "[": "|[",
}
_UNESCAPES = {escaped[1]: literal for literal, escaped in _ESCAPES.items()}

_LITERAL_PATTERN = re.compile(r"[|'\n\r\]\[]")
_ESCAPED_PATTERN = re.compile(r"\|([|'nr\]\[])")
# |' that is not itself the tail of an escaped pipe (||')
_ESCAPED_QUOTE_PATTERN = re.compile(r"(?<!\|)((?:\|\|)*)\|'")


class EscapeCodec:
    """Transcode between escaped service-message values and literal text.

    Every method accepts a plain value or a container. Strings are
    transformed; mappings, lists and dataclass instances are walked and a new
    object is returned with every string value transformed. Anything else is
    returned unchanged.
    """

    def escape(self, value: Any) -> Any:
        return _transform(value, _escape_text)

    def unescape(self, value: Any) -> Any:
        return _transform(value, _unescape_text)

    def escape_single_quote(self, value: Any) -> Any:
        """Hide escaped single quotes behind a placeholder.

        Used before tokenizing so that ``|'`` inside a value is not taken for
        the quote that closes it.
        """
        return _transform(value, _protect_quotes)

    def unescape_single_quote(self, value: Any) -> Any:
        """Turn placeholders left by ``escape_single_quote`` into literal quotes."""
        return _transform(value, _restore_quotes)


def _escape_text(text: str) -> str:
    return _LITERAL_PATTERN.sub(lambda m: _ESCAPES[m.group()], text)


def _unescape_text(text: str) -> str:
    return _ESCAPED_PATTERN.sub(lambda m: _UNESCAPES[m.group(1)], text)


def _protect_quotes(text: str) -> str:
    return _ESCAPED_QUOTE_PATTERN.sub(lambda m: m.group(1) + SINGLE_QUOTE_PLACEHOLDER, text)


def _restore_quotes(text: str) -> str:
    return text.replace(SINGLE_QUOTE_PLACEHOLDER, "'")


def _transform(value: Any, fn: Callable[[str], str]) -> Any:
    if isinstance(value, str):
        return fn(value)
    if isinstance(value, dict):
        return {key: _transform(item, fn) for key, item in value.items()}
    if isinstance(value, list):
        return [_transform(item, fn) for item in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        changes = {
            f.name: _transform(getattr(value, f.name), fn)
            for f in dataclasses.fields(value)
            if f.init
        }
        return dataclasses.replace(value, **changes)
    return value
