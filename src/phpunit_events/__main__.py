"""Allow running phpunit-events as a module: python -m phpunit_events."""

from phpunit_events.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
