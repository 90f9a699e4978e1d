"""Core data model and exceptions for phpunit-events."""
