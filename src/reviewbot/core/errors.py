from __future__ import annotations


class ReviewBotError(Exception):
    """Base class for errors raised by the review bot."""


class ConfigError(ReviewBotError):
    """Required configuration is missing or invalid."""

    def __init__(self, missing: list[str] | None = None, invalid: list[str] | None = None):
        self.missing = missing or []
        self.invalid = invalid or []
        problems = []
        if self.missing:
            problems.append(f"Missing required environment variables: {', '.join(self.missing)}")
        if self.invalid:
            problems.append(f"Invalid environment variables: {', '.join(self.invalid)}")
        super().__init__("; ".join(problems))


class MalformedSuggestionResponse(ReviewBotError):
    """The model's suggestion reply could not be parsed as a JSON list."""
