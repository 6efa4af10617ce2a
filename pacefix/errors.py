"""Error kinds raised by the pace fixer.

Every error is a ``ValueError`` so callers that only care about bad input
can catch that; the CLI catches :class:`PaceFixError`.
"""


class PaceFixError(ValueError):
    """Base class for every failure the pace fixer reports."""


class InvalidConfigurationError(PaceFixError):
    """Options are missing, contradictory or of the wrong type."""


class LengthMismatchError(PaceFixError):
    """Per-lap speed count differs from the number of laps in the file."""

    def __init__(self, speeds: int, laps: int):
        super().__init__(
            f"Speeds array length ({speeds}) must match lap count in fit file ({laps})"
        )
        self.speeds = speeds
        self.laps = laps


class MissingRequiredMessageError(PaceFixError):
    """A message every FIT activity must carry is absent."""

    def __init__(self, message_name: str):
        super().__init__(f"Required '{message_name}' message not found in input")
        self.message_name = message_name


class DegenerateActivityError(PaceFixError):
    """Activity has no timer time, so no average speed can be derived."""


class InvalidFormatError(PaceFixError):
    """A pace string does not match MM:SS."""


class FITDecodeError(PaceFixError):
    """Input bytes could not be decoded as a FIT file."""
