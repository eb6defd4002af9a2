"""
Error Types
============
Every failure the game reports to the user derives from RiverRaidError.
"""


class RiverRaidError(Exception):
    """Base class for game errors."""

    exit_code = 1


class ConfigError(RiverRaidError):
    """A GameConfig value is out of range."""


class StartupError(RiverRaidError):
    """The terminal or keyboard cannot be used. Raised before the loop starts."""

    exit_code = 1


class FrameError(RiverRaidError):
    """Terminal I/O failed while drawing or polling a frame."""

    exit_code = 2
