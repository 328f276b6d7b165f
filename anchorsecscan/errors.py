"""Exception types raised by the scanner's outer layers."""


class ScannerError(Exception):
    """Base class for errors surfaced to the command line."""


class ConfigError(ScannerError):
    """Invalid scan configuration (bad path, unknown format, bad pattern)."""
