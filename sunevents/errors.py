"""
Exceptions raised by sunevents.
"""


class MathError(ArithmeticError):
    """Raised when the sun never reaches a requested zenith."""
    pass


class GeocodingError(Exception):
    """Raised when a location cannot be found."""
    pass


class TimezoneError(Exception):
    """Raised when timezone resolution fails."""
    pass
