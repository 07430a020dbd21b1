"""
Exceptions raised by the advisor.

Boundary failures (malformed notation, impossible hands) are ValueErrors so
callers validating user input can catch them generically. Internal invariant
violations are AssertionErrors: they signal a bug, not bad input.
"""


class AdvisorError(Exception):
    """Base class for all advisor errors"""


class TileParseError(AdvisorError, ValueError):
    """Malformed tile, combination or snapshot text"""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class HandError(AdvisorError, ValueError):
    """Hand violates the 14-tile or 4-copy limits"""


class DecompositionError(AdvisorError, AssertionError):
    """Decomposition consumed tiles the hand does not hold"""
