"""
Document-level decode failures.
"""


class DecodeError(ValueError):
    """The document as a whole could not be turned into sale records."""
