"""Errors raised by the learning core."""
from typing import Optional


class VocabotError(Exception):
    """Base class for all vocabot errors."""


class ValidationError(VocabotError, ValueError):
    """A word record failed validation during import.

    ``index`` is the 1-based position of the record in the imported batch.
    """

    def __init__(self, index: int, field: Optional[str], reason: str):
        self.index = index
        self.field = field
        self.reason = reason
        super().__init__(f"Word #{index}: {reason}")


class ParseError(VocabotError, ValueError):
    """Serialized word list could not be parsed."""


class InvalidStateError(VocabotError, RuntimeError):
    """Operation is not allowed in the current session state."""
