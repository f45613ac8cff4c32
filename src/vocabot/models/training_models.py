"""Models for training-related data structures."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from vocabot.models.word_models import WordEntry


class Assessment(Enum):
    """Self-assessment given by the user after flipping a card."""
    UNKNOWN = "unknown"  # User did not know the word
    VAGUE = "vague"  # User vaguely remembered the word
    KNOWN = "known"  # User knew the word


class SessionState(Enum):
    """Phase of a learning session."""
    IDLE = "idle"  # No session started yet
    PRESENTING = "presenting"  # A word is shown and awaits assessment
    FINISHED = "finished"  # Results are available


@dataclass
class CardRequest:
    """Represents a card shown to the user."""
    word: WordEntry
    message: str
    buttons: List[List[Dict[str, str]]] = field(default_factory=list)
    revealed: bool = False
