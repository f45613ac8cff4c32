"""Word pool data structures."""
from dataclasses import dataclass, field
from typing import List

from vocabot.config import INITIAL_WEIGHT


@dataclass
class WordEntry:
    """A vocabulary item under training."""
    word: str
    part_of_speech: str
    explanations: List[str]
    weight: float = INITIAL_WEIGHT
    occurrences: int = 0
    accumulated_weight: float = 0.0  # sum of post-assessment weights

    def reset(self, initial_weight: float = INITIAL_WEIGHT) -> None:
        """Forget all learning progress for this word."""
        self.weight = initial_weight
        self.occurrences = 0
        self.accumulated_weight = 0.0

    @property
    def unfamiliarity(self) -> float:
        """Average weight per presentation."""
        if not self.occurrences:
            raise ZeroDivisionError(f"Word '{self.word}' was never assessed")
        return self.accumulated_weight / self.occurrences


@dataclass(frozen=True)
class LearningResult:
    """Per-word statistics of a finished session."""
    word: str
    unfamiliarity: float
    occurrences: int
    accumulated_weight: float

    @classmethod
    def from_entry(cls, entry: WordEntry) -> "LearningResult":
        return cls(
            word=entry.word,
            unfamiliarity=entry.unfamiliarity,
            occurrences=entry.occurrences,
            accumulated_weight=entry.accumulated_weight,
        )


@dataclass
class WordPool:
    """Ordered collection of word entries owned by one learner."""
    entries: List[WordEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index: int) -> WordEntry:
        return self.entries[index]
