"""Learning service for adaptive word selection and session results."""
import logging
import random
from typing import List, Optional, Union

from vocabot.config import LearningSettings, settings
from vocabot.exceptions import InvalidStateError
from vocabot.models.training_models import Assessment, SessionState
from vocabot.models.word_models import LearningResult, WordEntry, WordPool
from vocabot.services.word_service import WordService
from vocabot import monitoring

logger = logging.getLogger(__name__)


class LearningService:
    """Runs a learning session over a word pool.

    Words are drawn by weighted random sampling. Each self-assessment
    multiplies or divides the weight of the current word by the adjust
    factor, and words whose weight falls below the mastery threshold are not
    shown again until the pool is reset. The session finishes when no word
    is left or when the user ends it early.
    """

    def __init__(
        self,
        pool: WordPool,
        rng: Optional[random.Random] = None,
        learning_settings: Optional[LearningSettings] = None,
    ):
        """Initialize the service with a word pool and a random generator."""
        self.pool = pool
        self.settings = learning_settings or settings.learning
        self.rng = rng or random.Random(self.settings.random_seed)
        self.state = SessionState.IDLE
        self.current_index: Optional[int] = None
        self.rounds = 0
        self._results: List[LearningResult] = []

    def is_eligible(self, entry: WordEntry) -> bool:
        """Check if the word can still be shown in this session."""
        return entry.weight >= self.settings.mastery_threshold

    def get_eligible_indices(self) -> List[int]:
        """Get pool indices of words that are not mastered yet."""
        return [index for index, entry in enumerate(self.pool) if self.is_eligible(entry)]

    def get_current_word(self) -> Optional[WordEntry]:
        """Get the word currently presented, if any."""
        if self.current_index is None:
            return None
        return self.pool[self.current_index]

    def start_session(self, pool: Optional[WordPool] = None) -> Optional[WordEntry]:
        """Start a session and select the first word.

        Finishes immediately when the pool has no eligible words.
        """
        if pool is not None:
            self.pool = pool
        if self.state == SessionState.PRESENTING:
            monitoring.active_sessions.dec()

        self.state = SessionState.IDLE
        self.current_index = None
        self.rounds = 0
        self._results = []

        monitoring.sessions_started.inc()
        logger.info(f"Starting session with {len(self.pool)} words")
        return self.select_next()

    def select_next(self) -> Optional[WordEntry]:
        """Pick the next word with probability proportional to its weight."""
        eligible = self.get_eligible_indices()
        if not eligible:
            self._finish("mastered")
            return None

        total = sum(self.pool[index].weight for index in eligible)
        threshold = self.rng.random() * total

        # Last eligible word if rounding leaves the walk without a match
        selected = eligible[-1]
        cumulative = 0.0
        for index in eligible:
            cumulative += self.pool[index].weight
            if cumulative >= threshold:
                selected = index
                break

        if self.state != SessionState.PRESENTING:
            monitoring.active_sessions.inc()
        self.state = SessionState.PRESENTING
        self.current_index = selected
        return self.pool[selected]

    def assess(self, action: Union[Assessment, str]) -> Optional[WordEntry]:
        """Apply the user's self-assessment to the current word and move on.

        Returns the next word, or None when the session has finished.
        """
        action = Assessment(action)
        if self.state != SessionState.PRESENTING or self.current_index is None:
            raise InvalidStateError("No word is awaiting assessment")

        entry = self.pool[self.current_index]
        if action == Assessment.UNKNOWN:
            entry.weight *= self.settings.adjust_factor
        elif action == Assessment.KNOWN:
            entry.weight /= self.settings.adjust_factor

        entry.occurrences += 1
        entry.accumulated_weight += entry.weight
        self.rounds += 1

        monitoring.assessments.labels(action=action.value).inc()
        logger.debug(f"Assessed '{entry.word}' as {action.value}, weight is now {entry.weight:.4f}")
        if not self.is_eligible(entry):
            logger.debug(f"Word '{entry.word}' mastered after {entry.occurrences} rounds")

        return self.select_next()

    def end_early(self) -> List[LearningResult]:
        """Finish the session before all words are mastered."""
        if self.state != SessionState.PRESENTING:
            raise InvalidStateError("No session in progress")
        self._finish("early")
        return list(self._results)

    def aggregate(self) -> List[LearningResult]:
        """Compute per-word results, most unfamiliar words first.

        Words that were never assessed are left out. Ties keep pool order.
        """
        results = [LearningResult.from_entry(entry) for entry in self.pool if entry.occurrences > 0]
        return sorted(results, key=lambda result: result.unfamiliarity, reverse=True)

    def get_results(self) -> List[LearningResult]:
        """Get the results of the finished session."""
        if self.state != SessionState.FINISHED:
            raise InvalidStateError("Results are available only after the session has finished")
        return list(self._results)

    def reset(self) -> None:
        """Reset weights and counters of every word in the pool."""
        WordService(self.pool, self.settings).reset()

    def restart(self, pool: Optional[WordPool] = None) -> Optional[WordEntry]:
        """Reset the pool and start a new session with the same words."""
        if pool is not None:
            self.pool = pool
        self.reset()
        return self.start_session()

    def _finish(self, reason: str) -> None:
        if self.state == SessionState.PRESENTING:
            monitoring.active_sessions.dec()
        self.state = SessionState.FINISHED
        self.current_index = None
        self._results = self.aggregate()

        monitoring.sessions_finished.labels(reason=reason).inc()
        monitoring.session_rounds.observe(self.rounds)
        logger.info(
            f"Session finished ({reason}) after {self.rounds} rounds, "
            f"{len(self._results)} words practiced"
        )
