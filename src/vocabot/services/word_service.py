"""Service for managing words in a word pool."""
import json
import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from vocabot.config import LearningSettings, settings
from vocabot.exceptions import ParseError, ValidationError
from vocabot.models.word_models import WordEntry, WordPool
from vocabot import monitoring

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_record(record: Any, index: int) -> WordEntry:
    """Validate a raw word record and convert it to a fresh entry.

    Records use the import format ``{"word", "part_of_speech", "explanation"}``.
    ``index`` is the 1-based position reported in errors.
    """
    if not isinstance(record, Mapping):
        raise ValidationError(index, None, "must be an object with word, part_of_speech and explanation")

    if _is_blank(record.get("word")):
        raise ValidationError(index, "word", "missing or empty 'word'")

    if _is_blank(record.get("part_of_speech")):
        raise ValidationError(index, "part_of_speech", "missing or empty 'part_of_speech'")

    explanations = record.get("explanation")
    if not isinstance(explanations, list) or not explanations:
        raise ValidationError(index, "explanation", "'explanation' must be a non-empty list")

    for position, explanation in enumerate(explanations, start=1):
        if _is_blank(explanation):
            raise ValidationError(index, "explanation", f"explanation #{position} is empty")

    return WordEntry(
        word=record["word"],
        part_of_speech=record["part_of_speech"],
        explanations=list(explanations),
    )


def parse_word_list(text: str) -> List[Any]:
    """Parse a JSON array of word records."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e

    if not isinstance(data, list):
        raise ParseError("Word list must be a JSON array")
    return data


class WordService:
    """Service for managing words in a word pool."""

    def __init__(self, pool: WordPool, learning_settings: Optional[LearningSettings] = None):
        """Initialize the service with the pool it manages."""
        self.pool = pool
        self.settings = learning_settings or settings.learning

    def import_words(self, records: Iterable[Any]) -> List[WordEntry]:
        """Validate a batch of records and append them to the pool.

        The whole batch is validated before anything is added, so a failing
        record leaves the pool untouched.
        """
        records = list(records)
        if len(records) > self.settings.max_import_words:
            raise ValidationError(
                self.settings.max_import_words + 1,
                None,
                f"too many words, at most {self.settings.max_import_words} can be imported at once",
            )

        try:
            entries = [validate_record(record, index) for index, record in enumerate(records, start=1)]
        except ValidationError as e:
            monitoring.error_count.labels(error_type="validation").inc()
            logger.info(f"Rejected word import: {e}")
            raise

        for entry in entries:
            entry.reset(self.settings.initial_weight)
        self.pool.entries.extend(entries)

        monitoring.words_imported.inc(len(entries))
        logger.info(f"Imported {len(entries)} words, pool size is {len(self.pool)}")
        return entries

    def import_json(self, text: str) -> List[WordEntry]:
        """Parse a JSON word list and import it."""
        try:
            records = parse_word_list(text)
        except ParseError as e:
            monitoring.error_count.labels(error_type="parse").inc()
            logger.info(f"Rejected word list: {e}")
            raise
        return self.import_words(records)

    def reset(self) -> None:
        """Reset weights and counters of every entry."""
        for entry in self.pool.entries:
            entry.reset(self.settings.initial_weight)
        logger.debug(f"Reset {len(self.pool)} words")

    def clear(self) -> None:
        """Remove all entries from the pool."""
        self.pool.entries.clear()
        logger.debug("Word pool cleared")
