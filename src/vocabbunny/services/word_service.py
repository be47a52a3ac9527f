"""Service for managing a user's words."""
import logging
from datetime import UTC, datetime
from typing import Dict, List, Optional

from vocabbunny.config import settings
from vocabbunny.models.records import WordRecord
from vocabbunny.monitoring import words_added, words_deleted
from vocabbunny.services.enrichment_service import EnrichmentService
from vocabbunny.services.review_engine import filter_words, group_by_theme
from vocabbunny.services.word_store import WordStore

logger = logging.getLogger(__name__)


class WordService:
    """Service for managing a user's words."""

    def __init__(self, store: WordStore, enrichment: Optional[EnrichmentService] = None):
        """Initialize the service with a word store."""
        self.store = store
        self.enrichment = enrichment or EnrichmentService()

    def add_words(
        self,
        profile_id: str,
        raw_text: str,
        theme: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[WordRecord]:
        """Enrich the words typed by the user and add them to the list.

        Returns the new words. An empty list means nothing could be enriched
        and the user should be told so.
        """
        if not raw_text.strip():
            return []
        theme = (theme or "").strip() or settings.learning.default_theme
        now = now or datetime.now(UTC)

        enriched = self.enrichment.process(raw_text)
        if not enriched:
            logger.warning(f"No words could be enriched for user {profile_id}")
            return []

        records = [
            WordRecord(
                english=item.english,
                translation=item.translation,
                pos=item.pos,
                examples=item.examples,
                theme=theme,
                created_at=now,
            )
            for item in enriched
        ]
        added = self.store.add_words(profile_id, records)
        words_added.inc(len(added))
        logger.info(f"Added {len(added)} new words for user {profile_id} under theme {theme!r}")
        return added

    def get_word(self, profile_id: str, word_id: str) -> WordRecord:
        """Get a word by its ID."""
        return self.store.get_word(profile_id, word_id)

    def update_word(self, profile_id: str, word_id: str, **kwargs) -> WordRecord:
        """Update a word's content fields."""
        return self.store.update_word(profile_id, word_id, kwargs)

    def delete_word(self, profile_id: str, word_id: str) -> None:
        """Delete a word from the user's list."""
        self.store.delete_word(profile_id, word_id)
        words_deleted.inc()
        logger.info(f"Deleted word {word_id} for user {profile_id}")

    def toggle_star(self, profile_id: str, word_id: str) -> WordRecord:
        """Flip the starred flag of a word."""
        word = self.store.get_word(profile_id, word_id)
        return self.store.update_word(profile_id, word_id, {"is_starred": not word.is_starred})

    def get_starred_words(self, profile_id: str) -> List[WordRecord]:
        """Get the user's starred words."""
        return filter_words(self.store.list_words(profile_id), starred_only=True)

    def search_words(self, profile_id: str, query: str = "", starred_only: bool = False) -> List[WordRecord]:
        """Search words by text, translation or theme."""
        return filter_words(self.store.list_words(profile_id), query, starred_only)

    def get_words_by_theme(
        self,
        profile_id: str,
        query: str = "",
        starred_only: bool = False,
    ) -> Dict[str, List[WordRecord]]:
        """Get matching words grouped by theme."""
        return group_by_theme(self.search_words(profile_id, query, starred_only))
