"""Exceptions raised by the review core and its collaborators."""


class VocabBunnyError(Exception):
    """Base class for application errors."""


class EmptyPoolError(VocabBunnyError):
    """The profile has no words, so no quiz can start."""


class WordNotFoundError(VocabBunnyError, LookupError):
    """A word id does not reference a word of the profile."""

    def __init__(self, profile_id: str, word_id: str):
        super().__init__(f"Word {word_id} not found for user {profile_id}")
        self.profile_id = profile_id
        self.word_id = word_id


class ProfileNotFoundError(VocabBunnyError, LookupError):
    """No user profile exists with the given id."""

    def __init__(self, profile_id: str):
        super().__init__(f"User {profile_id} not found")
        self.profile_id = profile_id


class PersistenceError(VocabBunnyError):
    """The word store failed to read or write."""


class EnrichmentError(VocabBunnyError):
    """The enrichment service could not produce data for a token."""
