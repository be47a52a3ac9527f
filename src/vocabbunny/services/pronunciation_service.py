"""Pronunciation audio and speaking practice checks."""
import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from gtts import gTTS

from vocabbunny.config import settings

logger = logging.getLogger(__name__)


def sanitize_filename(word: str) -> str:
    """Sanitize word for use in filename."""
    # Replace any non-alphanumeric characters with underscore
    return re.sub(r"[^a-zA-Z0-9]", "_", word.lower())


class PronunciationProvider(ABC):
    """One source of pronunciation audio."""
    name: str = "provider"

    @abstractmethod
    def pronounce(self, text: str) -> Optional[str]:
        """Return the path of an audio file for ``text`` or None."""


class CachedAudioProvider(PronunciationProvider):
    """Serves audio generated earlier from the pronunciations directory."""
    name = "cache"

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory or settings.paths.pronunciations_dir)

    def pronounce(self, text: str) -> Optional[str]:
        path = self.directory / f"{sanitize_filename(text)}.mp3"
        if path.exists():
            return str(path)
        return None


class GTTSProvider(PronunciationProvider):
    """Synthesizes audio with Google Text-to-Speech and stores it."""
    name = "gtts"

    def __init__(self, directory: Optional[Path] = None, lang: Optional[str] = None):
        self.directory = Path(directory or settings.paths.pronunciations_dir)
        self.lang = lang or settings.enrichment.target_language

    def pronounce(self, text: str) -> Optional[str]:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{sanitize_filename(text)}.mp3"
        # A partial download must never land on the cached path
        partial = path.with_suffix(".part")
        try:
            tts = gTTS(text=text, lang=self.lang)
            tts.save(str(partial))
            os.replace(partial, path)
        except Exception:
            partial.unlink(missing_ok=True)
            raise
        logger.info(f"Pronunciation generated for word: {text}, file: {path}")
        return str(path)


@dataclass(frozen=True)
class PronunciationResult:
    """Outcome of a pronunciation request."""
    success: bool
    provider: Optional[str] = None
    audio_file: Optional[str] = None


class PronunciationService:
    """Tries pronunciation providers in a fixed priority order."""

    def __init__(self, providers: Optional[Sequence[PronunciationProvider]] = None):
        if providers is None:
            providers = [CachedAudioProvider(), GTTSProvider()]
        self.providers: List[PronunciationProvider] = list(providers)

    def pronounce(self, text: str) -> PronunciationResult:
        """Return audio from the first provider that can supply it."""
        for provider in self.providers:
            try:
                audio_file = provider.pronounce(text)
            except Exception as e:
                logger.warning(f"Provider {provider.name} failed for word: {text}, error: {e}")
                continue
            if audio_file:
                return PronunciationResult(success=True, provider=provider.name, audio_file=audio_file)
        logger.error(f"No pronunciation available for word: {text}")
        return PronunciationResult(success=False)


@dataclass(frozen=True)
class SpeakingResult:
    """Verdict on a recognized speech transcript."""
    transcript: str
    correct: bool
    feedback: str = ""


TOO_SHORT_FEEDBACK = "Too short! Make sure to say the whole word clearly."
ALMOST_FEEDBACK = "Almost, but the pronunciation isn't quite right. Listen again!"


def check_spoken_answer(target: str, transcript: str, min_ratio: Optional[float] = None) -> SpeakingResult:
    """Compare a speech transcript with the expected word.

    Only an exact match after trimming and lower-casing counts as correct.
    """
    if min_ratio is None:
        min_ratio = settings.speaking.min_transcript_ratio
    heard = transcript.strip().lower()
    expected = target.strip().lower()
    if heard == expected:
        return SpeakingResult(transcript=heard, correct=True)
    if len(heard) < len(expected) * min_ratio:
        return SpeakingResult(transcript=heard, correct=False, feedback=TOO_SHORT_FEEDBACK)
    return SpeakingResult(transcript=heard, correct=False, feedback=ALMOST_FEEDBACK)
