"""Word enrichment using Google Translate and WordNet."""
import logging
import re
from datetime import datetime, timedelta
from typing import List, Optional

import nltk
from deep_translator import GoogleTranslator
from nltk.corpus import wordnet

from vocabbunny.config import settings
from vocabbunny.exceptions import EnrichmentError
from vocabbunny.models.records import EnrichedWord, PartOfSpeech
from vocabbunny.monitoring import enrichment_failures

logger = logging.getLogger(__name__)

# WordNet synset pos codes; "s" is a satellite adjective
WORDNET_POS = {
    "n": PartOfSpeech.NOUN,
    "v": PartOfSpeech.VERB,
    "a": PartOfSpeech.ADJECTIVE,
    "s": PartOfSpeech.ADJECTIVE,
    "r": PartOfSpeech.ADVERB,
}

TOKEN_SEPARATORS = re.compile(r"[,;\n]+")


def split_tokens(raw_text: str) -> List[str]:
    """Split user input into distinct word tokens, keeping input order."""
    tokens = []
    seen = set()
    for token in TOKEN_SEPARATORS.split(raw_text):
        token = " ".join(token.split())
        if not token or token.lower() in seen:
            continue
        seen.add(token.lower())
        tokens.append(token)
    return tokens


class EnrichmentService:
    """Turns raw word tokens into translation, part of speech and examples."""
    _last_check: Optional[datetime] = None
    _check_interval = timedelta(days=7)  # Check for corpus updates every 7 days

    def __init__(
        self,
        target_lang: Optional[str] = None,
        native_lang: Optional[str] = None,
        max_examples: Optional[int] = None,
    ):
        self.target_lang = target_lang or settings.enrichment.target_language
        self.native_lang = native_lang or settings.enrichment.native_language
        self.max_examples = max_examples or settings.enrichment.max_examples

    @classmethod
    def _ensure_wordnet(cls) -> None:
        """Download the WordNet corpus when it is missing."""
        current_time = datetime.now()
        if cls._last_check is not None and current_time - cls._last_check <= cls._check_interval:
            return
        try:
            nltk.data.find("corpora/wordnet")
        except LookupError:
            # nltk.download reports failure through its return value
            if not nltk.download("wordnet", quiet=True):
                logger.error("Failed to download NLTK wordnet data")
                raise EnrichmentError("WordNet corpus could not be downloaded")
            logger.info("Downloaded NLTK wordnet data")
        cls._last_check = current_time

    def normalize(self, token: str) -> str:
        """Translate a token of any language into the target language."""
        try:
            text = GoogleTranslator(source="auto", target=self.target_lang).translate(token)
        except Exception as e:
            raise EnrichmentError(f"Could not normalize {token!r}: {e}") from e
        if not text or not text.strip():
            raise EnrichmentError(f"Empty normalization for {token!r}")
        return text.strip()

    def translate(self, word: str) -> str:
        """Translate a target-language word into the native language."""
        try:
            translation = GoogleTranslator(source=self.target_lang, target=self.native_lang).translate(word)
        except Exception as e:
            raise EnrichmentError(f"Could not translate {word!r}: {e}") from e
        if not translation or not translation.strip():
            raise EnrichmentError(f"Empty translation for {word!r}")
        logger.debug(f"Translation generated for word: {word}, translation: {translation}")
        return translation.strip()

    @staticmethod
    def part_of_speech(word: str) -> str:
        """Tag of the word's most common WordNet sense."""
        synsets = wordnet.synsets(word.replace(" ", "_"))
        if not synsets:
            return PartOfSpeech.OTHER.value
        return WORDNET_POS.get(synsets[0].pos(), PartOfSpeech.OTHER).value

    def examples(self, word: str) -> List[str]:
        """Collect example sentences across the word's WordNet senses."""
        sentences = []
        for synset in wordnet.synsets(word.replace(" ", "_")):
            for sentence in synset.examples():
                if sentence not in sentences:
                    sentences.append(sentence)
                if len(sentences) >= self.max_examples:
                    return sentences
        return sentences

    def enrich(self, token: str) -> EnrichedWord:
        """Build the structured entry for a single token."""
        english = self.normalize(token)
        translation = self.translate(english)
        try:
            examples = self.examples(english)
            pos = self.part_of_speech(english)
        except LookupError as e:
            raise EnrichmentError(f"WordNet lookup failed for {english!r}: {e}") from e
        if not examples:
            raise EnrichmentError(f"No example sentences for {english!r}")
        return EnrichedWord(
            english=english,
            translation=translation,
            pos=pos,
            examples=tuple(examples),
        )

    def process(self, raw_text: str) -> List[EnrichedWord]:
        """Enrich every token of the input. Tokens that fail are left out."""
        tokens = split_tokens(raw_text)
        if not tokens:
            return []
        try:
            self._ensure_wordnet()
        except Exception as e:
            enrichment_failures.inc(len(tokens))
            logger.error(f"WordNet corpus unavailable: {e}")
            return []

        results = []
        for token in tokens:
            try:
                results.append(self.enrich(token))
            except EnrichmentError as e:
                enrichment_failures.inc()
                logger.warning(f"Skipping word {token!r}: {e}")
        logger.info(f"Enriched {len(results)} of {len(tokens)} words")
        return results
