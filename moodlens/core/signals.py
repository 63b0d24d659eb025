"""
Text signal extraction for journal notes.

Derives an optional tone score in [-1, 1] and up to six theme keywords from
a note. Two interchangeable backends implement the same contract:

- LexiconBackend: VADER sentiment for tone, NLTK lemmatizer and
  part-of-speech tagger for keywords when their data is installed.
- HeuristicBackend: fixed positive/negative word lists for tone and plain
  lowercase frequency counting for keywords.

The backend is resolved once at startup (resolve_backend) and injected into
TextSignalExtractor, so nothing else in the engine knows which one runs.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import replace
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from nltk import pos_tag
from nltk.stem import WordNetLemmatizer
from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from moodlens.core.config import EngineConfig
from moodlens.core.models import DerivedSignals, Entry, clamp_tone

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"\w+")

# Penn Treebank prefixes -> WordNet part of speech
_NOUN_TAGS = ('NN',)
_ADJECTIVE_TAGS = ('JJ',)

Lemmatize = Callable[[str, Optional[str]], str]
Tagger = Callable[[List[str]], List[Tuple[str, str]]]


def _wordnet_pos(penn_tag: str) -> Optional[str]:
    if penn_tag.startswith(_NOUN_TAGS):
        return 'n'
    if penn_tag.startswith(_ADJECTIVE_TAGS):
        return 'a'
    return None


# ============================================================================
# KEYWORD RANKING
# ============================================================================

class KeywordRanker:
    """
    Frequency-ranked theme keywords with optional lemmatizer and tagger.

    Without a tagger every surviving token is a candidate; with one, only
    nouns and adjectives are. Ties are broken by ascending lexical order so
    the result is stable for a given input and capability set.
    """

    def __init__(self, lemmatize: Optional[Lemmatize] = None,
                 tagger: Optional[Tagger] = None,
                 stopwords: Optional[FrozenSet[str]] = None,
                 limit: int = EngineConfig.KEYWORD_LIMIT):
        self.lemmatize = lemmatize
        self.tagger = tagger
        self.stopwords = stopwords if stopwords is not None else EngineConfig.keyword_stopwords()
        self.limit = limit

    def rank(self, text: str) -> List[str]:
        words = _WORD_PATTERN.findall(text)
        if not words:
            return []

        tagged = self.tagger(words) if self.tagger else None
        counts: Counter = Counter()

        for index, word in enumerate(words):
            if len(word) < EngineConfig.KEYWORD_MIN_LENGTH or not word.isalpha():
                continue

            pos = _wordnet_pos(tagged[index][1]) if tagged else None
            token = word.lower()
            normalized = token
            if self.lemmatize:
                normalized = (self.lemmatize(token, pos) or token).lower()

            if normalized in self.stopwords:
                continue
            if tagged and pos is None:
                continue

            counts[normalized] += 1

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [word for word, _ in ranked[:self.limit]]


# ============================================================================
# BACKENDS
# ============================================================================

class SignalBackend(ABC):
    """Contract every text signal backend satisfies."""

    name: str = "abstract"

    @abstractmethod
    def tone(self, text: str) -> Optional[float]:
        """Tone in [-1, 1], or None when the backend has no opinion."""

    @abstractmethod
    def keywords(self, text: str) -> List[str]:
        """Up to six keywords, most frequent first."""


class HeuristicBackend(SignalBackend):
    """Word-list tone and lowercase frequency keywords. No external data needed."""

    name = "heuristic"

    def __init__(self, positive: Optional[Sequence[str]] = None,
                 negative: Optional[Sequence[str]] = None):
        self.positive = list(positive or EngineConfig.POSITIVE_WORDS)
        self.negative = list(negative or EngineConfig.NEGATIVE_WORDS)
        self.ranker = KeywordRanker()

    def tone(self, text: str) -> Optional[float]:
        lower = text.lower()
        if not lower.strip():
            return None

        pos_count = sum(1 for word in self.positive if word in lower)
        neg_count = sum(1 for word in self.negative if word in lower)
        total = max(pos_count + neg_count, 1)
        return clamp_tone((pos_count - neg_count) / total)

    def keywords(self, text: str) -> List[str]:
        return self.ranker.rank(text)


class LexiconBackend(SignalBackend):
    """VADER tone plus NLTK-assisted keywords."""

    name = "lexicon"

    def __init__(self, analyzer: Optional[SentimentIntensityAnalyzer] = None,
                 lemmatize: Optional[Lemmatize] = None,
                 tagger: Optional[Tagger] = None):
        self.analyzer = analyzer or SentimentIntensityAnalyzer()
        self.ranker = KeywordRanker(lemmatize=lemmatize, tagger=tagger)

    @property
    def capabilities(self) -> List[str]:
        caps = ['sentiment']
        if self.ranker.lemmatize:
            caps.append('lemma')
        if self.ranker.tagger:
            caps.append('pos')
        return caps

    def tone(self, text: str) -> Optional[float]:
        if not text.strip():
            return None
        scores = self.analyzer.polarity_scores(text)
        # No lexicon hit on either side: no opinion rather than a neutral 0
        if not scores.get('pos') and not scores.get('neg'):
            return None
        return clamp_tone(scores['compound'])

    def keywords(self, text: str) -> List[str]:
        return self.ranker.rank(text)


# ============================================================================
# BACKEND RESOLUTION
# ============================================================================

def _probe_lemmatizer() -> Optional[Lemmatize]:
    lemmatizer = WordNetLemmatizer()
    try:
        lemmatizer.lemmatize("probes")
    except LookupError:
        logger.warning("[SIGNALS] WordNet data not installed, keywords will not be lemmatized")
        return None

    def lemmatize(token: str, pos: Optional[str]) -> str:
        return lemmatizer.lemmatize(token, pos=pos or 'n')

    return lemmatize


def _probe_tagger() -> Optional[Tagger]:
    try:
        pos_tag(["probe"])
    except LookupError:
        logger.warning("[SIGNALS] POS tagger data not installed, keywords will not be filtered by word class")
        return None
    return pos_tag


def build_lexicon_backend() -> LexiconBackend:
    backend = LexiconBackend(lemmatize=_probe_lemmatizer(), tagger=_probe_tagger())
    logger.info(f"[SIGNALS] Lexicon backend ready ({', '.join(backend.capabilities)})")
    return backend


def resolve_backend(preference: str = "auto") -> SignalBackend:
    """
    Picks the signal backend once, at startup.

    Args:
        preference: 'auto' (lexicon, falling back to heuristic if the VADER
            lexicon cannot be loaded), 'lexicon' (errors propagate) or
            'heuristic'.

    Raises:
        ValueError: If the preference is not a known backend name.
    """
    if preference == "heuristic":
        logger.info("[SIGNALS] Using heuristic backend")
        return HeuristicBackend()
    if preference == "lexicon":
        return build_lexicon_backend()
    if preference != "auto":
        raise ValueError(f"Unknown signal backend: {preference!r}")

    try:
        return build_lexicon_backend()
    except OSError as e:
        logger.warning(f"[SIGNALS] Lexicon backend unavailable ({e}), using heuristic backend")
        return HeuristicBackend()


# ============================================================================
# EXTRACTOR
# ============================================================================

class TextSignalExtractor:
    """Derives DerivedSignals from note text through an injected backend."""

    def __init__(self, backend: SignalBackend):
        self.backend = backend

    def derive(self, note: str) -> DerivedSignals:
        trimmed = (note or "").strip()
        if not trimmed:
            return DerivedSignals(tone=None, keywords=())

        return DerivedSignals(
            tone=self.backend.tone(trimmed),
            keywords=tuple(self.backend.keywords(trimmed)[:EngineConfig.KEYWORD_LIMIT]),
        )

    def with_note(self, entry: Entry, note: str) -> Entry:
        """Copy of entry carrying the new note and signals recomputed from it."""
        return replace(entry, note=note).with_derived(self.derive(note))
