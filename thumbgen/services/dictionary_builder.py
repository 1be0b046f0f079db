"""Channel keyword dictionary built with TF-IDF weighting."""
import math
import re
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..core.config import settings
from ..core.exceptions import ValidationError
from ..models.channel import ChannelDictionary, ChannelDocument, Keyword
from ..utils.logging import CorrelatedLogger
from .cache_service import TTLCache

STOP_WORDS = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "were", "will", "with", "this", "you", "your", "our",
    "but", "not", "can", "all", "how", "what", "why",
])

HASHTAG_WEIGHT = 2.0
PHRASE_WEIGHT = 1.5

CATEGORY_TERMS: Dict[str, List[str]] = {
    "tutorial": ["how to", "tutorial", "guide", "learn", "step by step"],
    "entertainment": ["funny", "amazing", "best", "incredible", "awesome"],
    "review": ["review", "comparison", "vs", "versus", "unboxing"],
    "news": ["breaking", "news", "update", "latest", "announcement"],
    "gaming": ["gameplay", "playthrough", "gaming", "stream", "live"],
    "tech": ["technology", "software", "hardware", "programming", "code"],
    "lifestyle": ["vlog", "daily", "routine", "life", "experience"],
    "educational": ["education", "course", "lesson", "training", "workshop"],
}

NICHE_TERMS: Dict[str, List[str]] = {
    "gaming": ["game", "gaming", "playthrough", "minecraft", "fortnite"],
    "tech": ["technology", "programming", "coding", "software", "hardware"],
    "education": ["learn", "tutorial", "guide", "howto", "education"],
    "entertainment": ["vlog", "reaction", "comedy", "funny", "entertainment"],
    "business": ["business", "marketing", "entrepreneur", "startup", "finance"],
    "lifestyle": ["lifestyle", "vlog", "daily", "routine", "personal"],
    "news": ["news", "update", "latest", "breaking", "report"],
    "review": ["review", "unboxing", "comparison", "testing", "hands-on"],
}

_TOKEN_STRIP = re.compile(r"[^\w\s#]")
_PHRASE_STRIP = re.compile(r"[^\w\s]")
_HASHTAG = re.compile(r"#[\w-]+")
_QUOTED = re.compile(r"\"([^\"]+)\"|(?<!\w)'([^']+)'(?!\w)")


def tokenize(text: str) -> List[str]:
    """Lower-case, strip punctuation except '#', drop short and stop words."""
    words = _TOKEN_STRIP.sub("", text.lower()).split()
    return [w for w in words if (len(w) > 2 or w.startswith("#")) and w not in STOP_WORDS]


def normalize_phrase(text: str) -> str:
    return " ".join(_PHRASE_STRIP.sub("", text.lower()).split())


def extract_hashtags(text: str) -> List[str]:
    return [tag.lower() for tag in _HASHTAG.findall(text)]


def extract_phrases(text: str) -> List[str]:
    """Quoted phrases plus consecutive non-overlapping word triples."""
    phrases = []
    for double, single in _QUOTED.findall(text):
        phrase = normalize_phrase(double or single)
        if phrase:
            phrases.append(phrase)

    words = normalize_phrase(text).split()
    for i in range(0, len(words) - 2, 3):
        phrases.append(" ".join(words[i:i + 3]))

    return phrases


class ChannelDictionaryBuilder:
    """
    Builds a channel's keyword dictionary and niche classification.

    ``build`` is a pure function of its corpus apart from the timestamp,
    which comes from the injectable clock. Built dictionaries can be kept
    in a TTL store keyed by channel id.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        store: Optional[TTLCache] = None,
        max_keywords: Optional[int] = None
    ):
        self.clock = clock or datetime.now
        self.store = store if store is not None else TTLCache(
            settings.pattern_cache_ttl_hours, clock=self.clock, namespace="dictionary"
        )
        self.max_keywords = max_keywords or settings.max_keywords
        self.logger = CorrelatedLogger(__name__)

    def build(self, channel_id: str, documents: Sequence[ChannelDocument]) -> ChannelDictionary:
        if not documents:
            raise ValidationError("At least one document is required", {"channel_id": channel_id})

        docs = [f"{doc.title} {doc.description}".strip() for doc in documents]
        keywords = self._weigh_keywords(docs)

        ranked = sorted(keywords.items(), key=lambda item: (-item[1], item[0]))
        top = [Keyword(word=word, weight=weight) for word, weight in ranked[:self.max_keywords]]

        categories = self.detect_categories(keywords)
        primary_category = "other"
        best_score = 0.0
        for name, score in categories.items():
            if score > best_score:
                best_score, primary_category = score, name

        dictionary = ChannelDictionary(
            channel_id=channel_id,
            niche=self.detect_niche(top),
            primary_category=primary_category,
            keywords=top,
            categories=categories,
            last_updated=self.clock()
        )
        self.logger.info(
            f"Built dictionary for {channel_id}: {len(top)} keywords, "
            f"niche={dictionary.niche}, category={primary_category}"
        )
        return dictionary

    def _weigh_keywords(self, docs: List[str]) -> Dict[str, float]:
        total_docs = len(docs)
        token_lists = [tokenize(doc) for doc in docs]
        token_sets = [set(tokens) for tokens in token_lists]

        terms: List[str] = []
        for tokens in token_lists:
            terms.extend(tokens)

        keywords: Dict[str, float] = {}
        for term in dict.fromkeys(terms):
            df = sum(1 for token_set in token_sets if term in token_set)
            idf = math.log(total_docs / (df + 1))
            weight = sum(tokens.count(term) * idf for tokens in token_lists)
            keywords[term] = max(0.0, weight)

        lowered = [doc.lower() for doc in docs]
        for tag in dict.fromkeys(tag for doc in docs for tag in extract_hashtags(doc)):
            containing = sum(1 for doc in lowered if tag in doc)
            keywords[tag] = keywords.get(tag, 0.0) + containing * HASHTAG_WEIGHT

        normalized = [normalize_phrase(doc) for doc in docs]
        for phrase in dict.fromkeys(p for doc in docs for p in extract_phrases(doc)):
            containing = sum(1 for doc in normalized if phrase in doc)
            keywords[phrase] = keywords.get(phrase, 0.0) + containing * PHRASE_WEIGHT

        return {word: round(weight, 6) for word, weight in keywords.items()}

    @staticmethod
    def detect_categories(keywords: Dict[str, float]) -> Dict[str, float]:
        """Score each category by the weight of keywords containing its terms."""
        scores = {}
        for category, terms in CATEGORY_TERMS.items():
            score = sum(
                weight for word, weight in keywords.items()
                if any(term in word for term in terms)
            )
            scores[category] = round(score, 6)
        return scores

    @staticmethod
    def detect_niche(keywords: List[Keyword]) -> str:
        """Best niche by the weight of the first keyword matching each niche term."""
        best_niche = "general"
        best_score = 0.0
        for niche, terms in NICHE_TERMS.items():
            score = 0.0
            for term in terms:
                match = next((k for k in keywords if term in k.word.lower()), None)
                if match is not None:
                    score += match.weight
            if score > best_score:
                best_score, best_niche = score, niche
        return best_niche

    def get_dictionary(self, channel_id: str) -> Optional[ChannelDictionary]:
        """Stored dictionary for a channel, if still fresh."""
        return self.store.get(channel_id)

    def update_dictionary(self, dictionary: ChannelDictionary) -> None:
        self.store.set(dictionary.channel_id, dictionary)

    def build_and_store(self, channel_id: str, documents: Sequence[ChannelDocument]) -> ChannelDictionary:
        dictionary = self.build(channel_id, documents)
        self.update_dictionary(dictionary)
        return dictionary
