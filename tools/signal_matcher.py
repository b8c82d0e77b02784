"""Three-tier fuzzy signal matching: exact substring, chunk overlap, bigram overlap.

Short rigid phrases must match nearly verbatim while longer phrases
tolerate paraphrase-level drift. All thresholds are module constants.
"""

import math
from dataclasses import dataclass, field

from tools.text_utils import normalize_for_match

MIN_MATCH_LENGTH = 4

# Chunk tier
LONG_SIGNAL_LENGTH = 12
LONG_CHUNK_LENGTH = 6
SHORT_CHUNK_LENGTH = 4
MIN_CHUNK_LENGTH = 4
MIN_MATCHED_CHUNKS = 2

# Bigram tier
MIN_BIGRAMS = 3
BIGRAM_RATIO = 0.55
BIGRAM_MIN_MATCHED = 3
RELAXED_SIGNAL_LENGTH = 8
RELAXED_BIGRAM_RATIO = 0.42
RELAXED_MIN_MATCHED = 4


@dataclass
class MatchResult:
    """Coverage of one signal category over a body of text."""
    total: int = 0
    matched: list[str] = field(default_factory=list)
    coverage: float = 1.0


def build_signal_chunks(signal: str) -> list[str]:
    """Cut a signal into fixed-size chunks (6 chars for long signals, else 4)."""
    normalized = normalize_for_match(signal)
    if len(normalized) <= LONG_CHUNK_LENGTH:
        return [normalized]

    chunk_length = LONG_CHUNK_LENGTH if len(normalized) >= LONG_SIGNAL_LENGTH else SHORT_CHUNK_LENGTH
    chunks = []
    for idx in range(0, len(normalized) - chunk_length + 1, chunk_length):
        chunk = normalized[idx:idx + chunk_length]
        if len(chunk) >= MIN_CHUNK_LENGTH:
            chunks.append(chunk)

    if not chunks:
        chunks.append(normalized[:LONG_CHUNK_LENGTH])

    return list(dict.fromkeys(chunks))


def build_bigrams(text: str) -> list[str]:
    """Distinct 2-character sliding-window grams, in first-seen order."""
    normalized = normalize_for_match(text)
    grams = [normalized[i:i + 2] for i in range(len(normalized) - 1)]
    return list(dict.fromkeys(g for g in grams if len(g.strip()) == 2))


def has_sufficient_bigram_overlap(normalized_content: str, normalized_signal: str) -> bool:
    grams = build_bigrams(normalized_signal)
    if len(grams) < MIN_BIGRAMS:
        return False

    matched = sum(1 for gram in grams if gram in normalized_content)
    ratio = matched / len(grams)

    if ratio >= BIGRAM_RATIO and matched >= BIGRAM_MIN_MATCHED:
        return True
    return (
        len(normalized_signal) >= RELAXED_SIGNAL_LENGTH
        and ratio >= RELAXED_BIGRAM_RATIO
        and matched >= RELAXED_MIN_MATCHED
    )


def is_signal_matched(normalized_content: str, signal: str) -> bool:
    """Test whether ``signal`` occurs, exactly or fuzzily, in already-normalized content."""
    normalized_signal = normalize_for_match(signal)
    if len(normalized_signal) < MIN_MATCH_LENGTH:
        return False

    if normalized_signal in normalized_content:
        return True

    chunks = build_signal_chunks(normalized_signal)
    if len(chunks) > 1:
        matched_chunks = sum(1 for chunk in chunks if chunk in normalized_content)
        if matched_chunks >= max(MIN_MATCHED_CHUNKS, math.ceil(len(chunks) / 2)):
            return True

    return has_sufficient_bigram_overlap(normalized_content, normalized_signal)


def match_signals(content: str, signals: list[str]) -> MatchResult:
    """Match every signal against ``content``.

    An empty signal list has coverage 1: a category with no history
    cannot be missed.
    """
    if not signals:
        return MatchResult(total=0, matched=[], coverage=1.0)

    normalized_content = normalize_for_match(content)
    matched = [signal for signal in signals if is_signal_matched(normalized_content, signal)]
    return MatchResult(total=len(signals), matched=matched, coverage=len(matched) / len(signals))
