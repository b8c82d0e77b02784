"""Text utilities: whitespace normalization, signal segmentation, chapter endings."""

import re

# Sentence terminators that separate signal segments
_SIGNAL_SPLIT_RE = re.compile(r"[。！？!?；;\n]")
# Punctuation and quotes stripped from a segment before it becomes a signal
_SIGNAL_STRIP_RE = re.compile(r"[，,:：、\"“”'‘’（）()《》【】]")
_SENTENCE_BREAK_RE = re.compile(r"[。！？.!?]")
_WHITESPACE_RE = re.compile(r"\s+")

MIN_SIGNAL_LENGTH = 4
SHORT_SIGNAL_MAX_LENGTH = 24
LONG_SIGNAL_SPAN = 16


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces and trim (display form)."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def normalize_for_match(text: str) -> str:
    """Remove all whitespace. Used only for matching, never for display."""
    return _WHITESPACE_RE.sub("", text or "")


def to_string_list(value) -> list[str]:
    """Keep the non-empty, trimmed strings of a list; anything else yields []."""
    if not isinstance(value, (list, tuple)):
        return []
    items = [item.strip() if isinstance(item, str) else "" for item in value]
    return [item for item in items if item]


def split_into_signals(text: str, max_signals: int) -> list[str]:
    """Split text into short, deduplicated signal strings.

    Segments are cut at sentence terminators and stripped of quotes and
    in-sentence punctuation. Segments of up to 24 characters are kept
    whole; longer ones contribute their first and last 16 characters.
    """
    if not text or not text.strip() or max_signals <= 0:
        return []

    signals: list[str] = []
    seen: set[str] = set()

    for raw in _SIGNAL_SPLIT_RE.split(text):
        cleaned = _SIGNAL_STRIP_RE.sub("", raw.strip()).strip()
        if len(cleaned) < MIN_SIGNAL_LENGTH:
            continue

        if len(cleaned) <= SHORT_SIGNAL_MAX_LENGTH:
            candidates = [cleaned]
        else:
            candidates = [cleaned[:LONG_SIGNAL_SPAN], cleaned[-LONG_SIGNAL_SPAN:]]

        for candidate in candidates:
            if not candidate or candidate in seen:
                continue
            seen.add(candidate)
            signals.append(candidate)
            if len(signals) >= max_signals:
                return signals

    return signals


def extract_ending_snippet(content: str, max_length: int = 220) -> str:
    """Return the closing passage of a chapter.

    When the chapter is longer than ``max_length`` the tail window is
    trimmed forward to just after its first sentence break, unless that
    break sits within the last 12 characters.
    """
    normalized = normalize_whitespace(content)
    if not normalized:
        return ""
    if len(normalized) <= max_length:
        return normalized

    tail = normalized[-max_length:]
    match = _SENTENCE_BREAK_RE.search(tail)
    if match and match.start() < len(tail) - 12:
        return tail[match.start() + 1:].strip()
    return tail.strip()
