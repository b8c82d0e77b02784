"""Tools package — text normalization, segmentation, and fuzzy signal matching."""

from tools.signal_matcher import MatchResult, is_signal_matched, match_signals
from tools.text_utils import (
    normalize_whitespace,
    normalize_for_match,
    to_string_list,
    split_into_signals,
    extract_ending_snippet,
)

__all__ = [
    "MatchResult",
    "is_signal_matched",
    "match_signals",
    "normalize_whitespace",
    "normalize_for_match",
    "to_string_list",
    "split_into_signals",
    "extract_ending_snippet",
]
