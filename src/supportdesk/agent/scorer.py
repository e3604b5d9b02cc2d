"""Keyword overlap scoring for intent classification."""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache

from supportdesk.constants import (
    KEYWORD_SUBSTRING_WEIGHT,
    KEYWORD_WORD_BONUS,
    MAX_SCORE,
)


@lru_cache(maxsize=256)
def _word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def score(text: str, keywords: Sequence[str]) -> float:
    """Score lower-cased *text* against a keyword list.

    Each keyword found as a substring adds 0.2; if it also matches
    on word boundaries it adds a further 0.1. The total is clamped
    to 1.0, so an empty keyword list scores 0.
    """
    total = 0.0
    for keyword in keywords:
        if keyword in text:
            total += KEYWORD_SUBSTRING_WEIGHT
            if _word_pattern(keyword).search(text):
                total += KEYWORD_WORD_BONUS
    return min(total, MAX_SCORE)
