"""
Feature Extraction for Entity Resolution.

Responsibilities:
- Normalize store names into comparable entries.
- Classify candidates that are too short to trust on overlap alone.
- Apply the short-brand guard (whole-word presence + stricter floor).

Non-Responsibilities:
- No overlap scoring.
- No best-pair selection.
- No persistence.

Invariant:
Short candidates are only ever made harder to accept, never easier.
"""

import re
from typing import Iterable, List

from mallmatch.normalize import normalize
from mallmatch.schema import NormalizedEntry

SHORT_BRAND_MAX_LENGTH = 2
SHORT_BRAND_MAX_TOKEN_LENGTH = 2
SHORT_BRAND_MIN_SCORE = 85


def normalize_stores(stores: Iterable[str]) -> List[NormalizedEntry]:
    entries = []
    for raw in stores or []:
        norm = normalize(raw)
        if norm:
            entries.append(NormalizedEntry(raw=raw, norm=norm))
    return entries


def is_very_short_brand(norm: str) -> bool:
    tokens = norm.split()
    if not tokens:
        return True
    if len(tokens) == 1 and len(tokens[0]) <= SHORT_BRAND_MAX_TOKEN_LENGTH:
        return True
    return len(norm) <= SHORT_BRAND_MAX_LENGTH


def has_whole_word(store_raw: str, token: str) -> bool:
    if not token:
        return False
    # ASCII word boundaries: accented letters separate words, as in normalize()
    return re.search(rf"\b{re.escape(token)}\b", str(store_raw or ""), re.IGNORECASE | re.ASCII) is not None


def short_brand_floor(threshold: int) -> int:
    return max(threshold, SHORT_BRAND_MIN_SCORE)


def passes_short_brand_guard(store_raw: str, candidate_norm: str, score: int, threshold: int) -> bool:
    """
    Extra acceptance rule for very short candidates (e.g. "W").

    The first token must appear as a whole word in the raw store name and
    the overlap score must reach max(threshold, 85). Candidates that are
    not very short always pass.
    """
    if not is_very_short_brand(candidate_norm):
        return True
    tokens = candidate_norm.split()
    token = tokens[0] if tokens else candidate_norm
    if not has_whole_word(store_raw, token):
        return False
    return score >= short_brand_floor(threshold)
