from .candidate_selector import build_candidates, split_variations
from .dedupe import dedupe_key, deduplicate_results
from .features import is_very_short_brand, normalize_stores, passes_short_brand_guard
from .resolver import DEFAULT_THRESHOLD, match_mall
from .scoring import token_overlap_score

__all__ = [
    "DEFAULT_THRESHOLD",
    "build_candidates",
    "dedupe_key",
    "deduplicate_results",
    "is_very_short_brand",
    "match_mall",
    "normalize_stores",
    "passes_short_brand_guard",
    "split_variations",
    "token_overlap_score",
]
