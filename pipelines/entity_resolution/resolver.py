"""
Entity Resolution Orchestrator.

Responsibilities:
- Build candidates for each brand.
- Score every (store, candidate) pair and apply the short-brand guard.
- Keep the best pair per brand and apply the acceptance threshold.
- Return one explainable MatchResult per accepted brand.

Non-Responsibilities:
- No database access.
- No file or network I/O.
- No mutation of caller-supplied records.

Invariant:
This module must be deterministic given the same inputs. Ties keep the
first pair in store-then-candidate order; the first brand seen for a
dedupe key wins.
"""

from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Union

from mallmatch.schema import BrandRecord, Candidate, MatchResult, NormalizedEntry, validate_threshold

from .candidate_selector import build_candidates
from .dedupe import dedupe_key
from .features import normalize_stores, passes_short_brand_guard
from .scoring import token_overlap_score

DEFAULT_THRESHOLD = 70

BrandInput = Union[BrandRecord, Mapping[str, Any]]


class ScoredPair(NamedTuple):
    score: int
    store: NormalizedEntry
    candidate: Candidate


def _as_brand(brand: BrandInput) -> BrandRecord:
    if isinstance(brand, BrandRecord):
        return brand
    return BrandRecord.from_dict(brand)


def select_best_pair(
    stores: Sequence[NormalizedEntry],
    candidates: Sequence[Candidate],
    threshold: int,
) -> Optional[ScoredPair]:
    """Highest-scoring (store, candidate) pair that survives the short-brand guard."""
    best: Optional[ScoredPair] = None
    for store in stores:
        for cand in candidates:
            score = token_overlap_score(store.norm, cand.norm)
            if not passes_short_brand_guard(store.raw, cand.norm, score, threshold):
                continue
            # Strictly greater: earlier pairs win ties
            if best is None or score > best.score:
                best = ScoredPair(score=score, store=store, candidate=cand)
    return best


def match_mall(
    stores: Iterable[str],
    brands: Iterable[BrandInput],
    threshold: int = DEFAULT_THRESHOLD,
) -> List[MatchResult]:
    """
    Match a mall's directory against the brand catalog.

    Args:
        stores: Raw store names from the mall directory
        brands: Brand records (or dicts with brandName/productId/...) in priority order
        threshold: Minimum accepted overlap score, 0-100

    Returns:
        One MatchResult per accepted brand, in brand input order

    Raises:
        ValueError: If threshold is not an integer in 0..100
    """
    validate_threshold(threshold)
    store_entries = normalize_stores(stores)

    results: List[MatchResult] = []
    seen = set()

    for item in brands or []:
        brand = _as_brand(item)
        brand_name = (brand.brand_name or "").strip()
        product_id = (brand.product_id or "").strip()
        if not brand_name or not product_id:
            continue

        key = dedupe_key(product_id, brand_name)
        if key in seen:
            continue

        candidates = build_candidates(brand)
        if not candidates:
            continue

        best = select_best_pair(store_entries, candidates, threshold)
        if best is None or best.score < threshold:
            continue

        seen.add(key)
        results.append(
            MatchResult(
                brand_name=brand_name,
                product_id=product_id,
                matched_store_name=best.store.raw,
                matched_variant=best.candidate.raw,
                score=best.score,
                offline_redeem_url=brand.offline_redeem_url or "",
            )
        )

    return results
