"""
Result Deduplication.

Responsibilities:
- Define the dedupe key for a logical brand.
- Collapse a result list to one entry per key, first occurrence wins.

Invariant:
The resolver's in-run guard and every downstream collapse use the
same key function.
"""

from typing import Iterable, List, Optional

from mallmatch.schema import MatchResult


def dedupe_key(product_id: Optional[str], brand_name: Optional[str]) -> str:
    pid = str(product_id or "").strip()
    if pid:
        return f"PID#{pid}"
    return f"BN#{str(brand_name or '').strip().lower()}"


def deduplicate_results(results: Iterable[MatchResult]) -> List[MatchResult]:
    seen = set()
    unique = []
    for result in results:
        key = dedupe_key(result.product_id, result.brand_name)
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    return unique
