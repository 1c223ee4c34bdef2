"""
Candidate Selection Logic.

Responsibilities:
- Expand one brand record into its name variants (brand name + variations).
- Normalize each variant once, up front.

Non-Responsibilities:
- No scoring.
- No store comparison.
- No acceptance decisions.

Invariant:
Candidates keep source order (brand name first, then variations)
and never carry an empty normalized form.
"""

from typing import List, Optional

from mallmatch.normalize import normalize
from mallmatch.schema import BrandRecord, Candidate

# Tried in order; the first one present in the string wins
VARIATION_DELIMITERS = ("|", ";", ",", "/")


def split_variations(variations: Optional[str]) -> List[str]:
    if not variations:
        return []
    s = str(variations).strip()
    if not s:
        return []

    delim = next((d for d in VARIATION_DELIMITERS if d in s), None)
    parts = s.split(delim) if delim else [s]
    return [p.strip() for p in parts if p.strip()]


def build_candidates(brand: BrandRecord) -> List[Candidate]:
    raws = [brand.brand_name, *split_variations(brand.variations)]
    candidates = []
    for raw in raws:
        raw = str(raw or "").strip()
        if not raw:
            continue
        norm = normalize(raw)
        if norm:
            candidates.append(Candidate(raw=raw, norm=norm))
    return candidates
