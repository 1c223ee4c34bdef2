"""
Scoring Logic for Entity Resolution.

Responsibilities:
- Compute a deterministic token-overlap (Dice) score between a store
  name and a brand candidate, both already normalized.

Non-Responsibilities:
- No normalization.
- No short-brand rules.
- No threshold decisions.

Invariant:
Given identical inputs, this module must always return the same score,
and score(a, b) == score(b, a).
"""


def token_overlap_score(norm_a: str, norm_b: str) -> int:
    """
    Dice coefficient over the token sets of two normalized strings, 0-100.

    Duplicate tokens within one string collapse. Halves round up.
    """
    a = set((norm_a or "").split())
    b = set((norm_b or "").split())
    if not a or not b:
        return 0

    common = len(a & b)
    total = len(a) + len(b)
    # round(200 * common / total) with half-up, in integer arithmetic
    return (400 * common + total) // (2 * total)
