import re
from typing import Any, Mapping

# Words that don't help brand identification: mall, location and legal noise
STOPWORDS = frozenset({
    "mall",
    "store",
    "exclusive",
    "outlet",
    "shop",
    "showroom",
    "the",
    "and",
    "co",
    "company",
    "pvt",
    "ltd",
    "limited",
    "india",
    "shopping",
    "centre",
    "center",
    "plaza",
    "complex",
    "city",
    "road",
    "floor",
    "level",
    "unit",
})

_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s]")


def normalize(text: Any) -> str:
    """Lowercase, strip punctuation, drop stopwords and collapse spaces."""
    if text is None:
        return ""
    cleaned = _NON_TOKEN_CHARS.sub(" ", str(text).lower())
    return " ".join(t for t in cleaned.split() if t not in STOPWORDS)


def normalize_key(s: Any) -> str:
    return " ".join(str(s or "").strip().lower().split())


def build_mall_key(mall: Mapping[str, Any]) -> str:
    # One record per mall: name + city + state
    return "|".join(
        normalize_key(mall.get(field)) for field in ("Name", "City", "State")
    )
