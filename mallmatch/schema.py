from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, NamedTuple

REQUIRED_BRAND_FIELDS = ["brand_name", "product_id"]

_FIELD_ALIASES = {
    "brand_name": ("brandName", "brand_name"),
    "product_id": ("productId", "product_id"),
    "variations": ("variations",),
    "offline_redeem_url": ("offlineRedeemUrl", "offline_redeem_url"),
}


def _str_field(data: Mapping[str, Any], keys) -> str:
    for k in keys:
        v = data.get(k)
        if v is not None:
            return str(v).strip()
    return ""


@dataclass(frozen=True)
class BrandRecord:
    """Canonical brand entry from the catalog."""

    brand_name: str
    product_id: str
    variations: str = ""
    offline_redeem_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BrandRecord":
        """Build a record from camelCase or snake_case keys; missing values become ""."""
        return cls(**{field: _str_field(data, keys) for field, keys in _FIELD_ALIASES.items()})


class Candidate(NamedTuple):
    raw: str
    norm: str


class NormalizedEntry(NamedTuple):
    raw: str
    norm: str


@dataclass(frozen=True)
class MatchResult:
    """Best store entry accepted for one brand in one mall."""

    brand_name: str
    product_id: str
    matched_store_name: str
    matched_variant: str
    score: int
    offline_redeem_url: str = ""

    def to_product(self) -> Dict[str, str]:
        """Shape stored on the mall record."""
        return {
            "brandName": self.brand_name.strip(),
            "productId": self.product_id.strip(),
            "storeName": self.matched_store_name.strip(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brandName": self.brand_name,
            "productId": self.product_id,
            "matchedStoreName": self.matched_store_name,
            "matchedVariant": self.matched_variant,
            "score": self.score,
            "offlineRedeemUrl": self.offline_redeem_url,
        }


def validate_brand_record(record: BrandRecord) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []
    for f in REQUIRED_BRAND_FIELDS:
        value = getattr(record, f, None)
        if not isinstance(value, str) or value.strip() == "":
            errors.append(f"Missing required field: {f}")
    return errors


def validate_threshold(value: Any) -> int:
    """
    Check a match threshold at the boundary, before matching begins.

    Raises:
        ValueError: If the value is not an integer in 0..100
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Threshold must be an integer, got {value!r}")
    if not 0 <= value <= 100:
        raise ValueError(f"Threshold must be between 0 and 100, got {value}")
    return value
