"""
Input loaders for the brand catalog (CSV) and mall directories (JSON).

Catalog headers vary between exports, so columns are auto-detected.
Problems that would make a run meaningless (no brands mapped, unreadable
files, a failed download) raise ValueError with a readable message.
"""

import hashlib
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

import pandas as pd
import requests

from .logger import get_logger
from .retry import RetryError, exponential_backoff
from .schema import BrandRecord, validate_brand_record

logger = get_logger()

BRAND_NAME_COLUMNS = ["name", "brandname", "brand_name", "brand", "productname", "product_name", "title"]
PRODUCT_ID_COLUMNS = ["productid", "product_id", "product id", "id", "pid"]
VARIATION_COLUMNS = ["variations", "variation", "known variations", "aliases", "alias", "synonyms"]
REDEEM_URL_COLUMNS = ["offline_redeemurl", "offline redeem url", "redeemurl", "redeem_url", "url"]

SAMPLE_SIZE = 3


def _is_blank(v: Any) -> bool:
    return v is None or str(v).strip() == ""


def pick_column(row: Mapping[str, Any], candidates: Sequence[str]) -> str:
    """
    Return the first non-blank value among candidate columns.

    Exact (case-insensitive) header matches are tried first, then headers
    that merely contain a candidate name.
    """
    if not row:
        return ""
    keys = list(row.keys())
    lower_map = {str(k).lower().strip(): k for k in keys}

    for c in candidates:
        found = lower_map.get(c.lower())
        if found is not None and not _is_blank(row[found]):
            return str(row[found])

    for k in keys:
        lk = str(k).lower()
        for c in candidates:
            if c.lower() in lk and not _is_blank(row[k]):
                return str(row[k])

    return ""


def stable_id_from_name(name: str) -> str:
    """Deterministic product id for catalogs without an id column."""
    return hashlib.sha1(str(name or "").strip().lower().encode("utf-8")).hexdigest()[:12]


def map_brand_row(row: Mapping[str, Any]) -> BrandRecord:
    brand_name = pick_column(row, BRAND_NAME_COLUMNS).strip()
    product_id = pick_column(row, PRODUCT_ID_COLUMNS).strip()
    if not product_id and brand_name:
        product_id = stable_id_from_name(brand_name)

    return BrandRecord(
        brand_name=brand_name,
        product_id=product_id,
        variations=pick_column(row, VARIATION_COLUMNS).strip(),
        offline_redeem_url=pick_column(row, REDEEM_URL_COLUMNS).strip(),
    )


def load_brand_rows(path: Path) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Read the catalog CSV; every cell is a string and blanks stay ""."""
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except FileNotFoundError:
        raise ValueError(f"Brand catalog not found: {path}")
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not read brand catalog CSV: {path} ({e})")

    headers = [str(c) for c in df.columns]
    return df.to_dict(orient="records"), headers


def load_brands(path: Path) -> Tuple[List[BrandRecord], Dict[str, Any]]:
    """
    Load and map the brand catalog.

    Returns:
        (records, report) where report has rows, headers, mapped, dropped, sample

    Raises:
        ValueError: If the file can't be read or no brand could be mapped
    """
    rows, headers = load_brand_rows(Path(path))
    mapped = [map_brand_row(r) for r in rows]
    records = [b for b in mapped if not validate_brand_record(b)]

    report = {
        "rows": len(rows),
        "headers": headers,
        "mapped": len(records),
        "dropped": len(mapped) - len(records),
        "sample": [asdict(r) for r in records[:SAMPLE_SIZE]],
    }
    logger.info("Brand catalog loaded", path=str(path), rows=report["rows"], mapped=report["mapped"],
                dropped=report["dropped"])
    logger.debug("Brand catalog details", headers=headers, sample=report["sample"])

    if not records:
        raise ValueError(
            "No brands mapped from CSV. The catalog must include at least a 'name' column. "
            f"Headers found: {headers or 'NO ROWS'}"
        )
    return records, report


@exponential_backoff(max_retries=3, base_delay=1.0, exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError))
def _fetch_with_retry(url: str):
    return requests.get(url, timeout=30)


def fetch_malls(url: str) -> Any:
    """Download a mall directory JSON document."""
    try:
        resp = _fetch_with_retry(url)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.error("Mall directory download failed", url=url, status=status)
        raise ValueError(f"Mall directory request failed ({status}): {url}")
    except requests.exceptions.JSONDecodeError as e:
        raise ValueError(f"Mall directory at {url} is not valid JSON: {e}")
    except requests.exceptions.RequestException as e:
        logger.error("Mall directory request error", url=url, error=str(e))
        raise ValueError(f"Mall directory request error: {e}")
    except RetryError as e:
        logger.error("Mall directory unreachable", url=url, error=str(e))
        raise ValueError(f"Mall directory unreachable: {url} ({e})")


def load_malls(source: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load malls from a local JSON file or an http(s) URL.

    Raises:
        ValueError: If the source is missing, unreadable, or not a JSON list
    """
    src = str(source)
    if src.startswith(("http://", "https://")):
        data = fetch_malls(src)
    else:
        path = Path(src)
        if not path.exists():
            raise ValueError(f"Malls file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malls file is not valid JSON: {path} ({e})")

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of malls in {src}, got {type(data).__name__}")

    malls = [m for m in data if isinstance(m, dict)]
    logger.info("Malls loaded", source=src, malls=len(malls))
    if malls:
        logger.debug("First mall store sample", stores=mall_stores(malls[0])[:10])
    return malls


def mall_stores(mall: Mapping[str, Any]) -> List[str]:
    directory = mall.get("directory")
    if not isinstance(directory, list):
        return []
    return [str(s) for s in directory if s is not None]
