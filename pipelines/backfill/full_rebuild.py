"""
Full Backfill Pipeline.

Responsibilities:
- Match every mall directory against the brand catalog.
- Persist one record per mall that has at least one accepted brand.
- Report saved/skipped counts per run.

Non-Responsibilities:
- No file or network loading.
- No matching logic (delegated to the entity resolution resolver).

Invariant:
A full rebuild must be idempotent and reproducible: the same malls,
brands and threshold always produce the same stored products.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mallmatch.logger import get_logger
from mallmatch.normalize import build_mall_key, normalize_key
from mallmatch.retry import RetryError
from mallmatch.schema import BrandRecord, MatchResult, validate_threshold
from mallmatch.sources import mall_stores
from mallmatch.storage import put_mall_meta
from pipelines.entity_resolution.resolver import DEFAULT_THRESHOLD, match_mall


def rebuild_mall_records(
    malls: Iterable[Mapping[str, Any]],
    brands: Sequence[BrandRecord],
    session: Optional[Session] = None,
    threshold: int = DEFAULT_THRESHOLD,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """
    Match all malls and persist one record per mall with matches.

    Args:
        malls: Mall dicts (Name, City, State, directory)
        brands: Valid brand records, in priority order
        session: Database session; required unless dry_run
        threshold: Minimum accepted overlap score
        dry_run: Match only, don't write

    Returns:
        Summary dict: total, saved, skipped, threshold, matches (mall_key -> results)

    Raises:
        ValueError: On an invalid threshold, or a missing session outside dry_run
    """
    validate_threshold(threshold)
    if session is None and not dry_run:
        raise ValueError("A database session is required unless dry_run is set")

    logger = get_logger()
    total = saved = skipped = 0
    matches: Dict[str, List[MatchResult]] = {}

    def skip(reason: str, mall_key: str):
        nonlocal skipped
        skipped += 1
        logger.record_mall_skipped(reason)
        logger.debug("Skipping mall", mall_key=mall_key, reason=reason)

    for mall in malls:
        total += 1
        logger.record_mall_processed()
        mall_key = build_mall_key(mall)

        if not normalize_key(mall.get("Name")):
            skip("missing_name", mall_key)
            continue

        stores = mall_stores(mall)
        if not stores:
            skip("no_stores", mall_key)
            continue

        results = match_mall(stores, brands, threshold)
        if not results:
            skip("no_matches", mall_key)
            continue

        matches[mall_key] = results
        if dry_run:
            saved += 1
            logger.record_mall_saved(len(results))
            continue

        try:
            put_mall_meta(session, mall_key, mall, results, threshold=threshold)
        except (ValueError, RetryError, SQLAlchemyError) as e:
            session.rollback()
            logger.record_error(type(e).__name__)
            logger.error("Failed to save mall", mall_key=mall_key, error=str(e))
            skip("write_failed", mall_key)
            continue

        saved += 1
        logger.record_mall_saved(len(results))

    logger.info(
        "Rebuild complete",
        saved=saved,
        skipped=skipped,
        total=total,
        threshold=threshold,
        dry_run=dry_run,
    )
    return {
        "total": total,
        "saved": saved,
        "skipped": skipped,
        "threshold": threshold,
        "matches": matches,
    }
