"""
Mall record repository.

Writes one aggregate record per mall and serves the read side
(listing and per-mall lookup). No matching logic lives here.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from pipelines.entity_resolution.dedupe import deduplicate_results

from .database import MallRecord
from .logger import get_logger
from .retry import exponential_backoff
from .schema import MatchResult

logger = get_logger()


def _log_write_retry(attempt: int, error: Exception, delay: float) -> None:
    logger.warning("Mall write failed, retrying", attempt=attempt, delay=delay, error=str(error))


@exponential_backoff(max_retries=3, base_delay=0.5, exceptions=(OperationalError,), on_retry=_log_write_retry)
def _upsert(session: Session, record: MallRecord) -> MallRecord:
    try:
        merged = session.merge(record)
        session.commit()
        return merged
    except OperationalError:
        session.rollback()
        raise


def put_mall_meta(
    session: Session,
    mall_key: str,
    mall: Optional[Mapping[str, Any]],
    results: Sequence[MatchResult],
    threshold: Optional[int] = None,
) -> MallRecord:
    """
    Save ONE record per mall with its deduplicated products.

    A rerun for the same mall key replaces the products and keeps created_at.

    Raises:
        ValueError: If mall_key or mall is missing, or results is empty
        RetryError: If the write keeps failing on a locked/unavailable database
    """
    if not mall_key:
        raise ValueError("Missing mall_key")
    if not mall:
        raise ValueError("Missing mall")
    if not results:
        raise ValueError(f"Refusing to save mall={mall.get('Name')} because products are empty")

    products = [r.to_product() for r in deduplicate_results(results)]

    existing = session.get(MallRecord, mall_key)
    now = datetime.now()
    record = MallRecord(
        mall_key=mall_key,
        mall_name=str(mall.get("Name") or "").strip(),
        city=str(mall.get("City") or "").strip(),
        state=str(mall.get("State") or "").strip(),
        products=products,
        threshold=threshold,
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )
    saved = _upsert(session, record)
    logger.debug("Saved mall record", mall_key=mall_key, products=len(products))
    return saved


def list_malls(session: Session) -> List[Dict[str, Any]]:
    records = session.query(MallRecord).order_by(MallRecord.mall_key).all()
    return [r.to_summary() for r in records]


def get_mall(session: Session, mall_key: str) -> Optional[MallRecord]:
    if not mall_key:
        return None
    return session.get(MallRecord, mall_key)


def delete_mall(session: Session, mall_key: str) -> bool:
    record = get_mall(session, mall_key)
    if record is None:
        return False
    session.delete(record)
    session.commit()
    return True
