# storefront/tasks/purge.py
from datetime import datetime, timezone, timedelta

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger
from storefront.utils.retry import db_retry
from storefront.utils.settings import GUEST_CART_RETENTION_DAYS

logger = get_logger(__name__)


@db_retry()
def purge_guest_carts(db: Session, now: datetime | None = None, retention_days: int = GUEST_CART_RETENTION_DAYS) -> int:
    """Delete ownerless carts created before the retention window; returns how many."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=retention_days)

    try:
        removed = CartRepo(db).purge_guest_carts(cutoff)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Purged {removed} guest carts created before {cutoff.isoformat()}")
    return removed


@celery_app.task(name="storefront.tasks.purge.purge_guest_carts_task")
def purge_guest_carts_task():
    logger.info("Purge guest carts task started")

    db = SessionLocal()
    try:
        return {"purged": purge_guest_carts(db)}
    finally:
        db.close()
