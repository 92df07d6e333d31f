# app/tasks/expire.py
from app.celery_worker import celery_app, EXPIRE_CARTS_TASK
from app.data.database import SessionLocal
from app.repos.cart_repo import CartRepo
from app.services.cart_cleanup_service import CartCleanupService
from app.services.lock_service import CART_CLEANUP_GUARD, build_sweep_guard
from app.utils.logging import get_logger

logger = get_logger(__name__)

# with the redis backend this excludes every other worker and the admin API
cleanup_guard = build_sweep_guard(CART_CLEANUP_GUARD)


@celery_app.task(name=EXPIRE_CARTS_TASK)
def expire_carts_task():
    logger.info("Expire carts task started")

    db = SessionLocal()
    try:
        summary = CartCleanupService(CartRepo(db), cleanup_guard).run()
        return summary.model_dump(mode="json")
    finally:
        db.close()
