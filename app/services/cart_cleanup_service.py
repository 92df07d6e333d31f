# app/services/cart_cleanup_service.py
from datetime import datetime

from app.domain.schemas import CleanupSummary
from app.repos.cart_repo import CartRepo
from app.services.lock_service import SweepGuard
from app.utils.clock import utcnow
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartCleanupService:
    """
    Expires active carts whose expires_at has passed: status -> expired,
    items and total cleared. Carts are kept as records, never deleted.

    The guard makes a run that starts while another is in progress a no-op.
    """

    def __init__(self, repo: CartRepo, guard: SweepGuard):
        self.repo = repo
        self.guard = guard

    def run(self, now: datetime | None = None) -> CleanupSummary:
        try:
            acquired = self.guard.try_acquire()
        except Exception as e:
            logger.exception("[CART_CLEANUP] Could not acquire sweep guard")
            return CleanupSummary(error=str(e))

        if not acquired:
            logger.info("[CART_CLEANUP] Already running, skipping")
            return CleanupSummary(skipped=True)

        try:
            return self._cleanup(now or utcnow())
        finally:
            # a lost release must not discard the summary; the guard ttl frees it
            try:
                self.guard.release()
            except Exception:
                logger.exception("[CART_CLEANUP] Could not release sweep guard")

    def _cleanup(self, now: datetime) -> CleanupSummary:
        try:
            carts = self.repo.find_expired_active(now)
        except Exception as e:
            logger.exception("[CART_CLEANUP] Failed to query expired carts")
            return CleanupSummary(error=str(e))

        summary = CleanupSummary(found=len(carts))
        if not carts:
            logger.info("[CART_CLEANUP] No expired carts found")
            return summary

        logger.info(f"[CART_CLEANUP] Found {len(carts)} expired carts")

        for cart in carts:
            cart_id = cart.id
            try:
                cart.mark_expired()
                saved = self.repo.save(cart)
            except Exception as e:
                logger.error(f"[CART_CLEANUP] Error processing cart {cart_id}: {e}")
                saved = False

            if saved:
                summary.cleaned += 1
                logger.info(f"[CART_CLEANUP] Cart {cart_id} marked as expired")
            else:
                summary.failed += 1
                logger.error(f"[CART_CLEANUP] Cart {cart_id} could not be expired, retrying next run")

        logger.info(
            f"[CART_CLEANUP] Cleaned {summary.cleaned}/{summary.found} expired carts"
        )
        return summary
