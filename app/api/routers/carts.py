#app/api/routers/carts.py
from datetime import timedelta

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import CartOut, CartStatsOut, CleanupSummary, WarningSummary
from app.repos.cart_repo import CartRepo
from app.repos.settings_repo import SettingsRepo
from app.services.cart_cleanup_service import CartCleanupService
from app.services.cart_service import CartService
from app.services.cart_warning_service import CartExpiryWarningService
from app.services.lock_service import CART_CLEANUP_GUARD, build_sweep_guard
from app.services.notification_service import NotificationService
from app.utils import settings
from app.utils.clock import utcnow

router = APIRouter(prefix="/carts", tags=["carts"])

# same lock as the scheduled cleanup, so a manual run never overlaps it
admin_cleanup_guard = build_sweep_guard(CART_CLEANUP_GUARD)


def require_admin(authorization: str = Header(default="")):
    if settings.ADMIN_API_TOKEN and authorization != f"Bearer {settings.ADMIN_API_TOKEN}":
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get("/admin/stats", response_model=CartStatsOut, dependencies=[Depends(require_admin)])
def cart_stats(db: Session = Depends(get_db)):
    cart_settings = SettingsRepo(db).get_cart_settings()
    now = utcnow()
    threshold = now + timedelta(minutes=cart_settings.expiry_warning_minutes)
    return CartRepo(db).count_by_state(now, threshold)


@router.post("/admin/cleanup", response_model=CleanupSummary, dependencies=[Depends(require_admin)])
def cleanup_expired_carts(db: Session = Depends(get_db)):
    summary = CartCleanupService(CartRepo(db), admin_cleanup_guard).run()
    if summary.skipped:
        raise HTTPException(status_code=409, detail="Cart cleanup is already running")
    if summary.error:
        raise HTTPException(status_code=503, detail=summary.error)
    return summary


@router.post("/admin/send-warnings", response_model=WarningSummary, dependencies=[Depends(require_admin)])
def send_expiry_warnings(db: Session = Depends(get_db)):
    service = CartExpiryWarningService(
        repo=CartRepo(db),
        settings_repo=SettingsRepo(db),
        notifier=NotificationService(),
    )
    summary = service.run()
    if summary.error:
        raise HTTPException(status_code=503, detail=summary.error)
    return summary


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(cart_id: int, db: Session = Depends(get_db)):
    cart = CartService(db).get_cart(cart_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@router.post("/{cart_id}/renew", response_model=CartOut)
def renew_cart(cart_id: int, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.renew_expiry(cart_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
