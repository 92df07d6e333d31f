# app/tasks/expiry_warning.py
from app.celery_worker import celery_app, SEND_EXPIRY_WARNINGS_TASK
from app.data.database import SessionLocal
from app.repos.cart_repo import CartRepo
from app.repos.settings_repo import SettingsRepo
from app.services.cart_warning_service import CartExpiryWarningService
from app.services.notification_service import NotificationService

notification_service = NotificationService()


@celery_app.task(name=SEND_EXPIRY_WARNINGS_TASK)
def send_expiry_warnings_task():
    db = SessionLocal()
    try:
        service = CartExpiryWarningService(
            repo=CartRepo(db),
            settings_repo=SettingsRepo(db),
            notifier=notification_service,
        )
        return service.run().model_dump(mode="json")
    finally:
        db.close()
