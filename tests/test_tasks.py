"""Tests for the scheduled Celery tasks"""
from datetime import timedelta
from unittest.mock import MagicMock, patch

from app.celery_worker import (
    EXPIRE_CARTS_TASK,
    SEND_EXPIRY_WARNINGS_TASK,
    celery_app,
    run_sweeps_on_startup,
)
from app.repos.cart_repo import CartRepo
from app.tasks import expire, expiry_warning
from app.utils.clock import utcnow


def test_beat_schedule_intervals():
    schedule = celery_app.conf.beat_schedule

    assert schedule["expire-carts-every-5-minutes"]["task"] == EXPIRE_CARTS_TASK
    assert schedule["expire-carts-every-5-minutes"]["schedule"] == 300.0
    assert schedule["send-expiry-warnings-every-minute"]["task"] == SEND_EXPIRY_WARNINGS_TASK
    assert schedule["send-expiry-warnings-every-minute"]["schedule"] == 60.0


def test_both_sweeps_run_when_worker_starts():
    with patch.object(celery_app, "send_task") as send_task:
        run_sweeps_on_startup(sender=MagicMock())

    assert [c.args[0] for c in send_task.call_args_list] == [EXPIRE_CARTS_TASK, SEND_EXPIRY_WARNINGS_TASK]


def test_expire_carts_task(db_session, make_cart):
    # the task closes the session, so keep the id rather than the instance
    cart_id = make_cart(expires_at=utcnow() - timedelta(minutes=1)).id

    with patch.object(expire, "SessionLocal", return_value=db_session):
        result = expire.expire_carts_task()

    assert result["found"] == 1
    assert result["cleaned"] == 1
    assert result["skipped"] is False
    assert CartRepo(db_session).get_cart(cart_id).status == "expired"
    assert expire.cleanup_guard.try_acquire() is True
    expire.cleanup_guard.release()


def test_send_expiry_warnings_task(db_session, make_cart, make_user, make_settings):
    make_settings(expiry_warning_enabled=True, notification_type="email")
    cart_id = make_cart(user=make_user(), expires_at=utcnow() + timedelta(minutes=10)).id
    notifier = MagicMock()
    notifier.send_expiry_warning_email.return_value = True

    with patch.object(expiry_warning, "SessionLocal", return_value=db_session), \
            patch.object(expiry_warning, "notification_service", notifier):
        result = expiry_warning.send_expiry_warnings_task()

    assert result["processed"] == 1
    assert result["emails_sent"] == 1
    assert CartRepo(db_session).get_cart(cart_id).expiry_warning_sent is True
