"""Tests for the cart store queries and writes"""
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.data.models.cart import CART_EXPIRED
from app.repos.cart_repo import CartRepo
from app.utils.clock import as_utc


class TestFindExpiredActive:

    def test_selects_only_active_carts_past_expiry(self, db_session, make_cart, now):
        past = make_cart(expires_at=now - timedelta(minutes=1))
        on_the_dot = make_cart(expires_at=now)
        make_cart(expires_at=now + timedelta(minutes=1))
        make_cart(expires_at=None)
        make_cart(expires_at=now - timedelta(days=1), status=CART_EXPIRED, is_expired=True)

        found = CartRepo(db_session).find_expired_active(now)

        assert {c.id for c in found} == {past.id, on_the_dot.id}

    def test_skips_active_carts_already_flagged_expired(self, db_session, make_cart, now):
        make_cart(expires_at=now - timedelta(minutes=5), is_expired=True)

        assert CartRepo(db_session).find_expired_active(now) == []


class TestFindNearExpiry:

    def test_window_is_open_at_now_and_closed_at_threshold(self, db_session, make_cart, make_user, now):
        user = make_user()
        inside = make_cart(user=user, expires_at=now + timedelta(minutes=10))
        at_threshold = make_cart(user=user, expires_at=now + timedelta(minutes=30))
        make_cart(user=user, expires_at=now)
        make_cart(user=user, expires_at=now + timedelta(minutes=45))

        found = CartRepo(db_session).find_near_expiry(now, now + timedelta(minutes=30))

        assert {c.id for c in found} == {inside.id, at_threshold.id}

    def test_excludes_warned_and_expired_carts(self, db_session, make_cart, make_user, now):
        user = make_user()
        make_cart(user=user, expires_at=now + timedelta(minutes=10), expiry_warning_sent=True)
        make_cart(
            user=user,
            expires_at=now + timedelta(minutes=10),
            status=CART_EXPIRED,
            is_expired=True,
        )

        assert CartRepo(db_session).find_near_expiry(now, now + timedelta(minutes=30)) == []

    def test_loads_owner_contact_fields(self, db_session, make_cart, make_user, now):
        make_cart(user=make_user(name="سارا", email="sara@example.com", mobile=None),
                  expires_at=now + timedelta(minutes=5))

        (cart,) = CartRepo(db_session).find_near_expiry(now, now + timedelta(minutes=30))

        assert cart.user.name == "سارا"
        assert cart.user.email == "sara@example.com"
        assert cart.user.mobile is None
        assert len(cart.items) == 2

    def test_no_cart_matches_both_sweeps(self, db_session, make_cart, make_user, now):
        user = make_user()
        for minutes in (-30, -1, 0, 1, 29, 30, 31):
            make_cart(user=user, expires_at=now + timedelta(minutes=minutes))
        repo = CartRepo(db_session)

        expired = {c.id for c in repo.find_expired_active(now)}
        near = {c.id for c in repo.find_near_expiry(now, now + timedelta(minutes=30))}

        assert expired
        assert near
        assert expired.isdisjoint(near)


class TestWrites:

    def test_save_persists_changes(self, db_session, make_cart, now):
        cart = make_cart(expires_at=now)
        cart.mark_expired()

        assert CartRepo(db_session).save(cart) is True

        db_session.expire_all()
        stored = CartRepo(db_session).get_cart(cart.id)
        assert stored.status == CART_EXPIRED
        assert stored.items == []

    def test_save_reports_failure_and_rolls_back(self, db_session, make_cart, now):
        cart = make_cart(expires_at=now)
        cart.mark_expired()

        with patch.object(db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("db down"))):
            assert CartRepo(db_session).save(cart) is False

        db_session.expire_all()
        assert CartRepo(db_session).get_cart(cart.id).status == "active"

    def test_mark_warned_sets_only_the_flag(self, db_session, make_cart, now):
        cart = make_cart(expires_at=now + timedelta(minutes=10))

        assert CartRepo(db_session).mark_warned(cart.id) is True

        db_session.expire_all()
        stored = CartRepo(db_session).get_cart(cart.id)
        assert stored.expiry_warning_sent is True
        assert stored.status == "active"
        assert len(stored.items) == 2

    def test_mark_warned_unknown_cart(self, db_session):
        assert CartRepo(db_session).mark_warned(9999) is False

    def test_renew_expiry_starts_a_new_warning_cycle(self, db_session, make_cart, now):
        cart = make_cart(expires_at=now + timedelta(minutes=10), expiry_warning_sent=True)
        new_expiry = now + timedelta(hours=1)

        assert CartRepo(db_session).renew_expiry(cart.id, new_expiry) is True

        db_session.expire_all()
        stored = CartRepo(db_session).get_cart(cart.id)
        assert stored.expiry_warning_sent is False
        assert as_utc(stored.expires_at) == new_expiry

    def test_renew_expiry_ignores_expired_carts(self, db_session, make_cart, now):
        cart = make_cart(expires_at=now, status=CART_EXPIRED, is_expired=True, items=[])

        assert CartRepo(db_session).renew_expiry(cart.id, now + timedelta(hours=1)) is False

    def test_count_by_state(self, db_session, make_cart, now):
        make_cart(expires_at=now + timedelta(minutes=10))
        make_cart(expires_at=now + timedelta(minutes=10), expiry_warning_sent=True)
        make_cart(expires_at=now + timedelta(hours=5))
        make_cart(expires_at=now - timedelta(hours=5), status=CART_EXPIRED, is_expired=True, items=[])

        counts = CartRepo(db_session).count_by_state(now, now + timedelta(minutes=30))

        assert counts == {"active": 3, "expired": 1, "expiring_soon": 1, "warned": 1}
