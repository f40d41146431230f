from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.models.youtube_quota import QuotaHistory
from app.services.quota_service import QuotaService
from tests.conftest import DAILY_LIMIT, TODAY


def test_status_without_record_is_fresh(quota):
    status = quota.get_status("account-1")

    assert status.date == TODAY
    assert status.consumed_units == 0
    assert status.remaining_units == DAILY_LIMIT
    assert status.percent_used == 0


def test_search_usage_on_fresh_day_costs_100(quota):
    quota.record_usage("account-1", "search.list")

    status = quota.get_status("account-1")
    assert status.consumed_units == 100
    assert status.remaining_units == DAILY_LIMIT - 100
    assert status.percent_used == pytest.approx(1.0)


def test_status_read_is_idempotent(quota):
    quota.record_usage("account-1", "playlistItems.insert")

    assert quota.get_status("account-1") == quota.get_status("account-1")


def test_record_usage_increments_single_daily_row(quota, db):
    quota.record_usage("account-1", "playlistItems.insert")
    quota.record_usage("account-1", "playlistItems.delete")
    charged = quota.record_usage("account-1", "videos.list", multiplier=3)

    assert charged == 3
    rows = db.query(QuotaHistory).filter(QuotaHistory.account_id == "account-1").all()
    assert len(rows) == 1
    assert rows[0].consumed_units == 103
    assert rows[0].daily_limit == DAILY_LIMIT


def test_usage_is_tracked_per_account(quota):
    quota.record_usage("account-1", "search.list")

    assert quota.get_status("account-2").consumed_units == 0


def test_new_day_starts_fresh(quota, clock):
    quota.record_usage("account-1", "search.list")
    clock.day = TODAY + timedelta(days=1)

    assert quota.get_status("account-1").consumed_units == 0
    quota.record_usage("account-1", "playlists.list")
    assert quota.get_status("account-1").consumed_units == 1


def test_check_available_compares_remaining(quota, db):
    db.add(QuotaHistory(account_id="account-1", date=TODAY, consumed_units=9950, daily_limit=DAILY_LIMIT))
    db.commit()

    assert quota.check_available("account-1", 50)
    assert not quota.check_available("account-1", 100)


def test_history_most_recent_first_without_zero_fill(quota, db):
    for offset, units in [(3, 30), (0, 5), (1, 10), (9, 90)]:
        db.add(
            QuotaHistory(
                account_id="account-1",
                date=TODAY - timedelta(days=offset),
                consumed_units=units,
                daily_limit=DAILY_LIMIT,
            )
        )
    db.add(QuotaHistory(account_id="account-2", date=TODAY, consumed_units=1, daily_limit=DAILY_LIMIT))
    db.commit()

    history = quota.get_history("account-1", days=7)

    assert [item.date for item in history] == [
        TODAY,
        TODAY - timedelta(days=1),
        TODAY - timedelta(days=3),
    ]
    assert [item.consumed_units for item in history] == [5, 10, 30]


def test_history_window_includes_today(quota, db):
    db.add(QuotaHistory(account_id="account-1", date=TODAY - timedelta(days=1), consumed_units=7, daily_limit=DAILY_LIMIT))
    db.commit()

    assert quota.get_history("account-1", days=1) == []
    assert len(quota.get_history("account-1", days=2)) == 1


def test_history_rejects_non_positive_days(quota):
    with pytest.raises(ValueError):
        quota.get_history("account-1", days=0)


def test_storage_errors_propagate(engine, db, clock):
    quota = QuotaService(db, daily_limit=DAILY_LIMIT, today=clock)
    QuotaHistory.__table__.drop(bind=engine)

    with pytest.raises(OperationalError):
        quota.record_usage("account-1", "search.list")
    with pytest.raises(OperationalError):
        quota.get_status("account-1")
