import threading

import pytest

from app.core.context import RequestContext
from app.core.exceptions import BatchValidationError, InsufficientQuotaError
from app.models.youtube_quota import QuotaHistory
from app.schemas.playlist import VideoRef
from app.services.batch_service import CANCELLED_MESSAGE, AccountLockRegistry, BatchOperationService
from tests.conftest import DAILY_LIMIT, TODAY
from tests.fakes import http_error, inserted_video_id


def refs(*video_ids):
    return [VideoRef(playlist_item_id=f"pi-{vid}", video_id=vid) for vid in video_ids]


def consume(db, units, account_id="account-1"):
    db.add(QuotaHistory(account_id=account_id, date=TODAY, consumed_units=units, daily_limit=DAILY_LIMIT))
    db.commit()


def test_transfer_moves_each_video_in_order(api, batch, context, quota):
    result = batch.transfer(context, "PL-src", "PL-dst", refs("a", "b", "c"))

    assert result.success
    assert result.success_count == 3
    assert result.error_count == 0
    assert [d.video_id for d in result.details] == ["a", "b", "c"]
    # insert then delete, item by item
    assert [(r, m) for r, m, _ in api.calls] == [("playlistItems", "insert"), ("playlistItems", "delete")] * 3
    assert [kw["id"] for kw in api.calls_for("playlistItems", "delete")] == ["pi-a", "pi-b", "pi-c"]
    assert quota.get_status("account-1").consumed_units == 300


def test_transfer_duplicate_insert_skips_delete_for_that_item(api, batch, context):
    api.on(
        "playlistItems",
        "insert",
        lambda kw: http_error(409, "duplicate", "Conflict") if inserted_video_id(kw) == "v2" else {"id": "new"},
    )

    result = batch.transfer(context, "PL-src", "PL-dst", refs("v1", "v2", "v3"))

    assert not result.success
    assert result.success_count == 2
    assert result.error_count == 1
    assert result.details[1].status == "error"
    assert "duplicate" in result.details[1].error
    assert result.details[1].error_kind == "already_exists"
    assert [kw["id"] for kw in api.calls_for("playlistItems", "delete")] == ["pi-v1", "pi-v3"]


def test_transfer_never_deletes_when_insert_cannot_reach_remote(api, batch, context, quota):
    api.on("playlistItems", "insert", [ConnectionError("network down")])

    result = batch.transfer(context, "PL-src", "PL-dst", refs("v1"))

    assert result.error_count == 1
    assert api.calls_for("playlistItems", "delete") == []
    assert quota.recorded == []


def test_transfer_delete_failure_reports_delete_error(api, batch, context):
    api.on("playlistItems", "delete", [http_error(404, "playlistItemNotFound", "Playlist item not found.")])

    result = batch.transfer(context, "PL-src", "PL-dst", refs("v1"))

    assert result.details[0].status == "error"
    assert result.details[0].error == "Playlist item not found."
    assert len(api.calls_for("playlistItems", "insert")) == 1


def test_one_bad_item_does_not_abort_the_batch(api, batch, context):
    api.on("playlistItems", "delete", lambda kw: http_error(500, "backendError", "boom") if kw["id"] == "pi-a" else {})

    result = batch.remove(context, "PL-src", refs("a", "b", "c", "d"))

    assert [d.status for d in result.details] == ["error", "success", "success", "success"]
    assert result.success_count + result.error_count == len(result.details)


def test_insufficient_quota_makes_no_remote_calls(api, batch, context, db):
    consume(db, 9950)

    with pytest.raises(InsufficientQuotaError) as excinfo:
        batch.transfer(context, "PL-src", "PL-dst", refs("v1"))

    assert excinfo.value.required_units == 100
    assert excinfo.value.remaining_units == 50
    assert api.calls == []


@pytest.mark.parametrize("count", [1, 4, 10])
def test_quota_gate_uses_exact_transfer_cost(api, batch, context, db, count):
    consume(db, DAILY_LIMIT - count * 100 + 1)

    with pytest.raises(InsufficientQuotaError) as excinfo:
        batch.transfer(context, "PL-src", "PL-dst", refs(*[f"v{i}" for i in range(count)]))

    assert excinfo.value.required_units == count * 100
    assert api.calls_for("playlistItems", "insert") == []
    assert api.calls_for("playlistItems", "delete") == []


def test_exact_remaining_quota_is_enough(api, batch, context, db):
    consume(db, DAILY_LIMIT - 100)

    result = batch.transfer(context, "PL-src", "PL-dst", refs("v1"))

    assert result.success


def test_assign_only_inserts(api, batch, context, quota):
    video_ids = ["a", "b", "c", "d", "e"]

    result = batch.assign(context, "PL-dst", video_ids)

    assert result.success_count == 5
    assert result.error_count == 0
    assert [inserted_video_id(kw) for kw in api.calls_for("playlistItems", "insert")] == video_ids
    assert api.calls_for("playlistItems", "delete") == []
    assert quota.recorded.count("playlistItems.insert") == 5
    assert quota.get_status("account-1").consumed_units == 250


def test_assign_quota_gate(api, batch, context, db):
    consume(db, DAILY_LIMIT - 99)

    with pytest.raises(InsufficientQuotaError) as excinfo:
        batch.assign(context, "PL-dst", ["a", "b"])

    assert excinfo.value.required_units == 100
    assert api.calls == []


def test_remove_only_deletes(api, batch, context):
    result = batch.remove(context, "PL-src", refs("a", "b"))

    assert result.success
    assert api.calls_for("playlistItems", "insert") == []
    assert [kw["id"] for kw in api.calls_for("playlistItems", "delete")] == ["pi-a", "pi-b"]


@pytest.mark.parametrize(
    "call",
    [
        lambda b, c: b.transfer(c, "PL-1", "PL-1", refs("v1")),
        lambda b, c: b.transfer(c, "PL-1", "", refs("v1")),
        lambda b, c: b.transfer(c, "PL-1", "PL-2", []),
        lambda b, c: b.transfer(c, "PL-1", "PL-2", [VideoRef(playlist_item_id="", video_id="v1")]),
        lambda b, c: b.assign(c, "PL-1", []),
        lambda b, c: b.assign(c, "", ["v1"]),
        lambda b, c: b.assign(c, "PL-1", ["v1", ""]),
        lambda b, c: b.remove(c, "PL-1", []),
        lambda b, c: b.remove(c, "", refs("v1")),
    ],
)
def test_validation_happens_before_quota_check(api, context, youtube, call):
    class ExplodingQuota:
        def check_available(self, *args):
            raise AssertionError("quota must not be read for invalid requests")

        get_status = check_available

    service = BatchOperationService(youtube, ExplodingQuota(), locks=AccountLockRegistry())

    with pytest.raises(BatchValidationError):
        call(service, context)
    assert api.calls == []


def test_details_keep_input_order_with_mixed_outcomes(api, batch, context):
    failing = {"v2", "v5"}
    api.on(
        "playlistItems",
        "insert",
        lambda kw: http_error(400, "invalidValue", "bad") if inserted_video_id(kw) in failing else {},
    )
    video_ids = [f"v{i}" for i in range(1, 7)]

    result = batch.assign(context, "PL-dst", video_ids)

    assert [d.video_id for d in result.details] == video_ids
    assert [d.status == "error" for d in result.details] == [vid in failing for vid in video_ids]
    assert result.success_count + result.error_count == len(result.details)


def test_progress_callback_receives_each_item(batch, context):
    events = []

    batch.assign(context, "PL-dst", ["a", "b", "c"], on_item=lambda i, r: events.append((i, r.video_id)))

    assert events == [(0, "a"), (1, "b"), (2, "c")]


def test_cancellation_takes_effect_between_items(api, batch, context):
    cancel = threading.Event()

    def on_item(index, result):
        if index == 0:
            cancel.set()

    result = batch.transfer(context, "PL-src", "PL-dst", refs("a", "b", "c"), on_item=on_item, cancel_event=cancel)

    # first item finished its full insert/delete pair
    assert [(r, m) for r, m, _ in api.calls] == [("playlistItems", "insert"), ("playlistItems", "delete")]
    assert [d.status for d in result.details] == ["success", "error", "error"]
    assert result.details[2].error == CANCELLED_MESSAGE
    assert len(result.details) == 3


def test_batches_for_same_account_are_serialized(youtube, quota):
    locks = AccountLockRegistry()
    service = BatchOperationService(youtube, quota, locks=locks, serialize=True)
    context = RequestContext(account_id="account-1", trace_id="t")
    lock = locks.lock_for("account-1")
    observed = []

    service.assign(context, "PL-dst", ["a"], on_item=lambda i, r: observed.append(lock.locked()))

    assert observed == [True]
    assert not lock.locked()
    assert locks.lock_for("account-1") is lock
    assert locks.lock_for("account-2") is not lock


def test_serialization_can_be_disabled(youtube, quota):
    locks = AccountLockRegistry()
    service = BatchOperationService(youtube, quota, locks=locks, serialize=False)
    context = RequestContext(account_id="account-1", trace_id="t")
    observed = []

    service.assign(context, "PL-dst", ["a"], on_item=lambda i, r: observed.append(locks.lock_for("account-1").locked()))

    assert observed == [False]


def test_idle_account_locks_are_released():
    locks = AccountLockRegistry()

    for i in range(1000):
        with locks.hold(f"account-{i}"):
            pass

    assert len(locks._locks) == 0


def test_lock_is_shared_while_referenced():
    locks = AccountLockRegistry()
    held = locks.lock_for("account-1")

    with locks.hold("account-1"):
        assert held.locked()

    assert locks.lock_for("account-1") is held
