import pytest

from app.core.context import RequestContext, generate_trace_id
from app.utils.youtube_utils import chunked, parse_duration, to_int


@pytest.mark.parametrize(
    "value, seconds",
    [
        ("PT1H2M3S", 3723),
        ("PT45S", 45),
        ("PT10M", 600),
        ("P1DT1S", 86401),
        ("P0D", 0),
        ("", 0),
        (None, 0),
        ("garbage", 0),
    ],
)
def test_parse_duration(value, seconds):
    assert parse_duration(value) == seconds


def test_chunked_keeps_order():
    assert list(chunked(list(range(7)), 3)) == [[0, 1, 2], [3, 4, 5], [6]]
    assert list(chunked([], 50)) == []


def test_to_int_tolerates_missing_values():
    assert to_int("1234") == 1234
    assert to_int(None) == 0
    assert to_int("n/a") == 0


def test_request_context_hides_token_and_generates_trace_id():
    context = RequestContext(account_id="acc", access_token="secret")

    assert "secret" not in repr(context)
    assert context.trace_id
    assert context.log_prefix == f"[{context.trace_id}]"
    assert generate_trace_id() != generate_trace_id()
