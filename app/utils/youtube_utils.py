import re
from typing import Any, Dict, Iterator, List, Optional, Sequence, TypeVar

T = TypeVar("T")

_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def parse_duration(value: Optional[str]) -> int:
    """
    ISO 8601 동영상 길이를 초 단위로 변환

    Args:
        value: YouTube contentDetails.duration (예: "PT1H2M3S")

    Returns:
        int: 초 단위 길이, 해석할 수 없으면 0
    """
    if not value:
        return 0

    match = _DURATION_PATTERN.match(value)
    if not match:
        return 0

    parts = {key: int(number) if number else 0 for key, number in match.groupdict().items()}
    return (
        parts["days"] * 86400
        + parts["hours"] * 3600
        + parts["minutes"] * 60
        + parts["seconds"]
    )


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """size 개씩 나눈 목록 생성"""
    if size < 1:
        raise ValueError("size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def to_int(value: Any) -> int:
    """YouTube statistics 문자열 카운트를 정수로 변환"""
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def thumbnail_url(snippet: Dict[str, Any], size: str = "medium") -> Optional[str]:
    thumbnails = snippet.get("thumbnails") or {}
    return (thumbnails.get(size) or {}).get("url")
