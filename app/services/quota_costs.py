"""
YouTube Data API v3 할당량 비용표

https://developers.google.com/youtube/v3/determine_quota_cost
"""

from typing import Dict, List

from app.core.exceptions import UnknownOperationError

PLAYLISTS_LIST = "playlists.list"
PLAYLIST_ITEMS_LIST = "playlistItems.list"
PLAYLIST_ITEMS_INSERT = "playlistItems.insert"
PLAYLIST_ITEMS_DELETE = "playlistItems.delete"
VIDEOS_LIST = "videos.list"
CHANNELS_LIST = "channels.list"
SUBSCRIPTIONS_LIST = "subscriptions.list"
SEARCH_LIST = "search.list"

QUOTA_COSTS: Dict[str, int] = {
    PLAYLISTS_LIST: 1,
    PLAYLIST_ITEMS_LIST: 1,
    PLAYLIST_ITEMS_INSERT: 50,
    PLAYLIST_ITEMS_DELETE: 50,
    VIDEOS_LIST: 1,
    CHANNELS_LIST: 1,
    SUBSCRIPTIONS_LIST: 1,
    SEARCH_LIST: 100,
}

# 화면 표시용 작업 목록
QUOTA_OPERATIONS: List[Dict[str, object]] = [
    {"operation": PLAYLISTS_LIST, "label": "List playlists"},
    {"operation": PLAYLIST_ITEMS_LIST, "label": "List playlist videos"},
    {"operation": PLAYLIST_ITEMS_INSERT, "label": "Add video to playlist"},
    {"operation": PLAYLIST_ITEMS_DELETE, "label": "Remove video from playlist"},
    {"operation": VIDEOS_LIST, "label": "Fetch video details"},
    {"operation": CHANNELS_LIST, "label": "List channels"},
    {"operation": SUBSCRIPTIONS_LIST, "label": "List subscriptions"},
    {"operation": SEARCH_LIST, "label": "Search channel videos"},
]


def cost_of(operation: str) -> int:
    try:
        return QUOTA_COSTS[operation]
    except KeyError:
        raise UnknownOperationError(operation) from None


def _check_count(count: int) -> None:
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")


def transfer_cost(count: int) -> int:
    """이동 = 대상 insert + 원본 delete"""
    _check_count(count)
    return count * (cost_of(PLAYLIST_ITEMS_INSERT) + cost_of(PLAYLIST_ITEMS_DELETE))


def assign_cost(count: int) -> int:
    _check_count(count)
    return count * cost_of(PLAYLIST_ITEMS_INSERT)


def remove_cost(count: int) -> int:
    _check_count(count)
    return count * cost_of(PLAYLIST_ITEMS_DELETE)


def max_transfers_available(remaining_units: int) -> int:
    return max(0, remaining_units // transfer_cost(1))


def max_assigns_available(remaining_units: int) -> int:
    return max(0, remaining_units // assign_cost(1))


def describe_operations() -> List[Dict[str, object]]:
    return [dict(entry, cost=QUOTA_COSTS[entry["operation"]]) for entry in QUOTA_OPERATIONS]
