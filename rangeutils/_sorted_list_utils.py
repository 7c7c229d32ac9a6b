"""
Utility functions giving a `SortedKeyList` an interface more like Java's `NavigableMap`.

Both range collections keep their members in a `SortedKeyList` ordered by lower cut, so these
lookups are what make neighbour queries `O(log n)`. Lookups only ever compare keys, so member
endpoints never need to be hashable.
"""
from typing import Any, List, Optional, TypeVar

from sortedcontainers import SortedKeyList

K = TypeVar("K")


def value_below(sorted_list: SortedKeyList, key: K) -> Optional[Any]:
    """
    Get item for greatest key strictly less than the given key

    Returns None if there is no such key.
    """
    idx = sorted_list.bisect_key_left(key) - 1
    return sorted_list[idx] if idx >= 0 else None


def value_at_or_below(sorted_list: SortedKeyList, key: K) -> Optional[Any]:
    """
    Get item for greatest key less than or equal to a given key.

    Returns None if there is no such key
    """
    idx = sorted_list.bisect_key_right(key) - 1
    return sorted_list[idx] if idx >= 0 else None


def value_at_or_above(sorted_list: SortedKeyList, key: K) -> Optional[Any]:
    """
    Get item for least key greater than or equal to a given key.

    Returns None if there is no such key
    """
    idx = sorted_list.bisect_key_left(key)
    return sorted_list[idx] if idx < len(sorted_list) else None


def values_between(sorted_list: SortedKeyList, min_key: K, max_key: K) -> List[Any]:
    """
    Get, in key order, the items of all keys in the closed interval from `min_key` to `max_key`.
    """
    return list(sorted_list.irange_key(min_key, max_key))


def first_value(sorted_list: SortedKeyList) -> Optional[Any]:
    return sorted_list[0] if sorted_list else None


def last_value(sorted_list: SortedKeyList) -> Optional[Any]:
    return sorted_list[-1] if sorted_list else None


def remove_key(sorted_list: SortedKeyList, key: K) -> None:
    """
    Delete the item with the given key, if there is one.
    """
    idx = sorted_list.bisect_key_left(key)
    if idx < len(sorted_list) and sorted_list.key(sorted_list[idx]) == key:
        del sorted_list[idx]


def put(sorted_list: SortedKeyList, item: Any) -> None:
    """
    Insert `item`, replacing any item with an equal key.

    Keys are assumed unique, as they are in a map.
    """
    remove_key(sorted_list, sorted_list.key(item))
    sorted_list.add(item)


def clear(sorted_list: SortedKeyList, start_key_inclusive: K, stop_key_exclusive: K) -> int:
    """
    Delete all items with keys from `start_key_inclusive` up to but excluding
    `stop_key_exclusive`.

    Returns the number of items deleted.
    """
    start = sorted_list.bisect_key_left(start_key_inclusive)
    stop = sorted_list.bisect_key_left(stop_key_exclusive)
    if stop <= start:
        return 0
    del sorted_list[start:stop]
    return stop - start
