import logging
from abc import ABCMeta, abstractmethod
from typing import Generic, Iterable, List, Mapping, Optional, Sized, Tuple, TypeVar, Union

from immutablecollections import ImmutableDict, immutabledict

from rangeutils import _sorted_list_utils
from rangeutils.preconditions import check_arg, check_not_none
from rangeutils.range import _BelowValue, _Cut, _narrow, OutOfViewBoundsError, Range

from sortedcontainers import SortedKeyList

_log = logging.getLogger(__name__)  # pylint:disable=invalid-name

K = TypeVar("K")
V = TypeVar("V")


class RangeMap(Generic[K, V], Sized, metaclass=ABCMeta):
    """
    A mapping from disjoint nonempty ranges to values.

    Queries look up the value associated with the range (if any) that contains a specified key.

    In contrast to RangeSet, no "coalescing" is done of connected ranges, even if they are mapped
    to the same value. Putting a range overwrites whatever portions of existing entries it
    overlaps; the remainders of those entries keep their original values. For example ::

        range_map: MutableRangeMap[int, str] = RangeMap.create_mutable()
        range_map.put(Range.closed(1, 10), "a")  # {[1..10]: a}
        range_map.put(Range.open(3, 6), "b")  # {[1..3]: a, (3..6): b, [6..10]: a}
        range_map.put(Range.open_closed(10, 20), "a")  # [6..10] and (10..20] stay separate
        range_map.remove(Range.closed(5, 11))  # {[1..3]: a, (3..5): b, (11..20]: a}

    Note that this does not extend `Mapping` because you can't iterate over the keys.
    """

    __slots__ = ()

    @staticmethod
    def create_mutable(
        mappings: Union[
            "RangeMap[K, V]", Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]
        ] = ()
    ) -> "MutableRangeMap[K, V]":
        return _MutableSortedListRangeMap.create().put_all(mappings)

    @abstractmethod
    def get_entry(self, key: K) -> Optional[Tuple[Range[K], V]]:
        """
        Get the range containing `key` together with its value, if any.
        """
        raise NotImplementedError()

    def get(self, key: K) -> Optional[V]:
        """
        Get the value associated with the range containing `key`.

        Returns `None` if no range contains `key`.
        """
        entry = self.get_entry(key)
        return entry[1] if entry is not None else None

    def __getitem__(self, key: K) -> Optional[V]:
        return self.get(key)

    def __contains__(self, key: K) -> bool:
        """
        Determine whether any of this range map's key ranges contains `key`.
        """
        return self.get_entry(key) is not None

    @abstractmethod
    def span(self) -> Optional[Range[K]]:
        """
        The minimal range which encloses all key ranges in this map.

        Returns `None` if this range map is empty.
        """
        raise NotImplementedError()

    @abstractmethod
    def as_map_of_ranges(self) -> ImmutableDict[Range[K], V]:
        """
        Get the entries of this map, iterating in ascending order of their key ranges.
        """
        raise NotImplementedError()

    @abstractmethod
    def sub_range_map(self, view: Range[K]) -> "RangeMap[K, V]":
        """
        Get the entries of this map restricted to `view`.

        Every entry whose range is connected to `view` contributes its non-empty intersection
        with `view`, keeping its value.
        """
        raise NotImplementedError()

    def is_empty(self) -> bool:
        """
        Determine if this range map has no mappings.
        """
        return len(self) == 0

    def __eq__(self, other) -> bool:
        if isinstance(other, RangeMap):
            return tuple(self.as_map_of_ranges().items()) == tuple(
                other.as_map_of_ranges().items()
            )
        return False

    def __hash__(self) -> int:
        return hash(tuple(self.as_map_of_ranges().items()))

    def __repr__(self):
        name = "ImmutableRangeMap" if isinstance(self, ImmutableRangeMap) else "MutableRangeMap"
        return name + "(" + str(dict(self.as_map_of_ranges())) + ")"

    def __reduce__(self):
        factory = immutablerangemap if isinstance(self, ImmutableRangeMap) else mutablerangemap
        return (factory, (tuple(self.as_map_of_ranges().items()),))


# necessary for builder because an inner class cannot share type variables with its outer class
K2 = TypeVar("K2")
V2 = TypeVar("V2")


class ImmutableRangeMap(RangeMap[K, V], metaclass=ABCMeta):
    """
    A RangeMap which cannot be modified.

    `put`, `put_all` and `remove` leave the receiver untouched and return a new range map
    reflecting the change.
    """

    @staticmethod
    def builder() -> "ImmutableRangeMap.Builder[K, V]":
        return _ImmutableSortedListRangeMap.Builder()

    @abstractmethod
    def put(self, rng: Range[K], value: V) -> "ImmutableRangeMap[K, V]":
        raise NotImplementedError()

    @abstractmethod
    def put_all(
        self,
        mappings: Union[
            "RangeMap[K, V]", Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]
        ],
    ) -> "ImmutableRangeMap[K, V]":
        raise NotImplementedError()

    @abstractmethod
    def remove(self, rng: Range[K]) -> "ImmutableRangeMap[K, V]":
        raise NotImplementedError()

    class Builder(Generic[K2, V2], metaclass=ABCMeta):
        @abstractmethod
        def put(self, key: Range[K2], val: V2) -> "ImmutableRangeMap.Builder[K2, V2]":
            raise NotImplementedError()

        def put_all(
            self,
            mappings: Union[
                "RangeMap[K2, V2]", Mapping[Range[K2], V2], Iterable[Tuple[Range[K2], V2]]
            ],
        ) -> "ImmutableRangeMap.Builder[K2, V2]":
            for (rng, value) in _entries_of(mappings):
                self.put(rng, value)
            return self

        @abstractmethod
        def build(self) -> "ImmutableRangeMap[K2, V2]":
            raise NotImplementedError()


class MutableRangeMap(RangeMap[K, V], metaclass=ABCMeta):
    __slots__ = ()

    @abstractmethod
    def put(self, rng: Range[K], value: V) -> "MutableRangeMap[K, V]":
        """
        Map every key in `rng` to `value`.

        Portions of existing entries overlapping `rng` are discarded; their remainders keep
        their values. If `rng` is empty, this is a no-op.

        Returns the RangeMap itself to facilitate chaining operations, especially in tests.
        """
        raise NotImplementedError()

    def put_all(
        self,
        mappings: Union[
            "RangeMap[K, V]", Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]
        ],
    ) -> "MutableRangeMap[K, V]":
        """
        Put each of the given entries in turn.

        Returns the RangeMap itself to facilitate chaining operations, especially in tests.
        """
        for (rng, value) in tuple(_entries_of(mappings)):
            self.put(rng, value)
        return self

    @abstractmethod
    def remove(self, rng: Range[K]) -> "MutableRangeMap[K, V]":
        """
        Remove all mappings for keys in `rng`.

        Entries straddling either end of `rng` are trimmed and keep their values. If `rng` is
        empty, this is a no-op.

        Returns the RangeMap itself to facilitate chaining operations, especially in tests.
        """
        raise NotImplementedError()

    @abstractmethod
    def clear(self) -> None:
        """
        Remove all mappings from this RangeMap.
        """
        raise NotImplementedError()

    @abstractmethod
    def sub_range_map(self, view: Range[K]) -> "MutableRangeMap[K, V]":
        """
        Get a live view of the entries of this map restricted to `view`.

        Queries on the view always reflect the current state of this map. `put` and `remove`
        on the view modify this map, but raise an `OutOfViewBoundsError` unless `view` encloses
        their range. The view must not outlive this map.
        """
        raise NotImplementedError()


# the algorithms below operate on a SortedKeyList of (range, value) entries keyed by the lower
# cut of each entry's range.
# pylint:disable=protected-access


def _entries_of(
    mappings: Union[RangeMap[K, V], Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]]
) -> Iterable[Tuple[Range[K], V]]:
    if isinstance(mappings, RangeMap):
        return mappings.as_map_of_ranges().items()
    if isinstance(mappings, Mapping):
        return mappings.items()
    return mappings


def _entry_lower_cut(entry: Tuple[Range[K], V]) -> _Cut[K]:
    return entry[0]._lower_cut


def _by_lower_bound(disjoint_entries: Iterable[Tuple[Range[K], V]]) -> SortedKeyList:
    return SortedKeyList(disjoint_entries, key=_entry_lower_cut)


def _put_entry(entries_by_lower_bound: SortedKeyList, rng: Range[K], value: V) -> None:
    if not rng.is_empty():
        _sorted_list_utils.put(entries_by_lower_bound, (rng, value))


def _trim(entries_by_lower_bound: SortedKeyList, range_to_remove: Range[K]) -> None:
    lb_to_remove = range_to_remove._lower_cut
    ub_to_remove = range_to_remove._upper_cut

    entry_below_lb: Optional[Tuple[Range[K], V]] = _sorted_list_utils.value_below(
        entries_by_lower_bound, lb_to_remove
    )
    if entry_below_lb is not None:
        (rng_below_lb, value_below_lb) = entry_below_lb
        if rng_below_lb._upper_cut > lb_to_remove:
            if rng_below_lb._upper_cut > ub_to_remove:
                # the entry straddles the removed range and is split in two
                _put_entry(
                    entries_by_lower_bound,
                    Range(ub_to_remove, rng_below_lb._upper_cut),
                    value_below_lb,
                )
            _log.debug("Trimming %s -> %s to make room for %s", *entry_below_lb, range_to_remove)
            _put_entry(
                entries_by_lower_bound,
                Range(rng_below_lb._lower_cut, lb_to_remove),
                value_below_lb,
            )

    entry_below_ub: Optional[Tuple[Range[K], V]] = _sorted_list_utils.value_below(
        entries_by_lower_bound, ub_to_remove
    )
    if entry_below_ub is not None:
        (rng_below_ub, value_below_ub) = entry_below_ub
        if rng_below_ub._upper_cut > ub_to_remove:
            _log.debug("Trimming %s -> %s to make room for %s", *entry_below_ub, range_to_remove)
            _put_entry(
                entries_by_lower_bound,
                Range(ub_to_remove, rng_below_ub._upper_cut),
                value_below_ub,
            )

    _sorted_list_utils.clear(entries_by_lower_bound, lb_to_remove, ub_to_remove)


def _put(entries_by_lower_bound: SortedKeyList, rng: Range[K], value: V) -> None:
    check_not_none(rng)
    check_not_none(value)
    if rng.is_empty():
        return
    _trim(entries_by_lower_bound, rng)
    _sorted_list_utils.put(entries_by_lower_bound, (rng, value))


def _remove(entries_by_lower_bound: SortedKeyList, rng: Range[K]) -> None:
    check_not_none(rng)
    if rng.is_empty():
        return
    _trim(entries_by_lower_bound, rng)


def _clipped_entries(
    entries_by_lower_bound: SortedKeyList, view: Range[K]
) -> List[Tuple[Range[K], V]]:
    candidates: List[Tuple[Range[K], V]] = []
    entry_below: Optional[Tuple[Range[K], V]] = _sorted_list_utils.value_below(
        entries_by_lower_bound, view._lower_cut
    )
    if entry_below is not None and entry_below[0].is_connected(view):
        candidates.append(entry_below)
    candidates.extend(
        _sorted_list_utils.values_between(
            entries_by_lower_bound, view._lower_cut, view._upper_cut
        )
    )
    ret = []
    for (rng, value) in candidates:
        clipped = rng.intersection(view)
        if not clipped.is_empty():
            ret.append((clipped, value))
    return ret


def _span_of(first: Range[K], last: Range[K]) -> Range[K]:
    return Range(first._lower_cut, last._upper_cut)


class _SortedListRangeMap(RangeMap[K, V], metaclass=ABCMeta):
    def __init__(self, entries_by_lower_bound: SortedKeyList) -> None:
        self._entries_by_lower_bound = entries_by_lower_bound

    def get_entry(self, key: K) -> Optional[Tuple[Range[K], V]]:
        entry: Optional[Tuple[Range[K], V]] = _sorted_list_utils.value_at_or_below(
            self._entries_by_lower_bound, _BelowValue(check_not_none(key))
        )
        if entry is not None and key in entry[0]:
            return entry
        return None

    def span(self) -> Optional[Range[K]]:
        if not self._entries_by_lower_bound:
            return None
        return _span_of(
            _sorted_list_utils.first_value(self._entries_by_lower_bound)[0],
            _sorted_list_utils.last_value(self._entries_by_lower_bound)[0],
        )

    def as_map_of_ranges(self) -> ImmutableDict[Range[K], V]:
        return immutabledict(self._entries_by_lower_bound)

    def __len__(self) -> int:
        return len(self._entries_by_lower_bound)


class _MutableSortedListRangeMap(_SortedListRangeMap[K, V], MutableRangeMap[K, V]):
    @staticmethod
    def create() -> "_MutableSortedListRangeMap[K, V]":
        return _MutableSortedListRangeMap(_by_lower_bound(()))

    def put(self, rng: Range[K], value: V) -> "MutableRangeMap[K, V]":
        _put(self._entries_by_lower_bound, rng, value)
        return self

    def remove(self, rng: Range[K]) -> "MutableRangeMap[K, V]":
        _remove(self._entries_by_lower_bound, rng)
        return self

    def clear(self) -> None:
        self._entries_by_lower_bound.clear()

    def sub_range_map(self, view: Range[K]) -> "MutableRangeMap[K, V]":
        return _SubRangeMapView(self, check_not_none(view))

    def immutable_copy(self) -> "ImmutableRangeMap[K, V]":
        return _ImmutableSortedListRangeMap(self._entries_by_lower_bound.copy())


class _ImmutableSortedListRangeMap(ImmutableRangeMap[K, V], _SortedListRangeMap[K, V]):
    """
    An implementation of ImmutableRangeMap

    This should never be directly created by the user. In particular if something maintains
    a reference to the sorted dict it wraps, then all immutability guarantees are broken.
    """

    def put(self, rng: Range[K], value: V) -> "ImmutableRangeMap[K, V]":
        return self.put_all(((rng, value),))

    def put_all(
        self,
        mappings: Union[
            "RangeMap[K, V]", Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]
        ],
    ) -> "ImmutableRangeMap[K, V]":
        entries_by_lower_bound = self._entries_by_lower_bound.copy()
        for (rng, value) in _entries_of(mappings):
            _put(entries_by_lower_bound, rng, value)
        return _ImmutableSortedListRangeMap(entries_by_lower_bound)

    def remove(self, rng: Range[K]) -> "ImmutableRangeMap[K, V]":
        entries_by_lower_bound = self._entries_by_lower_bound.copy()
        _remove(entries_by_lower_bound, rng)
        return _ImmutableSortedListRangeMap(entries_by_lower_bound)

    def sub_range_map(self, view: Range[K]) -> "ImmutableRangeMap[K, V]":
        return _ImmutableSortedListRangeMap(
            _by_lower_bound(
                _clipped_entries(self._entries_by_lower_bound, check_not_none(view))
            )
        )

    class Builder(ImmutableRangeMap.Builder[K2, V2]):
        def __init__(self):
            self._mutable_builder = _MutableSortedListRangeMap.create()

        def put(self, key: Range[K2], val: V2) -> "ImmutableRangeMap.Builder[K2, V2]":
            self._mutable_builder.put(key, val)
            return self

        def build(self) -> "ImmutableRangeMap[K2, V2]":
            return self._mutable_builder.immutable_copy()


class _SubRangeMapView(MutableRangeMap[K, V]):
    def __init__(self, backing: _MutableSortedListRangeMap[K, V], view: Range[K]) -> None:
        self._backing = backing
        self._view = view

    def _entries(self) -> List[Tuple[Range[K], V]]:
        return _clipped_entries(self._backing._entries_by_lower_bound, self._view)

    def _check_in_view(self, rng: Range[K]) -> None:
        in_view = self._view.encloses(check_not_none(rng))
        if not in_view:
            _log.debug("Rejected write of %s through view restricted to %s", rng, self._view)
        check_arg(
            in_view,
            "Cannot modify range %s through a view restricted to %s",
            (rng, self._view),
            error_type=OutOfViewBoundsError,
        )

    def get_entry(self, key: K) -> Optional[Tuple[Range[K], V]]:
        if key not in self._view:
            return None
        entry = self._backing.get_entry(key)
        if entry is None:
            return None
        return (entry[0].intersection(self._view), entry[1])

    def span(self) -> Optional[Range[K]]:
        entries = self._entries()
        if not entries:
            return None
        return _span_of(entries[0][0], entries[-1][0])

    def as_map_of_ranges(self) -> ImmutableDict[Range[K], V]:
        return immutabledict(self._entries())

    def sub_range_map(self, view: Range[K]) -> "MutableRangeMap[K, V]":
        return _SubRangeMapView(self._backing, _narrow(self._view, check_not_none(view)))

    def put(self, rng: Range[K], value: V) -> "MutableRangeMap[K, V]":
        self._check_in_view(rng)
        self._backing.put(rng, value)
        return self

    def remove(self, rng: Range[K]) -> "MutableRangeMap[K, V]":
        self._check_in_view(rng)
        self._backing.remove(rng)
        return self

    def clear(self) -> None:
        self._backing.remove(self._view)

    def __len__(self) -> int:
        return len(self._entries())


def immutablerangemap(
    mappings: Optional[
        Union[RangeMap[K, V], Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]]
    ] = None
) -> ImmutableRangeMap[K, V]:
    """
    Create an immutable range map by putting each of the given entries in turn.

    If `mappings` is already an `ImmutableRangeMap`, it is returned unchanged.
    """
    if isinstance(mappings, ImmutableRangeMap):
        return mappings
    return (
        ImmutableRangeMap.builder()
        .put_all(mappings if mappings is not None else ())
        .build()
    )


def mutablerangemap(
    mappings: Optional[
        Union[RangeMap[K, V], Mapping[Range[K], V], Iterable[Tuple[Range[K], V]]]
    ] = None
) -> MutableRangeMap[K, V]:
    """
    Create a new mutable range map by putting each of the given entries in turn.
    """
    return RangeMap.create_mutable(mappings if mappings is not None else ())
