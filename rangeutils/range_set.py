import logging
from abc import ABCMeta, abstractmethod
from typing import (
    Container,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    Sized,
    TypeVar,
    Union,
)

from rangeutils import _sorted_list_utils
from rangeutils.preconditions import check_arg, check_not_none
from rangeutils.range import (
    _ABOVE_ALL,
    _BELOW_ALL,
    _BelowValue,
    _Cut,
    _narrow,
    OutOfViewBoundsError,
    Range,
)

from sortedcontainers import SortedKeyList

_log = logging.getLogger(__name__)  # pylint:disable=invalid-name

T = TypeVar("T")


# Pylint disable due to https://github.com/PyCQA/pylint/issues/2472
class RangeSet(
    Generic[T], Container[T], Sized, metaclass=ABCMeta
):  # pylint:disable=E0239
    """
    A set comprising zero or more nonempty, disconnected ranges of type `T`.

    Implementations that choose to support the `add(Range)` operation are required to ignore empty
    ranges and coalesce connected ranges. For example ::

         range_set: MutableRangeSet[int] = RangeSet.create_mutable()
         range_set.add(Range.closed(1, 10)) # {[1..10]}
         range_set.add(Range.closed_open(11, 15)) # disconnected range; {[1..10], [11..15)}
         range_set.add(Range.closed_open(15, 20)) # connected range; {[1..10], [11..20)}
         range_set.add(Range.open(0, 0)) # empty range; {[1..10], [11..20)}
         range_set.remove(Range.open(5, 10)) # splits [1..10]; {[1..5], [10..10], [11..20)}

    Note that the behavior of `Range.is_empty()` and `Range.is_connected(Range)` may not be as
    expected on discrete ranges. See the documentation of those methods for details.

    Two range sets are equal when they contain the same ranges, regardless of whether either is
    mutable.
    """

    __slots__ = ()

    @staticmethod
    def create_mutable(
        ranges: Union["RangeSet[T]", Iterable[Range[T]]] = ()
    ) -> "MutableRangeSet[T]":
        return _MutableSortedListRangeSet.create().add_all(ranges)

    @abstractmethod
    def __contains__(self, value: T) -> bool:  # type: ignore
        """
        Determine whether any of this range set's member ranges contains `value`.
        """
        raise NotImplementedError()

    @abstractmethod
    def range_containing(self, value: T) -> Optional[Range[T]]:
        """
        Get the member range containing `value`, if any.
        """
        raise NotImplementedError()

    @abstractmethod
    def encloses(self, rng: Range[T]) -> bool:
        """
        Check if any member range encloses `rng`
        """
        raise NotImplementedError()

    def encloses_all(self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]) -> bool:
        """
        For each input range, check if any member range encloses it.
        """
        if isinstance(rngs, RangeSet):
            return self.encloses_all(rngs.as_ranges())
        return all(self.encloses(rng) for rng in rngs)

    @abstractmethod
    def intersects(self, rng: Range[T]) -> bool:
        """
        Get whether any ranges in this set intersects `rng`

        Returns `True` if there exists a non-empty range enclosed by both a member range in
        this range set and the specified range.
        """
        raise NotImplementedError()

    @abstractmethod
    def as_ranges(self) -> Sequence[Range[T]]:
        """
        Get the member ranges of this set, in ascending order.

        No two of the returned ranges are connected and none is empty.
        """
        raise NotImplementedError()

    def is_empty(self) -> bool:
        """
        Determine if this range set has no ranges.
        """
        return len(self) == 0

    @abstractmethod
    def span(self) -> Optional[Range[T]]:
        """
        The minimal range which encloses all ranges in this range set.

        Returns `None` if this range set is empty.
        """
        raise NotImplementedError()

    @abstractmethod
    def complement(self) -> "RangeSet[T]":
        """
        Get a range set covering exactly the values this one does not.

        The result is independent of this set and has the same mutability.
        """
        raise NotImplementedError()

    @abstractmethod
    def sub_range_set(self, view: Range[T]) -> "RangeSet[T]":
        """
        Get the intersection of this range set with `view`.

        Each member range connected to `view` contributes its non-empty intersection with
        `view`.
        """
        raise NotImplementedError()

    def __eq__(self, other) -> bool:
        if isinstance(other, RangeSet):
            return tuple(self.as_ranges()) == tuple(other.as_ranges())
        return False

    def __hash__(self) -> int:
        return hash(tuple(self.as_ranges()))

    def __repr__(self):
        return repr(list(self.as_ranges()))

    def __reduce__(self):
        # views and both variants all pickle as a snapshot rebuilt by the matching factory
        factory = immutablerangeset if isinstance(self, ImmutableRangeSet) else mutablerangeset
        return (factory, (tuple(self.as_ranges()),))


T2 = TypeVar("T2")


class ImmutableRangeSet(RangeSet[T], metaclass=ABCMeta):
    """
    A RangeSet which cannot be modified.

    The `add` and `remove` family of methods leave the receiver untouched and return a new
    range set reflecting the change. If you reach into its guts and modify it, its behavior is
    undefined.
    """

    @staticmethod
    def builder() -> "ImmutableRangeSet.Builder[T]":
        return _ImmutableSortedListRangeSet.Builder()

    @abstractmethod
    def add(self, rng: Range[T]) -> "ImmutableRangeSet[T]":
        raise NotImplementedError()

    @abstractmethod
    def add_all(
        self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]
    ) -> "ImmutableRangeSet[T]":
        raise NotImplementedError()

    @abstractmethod
    def remove(self, rng: Range[T]) -> "ImmutableRangeSet[T]":
        raise NotImplementedError()

    @abstractmethod
    def remove_all(
        self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]
    ) -> "ImmutableRangeSet[T]":
        raise NotImplementedError()

    class Builder(Generic[T2], metaclass=ABCMeta):
        @abstractmethod
        def add(self, rng: Range[T2]) -> "ImmutableRangeSet.Builder[T2]":
            raise NotImplementedError()

        def add_all(
            self, ranges: Union["RangeSet[T2]", Iterable[Range[T2]]]
        ) -> "ImmutableRangeSet.Builder[T2]":
            for rng in _ranges_of(ranges):
                self.add(rng)
            return self

        @abstractmethod
        def build(self) -> "ImmutableRangeSet[T2]":
            raise NotImplementedError()


class MutableRangeSet(RangeSet[T], metaclass=ABCMeta):
    __slots__ = ()

    @abstractmethod
    def add(self, rng: Range[T]) -> "MutableRangeSet[T]":
        """
        Add the specified range to this RangeSet.

         For equal range sets `a` and `b`, the result of `a.add(range)` is that `a` will be the
         minimal range set for which both `a.encloses_all(b)` and `a.encloses(range)`.

        Note that `range` will be coalesced with any ranges in the range set that are connected
         with it. Moreover, if range is empty, this is a no-op.

        Returns the RangeSet itself to facilitate chaining operations, especially in tests.
         """
        raise NotImplementedError()

    def add_all(
        self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]
    ) -> "MutableRangeSet[T]":
        """
        Add all the specified ranges to this RangeSet.

        Returns the RangeSet itself to facilitate chaining operations, especially in tests.
        """
        for rng in _ranges_of(rngs):
            self.add(rng)
        return self

    @abstractmethod
    def clear(self) -> None:
        """
        Remove all ranges from this RangeSet.

        After this operation, `c in this_range_set` will return `False` for all `c`.

        This is equivalent to `remove(Range.all())`.
        """
        raise NotImplementedError()

    @abstractmethod
    def remove(self, rng: Range[T]) -> "MutableRangeSet[T]":
        """
        Remove the specified range from this RangeSet.

        After this operation, if `c in rng`, `c in self` will return `False`.
        A member range straddling `rng` is split in two. If `rng` is empty, this is a no-op.

        Returns the RangeSet itself to facilitate chaining operations, especially in tests.
        """
        raise NotImplementedError()

    def remove_all(
        self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]
    ) -> "MutableRangeSet[T]":
        """
        Remove each specified range.

        Returns the RangeSet itself to facilitate chaining operations, especially in tests.
        """
        for rng in tuple(_ranges_of(rngs)):
            self.remove(rng)
        return self

    @abstractmethod
    def sub_range_set(self, view: Range[T]) -> "MutableRangeSet[T]":
        """
        Get a live view of the intersection of this range set with `view`.

        Queries on the view always reflect the current state of this set. Writes through the
        view modify this set, but raise an `OutOfViewBoundsError` unless `view` encloses the
        range being added or removed. The view must not outlive this set.
        """
        raise NotImplementedError()


# the algorithms below operate on a SortedKeyList of the member ranges keyed by lower cut.
# Because members are never connected, this orders them by upper cut as well.
# pylint:disable=protected-access


def _lower_cut_of(rng: Range[T]) -> _Cut[T]:
    return rng._lower_cut


def _by_lower_bound(disjoint_ranges: Iterable[Range[T]]) -> SortedKeyList:
    return SortedKeyList(disjoint_ranges, key=_lower_cut_of)


def _ranges_of(rngs: Union[RangeSet[T], Iterable[Range[T]]]) -> Iterable[Range[T]]:
    if isinstance(rngs, RangeSet):
        return rngs.as_ranges()
    return rngs


def _replace_range_with_same_lower_bound(
    ranges_by_lower_bound: SortedKeyList, rng: Range[T]
) -> None:
    if rng.is_empty():
        _sorted_list_utils.remove_key(ranges_by_lower_bound, rng._lower_cut)
    else:
        _sorted_list_utils.put(ranges_by_lower_bound, rng)


def _coalescing_add(ranges_by_lower_bound: SortedKeyList, range_to_add: Range[T]) -> None:
    check_not_none(range_to_add)
    if range_to_add.is_empty():
        return

    # the range we actually need to add may not correspond exactly to range_to_add
    # because it may overlap or be connected to existing ranges
    # lb_to_add and ub_to_add will form the range we actually add
    lb_to_add = range_to_add._lower_cut
    ub_to_add = range_to_add._upper_cut

    # is there any range which begins strictly before range_to_add's lower bound?
    # if so, range_to_add's beginning might lie within that range...
    range_below_lb: Optional[Range[T]] = _sorted_list_utils.value_below(
        ranges_by_lower_bound, lb_to_add
    )
    if range_below_lb is not None and lb_to_add <= range_below_lb._upper_cut:
        # and we need to coalesce with it by extending the bounds to include
        # that range's lower bound
        lb_to_add = range_below_lb._lower_cut
        # if that range reaches at least as far up, range_to_add is already covered
        if ub_to_add <= range_below_lb._upper_cut:
            return

    # now we need to check for coalescing and connectedness on the upper end
    range_below_ub: Optional[Range[T]] = _sorted_list_utils.value_at_or_below(
        ranges_by_lower_bound, ub_to_add
    )
    if range_below_ub is not None and ub_to_add < range_below_ub._upper_cut:
        ub_to_add = range_below_ub._upper_cut

    # any ranges which lie within the range we are getting ready to add are subsumed in it
    num_subsumed = _sorted_list_utils.clear(ranges_by_lower_bound, lb_to_add, ub_to_add)
    coalesced = Range(lb_to_add, ub_to_add)
    if num_subsumed or coalesced != range_to_add:
        _log.debug("Coalesced %s with existing ranges into %s", range_to_add, coalesced)
    _replace_range_with_same_lower_bound(ranges_by_lower_bound, coalesced)


def _carve_out(ranges_by_lower_bound: SortedKeyList, range_to_remove: Range[T]) -> None:
    check_not_none(range_to_remove)
    if range_to_remove.is_empty():
        return

    lb_to_remove = range_to_remove._lower_cut
    ub_to_remove = range_to_remove._upper_cut

    range_below_lb: Optional[Range[T]] = _sorted_list_utils.value_below(
        ranges_by_lower_bound, lb_to_remove
    )
    if range_below_lb is not None and range_below_lb._upper_cut >= lb_to_remove:
        # the range below overlaps the start of the removed range
        if range_to_remove.has_upper_bound() and range_below_lb._upper_cut >= ub_to_remove:
            # and also its end, so it is split in two
            _log.debug("Removing %s splits %s", range_to_remove, range_below_lb)
            _replace_range_with_same_lower_bound(
                ranges_by_lower_bound, Range(ub_to_remove, range_below_lb._upper_cut)
            )
        _replace_range_with_same_lower_bound(
            ranges_by_lower_bound, Range(range_below_lb._lower_cut, lb_to_remove)
        )

    range_below_ub: Optional[Range[T]] = _sorted_list_utils.value_at_or_below(
        ranges_by_lower_bound, ub_to_remove
    )
    if (
        range_below_ub is not None
        and range_to_remove.has_upper_bound()
        and range_below_ub._upper_cut >= ub_to_remove
    ):
        # the range below the upper bound sticks out past the removed range
        _replace_range_with_same_lower_bound(
            ranges_by_lower_bound, Range(ub_to_remove, range_below_ub._upper_cut)
        )

    _sorted_list_utils.clear(ranges_by_lower_bound, lb_to_remove, ub_to_remove)


def _connected_ranges(
    ranges_by_lower_bound: SortedKeyList, rng: Range[T]
) -> List[Range[T]]:
    # only the member beginning just below rng can reach into it from the left; every other
    # connected member begins within rng
    ret = []
    range_below: Optional[Range[T]] = _sorted_list_utils.value_below(
        ranges_by_lower_bound, rng._lower_cut
    )
    if range_below is not None and range_below.is_connected(rng):
        ret.append(range_below)
    ret.extend(
        _sorted_list_utils.values_between(
            ranges_by_lower_bound, rng._lower_cut, rng._upper_cut
        )
    )
    return ret


def _clipped_ranges(ranges_by_lower_bound: SortedKeyList, view: Range[T]) -> List[Range[T]]:
    ret = []
    for rng in _connected_ranges(ranges_by_lower_bound, view):
        clipped = rng.intersection(view)
        if not clipped.is_empty():
            ret.append(clipped)
    return ret


def _range_enclosing(
    ranges_by_lower_bound: SortedKeyList, rng: Range[T]
) -> Optional[Range[T]]:
    candidate: Optional[Range[T]] = _sorted_list_utils.value_at_or_below(
        ranges_by_lower_bound, rng._lower_cut
    )
    if candidate is not None and candidate.encloses(rng):
        return candidate
    return None


def _complement_of(ranges: Sequence[Range[T]]) -> List[Range[T]]:
    if not ranges:
        return [Range.all()]
    ret = []
    if ranges[0].has_lower_bound():
        ret.append(Range(_BELOW_ALL, ranges[0]._lower_cut))
    for (below, above) in zip(ranges, ranges[1:]):
        ret.append(Range(below._upper_cut, above._lower_cut))
    if ranges[-1].has_upper_bound():
        ret.append(Range(ranges[-1]._upper_cut, _ABOVE_ALL))
    return ret


# noinspection PyProtectedMember
class _SortedListRangeSet(RangeSet[T], metaclass=ABCMeta):
    def __init__(self, ranges_by_lower_bound: SortedKeyList) -> None:
        self._ranges_by_lower_bound = ranges_by_lower_bound

    @abstractmethod
    def _wrap(self, ranges_by_lower_bound: SortedKeyList) -> RangeSet[T]:
        """
        Create a range set of the same variant as this one around the given storage.
        """
        raise NotImplementedError()

    def range_containing(self, value: T) -> Optional[Range[T]]:
        highest_range_beginning_at_or_below: Optional[
            Range[T]
        ] = _sorted_list_utils.value_at_or_below(
            self._ranges_by_lower_bound, _BelowValue(check_not_none(value))
        )
        if (
            highest_range_beginning_at_or_below is not None
            and value in highest_range_beginning_at_or_below
        ):
            return highest_range_beginning_at_or_below
        return None

    # noinspection PyTypeHints
    def __contains__(self, value: T) -> bool:  # type: ignore
        return self.range_containing(value) is not None

    def encloses(self, rng: Range[T]) -> bool:
        return _range_enclosing(self._ranges_by_lower_bound, check_not_none(rng)) is not None

    def intersects(self, rng: Range[T]) -> bool:
        check_not_none(rng)
        ceiling_range: Optional[Range[T]] = _sorted_list_utils.value_at_or_above(
            self._ranges_by_lower_bound, rng._lower_cut
        )
        if (
            ceiling_range is not None
            and ceiling_range.is_connected(rng)
            and not ceiling_range.intersection(rng).is_empty()
        ):
            return True
        # check strictness of lowerEntry
        lower_range: Optional[Range[T]] = _sorted_list_utils.value_below(
            self._ranges_by_lower_bound, rng._lower_cut
        )
        return bool(
            lower_range is not None
            and lower_range.is_connected(rng)
            and not lower_range.intersection(rng).is_empty()
        )

    def as_ranges(self) -> Sequence[Range[T]]:
        return tuple(self._ranges_by_lower_bound)

    def span(self) -> Optional[Range[T]]:
        if not self._ranges_by_lower_bound:
            return None
        first: Range[T] = _sorted_list_utils.first_value(self._ranges_by_lower_bound)
        last: Range[T] = _sorted_list_utils.last_value(self._ranges_by_lower_bound)
        return Range(first._lower_cut, last._upper_cut)

    def complement(self) -> RangeSet[T]:
        return self._wrap(_by_lower_bound(_complement_of(list(self.as_ranges()))))

    def immutable_copy(self) -> ImmutableRangeSet[T]:
        return _ImmutableSortedListRangeSet(self._ranges_by_lower_bound.copy())

    def __len__(self) -> int:
        return len(self._ranges_by_lower_bound)


class _MutableSortedListRangeSet(_SortedListRangeSet[T], MutableRangeSet[T]):
    @staticmethod
    def create() -> "_MutableSortedListRangeSet[T]":
        return _MutableSortedListRangeSet(_by_lower_bound(()))

    def _wrap(self, ranges_by_lower_bound: SortedKeyList) -> "MutableRangeSet[T]":
        return _MutableSortedListRangeSet(ranges_by_lower_bound)

    def add(self, rng: Range[T]) -> "MutableRangeSet[T]":
        _coalescing_add(self._ranges_by_lower_bound, rng)
        return self

    def remove(self, rng: Range[T]) -> "MutableRangeSet[T]":
        _carve_out(self._ranges_by_lower_bound, rng)
        return self

    def clear(self) -> None:
        self._ranges_by_lower_bound.clear()

    def sub_range_set(self, view: Range[T]) -> "MutableRangeSet[T]":
        return _SubRangeSetView(self, check_not_none(view))


class _ImmutableSortedListRangeSet(ImmutableRangeSet[T], _SortedListRangeSet[T]):
    """
    An implementation of ImmutableRangeSet

    This should never be directly created by the user. In particular if something maintains
    a reference to the sorted list it wraps, then all immutability guarantees are broken.
    """

    def _wrap(self, ranges_by_lower_bound: SortedKeyList) -> "ImmutableRangeSet[T]":
        return _ImmutableSortedListRangeSet(ranges_by_lower_bound)

    def add(self, rng: Range[T]) -> "ImmutableRangeSet[T]":
        return self.add_all((rng,))

    def add_all(
        self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]
    ) -> "ImmutableRangeSet[T]":
        ranges_by_lower_bound = self._ranges_by_lower_bound.copy()
        for rng in _ranges_of(rngs):
            _coalescing_add(ranges_by_lower_bound, rng)
        return _ImmutableSortedListRangeSet(ranges_by_lower_bound)

    def remove(self, rng: Range[T]) -> "ImmutableRangeSet[T]":
        return self.remove_all((rng,))

    def remove_all(
        self, rngs: Union["RangeSet[T]", Iterable[Range[T]]]
    ) -> "ImmutableRangeSet[T]":
        ranges_by_lower_bound = self._ranges_by_lower_bound.copy()
        for rng in _ranges_of(rngs):
            _carve_out(ranges_by_lower_bound, rng)
        return _ImmutableSortedListRangeSet(ranges_by_lower_bound)

    def sub_range_set(self, view: Range[T]) -> "ImmutableRangeSet[T]":
        return _ImmutableSortedListRangeSet(
            _by_lower_bound(
                _clipped_ranges(self._ranges_by_lower_bound, check_not_none(view))
            )
        )

    class Builder(ImmutableRangeSet.Builder[T2]):
        def __init__(self):
            self._mutable_builder = _MutableSortedListRangeSet.create()

        def add(self, rng: Range[T2]) -> "ImmutableRangeSet.Builder[T2]":
            self._mutable_builder.add(rng)
            return self

        def build(self) -> "ImmutableRangeSet[T2]":
            return self._mutable_builder.immutable_copy()


class _SubRangeSetView(MutableRangeSet[T]):
    """
    A live, restricted view of a mutable range set.

    Nothing is cached: every query is answered from the backing set's current contents.
    """

    def __init__(self, backing: _MutableSortedListRangeSet[T], view: Range[T]) -> None:
        self._backing = backing
        self._view = view

    def _ranges(self) -> List[Range[T]]:
        return _clipped_ranges(self._backing._ranges_by_lower_bound, self._view)

    def _check_in_view(self, rng: Range[T]) -> None:
        in_view = self._view.encloses(check_not_none(rng))
        if not in_view:
            _log.debug("Rejected write of %s through view restricted to %s", rng, self._view)
        check_arg(
            in_view,
            "Cannot modify range %s through a view restricted to %s",
            (rng, self._view),
            error_type=OutOfViewBoundsError,
        )

    def __contains__(self, value: T) -> bool:  # type: ignore
        return value in self._view and value in self._backing

    def range_containing(self, value: T) -> Optional[Range[T]]:
        if value not in self._view:
            return None
        containing = self._backing.range_containing(value)
        return containing.intersection(self._view) if containing is not None else None

    def encloses(self, rng: Range[T]) -> bool:
        check_not_none(rng)
        if self._view.is_empty() or not self._view.encloses(rng):
            return False
        enclosing = _range_enclosing(self._backing._ranges_by_lower_bound, rng)
        return enclosing is not None and not enclosing.intersection(self._view).is_empty()

    def intersects(self, rng: Range[T]) -> bool:
        check_not_none(rng)
        return self._view.is_connected(rng) and self._backing.intersects(
            self._view.intersection(rng)
        )

    def as_ranges(self) -> Sequence[Range[T]]:
        return tuple(self._ranges())

    def span(self) -> Optional[Range[T]]:
        ranges = self._ranges()
        if not ranges:
            return None
        return Range(ranges[0]._lower_cut, ranges[-1]._upper_cut)

    def complement(self) -> "MutableRangeSet[T]":
        return _MutableSortedListRangeSet(_by_lower_bound(_complement_of(self._ranges())))

    def sub_range_set(self, view: Range[T]) -> "MutableRangeSet[T]":
        return _SubRangeSetView(self._backing, _narrow(self._view, check_not_none(view)))

    def add(self, rng: Range[T]) -> "MutableRangeSet[T]":
        self._check_in_view(rng)
        self._backing.add(rng)
        return self

    def remove(self, rng: Range[T]) -> "MutableRangeSet[T]":
        self._check_in_view(rng)
        self._backing.remove(rng)
        return self

    def clear(self) -> None:
        self._backing.remove(self._view)

    def __len__(self) -> int:
        return len(self._ranges())


def immutablerangeset(
    ranges: Optional[Union[RangeSet[T], Iterable[Range[T]]]] = None
) -> ImmutableRangeSet[T]:
    """
    Create an immutable range set from the given ranges, coalescing connected ones.

    If `ranges` is already an `ImmutableRangeSet`, it is returned unchanged.
    """
    if isinstance(ranges, ImmutableRangeSet):
        return ranges
    return ImmutableRangeSet.builder().add_all(ranges if ranges is not None else ()).build()


def mutablerangeset(
    ranges: Optional[Union[RangeSet[T], Iterable[Range[T]]]] = None
) -> MutableRangeSet[T]:
    """
    Create a new mutable range set from the given ranges, coalescing connected ones.
    """
    return RangeSet.create_mutable(ranges if ranges is not None else ())
