# really needs to be totally-ordered
from abc import ABCMeta, abstractmethod
from typing import Any, Container, Generic, Hashable, Iterable, Tuple, TypeVar

from attr import attrib, attrs, validators

from rangeutils.discrete_domain import DiscreteDomain
from rangeutils.preconditions import check_arg, check_isinstance, check_not_none

from typing_extensions import Protocol


class InvalidRangeError(ValueError):
    """
    Raised when range endpoints are out of order or describe a forbidden half-open
    degenerate range such as `[v..v)`.
    """


class DisconnectedRangesError(ValueError):
    """
    Raised when the intersection of two ranges which are not connected is requested.
    """


class OutOfViewBoundsError(ValueError):
    """
    Raised when a write through a restricted view of a range collection targets a range
    not enclosed by the view's restriction.
    """


class EmptyInputError(ValueError):
    """
    Raised when an operation needs at least one input value but got none.
    """


class _Comparable(Protocol):
    def __lt__(self, other: Any) -> bool:
        ...


def _endpoint_hash(endpoint: Any) -> int:
    # endpoints ordered through a wrapper such as functools.cmp_to_key are not hashable; all such
    # endpoints of one type share a hash
    return hash(endpoint) if isinstance(endpoint, Hashable) else hash(type(endpoint))


# will be initialized after bound type declarations
# noinspection PyTypeHints
_OPEN: "BoundType" = None  # type:ignore
# noinspection PyTypeHints
_CLOSED: "BoundType" = None  # type:ignore


class BoundType:
    """
    A possible type of boundary for a range.

    A boundary is either closed, meaning it includes its endpoint, or open, meaning it does not.
    """

    __slots__ = ()

    @staticmethod
    def open() -> "BoundType":
        return _OPEN

    @staticmethod
    def closed() -> "BoundType":
        return _CLOSED

    def flip(self) -> "BoundType":
        return _CLOSED if self is _OPEN else _OPEN


class _Open(BoundType):
    __slots__ = ()

    def __reduce__(self):
        return "_OPEN"

    def __repr__(self) -> str:
        return "OPEN"


class _Closed(BoundType):
    __slots__ = ()

    def __reduce__(self):
        return "_CLOSED"

    def __repr__(self) -> str:
        return "CLOSED"


# noinspection PyRedeclaration,PyTypeHints
_OPEN: BoundType = _Open()  # type: ignore
# noinspection PyRedeclaration,PyTypeHints
_CLOSED: BoundType = _Closed()  # type: ignore

T = TypeVar("T", bound=_Comparable)


class Bound(Generic[T], metaclass=ABCMeta):
    """
    One endpoint of a `Range` as seen from outside.

    A bound is either `INFINITE_BOUND`, meaning the range is unbounded on that side, or a
    `FiniteBound` carrying an endpoint value and a `BoundType`.
    """

    __slots__ = ()

    @abstractmethod
    def is_finite(self) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def describe_as_lower_bound(self) -> str:
        raise NotImplementedError()

    @abstractmethod
    def describe_as_upper_bound(self) -> str:
        raise NotImplementedError()


@attrs(frozen=True, slots=True, hash=False)
class FiniteBound(Bound[T]):
    value: T = attrib()
    bound_type: BoundType = attrib(validator=validators.instance_of(BoundType))

    # noinspection PyUnusedLocal
    @value.validator
    def _validate_value(self, attr, val):  # pylint:disable=unused-argument
        check_not_none(val, "A finite bound requires an endpoint value")

    def is_finite(self) -> bool:
        return True

    def describe_as_lower_bound(self) -> str:
        return ("[%s" if self.bound_type is _CLOSED else "(%s") % (self.value,)

    def describe_as_upper_bound(self) -> str:
        return ("%s]" if self.bound_type is _CLOSED else "%s)") % (self.value,)

    def __hash__(self) -> int:
        return hash((_endpoint_hash(self.value), self.bound_type))


class _InfiniteBound(Bound[Any]):
    __slots__ = ()

    def is_finite(self) -> bool:
        return False

    def describe_as_lower_bound(self) -> str:
        return "(-\u221e"

    def describe_as_upper_bound(self) -> str:
        return "+\u221e)"

    def __reduce__(self):
        return "INFINITE_BOUND"

    def __repr__(self) -> str:
        return "INFINITE_BOUND"


INFINITE_BOUND: Bound[Any] = _InfiniteBound()

# these need to be initialized after declaration of _Cut
# noinspection PyTypeHints
_BELOW_ALL: "_Cut" = None  # type:ignore
# noinspection PyTypeHints
_ABOVE_ALL: "_Cut" = None  # type:ignore


class _Cut(Generic[T], metaclass=ABCMeta):
    """
    Implementation detail for the internal structure of Range instances.

    Represents a unique way of "cutting" a "number line" into two sections; this can be done below
    a certain value, above a certain value, below all values or above all values.
    With this  object defined in this way, an interval can always be represented by a pair of
    Cut instances, and the ordering of cuts is exactly the ordering of range bounds: for equal
    endpoints, a closed lower bound (below the value) precedes an open lower bound (above it),
    and an open upper bound (below the value) precedes a closed upper bound (above it).
    """

    __slots__ = ()

    @property
    @abstractmethod
    def endpoint(self) -> T:
        raise NotImplementedError()

    @abstractmethod
    def is_less_than(self, value: T) -> bool:
        """
        Whether this cut lies below `value` on the number line.
        """
        raise NotImplementedError()

    @abstractmethod
    def as_lower_bound(self) -> Bound[T]:
        raise NotImplementedError()

    @abstractmethod
    def as_upper_bound(self) -> Bound[T]:
        raise NotImplementedError()

    @abstractmethod
    def canonical(self, domain: DiscreteDomain[T]) -> "_Cut[T]":
        """
        The equivalent below-value cut, where `domain` makes one exist.
        """
        raise NotImplementedError()

    def compare_to(self, other: "_Cut[T]") -> int:
        # overridden by BelowAll, AboveAll
        if other is _BELOW_ALL:
            return 1
        if other is _ABOVE_ALL:
            return -1
        if self.endpoint < other.endpoint:
            return -1
        elif other.endpoint < self.endpoint:
            return 1
        # BelowValue precedes AboveValue
        elif isinstance(self, _AboveValue):
            return 0 if isinstance(other, _AboveValue) else 1
        else:
            return -1 if isinstance(other, _AboveValue) else 0

    # cannot use @totalordering because we want to compare across sub-classes
    # so we need to spell out all the operators
    def __lt__(self, other) -> bool:
        return self.compare_to(other) < 0

    def __le__(self, other) -> bool:
        return self.compare_to(other) <= 0

    def __gt__(self, other) -> bool:
        return self.compare_to(other) > 0

    def __ge__(self, other) -> bool:
        return self.compare_to(other) >= 0

    def __eq__(self, other) -> bool:
        return isinstance(other, _Cut) and self.compare_to(other) == 0

    def __hash__(self) -> int:
        raise NotImplementedError()


class _BelowAll(_Cut[Any]):
    __slots__ = ()

    @property
    def endpoint(self) -> Any:
        raise ValueError("Range is unbounded below and so lacks a lower endpoint")

    def is_less_than(self, value: Any) -> bool:  # pylint:disable=unused-argument
        return True

    def as_lower_bound(self) -> Bound[Any]:
        return INFINITE_BOUND

    def as_upper_bound(self) -> Bound[Any]:
        raise AssertionError("Should never be called")

    def canonical(self, domain: DiscreteDomain[Any]) -> _Cut[Any]:
        min_value = domain.min_value()
        return _BelowValue(min_value) if min_value is not None else self

    def compare_to(self, other: _Cut[Any]) -> int:
        # we assume only the constant _BELOW_ALL is ever instantiated
        return 0 if other is self else -1

    def __hash__(self) -> int:
        # some arbitrary number
        return 233904909

    def __reduce__(self):
        return "_BELOW_ALL"

    def __repr__(self) -> str:
        return "-\u221e"


class _AboveAll(_Cut[Any]):
    __slots__ = ()

    @property
    def endpoint(self) -> Any:
        raise ValueError("Range is unbounded above and so lacks an upper endpoint")

    def is_less_than(self, value: Any) -> bool:  # pylint:disable=unused-argument
        return False

    def as_lower_bound(self) -> Bound[Any]:
        raise AssertionError("Should never be called")

    def as_upper_bound(self) -> Bound[Any]:
        return INFINITE_BOUND

    def canonical(self, domain: DiscreteDomain[Any]) -> _Cut[Any]:
        return self

    def compare_to(self, other: _Cut[Any]) -> int:
        # we assume only the constant _ABOVE_ALL is ever instantiated
        return 0 if other is self else 1

    def __hash__(self) -> int:
        # some arbitrary number
        return 9989388

    def __reduce__(self):
        return "_ABOVE_ALL"

    def __repr__(self) -> str:
        return "+\u221e"


# noinspection PyRedeclaration
_BELOW_ALL = _BelowAll()
# noinspection PyRedeclaration
_ABOVE_ALL = _AboveAll()


@attrs(frozen=True, slots=True, repr=False, hash=False, eq=False)
class _BelowValue(_Cut[T]):
    _endpoint: T = attrib()

    @property
    def endpoint(self) -> T:
        return self._endpoint

    def is_less_than(self, value: T) -> bool:
        return not value < self._endpoint

    def as_lower_bound(self) -> Bound[T]:
        return FiniteBound(self._endpoint, _CLOSED)

    def as_upper_bound(self) -> Bound[T]:
        return FiniteBound(self._endpoint, _OPEN)

    def canonical(self, domain: DiscreteDomain[T]) -> _Cut[T]:
        return self

    def __hash__(self) -> int:
        return _endpoint_hash(self._endpoint)

    def __repr__(self) -> str:
        return "\\%s/" % (self._endpoint,)


@attrs(frozen=True, slots=True, repr=False, hash=False, eq=False)
class _AboveValue(_Cut[T]):
    _endpoint: T = attrib()

    @property
    def endpoint(self) -> T:
        return self._endpoint

    def is_less_than(self, value: T) -> bool:
        return self._endpoint < value

    def as_lower_bound(self) -> Bound[T]:
        return FiniteBound(self._endpoint, _OPEN)

    def as_upper_bound(self) -> Bound[T]:
        return FiniteBound(self._endpoint, _CLOSED)

    def canonical(self, domain: DiscreteDomain[T]) -> _Cut[T]:
        successor = domain.next(self._endpoint)
        return _BelowValue(successor) if successor is not None else _ABOVE_ALL

    def __hash__(self) -> int:
        # bitwise complement to distinguish it from the corresponding _BelowValue
        return ~_endpoint_hash(self._endpoint)

    def __repr__(self) -> str:
        return "/%s\\" % (self._endpoint,)


def _lower_cut(endpoint: T, bound_type: BoundType) -> _Cut[T]:
    check_not_none(endpoint)
    return _BelowValue(endpoint) if bound_type is _CLOSED else _AboveValue(endpoint)


def _upper_cut(endpoint: T, bound_type: BoundType) -> _Cut[T]:
    check_not_none(endpoint)
    return _AboveValue(endpoint) if bound_type is _CLOSED else _BelowValue(endpoint)


# must initialize after declaring Range
# noinspection PyTypeHints
RANGE_ALL: "Range" = None  # type: ignore


# this should have slots=True but cannot for the moment due to
# https://github.com/python-attrs/attrs/issues/313
# Pylint disable due to https://github.com/PyCQA/pylint/issues/2472
@attrs(frozen=True, repr=False, eq=False, hash=False)  # pylint: disable=inherit-non-class
class Range(Container[T], Generic[T], Hashable):
    """
    The boundaries of a contiguous span of values.

    The value must be of some type which implements `<` in a way consistent with `__eq__`;
    that comparison is the total ordering used for everything a range does.
    Note this does not provide a means of iterating over these values.

    Each end of the `Range` may be *bounded* or *unbounded*. If bounded, there is an associated
     *endpoint* value and the range is considered either *open* (does not include the endpoint
     value) or *closed* (does include the endpoint value).  With three possibilities on each
     side, this yields nine basic types of ranges, enumerated below.
     (Notation: a square bracket (`[ ]`) indicates that the range is closed on that side;
     a parenthesis (`( )`) means it is either open or unbounded. The construct `{x | statement}`
      is read "the set of all x such that statement.")

    ========        ==========            ==============
    Notation	    Definition	          Factory method
    ========        ==========            ==============
    `(a..b)`	    `{x | a < x < b}`	      open
    `[a..b]`	    `{x | a <= x <= b}`	      closed
    `(a..b]`	    `{x | a < x <= b}`	      open_closed
    `[a..b)`	    `{x | a <= x < b}`	      closed_open
    `(a..+∞)`	    `{x | x > a}`	          greater_than
    `[a..+∞)`	    `{x | x >= a}`	          at_least
    `(-∞..b)`	    `{x | x < b}`	          less_than
    `(-∞..b]`	    `{x | x <= b}`	          at_most
    `(-∞..+∞)`	    `{x}`	                  all
    =========       ===========           ==============

    When both endpoints exist, the upper endpoint may not be less than the lower. The endpoints may
     be equal only if both bounds are closed or both are open:

     * `[a..a]` : a singleton range
     * `(a..a)` : the empty range
     * `[a..a)`; `(a..a]` : invalid; an `InvalidRangeError` will be raised

    Operations such as `intersection` which can produce an empty result always report it in the
    `(a..a)` form, so all empty ranges at the same point are equal.

    Ranges are convex: whenever two values are contained, all values in between them must also be
    contained. Use immutable value types only; endpoint instances must never mutate after the
    range is created.
    """

    _lower_cut: _Cut[T] = attrib(validator=validators.instance_of(_Cut))
    _upper_cut: _Cut[T] = attrib(validator=validators.instance_of(_Cut))

    def __attrs_post_init__(self):
        check_arg(
            self._lower_cut is not _ABOVE_ALL and self._upper_cut is not _BELOW_ALL,
            "A range cannot be bounded below by +\u221e or above by -\u221e",
            error_type=InvalidRangeError,
        )
        check_arg(
            self._lower_cut <= self._upper_cut,
            "Upper bound of a range cannot be less than lower bound but got %s..%s",
            (self._lower_cut, self._upper_cut),
            error_type=InvalidRangeError,
        )

    @staticmethod
    def open(lower: T, upper: T) -> "Range[T]":
        check_not_none(lower)
        check_not_none(upper)
        if lower == upper:
            # the only empty range the factories can build
            return Range(_BelowValue(lower), _BelowValue(upper))
        return Range(_AboveValue(lower), _BelowValue(upper))

    @staticmethod
    def closed(lower: T, upper: T) -> "Range[T]":
        return Range(
            _BelowValue(check_not_none(lower)), _AboveValue(check_not_none(upper))
        )

    @staticmethod
    def closed_open(lower: T, upper: T) -> "Range[T]":
        Range._check_not_half_open_degenerate(lower, upper)
        return Range(_BelowValue(lower), _BelowValue(upper))

    @staticmethod
    def open_closed(lower: T, upper: T) -> "Range[T]":
        Range._check_not_half_open_degenerate(lower, upper)
        return Range(_AboveValue(lower), _AboveValue(upper))

    @staticmethod
    def range(
        lower: T, lower_type: BoundType, upper: T, upper_type: BoundType
    ) -> "Range[T]":
        """
        Create a range with both endpoints present and explicitly chosen bound types.
        """
        check_isinstance(lower_type, BoundType)
        check_isinstance(upper_type, BoundType)
        if lower_type is _OPEN and upper_type is _OPEN:
            return Range.open(lower, upper)
        if lower_type is not upper_type:
            Range._check_not_half_open_degenerate(lower, upper)
        return Range(_lower_cut(lower, lower_type), _upper_cut(upper, upper_type))

    @staticmethod
    def less_than(upper: T) -> "Range[T]":
        return Range(_BELOW_ALL, _BelowValue(check_not_none(upper)))

    @staticmethod
    def at_most(upper: T) -> "Range[T]":
        return Range(_BELOW_ALL, _AboveValue(check_not_none(upper)))

    @staticmethod
    def up_to(upper: T, bound_type: BoundType) -> "Range[T]":
        return Range(_BELOW_ALL, _upper_cut(upper, bound_type))

    @staticmethod
    def greater_than(lower: T) -> "Range[T]":
        return Range(_AboveValue(check_not_none(lower)), _ABOVE_ALL)

    @staticmethod
    def at_least(lower: T) -> "Range[T]":
        return Range(_BelowValue(check_not_none(lower)), _ABOVE_ALL)

    @staticmethod
    def down_to(lower: T, bound_type: BoundType) -> "Range[T]":
        return Range(_lower_cut(lower, bound_type), _ABOVE_ALL)

    @staticmethod
    def all() -> "Range[T]":
        return RANGE_ALL

    @staticmethod
    def singleton(value: T) -> "Range[T]":
        return Range.closed(value, value)

    @staticmethod
    def from_bounds(lower: Bound[T], upper: Bound[T]) -> "Range[T]":
        """
        Create a range from a pair of `Bound`s, the inverse of `Range.bounds`.
        """
        check_isinstance(lower, Bound)
        check_isinstance(upper, Bound)
        if isinstance(lower, FiniteBound) and isinstance(upper, FiniteBound):
            return Range.range(lower.value, lower.bound_type, upper.value, upper.bound_type)
        return Range(
            _lower_cut(lower.value, lower.bound_type)
            if isinstance(lower, FiniteBound)
            else _BELOW_ALL,
            _upper_cut(upper.value, upper.bound_type)
            if isinstance(upper, FiniteBound)
            else _ABOVE_ALL,
        )

    @staticmethod
    def enclose_all(values: Iterable[T]) -> "Range[T]":
        """
        Get the minimal closed range containing all of `values`.

        Raises an `EmptyInputError` if `values` is empty and a `ValueError` if any value is
        `None`.
        """
        iterator = iter(values)
        try:
            lowest = check_not_none(
                next(iterator), "Cannot enclose a None value in a range"
            )
        except StopIteration:
            raise EmptyInputError("Cannot create range enclosing an empty collection")
        highest = lowest
        for value in iterator:
            check_not_none(value, "Cannot enclose a None value in a range")
            if value < lowest:
                lowest = value
            elif highest < value:
                highest = value
        return Range.closed(lowest, highest)

    @staticmethod
    def create_spanning(ranges: Iterable["Range[T]"]) -> "Range[T]":
        """
        Get the minimal range enclosing every range in a non-empty collection.
        """
        ranges = tuple(ranges)
        if not ranges:
            raise EmptyInputError(
                "Cannot create range from span of empty range collection"
            )
        return Range(
            min(x._lower_cut for x in ranges), max(x._upper_cut for x in ranges)
        )

    @staticmethod
    def _check_not_half_open_degenerate(lower: T, upper: T) -> None:
        check_not_none(lower)
        check_not_none(upper)
        check_arg(
            not lower == upper,
            "A range with equal endpoints must be both open or both closed but got "
            "a half-open range at %s",
            (lower,),
            error_type=InvalidRangeError,
        )

    def has_lower_bound(self) -> bool:
        return self._lower_cut is not _BELOW_ALL

    def has_upper_bound(self) -> bool:
        return self._upper_cut is not _ABOVE_ALL

    @property
    def lower_bound(self) -> Bound[T]:
        if self.is_empty():
            return FiniteBound(self._lower_cut.endpoint, _OPEN)
        return self._lower_cut.as_lower_bound()

    @property
    def upper_bound(self) -> Bound[T]:
        if self.is_empty():
            return FiniteBound(self._upper_cut.endpoint, _OPEN)
        return self._upper_cut.as_upper_bound()

    @property
    def bounds(self) -> Tuple[Bound[T], Bound[T]]:
        return (self.lower_bound, self.upper_bound)

    @property
    def lower_bound_type(self) -> BoundType:
        bound = self.lower_bound
        if isinstance(bound, FiniteBound):
            return bound.bound_type
        raise ValueError("Range %s is unbounded below and has no lower bound type" % self)

    @property
    def upper_bound_type(self) -> BoundType:
        bound = self.upper_bound
        if isinstance(bound, FiniteBound):
            return bound.bound_type
        raise ValueError("Range %s is unbounded above and has no upper bound type" % self)

    @property
    def lower_endpoint(self) -> T:
        return self._lower_cut.endpoint

    @property
    def upper_endpoint(self) -> T:
        return self._upper_cut.endpoint

    def is_empty(self) -> bool:
        """
        Determine if a range is empty.

        Returns `True` exactly for ranges of the form `(v..v)`.

        Note that certain discrete ranges such as the integer range (3..4) are not considered empty,
         even though they contain no actual values. Use `canonical` to detect these.
        """
        return self._lower_cut == self._upper_cut

    # I don't know why mypy complains about narrowing the type, which seems a reasonable thing to do
    def __contains__(self, val: T) -> bool:  # type: ignore
        check_not_none(val)
        return self._lower_cut.is_less_than(val) and not self._upper_cut.is_less_than(
            val
        )

    def __call__(self, val: T) -> bool:
        return val in self

    def contains_all(self, values: Iterable[T]) -> bool:
        return all(value in self for value in values)

    def encloses(self, other: "Range[T]") -> bool:
        return (
            self._lower_cut.compare_to(other._lower_cut) <= 0
            and self._upper_cut.compare_to(other._upper_cut) >= 0
        )

    def is_connected(self, other: "Range[T]") -> bool:
        """
        Determine if two ranges are connected.

        Returns `True` if there exists a (possibly empty) range which is enclosed by both this
        range and `other`. For example,

        * `[2, 4)` and `[5, 7)` are not connected
        * `[2, 4)` and `[3, 5)` are connected, because both enclose `[3, 4)`
        * `[2, 4)` and `[4, 6)` are connected, because both enclose the empty range `(4, 4)`

        Note that this range and `other` have a well-defined union and intersection (as a
        single, possibly-empty range) if and only if this method returns `True`.

        The connectedness relation is both reflexive and symmetric, but does not form an
        equivalence relation as it is not transitive.

        Note that certain discrete ranges are not considered connected, even though there are
        no elements "between them." For example, `[3, 5]` is not considered connected to
        `[6, 10]`.
        """
        return (
            self._lower_cut <= other._upper_cut and other._lower_cut <= self._upper_cut
        )

    def intersects(self, other: "Range[T]") -> bool:
        """
        Determine if this range and `other` share a non-empty intersection.

        Unlike `is_connected`, ranges which merely touch, such as `[2..4)` and `[4..6)`, do not
        intersect.
        """
        return self.is_connected(other) and not self.intersection(other).is_empty()

    def span(self, other: "Range[T]") -> "Range[T]":
        """
        Get the minimal range enclosing both this range and `other`.

        For example, the span of `[1..3]` and `(5..7)` is `[1..7)`.
        If the input ranges are connected, the returned range can also be called their union.
        If they are not, note that the span might contain values that are not contained in either
        input range.
        """
        lower_cmp = self._lower_cut.compare_to(other._lower_cut)
        upper_cmp = self._upper_cut.compare_to(other._upper_cut)

        if lower_cmp <= 0 <= upper_cmp:
            return self
        elif lower_cmp >= 0 >= upper_cmp:
            return other
        return Range(
            self._lower_cut if lower_cmp <= 0 else other._lower_cut,
            self._upper_cut if upper_cmp >= 0 else other._upper_cut,
        )

    def intersection(self, connected_range: "Range[T]") -> "Range[T]":
        """
        Get the maximal range enclosed by both this range and `connected_range`.

        For example, the intersection of `[1..5]` and `(3..7)` is `(3..5]`. The
        resulting range may be empty; for example, `[1..5)` intersected with `[5..7)`
        yields the empty range `(5..5)`.

        The intersection exists if and only if the two ranges are connected.  A
        `DisconnectedRangesError` is raised if `connected_range` is not in fact connected.
        """
        check_arg(
            self.is_connected(connected_range),
            "Ranges %s and %s are not connected so they have no intersection",
            (self, connected_range),
            error_type=DisconnectedRangesError,
        )
        lower_cmp = self._lower_cut.compare_to(connected_range._lower_cut)
        upper_cmp = self._upper_cut.compare_to(connected_range._upper_cut)
        if lower_cmp >= 0 >= upper_cmp:
            return self
        elif lower_cmp <= 0 <= upper_cmp:
            return connected_range
        return Range(
            self._lower_cut if lower_cmp >= 0 else connected_range._lower_cut,
            self._upper_cut if upper_cmp <= 0 else connected_range._upper_cut,
        )

    def canonical(self, domain: DiscreteDomain[T]) -> "Range[T]":
        """
        Get the canonical form of this range in the given discrete domain.

        The canonical form is closed below and open above (`[a..b)`), except that a side
        stays unbounded when the domain has no value to close it with. Two ranges denoting the
        same set of domain values have equal canonical forms; for example, over the integers,
        `(1..5]`, `[2..5]` and `[2..6)` all canonicalize to `[2..6)`.
        """
        check_not_none(domain)
        lower = self._lower_cut.canonical(domain)
        if lower is _ABOVE_ALL:
            # the lower endpoint is the maximum of the domain, so no domain value lies above it
            return Range.open(self._lower_cut.endpoint, self._lower_cut.endpoint)
        upper = self._upper_cut.canonical(domain)
        if lower is self._lower_cut and upper is self._upper_cut:
            return self
        return Range(lower, upper)

    def __eq__(self, other) -> bool:
        if isinstance(other, Range):
            return self.bounds == other.bounds
        return False

    def __hash__(self) -> int:
        return hash(self.bounds)

    def __repr__(self) -> str:
        return (
            self.lower_bound.describe_as_lower_bound()
            + ".."
            + self.upper_bound.describe_as_upper_bound()
        )


# noinspection PyRedeclaration
RANGE_ALL = Range(_BELOW_ALL, _ABOVE_ALL)


# pylint:disable=protected-access
def _narrow(view: Range[T], rng: Range[T]) -> Range[T]:
    """
    Restrict `view` further to `rng`.

    If the two are not connected, the result is an empty range at the end of `view` facing `rng`.
    """
    if view.is_connected(rng):
        return view.intersection(rng)
    edge = view._lower_cut if rng._upper_cut < view._lower_cut else view._upper_cut
    return Range(edge, edge)
