from abc import ABCMeta, abstractmethod
from datetime import date, timedelta
from typing import Generic, Optional, TypeVar

from attr import attrib, attrs, validators

from rangeutils.preconditions import check_arg

C = TypeVar("C")

# distances are reported as signed 64-bit quantities, saturating at the extremes
_MIN_DISTANCE = -(2 ** 63)
_MAX_DISTANCE = 2 ** 63 - 1

_ONE_DAY = timedelta(days=1)


def _saturated_distance(distance: int) -> int:
    return max(_MIN_DISTANCE, min(_MAX_DISTANCE, distance))


class DiscreteDomain(Generic[C], metaclass=ABCMeta):
    """
    A descriptor for a discrete domain of totally ordered values.

    A discrete domain is one that has a unique successor and predecessor for every value
    except its maximum and minimum (if it has them).  Providing one of these is what lets
    `Range.canonical` rewrite a range into its unique `[a..b)` form; for example, over the
    integers `(1..5]`, `[2..6)` and `[2..5]` all denote the same values.

    The stock domains are available through the static factory methods on this class.
    """

    __slots__ = ()

    @abstractmethod
    def next(self, value: C) -> Optional[C]:
        """
        Get the least value greater than `value`.

        Returns `None` if `value` is the maximum value of this domain.
        """
        raise NotImplementedError()

    @abstractmethod
    def previous(self, value: C) -> Optional[C]:
        """
        Get the greatest value less than `value`.

        Returns `None` if `value` is the minimum value of this domain.
        """
        raise NotImplementedError()

    @abstractmethod
    def distance(self, start: C, end: C) -> int:
        """
        Get the signed number of `next` (if positive) or `previous` (if negative) steps
        needed to reach `end` from `start`.

        `distance(a, a)` is always zero. The result is clamped to the range of a signed
        64-bit integer.
        """
        raise NotImplementedError()

    def min_value(self) -> Optional[C]:
        """
        The minimum value of this domain, or `None` if it is unbounded below.
        """
        return None

    def max_value(self) -> Optional[C]:
        """
        The maximum value of this domain, or `None` if it is unbounded above.
        """
        return None

    @staticmethod
    def integers() -> "DiscreteDomain[int]":
        """
        The domain of all Python integers, which has neither a minimum nor a maximum.
        """
        return _INTEGERS

    @staticmethod
    def int32s() -> "DiscreteDomain[int]":
        """
        The domain of integers representable as a signed 32-bit value.
        """
        return _INT32S

    @staticmethod
    def int64s() -> "DiscreteDomain[int]":
        """
        The domain of integers representable as a signed 64-bit value.
        """
        return _INT64S

    @staticmethod
    def dates() -> "DiscreteDomain[date]":
        """
        The domain of calendar dates, stepping one day at a time.
        """
        return _DATES


class _IntegerDomain(DiscreteDomain[int]):
    __slots__ = ()

    def next(self, value: int) -> Optional[int]:
        return value + 1

    def previous(self, value: int) -> Optional[int]:
        return value - 1

    def distance(self, start: int, end: int) -> int:
        return _saturated_distance(end - start)

    def __reduce__(self):
        return "_INTEGERS"

    def __repr__(self) -> str:
        return "DiscreteDomain.integers()"


@attrs(frozen=True, slots=True, repr=False)
class _BoundedIntegerDomain(DiscreteDomain[int]):
    _min: int = attrib(validator=validators.instance_of(int))
    _max: int = attrib(validator=validators.instance_of(int))
    _name: str = attrib(validator=validators.instance_of(str))

    def __attrs_post_init__(self) -> None:
        check_arg(
            self._min <= self._max,
            "Minimum of a bounded domain must not exceed its maximum, but got %s > %s",
            (self._min, self._max),
        )

    def next(self, value: int) -> Optional[int]:
        return None if value == self._max else value + 1

    def previous(self, value: int) -> Optional[int]:
        return None if value == self._min else value - 1

    def distance(self, start: int, end: int) -> int:
        return _saturated_distance(end - start)

    def min_value(self) -> Optional[int]:
        return self._min

    def max_value(self) -> Optional[int]:
        return self._max

    def __repr__(self) -> str:
        return f"DiscreteDomain.{self._name}()"


class _DateDomain(DiscreteDomain[date]):
    __slots__ = ()

    def next(self, value: date) -> Optional[date]:
        return None if value == date.max else value + _ONE_DAY

    def previous(self, value: date) -> Optional[date]:
        return None if value == date.min else value - _ONE_DAY

    def distance(self, start: date, end: date) -> int:
        return (end - start).days

    def min_value(self) -> Optional[date]:
        return date.min

    def max_value(self) -> Optional[date]:
        return date.max

    def __reduce__(self):
        return "_DATES"

    def __repr__(self) -> str:
        return "DiscreteDomain.dates()"


_INTEGERS = _IntegerDomain()
_INT32S = _BoundedIntegerDomain(-(2 ** 31), 2 ** 31 - 1, "int32s")
_INT64S = _BoundedIntegerDomain(_MIN_DISTANCE, _MAX_DISTANCE, "int64s")
_DATES = _DateDomain()
