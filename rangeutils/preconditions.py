"""Python versions of Guava-like checks."""
from typing import Any, Tuple, Type, TypeVar, Union

# Disable naming convention warnings for type aliases
# pylint: disable=invalid-name
# Type annotation from TypeShed for classinfo argument  of isinstance and issubclass

_ClassInfo = Union[type, Tuple[Union[type, Tuple], ...]]


T = TypeVar("T")


def check_not_none(x: T, msg: str = None) -> T:
    """
    Raise an error if the given argument is None.

    This returns its input so you can do::
        self.x = check_not_none(x)

    check_arg would have the same result but is less clear to the reader
    """
    if x is None:
        if msg:
            raise ValueError(msg)
        else:
            raise ValueError()
    else:
        return x


def check_arg(
    result: Any,
    msg: str = None,
    msg_args: Tuple = None,
    *,
    error_type: Type[ValueError] = ValueError,
) -> None:
    """
    Raise `error_type` (a `ValueError` by default) if `result` is falsy.

    `msg` is %-formatted with `msg_args` only when the check fails.
    """
    if not result:
        if msg:
            raise error_type(msg % (msg_args or ()))
        else:
            raise error_type()


def check_isinstance(item: T, classinfo: _ClassInfo) -> T:
    if not isinstance(item, classinfo):
        raise TypeError(
            f"Expected instance of type {classinfo} but got type {type(item)} for {item}"
        )
    return item
