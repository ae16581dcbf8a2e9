"""Command-line settings for the dining philosophers simulation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"


class ConfigError(ValueError):
    """Raised when the simulation arguments cannot be accepted.

    ``kind`` is one of ``"count"`` (wrong number of arguments),
    ``"format"`` (an argument is not an unsigned decimal number) or
    ``"value"`` (a number is out of range or not acceptable).
    """

    def __init__(self, message: str, kind: str = "value") -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class Settings:
    """Parameters of one simulation run; times are in milliseconds."""

    n_philos: int
    time_to_die: int
    time_to_eat: int
    time_to_sleep: int
    max_meals: int | None = None


def parse_int(text: str) -> int:
    """Read a leading 32-bit signed decimal integer from ``text``.

    Leading whitespace and one sign are accepted; reading stops at the
    first non-digit. Text without digits reads as 0. A value outside
    the 32-bit signed range raises ConfigError.
    """
    rest = text.lstrip(_WHITESPACE)
    negative = False
    if rest[:1] == "-":
        negative = True
        rest = rest[1:]
    elif rest[:1] == "+":
        rest = rest[1:]

    result = 0
    for char in rest:
        if char not in _DIGITS:
            break
        result = result * 10 + _DIGITS.index(char)
        if (not negative and result > INT_MAX) or (negative and -result < INT_MIN):
            raise ConfigError(f"number out of range: {text!r}", kind="value")
    return -result if negative else result


def _is_valid_arg(arg: str) -> bool:
    digits = arg[1:] if arg.startswith("+") else arg
    return bool(digits) and all(char in _DIGITS for char in digits)


def is_valid_args(args: Sequence[str]) -> bool:
    """Tell whether every argument is an optional '+' followed by digits."""
    return all(_is_valid_arg(arg) for arg in args)


def parse_settings(args: Sequence[str]) -> Settings:
    """Build Settings from the arguments that follow the program name.

    Four or five arguments are expected: number of philosophers, time to
    die, time to eat, time to sleep and, optionally, the number of meals
    each philosopher must eat.
    """
    if not 4 <= len(args) <= 5:
        raise ConfigError("invalid number of arguments", kind="count")
    if not is_valid_args(args):
        raise ConfigError("one or more arguments are not valid", kind="format")

    n_philos, time_to_die, time_to_eat, time_to_sleep = (
        parse_int(arg) for arg in args[:4]
    )
    max_meals = parse_int(args[4]) if len(args) == 5 else None

    if min(n_philos, time_to_die, time_to_eat, time_to_sleep) <= 0:
        raise ConfigError("an argument is unacceptable", kind="value")

    return Settings(
        n_philos=n_philos,
        time_to_die=time_to_die,
        time_to_eat=time_to_eat,
        time_to_sleep=time_to_sleep,
        max_meals=max_meals,
    )