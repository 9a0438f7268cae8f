import re
from datetime import timedelta
from decimal import ROUND_CEILING, Decimal, InvalidOperation
from typing import Optional, Union

QuantityLike = Union[str, int, float, Decimal]

_BINARY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "Pi": 1024**5,
    "Ei": 1024**6,
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("0.000000001"),
    "u": Decimal("0.000001"),
    "m": Decimal("0.001"),
    "k": Decimal(1000),
    "M": Decimal(1000**2),
    "G": Decimal(1000**3),
    "T": Decimal(1000**4),
    "P": Decimal(1000**5),
    "E": Decimal(1000**6),
}

_DURATION_UNITS = {
    "ns": Decimal("0.000000001"),
    "us": Decimal("0.000001"),
    "µs": Decimal("0.000001"),
    "μs": Decimal("0.000001"),
    "ms": Decimal("0.001"),
    "s": Decimal(1),
    "m": Decimal(60),
    "h": Decimal(3600),
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_quantity(quantity: Optional[QuantityLike]) -> Decimal:
    """
    Parse a Kubernetes quantity ("250m", "1Gi", "12e6", "3") to a Decimal
    expressed in base units (cores for CPU, bytes for memory).

    Raises:
        ValueError: If the quantity is not a valid Kubernetes quantity.
    """
    if quantity is None:
        return Decimal(0)
    if isinstance(quantity, (int, Decimal)):
        return Decimal(quantity)
    if isinstance(quantity, float):
        # Shortest round-tripping form: 0.1, not 0.1000000000000000055...
        quantity = repr(quantity)

    quantity = str(quantity).strip()
    number, multiplier = quantity, Decimal(1)

    if quantity[-2:] in _BINARY_SUFFIXES:
        number, multiplier = quantity[:-2], Decimal(_BINARY_SUFFIXES[quantity[-2:]])
    elif quantity[-1:] in _DECIMAL_SUFFIXES:
        number, multiplier = quantity[:-1], _DECIMAL_SUFFIXES[quantity[-1:]]

    try:
        value = Decimal(number)
    except InvalidOperation as e:
        raise ValueError(f"Invalid Kubernetes quantity: '{quantity}'") from e
    if not value.is_finite():
        raise ValueError(f"Invalid Kubernetes quantity: '{quantity}'")

    return value * multiplier


def _ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def to_millicores(cpu: Optional[QuantityLike]) -> int:
    """Converts a K8s CPU quantity to millicores, rounding fractions up."""
    return _ceil(parse_quantity(cpu) * 1000)


def to_bytes(memory: Optional[QuantityLike]) -> int:
    """Converts a K8s memory quantity to bytes, rounding fractions up."""
    return _ceil(parse_quantity(memory))


def parse_duration(value: Union[str, int, float, timedelta]) -> timedelta:
    """
    Parse a Go-style duration string as emitted by the metrics API
    ("30s", "1m0.5s", "250ms") into a timedelta.

    Plain numbers are taken as seconds.

    Raises:
        ValueError: If the value is not a valid duration.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    text = str(value).strip()
    if text == "0":
        return timedelta(0)

    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    seconds = Decimal(0)
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        seconds += Decimal(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if pos == 0 or pos != len(text):
        raise ValueError(f"Invalid duration: '{value}'")
    return timedelta(seconds=float(sign * seconds))
