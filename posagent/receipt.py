"""Structured receipt document as submitted by the POS web app.

Field names mirror the wire JSON keys, so a decoded ``/print`` request
body can be turned into a :class:`Receipt` with :meth:`Receipt.from_dict`.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, TypeVar

T = TypeVar("T")

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_FRACTION_RE = re.compile(r"\.(\d+)")


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"expected an object, got {type(value).__name__}")
    return value


def _as_list(convert: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def build(value: Any) -> list[T]:
        if not isinstance(value, list):
            raise TypeError(f"expected an array, got {type(value).__name__}")
        return [convert(item) for item in value]

    return build


def _parse_time(value: Any) -> datetime:
    text = _as_str(value)
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(
        lambda m: "." + (m.group(1) + "000000")[:6], text, count=1
    )
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"invalid RFC 3339 time {value!r}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"time {value!r} carries no UTC offset")
    return parsed


def _format_time(moment: datetime) -> str:
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _get(data: Mapping[str, Any], key: str, convert: Callable[[Any], T], default: T) -> T:
    """Read one key; a missing or null value yields the default."""
    value = data.get(key)
    if value is None:
        return default
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key}: {exc}") from exc


@dataclass
class Store:
    """Merchant identification block printed at the top."""

    name: str = ""
    address_line_1: str = ""
    address_line_2: str = ""
    phone: str = ""
    tax_id: str = ""

    @classmethod
    def _from_dict(cls, value: Any) -> "Store":
        data = _as_mapping(value)
        return cls(
            name=_get(data, "name", _as_str, ""),
            address_line_1=_get(data, "address_line_1", _as_str, ""),
            address_line_2=_get(data, "address_line_2", _as_str, ""),
            phone=_get(data, "phone", _as_str, ""),
            tax_id=_get(data, "tax_id", _as_str, ""),
        )


@dataclass
class Terminal:
    """The POS register that produced the receipt."""

    id: str = ""
    label: str = ""

    @classmethod
    def _from_dict(cls, value: Any) -> "Terminal":
        data = _as_mapping(value)
        return cls(
            id=_get(data, "id", _as_str, ""),
            label=_get(data, "label", _as_str, ""),
        )


@dataclass
class Cashier:
    """The operator who rang up the sale."""

    name: str = ""

    @classmethod
    def _from_dict(cls, value: Any) -> "Cashier":
        data = _as_mapping(value)
        return cls(name=_get(data, "name", _as_str, ""))


@dataclass
class Line:
    """One item line on the receipt."""

    sku: str = ""
    name: str = ""
    qty: int = 0
    unit_price: float = 0.0
    line_total: float = 0.0
    discount_label: Optional[str] = None

    @classmethod
    def _from_dict(cls, value: Any) -> "Line":
        data = _as_mapping(value)
        return cls(
            sku=_get(data, "sku", _as_str, ""),
            name=_get(data, "name", _as_str, ""),
            qty=_get(data, "qty", _as_int, 0),
            unit_price=_get(data, "unit_price", _as_float, 0.0),
            line_total=_get(data, "line_total", _as_float, 0.0),
            discount_label=_get(data, "discount_label", _as_str, None),
        )


@dataclass
class Discount:
    """A top-level adjustment applied to the receipt subtotal."""

    label: str = ""
    amount: float = 0.0

    @classmethod
    def _from_dict(cls, value: Any) -> "Discount":
        data = _as_mapping(value)
        return cls(
            label=_get(data, "label", _as_str, ""),
            amount=_get(data, "amount", _as_float, 0.0),
        )


@dataclass
class Totals:
    """Totals computed by the POS; no arithmetic is performed here."""

    subtotal: float = 0.0
    discount_total: float = 0.0
    tax_total: float = 0.0
    grand_total: float = 0.0

    @classmethod
    def _from_dict(cls, value: Any) -> "Totals":
        data = _as_mapping(value)
        return cls(
            subtotal=_get(data, "subtotal", _as_float, 0.0),
            discount_total=_get(data, "discount_total", _as_float, 0.0),
            tax_total=_get(data, "tax_total", _as_float, 0.0),
            grand_total=_get(data, "grand_total", _as_float, 0.0),
        )


@dataclass
class Payment:
    """How the sale was settled."""

    method: str = ""
    tendered: float = 0.0
    change: float = 0.0

    @classmethod
    def _from_dict(cls, value: Any) -> "Payment":
        data = _as_mapping(value)
        return cls(
            method=_get(data, "method", _as_str, ""),
            tendered=_get(data, "tendered", _as_float, 0.0),
            change=_get(data, "change", _as_float, 0.0),
        )


@dataclass
class Receipt:
    """The full document submitted by the POS for one printed ticket."""

    store: Store = field(default_factory=Store)
    terminal: Terminal = field(default_factory=Terminal)
    cashier: Cashier = field(default_factory=Cashier)
    receipt_number: str = ""
    issued_at: datetime = _ZERO_TIME
    currency: str = ""
    lines: list[Line] = field(default_factory=list)
    discounts: list[Discount] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)
    payment: Payment = field(default_factory=Payment)
    footer_lines: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Receipt":
        """Build a receipt from decoded wire JSON.

        Missing or null keys take their zero value; unknown keys are
        ignored. Raises ValueError on a value of the wrong type.
        """
        try:
            payload = _as_mapping(data)
        except TypeError as exc:
            raise ValueError(f"receipt: {exc}") from exc
        return cls(
            store=_get(payload, "store", Store._from_dict, Store()),
            terminal=_get(payload, "terminal", Terminal._from_dict, Terminal()),
            cashier=_get(payload, "cashier", Cashier._from_dict, Cashier()),
            receipt_number=_get(payload, "receipt_number", _as_str, ""),
            issued_at=_get(payload, "issued_at", _parse_time, _ZERO_TIME),
            currency=_get(payload, "currency", _as_str, ""),
            lines=_get(payload, "lines", _as_list(Line._from_dict), []),
            discounts=_get(payload, "discounts", _as_list(Discount._from_dict), []),
            totals=_get(payload, "totals", Totals._from_dict, Totals()),
            payment=_get(payload, "payment", Payment._from_dict, Payment()),
            footer_lines=_get(payload, "footer_lines", _as_list(_as_str), []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire JSON form, with ``issued_at`` as an RFC 3339 string."""
        data = asdict(self)
        data["issued_at"] = _format_time(self.issued_at)
        return data