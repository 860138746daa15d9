"""Order book value types and request bodies."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

__all__ = [
    "U64_MAX",
    "Side",
    "Order",
    "PartialOrder",
    "Receipt",
    "AccountUpdateRequest",
    "AccountBalanceRequest",
    "SendRequest",
]

U64_MAX = 2**64 - 1


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _u64(data: Any, key: str) -> int:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an unsigned integer, got {value!r}")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"field `{key}` out of range: {value}")
    return value


def _str(data: Any, key: str) -> str:
    value = _field(data, key)
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string, got {value!r}")
    return value


def _side(data: Any, key: str) -> Side:
    value = _field(data, key)
    try:
        return Side(value)
    except (ValueError, TypeError):
        raise ValueError(f"field `{key}` is not a valid side: {value!r}") from None


class Side(enum.Enum):
    """Side of an order or position."""

    BUY = "Buy"
    SELL = "Sell"


@dataclass(frozen=True)
class Order:
    """An order to buy or sell an amount at a given price."""

    price: int
    amount: int
    side: Side
    signer: str

    def into_partial_order(self, ordinal: int, remaining: int) -> PartialOrder:
        """Turn this order into a book position with a sequence number."""
        return PartialOrder(
            price=self.price,
            amount=self.amount,
            remaining=remaining,
            side=self.side,
            signer=self.signer,
            ordinal=ordinal,
        )

    @classmethod
    def from_dict(cls, data: Any) -> Order:
        return cls(
            price=_u64(data, "price"),
            amount=_u64(data, "amount"),
            side=_side(data, "side"),
            signer=_str(data, "signer"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "amount": self.amount,
            "side": self.side.value,
            "signer": self.signer,
        }


@dataclass
class PartialOrder:
    """An unfilled order kept in the book for later matching.

    Positions order by sequence number: the earliest ordinal comes first.
    """

    price: int
    amount: int
    remaining: int
    side: Side
    signer: str
    ordinal: int

    def __lt__(self, other: PartialOrder) -> bool:
        if not isinstance(other, PartialOrder):
            return NotImplemented
        return self.ordinal < other.ordinal

    def take_from(self, take: int, price: int) -> PartialOrder:
        """Take ``take`` units from this position, returning them as a new one at ``price``."""
        if take > self.remaining:
            raise ValueError(f"cannot take {take} from {self.remaining} remaining")
        self.remaining -= take
        return replace(self, amount=take, price=price)

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "amount": self.amount,
            "remaining": self.remaining,
            "side": self.side.value,
            "signer": self.signer,
            "ordinal": self.ordinal,
        }

    @classmethod
    def from_dict(cls, data: Any) -> PartialOrder:
        return cls(
            price=_u64(data, "price"),
            amount=_u64(data, "amount"),
            remaining=_u64(data, "remaining"),
            side=_side(data, "side"),
            signer=_str(data, "signer"),
            ordinal=_u64(data, "ordinal"),
        )


@dataclass
class Receipt:
    """Issued for an accepted order, listing the matches made at once."""

    ordinal: int
    matches: list[PartialOrder] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ordinal": self.ordinal,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Receipt:
        ordinal = _u64(data, "ordinal")
        matches = _field(data, "matches")
        if not isinstance(matches, list):
            raise ValueError("field `matches` must be a list")
        return cls(ordinal=ordinal, matches=[PartialOrder.from_dict(m) for m in matches])


@dataclass(frozen=True)
class AccountUpdateRequest:
    """Body of a deposit or withdrawal request."""

    account: str
    amount: int

    @classmethod
    def from_dict(cls, data: Any) -> AccountUpdateRequest:
        return cls(account=_str(data, "account"), amount=_u64(data, "amount"))


@dataclass(frozen=True)
class AccountBalanceRequest:
    """Body of a balance request."""

    account: str

    @classmethod
    def from_dict(cls, data: Any) -> AccountBalanceRequest:
        return cls(account=_str(data, "account"))


@dataclass(frozen=True)
class SendRequest:
    """Body of a transfer request."""

    sender: str
    recipient: str
    amount: int

    @classmethod
    def from_dict(cls, data: Any) -> SendRequest:
        return cls(
            sender=_str(data, "sender"),
            recipient=_str(data, "recipient"),
            amount=_u64(data, "amount"),
        )