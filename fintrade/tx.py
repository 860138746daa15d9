"""Transactions that, replayed in order, rebuild a ledger's state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = ["Deposit", "Withdraw", "Tx"]


@dataclass(frozen=True)
class Deposit:
    """Currency was added to the account."""

    account: str
    amount: int


@dataclass(frozen=True)
class Withdraw:
    """Currency was withdrawn from the account."""

    account: str
    amount: int


Tx = Union[Deposit, Withdraw]