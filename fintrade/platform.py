"""Trading platform that ties accounts to the matching engine."""

from __future__ import annotations

from dataclasses import replace

from fintrade.accounting import Accounts
from fintrade.errors import AccountUnderFunded
from fintrade.matching import MatchingEngine
from fintrade.tx import Deposit, Tx, Withdraw
from fintrade.types import Order, PartialOrder, Receipt, Side

__all__ = ["TradingPlatform"]


class TradingPlatform:
    """Manages accounts, validates orders and settles the matches they produce."""

    def __init__(self) -> None:
        self.accounts = Accounts()
        self.matching_engine = MatchingEngine()
        self.tx_log: list[Tx] = []

    def __repr__(self) -> str:
        return (
            f"TradingPlatform(accounts={self.accounts!r}, "
            f"engine={self.matching_engine!r}, tx_log={len(self.tx_log)} entries)"
        )

    def orderbook(self) -> list[PartialOrder]:
        """Return every resting position on both sides, sorted by sequence number."""
        positions = [
            replace(position)
            for book in (self.matching_engine.asks, self.matching_engine.bids)
            for price in sorted(book)
            for position in book[price]
        ]
        positions.sort(key=lambda p: p.ordinal)
        return positions

    def balance_of(self, signer: str) -> int:
        """Return the balance of ``signer``."""
        return self.accounts.balance_of(signer)

    def deposit(self, signer: str, amount: int) -> Deposit:
        """Deposit ``amount`` into ``signer``."""
        return self.accounts.deposit(signer, amount)

    def withdraw(self, signer: str, amount: int) -> Withdraw:
        """Withdraw ``amount`` from ``signer``."""
        return self.accounts.withdraw(signer, amount)

    def send(self, sender: str, recipient: str, amount: int) -> tuple[Withdraw, Deposit]:
        """Transfer ``amount`` from ``sender`` to ``recipient``."""
        return self.accounts.send(sender, recipient, amount)

    def order(self, order: Order) -> Receipt:
        """Process ``order`` and settle its matches between the accounts involved.

        The signer must have an account; a buyer must also hold at least
        ``price * amount``. Settlement has few other safeguards.
        """
        total_amount = order.amount * order.price
        balance = self.balance_of(order.signer)
        if order.side is Side.BUY and balance < total_amount:
            raise AccountUnderFunded(order.signer, total_amount)

        signer = order.signer
        side = order.side
        receipt = self.matching_engine.process(order)

        settled: list[Tx] = []
        for match in receipt.matches:
            value = match.amount * match.price
            if side is Side.BUY:
                settled.extend(self.send(signer, match.signer, value))
            else:
                settled.extend(self.send(match.signer, signer, value))
        self.tx_log.extend(settled)
        return receipt