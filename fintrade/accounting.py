"""Account balances and the basic money movements between them."""

from __future__ import annotations

from fintrade.errors import AccountNotFound, AccountOverFunded, AccountUnderFunded
from fintrade.tx import Deposit, Withdraw
from fintrade.types import U64_MAX

__all__ = ["Accounts"]


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"amount must be an integer, got {amount!r}")
    if not 0 <= amount <= U64_MAX:
        raise ValueError(f"amount out of range: {amount}")


class Accounts:
    """Accounts and their current currency balance."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}

    def __repr__(self) -> str:
        return f"Accounts({self._balances!r})"

    def balance_of(self, signer: str) -> int:
        """Return the balance of ``signer``."""
        try:
            return self._balances[signer]
        except KeyError:
            raise AccountNotFound(signer) from None

    def deposit(self, signer: str, amount: int) -> Deposit:
        """Add ``amount`` to ``signer``, opening the account if needed."""
        _check_amount(amount)
        current = self._balances.get(signer)
        if current is not None:
            total = current + amount
            if total > U64_MAX:
                raise AccountOverFunded(signer, amount)
            self._balances[signer] = total
        else:
            self._balances[signer] = amount
        return Deposit(account=signer, amount=amount)

    def withdraw(self, signer: str, amount: int) -> Withdraw:
        """Take ``amount`` from an existing ``signer`` account."""
        _check_amount(amount)
        current = self.balance_of(signer)
        if current < amount:
            raise AccountUnderFunded(signer, amount)
        self._balances[signer] = current - amount
        return Withdraw(account=signer, amount=amount)

    def send(self, sender: str, recipient: str, amount: int) -> tuple[Withdraw, Deposit]:
        """Move ``amount`` from ``sender`` to ``recipient``.

        Both accounts must exist and the sender must hold enough funds; a failed
        deposit returns the funds to the sender.
        """
        _check_amount(amount)
        balances = self._balances
        if not (
            sender in balances and recipient in balances and balances[sender] >= amount
        ):
            if sender not in balances:
                raise AccountNotFound(sender)
            raise AccountNotFound(recipient)
        tx_withdraw = self.withdraw(sender, amount)
        try:
            tx_deposit = self.deposit(recipient, amount)
        except AccountOverFunded:
            self.deposit(sender, amount)
            raise
        return tx_withdraw, tx_deposit