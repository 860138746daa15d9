"""Errors raised by account and order operations."""

from __future__ import annotations

import json

__all__ = [
    "ApplicationError",
    "AccountNotFound",
    "AccountUnderFunded",
    "AccountOverFunded",
]


def _debug(value: object) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class ApplicationError(Exception):
    """Base class for application-level failures.

    Two errors are equal when they are of the same kind and carry the same data.
    """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApplicationError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        inner = ", ".join(_debug(arg) for arg in self.args)
        return f"{type(self).__name__}({inner})"


class AccountNotFound(ApplicationError):
    """The account does not exist."""

    def __init__(self, account: str) -> None:
        super().__init__(account)
        self.account = account

    def __str__(self) -> str:
        return f"account not found: {self.account}"


class AccountUnderFunded(ApplicationError):
    """Not enough currency in the account."""

    def __init__(self, account: str, amount: int) -> None:
        super().__init__(account, amount)
        self.account = account
        self.amount = amount

    def __str__(self) -> str:
        return f"account {self.account} is underfunded for {self.amount}"


class AccountOverFunded(ApplicationError):
    """The account balance would exceed the largest representable amount."""

    def __init__(self, account: str, amount: int) -> None:
        super().__init__(account, amount)
        self.account = account
        self.amount = amount

    def __str__(self) -> str:
        return f"account {self.account} would overflow by adding {self.amount}"