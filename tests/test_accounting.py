import pytest

from fintrade.accounting import Accounts
from fintrade.errors import AccountNotFound, AccountOverFunded, AccountUnderFunded
from fintrade.tx import Deposit, Withdraw
from fintrade.types import U64_MAX


def test_accounts_withdraw_underfunded():
    accounts = Accounts()
    accounts.deposit("a-key", 0)
    with pytest.raises(AccountUnderFunded) as info:
        accounts.withdraw("a-key", 100)
    assert info.value == AccountUnderFunded("a-key", 100)


def test_accounts_deposit_overfunded():
    accounts = Accounts()
    accounts.deposit("a-key", 1)
    with pytest.raises(AccountOverFunded) as info:
        accounts.deposit("a-key", U64_MAX)
    assert info.value == AccountOverFunded("a-key", U64_MAX)
    assert accounts.balance_of("a-key") == 1


def test_accounts_deposit_works():
    accounts = Accounts()
    assert accounts.deposit("a-key", 100) == Deposit(account="a-key", amount=100)
    assert accounts.balance_of("a-key") == 100


def test_accounts_deposit_adds_to_existing():
    accounts = Accounts()
    accounts.deposit("a-key", 100)
    accounts.deposit("a-key", 50)
    assert accounts.balance_of("a-key") == 150


def test_accounts_withdraw_works():
    accounts = Accounts()
    accounts.deposit("a-key", 100)
    assert accounts.withdraw("a-key", 100) == Withdraw(account="a-key", amount=100)
    assert accounts.balance_of("a-key") == 0


def test_accounts_withdraw_missing_account():
    accounts = Accounts()
    with pytest.raises(AccountNotFound) as info:
        accounts.withdraw("a-key", 1)
    assert info.value == AccountNotFound("a-key")


def test_accounts_balance_of_missing_account():
    with pytest.raises(AccountNotFound) as info:
        Accounts().balance_of("nobody")
    assert info.value.account == "nobody"


def test_accounts_send_works():
    accounts = Accounts()
    amt = 100
    accounts.deposit("a-key", amt)
    accounts.deposit("b-key", 0)

    tx1, tx2 = accounts.send("a-key", "b-key", amt)
    assert tx1 == Withdraw(account="a-key", amount=amt)
    assert tx2 == Deposit(account="b-key", amount=amt)

    assert accounts.withdraw("b-key", amt) == Withdraw(account="b-key", amount=amt)


def test_accounts_send_underfunded_fails_and_rolls_back():
    accounts = Accounts()
    amt = 100
    accounts.deposit("a-key", amt)
    accounts.deposit("b-key", 0)

    with pytest.raises(AccountNotFound):
        accounts.send("a-key", "b-key", amt + 1)
    assert accounts.balance_of("a-key") == amt
    assert accounts.balance_of("b-key") == 0


def test_accounts_send_overfunded_fails_and_rolls_back():
    accounts = Accounts()
    amt = 100
    accounts.deposit("a-key", amt)
    accounts.deposit("b-key", U64_MAX)

    with pytest.raises(AccountOverFunded) as info:
        accounts.send("a-key", "b-key", 1)
    assert info.value == AccountOverFunded("b-key", 1)
    assert accounts.balance_of("a-key") == amt
    assert accounts.balance_of("b-key") == U64_MAX


def test_accounts_send_missing_sender():
    accounts = Accounts()
    accounts.deposit("b-key", 10)
    with pytest.raises(AccountNotFound) as info:
        accounts.send("a-key", "b-key", 1)
    assert info.value == AccountNotFound("a-key")


def test_accounts_send_missing_recipient():
    accounts = Accounts()
    accounts.deposit("a-key", 10)
    with pytest.raises(AccountNotFound) as info:
        accounts.send("a-key", "b-key", 1)
    assert info.value == AccountNotFound("b-key")
    assert accounts.balance_of("a-key") == 10


@pytest.mark.parametrize("amount", [-1, U64_MAX + 1])
def test_accounts_reject_out_of_range_amounts(amount):
    accounts = Accounts()
    with pytest.raises(ValueError):
        accounts.deposit("a-key", amount)
    with pytest.raises(AccountNotFound):
        accounts.balance_of("a-key")