# fintrade

An in-memory trading platform: a ledger of accounts holding whole-unit
balances, an order book with a matching engine that fills resting orders
in sequence order, a small JSON HTTP server in front of them, and an
interactive client for that server. No third-party libraries are needed.

## Install

    pip install .

## Running the server

    fintrade-server [--host HOST] [--port PORT]

By default the server listens on `127.0.0.1:3030` and answers JSON requests:

| Method | Path         | Body                                                   | Reply on success          |
|--------|--------------|--------------------------------------------------------|---------------------------|
| POST   | `/deposit`   | `{"account": "ALICE", "amount": 100}`                  | `"Deposit successful"`    |
| POST   | `/withdraw`  | `{"account": "ALICE", "amount": 10}`                   | `"Withdrawal successful"` |
| POST   | `/send`      | `{"sender": "ALICE", "recipient": "BOB", "amount": 5}` | `"Transfer successful"`   |
| POST   | `/order`     | `{"price": 10, "amount": 1, "side": "Sell", "signer": "ALICE"}` | the receipt: `{"ordinal": ..., "matches": [...]}` |
| GET    | `/orderbook` | none                                                   | a list of resting orders  |
| POST   | `/balance`   | `{"account": "ALICE"}`                                 | the balance as a number   |

Amounts and prices are unsigned integers; `side` is `"Buy"` or `"Sell"`.
Failures such as an unknown account or insufficient funds are answered
with status 200 and a JSON string that starts with `Error`, for example
`"Error: AccountNotFound(\"ALICE\")"`. A body that cannot be read as the
expected request gives 400, an unknown path 404, a wrong method 405 and a
body over 16 KiB 413.

## Using the interactive client

With the server running, start the client in another terminal:

    fintrade-cli [--url URL]

`--url` defaults to `http://localhost:3030`. The client asks for an
operation, one of `deposit`, `withdraw`, `send`, `print`, `orderbook`,
`order` or `quit`, and then for the values that operation needs. It stops
on `quit` or at the end of input.

## Using the library

```python
from fintrade.platform import TradingPlatform
from fintrade.types import Order, Side

platform = TradingPlatform()
platform.deposit("ALICE", 100)
platform.deposit("BOB", 100)

platform.order(Order(price=10, amount=1, side=Side.SELL, signer="ALICE"))
receipt = platform.order(Order(price=10, amount=2, side=Side.BUY, signer="BOB"))

print(receipt.matches)               # ALICE's sell order, filled
print(platform.balance_of("ALICE"))  # 110
print(platform.orderbook())          # BOB's unfilled remainder
```

`Accounts` in `fintrade.accounting` and `MatchingEngine` in
`fintrade.matching` can also be used on their own. Errors derive from
`fintrade.errors.ApplicationError`: `AccountNotFound`,
`AccountUnderFunded` and `AccountOverFunded`. `fintrade.server.TradingService`
answers requests without a network (`handle(method, path, body)`), and
`fintrade.cli.LedgerClient` can be used to call a running server from code.

## What it does not do

- All state lives in memory; nothing is stored, and a restarted server
  starts with no accounts and an empty order book.
- The server has no route that lists all accounts. The client's `print`
  operation asks for `/accounts`, which the server answers with 404, so
  it shows an empty ledger. Use `/balance` for a single account.
- The client accepts decimal amounts, but the server takes only whole
  numbers and rejects anything else. For `deposit` and `withdraw` the
  client prints its confirmation line whether or not the server accepted
  the request.

## Tests

    pip install ".[test]"
    pytest