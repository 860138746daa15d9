"""Interactive client for the trading platform server."""

from __future__ import annotations

import argparse
import json
import math
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, TextIO

from fintrade.types import PartialOrder, Side

__all__ = ["DEFAULT_URL", "PROMPT", "Response", "LedgerClient", "repl", "main"]

DEFAULT_URL = "http://localhost:3030"
PROMPT = (
    "Choose operation [deposit, withdraw, send, print, orderbook, order, quit], "
    "confirm with return:"
)


def _parse_number(text: str) -> float | None:
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _json_number(value: float) -> float | int:
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def _fmt(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Response:
    """Status and body of a server reply."""

    status: int
    reason: str
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


class LedgerClient:
    """Talks to the trading platform server over HTTP.

    Network failures raise :class:`OSError`; HTTP error statuses are returned
    as ordinary responses.
    """

    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))

    def _request(self, method: str, path: str, payload: Any = None) -> Response:
        data = None
        headers = {}
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"
        request = urllib.request.Request(
            self.base_url + path, data=data, headers=headers, method=method
        )
        try:
            with self._opener.open(request, timeout=self.timeout) as reply:
                return Response(reply.status, reply.reason, reply.read())
        except urllib.error.HTTPError as exc:
            try:
                return Response(exc.code, str(exc.reason), exc.read())
            finally:
                exc.close()

    def deposit(self, account: str, amount: float) -> Response:
        return self._request(
            "POST", "/deposit", {"account": account, "amount": _json_number(amount)}
        )

    def withdraw(self, account: str, amount: float) -> Response:
        return self._request(
            "POST", "/withdraw", {"account": account, "amount": _json_number(amount)}
        )

    def send(self, sender: str, recipient: str, amount: float) -> Response:
        return self._request(
            "POST",
            "/send",
            {"sender": sender, "recipient": recipient, "amount": _json_number(amount)},
        )

    def order(self, price: float, amount: float, side: Side, signer: str) -> Response:
        return self._request(
            "POST",
            "/order",
            {
                "price": _json_number(price),
                "amount": _json_number(amount),
                "side": Side(side).value,
                "signer": signer,
            },
        )

    def orderbook(self) -> list[PartialOrder]:
        """Fetch the resting orders; raises ValueError if the reply cannot be read."""
        data = self._request("GET", "/orderbook").json()
        if isinstance(data, dict) and "orders" in data:
            data = data["orders"]
        if not isinstance(data, list):
            raise ValueError("orderbook reply is not a list of orders")
        return [PartialOrder.from_dict(entry) for entry in data]

    def accounts(self) -> str:
        """Fetch the ledger as text."""
        return self._request("GET", "/accounts").text()


class _Session:
    def __init__(self, client: LedgerClient, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> None:
        self.client = client
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr

    def say(self, message: str) -> None:
        print(message, file=self.stdout)

    def complain(self, message: str) -> None:
        print(message, file=self.stderr)

    def ask(self, label: str) -> str:
        self.say(label)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError
        return line.strip()

    def deposit(self) -> None:
        account = self.ask("Account:")
        raw = self.ask("Amount:")
        amount = _parse_number(raw)
        if amount is None:
            self.complain(f"Not a number: '{raw}'")
            return
        try:
            self.client.deposit(account, amount)
        except OSError:
            pass
        self.say(f"Deposited {_fmt(amount)} into account '{account}'")

    def withdraw(self) -> None:
        account = self.ask("Account:")
        raw = self.ask("Amount:")
        amount = _parse_number(raw)
        if amount is None:
            self.complain(f"Not a number: '{raw}'")
            return
        try:
            self.client.withdraw(account, amount)
        except OSError:
            pass
        self.say(f"Withdrew {_fmt(amount)} from account '{account}'")

    def send(self) -> None:
        sender = self.ask("Sender Account:")
        recipient = self.ask("Recipient Account:")
        raw = self.ask("Amount:")
        amount = _parse_number(raw)
        if amount is None:
            self.complain(f"Not a number: '{raw}'")
            return
        try:
            self.client.send(sender, recipient, amount)
        except OSError:
            pass

    def order(self) -> None:
        price = _parse_number(self.ask("Price:"))
        amount = _parse_number(self.ask("Amount:"))
        side_input = self.ask("Side (buy/sell):")
        signer = self.ask("Signer:")
        if price is None or amount is None:
            self.complain("Invalid price or amount")
            return
        sides = {"buy": Side.BUY, "sell": Side.SELL}
        side = sides.get(side_input)
        if side is None:
            self.complain(f"Invalid side: '{side_input}'")
            return
        try:
            response = self.client.order(price, amount, side, signer)
        except OSError as exc:
            self.complain(f"Error sending order: {exc}")
            return
        if response.ok:
            self.say("Order processed successfully")
        else:
            self.complain(f"Error processing order: {response.status} {response.reason}")

    def orderbook(self) -> None:
        try:
            orders = self.client.orderbook()
        except OSError as exc:
            self.complain(f"Error fetching orderbook: {exc}")
            orders = []
        except ValueError as exc:
            self.complain(f"Error parsing orderbook: {exc}")
            orders = []
        self.say(f"Orderbook: {orders!r}")

    def print_ledger(self) -> None:
        try:
            text = self.client.accounts()
        except OSError as exc:
            self.complain(f"Error fetching accounts: {exc}")
            return
        self.say(f"The ledger: {text}")


def repl(
    client: LedgerClient,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Read operations from ``stdin`` until ``quit`` or end of input."""
    session = _Session(
        client,
        stdin if stdin is not None else sys.stdin,
        stdout if stdout is not None else sys.stdout,
        stderr if stderr is not None else sys.stderr,
    )
    actions: dict[str, Callable[[], None]] = {
        "deposit": session.deposit,
        "withdraw": session.withdraw,
        "send": session.send,
        "order": session.order,
        "orderbook": session.orderbook,
        "print": session.print_ledger,
    }
    session.say("Hello, accounting world!")
    try:
        while True:
            choice = session.ask(PROMPT)
            if choice == "quit":
                session.say("Quitting...")
                return
            action = actions.get(choice)
            if action is None:
                session.complain(f"Invalid option: '{choice}'")
                continue
            action()
    except EOFError:
        return


def main(argv: list[str] | None = None) -> int:
    """Start the interactive client."""
    parser = argparse.ArgumentParser(description="Trading platform client")
    parser.add_argument("--url", default=DEFAULT_URL, help="server base URL")
    args = parser.parse_args(argv)
    repl(LedgerClient(args.url))
    return 0