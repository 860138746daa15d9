import io
import socket
import threading

import pytest

from fintrade.cli import LedgerClient, main, repl
from fintrade.errors import AccountNotFound
from fintrade.server import TradingService, make_server
from fintrade.types import Side


@pytest.fixture
def running():
    service = TradingService()
    server = make_server(service, "127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield service, LedgerClient(f"http://{host}:{port}", timeout=5)
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


@pytest.fixture
def closed_url():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


def run(client, text):
    out, err = io.StringIO(), io.StringIO()
    repl(client, io.StringIO(text), out, err)
    return out.getvalue(), err.getvalue()


def test_repl_deposit_updates_server(running):
    service, client = running
    out, err = run(client, "deposit\nalice\n100\nquit\n")
    assert "Deposited 100 into account 'alice'" in out
    assert out.rstrip().endswith("Quitting...")
    assert err == ""
    assert service.platform.balance_of("alice") == 100


def test_repl_withdraw_updates_server(running):
    service, client = running
    client.deposit("alice", 100)
    out, _ = run(client, "withdraw\nalice\n40\nquit\n")
    assert "Withdrew 40 from account 'alice'" in out
    assert service.platform.balance_of("alice") == 60


def test_repl_rejects_non_number(running):
    service, client = running
    _, err = run(client, "deposit\nalice\nabc\nquit\n")
    assert "Not a number: 'abc'" in err
    with pytest.raises(AccountNotFound):
        service.platform.balance_of("alice")


def test_repl_rejects_unknown_option(running):
    _, client = running
    out, err = run(client, "dance\nquit\n")
    assert "Invalid option: 'dance'" in err
    assert "Quitting..." in out


def test_repl_send_moves_funds(running):
    service, client = running
    client.deposit("alice", 100)
    client.deposit("bob", 0)
    run(client, "send\nalice\nbob\n25\nquit\n")
    assert service.platform.balance_of("alice") == 75
    assert service.platform.balance_of("bob") == 25


def test_repl_order_invalid_side(running):
    service, client = running
    _, err = run(client, "order\n10\n1\nup\nalice\nquit\n")
    assert "Invalid side: 'up'" in err
    assert service.platform.orderbook() == []


def test_repl_order_invalid_numbers(running):
    _, client = running
    _, err = run(client, "order\nten\n1\nbuy\nalice\nquit\n")
    assert "Invalid price or amount" in err


def test_repl_order_then_orderbook(running):
    service, client = running
    client.deposit("ALICE", 100)
    out, err = run(client, "order\n10\n2\nsell\nALICE\norderbook\nquit\n")
    assert "Order processed successfully" in out
    assert "Orderbook: [" in out
    assert err == ""
    book = service.platform.orderbook()
    assert [(p.signer, p.price, p.remaining) for p in book] == [("ALICE", 10, 2)]


def test_client_order_round_trip(running):
    service, client = running
    client.deposit("ALICE", 100)
    client.deposit("BOB", 100)
    assert client.order(10.0, 1.0, Side.SELL, "ALICE").ok
    response = client.order(10, 1, Side.BUY, "BOB")
    receipt = response.json()
    assert receipt["ordinal"] == 2
    assert [m["signer"] for m in receipt["matches"]] == ["ALICE"]
    assert client.orderbook() == []
    assert service.platform.balance_of("ALICE") == 110


def test_client_orderbook_parses_positions(running):
    _, client = running
    client.deposit("ALICE", 100)
    client.order(10, 2, Side.SELL, "ALICE")
    (position,) = client.orderbook()
    assert position.signer == "ALICE"
    assert position.side is Side.SELL
    assert position.ordinal == 1


def test_client_fractional_order_is_rejected(running):
    service, client = running
    client.deposit("ALICE", 100)
    response = client.order(10.5, 1, Side.SELL, "ALICE")
    assert not response.ok
    assert service.platform.orderbook() == []


def test_repl_print_shows_ledger_reply(running):
    _, client = running
    out, err = run(client, "print\nquit\n")
    assert "The ledger: " in out
    assert err == ""


def test_repl_reports_unreachable_server(closed_url):
    client = LedgerClient(closed_url, timeout=2)
    out, err = run(client, "order\n10\n1\nbuy\nalice\norderbook\nprint\nquit\n")
    assert "Error sending order" in err
    assert "Error fetching orderbook" in err
    assert "Error fetching accounts" in err
    assert "Orderbook: []" in out


def test_repl_stops_at_end_of_input(running):
    _, client = running
    out, _ = run(client, "deposit\nalice\n")
    assert out.startswith("Hello, accounting world!")
    assert "Quitting..." not in out


def test_main_runs_until_quit(monkeypatch, capsys, closed_url):
    monkeypatch.setattr("sys.stdin", io.StringIO("quit\n"))
    assert main(["--url", closed_url]) == 0
    assert "Quitting..." in capsys.readouterr().out