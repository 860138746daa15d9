"""HTTP front end that exposes a trading platform as a small JSON API."""

from __future__ import annotations

import argparse
import json
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlsplit

from fintrade.errors import ApplicationError
from fintrade.platform import TradingPlatform
from fintrade.types import (
    AccountBalanceRequest,
    AccountUpdateRequest,
    Order,
    SendRequest,
)

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "MAX_BODY_SIZE",
    "Reply",
    "TradingService",
    "make_server",
    "main",
]

log = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3030
MAX_BODY_SIZE = 16 * 1024


@dataclass(frozen=True)
class Reply:
    """An HTTP response produced by the service."""

    status: int
    body: bytes
    content_type: str = "application/json"

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)


def _json_reply(payload: Any) -> Reply:
    return Reply(int(HTTPStatus.OK), json.dumps(payload).encode("utf-8"))


def _rejection(status: HTTPStatus, message: str) -> Reply:
    return Reply(int(status), message.encode("utf-8"), "text/plain; charset=utf-8")


def _too_large() -> Reply:
    return _rejection(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "Payload too large")


@dataclass(frozen=True)
class _Route:
    method: str
    handler: Callable[..., Reply]
    request_type: Any = None


class TradingService:
    """Routes requests to a shared :class:`TradingPlatform`, one at a time."""

    def __init__(self, platform: TradingPlatform | None = None) -> None:
        self.platform = platform if platform is not None else TradingPlatform()
        self._lock = threading.Lock()
        self._routes: dict[str, _Route] = {
            "/deposit": _Route("POST", self._deposit, AccountUpdateRequest),
            "/withdraw": _Route("POST", self._withdraw, AccountUpdateRequest),
            "/send": _Route("POST", self._send, SendRequest),
            "/order": _Route("POST", self._order, Order),
            "/orderbook": _Route("GET", self._orderbook),
            "/balance": _Route("POST", self._balance, AccountBalanceRequest),
        }

    def handle(self, method: str, path: str, body: bytes = b"") -> Reply:
        """Answer one request given its method, target path and raw body."""
        route = self._routes.get(urlsplit(path).path)
        if route is None:
            return _rejection(HTTPStatus.NOT_FOUND, "")
        if method.upper() != route.method:
            return _rejection(HTTPStatus.METHOD_NOT_ALLOWED, "HTTP method not allowed")
        if route.request_type is None:
            with self._lock:
                return route.handler()
        if len(body) > MAX_BODY_SIZE:
            return _too_large()
        try:
            request = route.request_type.from_dict(json.loads(body))
        except ValueError as exc:
            return _rejection(
                HTTPStatus.BAD_REQUEST, f"Request body deserialize error: {exc}"
            )
        with self._lock:
            return route.handler(request)

    def _deposit(self, req: AccountUpdateRequest) -> Reply:
        log.info("Deposit request for account: %s, amount: %s", req.account, req.amount)
        try:
            self.platform.deposit(req.account, req.amount)
        except ApplicationError as exc:
            log.error(
                "Deposit failed for account: %s, amount: %s, error: %r",
                req.account, req.amount, exc,
            )
            return _json_reply(f"Error: {exc!r}")
        log.info("Deposit successful for account: %s, amount: %s", req.account, req.amount)
        return _json_reply("Deposit successful")

    def _withdraw(self, req: AccountUpdateRequest) -> Reply:
        log.info("Withdraw request for account: %s, amount: %s", req.account, req.amount)
        try:
            self.platform.withdraw(req.account, req.amount)
        except ApplicationError as exc:
            log.error(
                "Withdrawal failed for account: %s, amount: %s, error: %r",
                req.account, req.amount, exc,
            )
            return _json_reply(f"Error: {exc!r}")
        log.info(
            "Withdrawal successful for account: %s, amount: %s", req.account, req.amount
        )
        return _json_reply("Withdrawal successful")

    def _send(self, req: SendRequest) -> Reply:
        log.info(
            "Transfer request from: %s to: %s, amount: %s",
            req.sender, req.recipient, req.amount,
        )
        try:
            self.platform.send(req.sender, req.recipient, req.amount)
        except ApplicationError as exc:
            log.error(
                "Transfer failed from: %s to: %s, amount: %s, error: %r",
                req.sender, req.recipient, req.amount, exc,
            )
            return _json_reply(f"Error: {exc!r}")
        log.info(
            "Transfer successful from: %s to: %s, amount: %s",
            req.sender, req.recipient, req.amount,
        )
        return _json_reply("Transfer successful")

    def _order(self, req: Order) -> Reply:
        log.info(
            "Order request - signer: %s, side: %s, price: %s, amount: %s",
            req.signer, req.side.value, req.price, req.amount,
        )
        try:
            receipt = self.platform.order(req)
        except ApplicationError as exc:
            log.error("Order processing failed, error: %r", exc)
            return _json_reply(f"Error processing order: {exc!r}")
        log.info(
            "Order processed successfully - ordinal: %s, matches: %s",
            receipt.ordinal, len(receipt.matches),
        )
        return _json_reply(receipt.to_dict())

    def _orderbook(self) -> Reply:
        log.info("Orderbook request received")
        orderbook = self.platform.orderbook()
        log.info("Returning orderbook with %s orders", len(orderbook))
        return _json_reply([position.to_dict() for position in orderbook])

    def _balance(self, req: AccountBalanceRequest) -> Reply:
        log.info("Balance request for account: %s", req.account)
        try:
            balance = self.platform.balance_of(req.account)
        except ApplicationError as exc:
            log.error("Balance retrieval failed for account: %s, error: %r", req.account, exc)
            return _json_reply(f"Error: {exc!r}")
        log.info("Balance retrieved for account: %s, balance: %s", req.account, balance)
        return _json_reply(balance)


def make_server(
    service: TradingService, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT
) -> ThreadingHTTPServer:
    """Build an HTTP server bound to ``host:port`` that answers through ``service``."""

    class _Handler(BaseHTTPRequestHandler):
        server_version = "fintrade"

        def _dispatch(self) -> None:
            raw_length = self.headers.get("Content-Length") or "0"
            try:
                length = int(raw_length)
            except ValueError:
                length = -1
            if length < 0:
                reply = _rejection(HTTPStatus.BAD_REQUEST, "Invalid Content-Length")
                self.close_connection = True
            elif length > MAX_BODY_SIZE:
                reply = _too_large()
                self.close_connection = True
            else:
                body = self.rfile.read(length) if length else b""
                reply = service.handle(self.command, self.path, body)
            self.send_response(reply.status)
            self.send_header("Content-Type", reply.content_type)
            self.send_header("Content-Length", str(len(reply.body)))
            self.end_headers()
            self.wfile.write(reply.body)

        do_GET = _dispatch
        do_POST = _dispatch
        do_PUT = _dispatch
        do_DELETE = _dispatch
        do_PATCH = _dispatch

        def log_message(self, format: str, *args: Any) -> None:
            log.debug("%s - %s", self.address_string(), format % args)

    return ThreadingHTTPServer((host, port), _Handler)


def main(argv: list[str] | None = None) -> int:
    """Run the trading platform server until interrupted."""
    parser = argparse.ArgumentParser(description="Trading platform server")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    log.info("Starting Fintech Trading Platform Server")
    service = TradingService()
    log.info("Trading platform initialized")
    server = make_server(service, args.host, args.port)
    log.info("Routes configured")
    print(f"Starting server on http://{args.host}:{args.port}")
    log.info("Server starting on http://%s:%s", args.host, args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0