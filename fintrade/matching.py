"""Price-level order book that matches incoming orders against the opposite side."""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Iterator
from dataclasses import replace

from fintrade.types import Order, PartialOrder, Receipt, Side

__all__ = ["MatchingEngine"]

Book = dict[int, list[PartialOrder]]


def _levels(book: Book, low: int, high: int | None = None) -> Iterator[tuple[int, list[PartialOrder]]]:
    """Yield the price levels of ``book`` within ``[low, high]`` in ascending price order."""
    for price in sorted(book):
        if price < low or (high is not None and price > high):
            continue
        yield price, book[price]


class MatchingEngine:
    """Keeps bids and asks by price and matches orders in sequence order.

    Each side maps a price to a heap of positions; the position with the
    lowest ordinal is matched first.
    """

    def __init__(self) -> None:
        self.ordinal: int = 0
        self.bids: Book = {}
        self.asks: Book = {}
        self.history: list[Receipt] = []

    def __repr__(self) -> str:
        return (
            f"MatchingEngine(ordinal={self.ordinal}, bids={self.bids!r}, "
            f"asks={self.asks!r}, history={len(self.history)} receipts)"
        )

    def process(self, order: Order) -> Receipt:
        """Match ``order`` against the book and rest any unmatched amount.

        Returns the receipt listing the matches made immediately.
        """
        self.ordinal += 1
        ordinal = self.ordinal

        original_amount = order.amount
        partial = order.into_partial_order(ordinal, original_amount)

        if partial.side is Side.BUY:
            entries = _levels(self.asks, 0, partial.price)
            book = self.bids
        else:
            entries = _levels(self.bids, partial.price)
            book = self.asks

        receipt = self._match_order(partial, entries, ordinal)
        matched_amount = sum(m.amount for m in receipt.matches)

        if matched_amount < original_amount:
            partial.amount = original_amount - matched_amount
            heapq.heappush(book.setdefault(partial.price, []), partial)

        for side in (self.asks, self.bids):
            for price in [p for p, orders in side.items() if not orders]:
                del side[price]

        self.history.append(
            Receipt(ordinal=receipt.ordinal, matches=[replace(m) for m in receipt.matches])
        )
        return receipt

    @staticmethod
    def _match_order(
        order: PartialOrder,
        entries: Iterable[tuple[int, list[PartialOrder]]],
        ordinal: int,
    ) -> Receipt:
        """Match ``order`` against pre-filtered price levels of the opposite side."""
        remaining_amount = order.amount
        matches: list[PartialOrder] = []
        levels = iter(entries)

        while remaining_amount > 0:
            try:
                price, heap = next(levels)
            except StopIteration:
                break

            self_matches: list[PartialOrder] = []
            while heap:
                position = heapq.heappop(heap)
                if position.signer == order.signer:
                    self_matches.append(position)
                    continue

                if position.remaining >= remaining_amount:
                    matches.append(position.take_from(remaining_amount, price))
                    if position.remaining > 0:
                        heapq.heappush(heap, position)
                    break

                remaining_amount -= position.remaining
                position.remaining = 0
                matches.append(position)

            for position in self_matches:
                heapq.heappush(heap, position)

        return Receipt(ordinal=ordinal, matches=matches)