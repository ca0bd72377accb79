"""LiteralTable: dense item x bin storage for one round's decision literals."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from placement_allocator.types import Bin, Item, ItemBin


class LiteralTable:
    """Flat, item-major arena of literals sized ``len(items) * len(bins)``.

    cells[i * n_bins + j] holds the literal for (items[i], bins[j]).
    A row is a contiguous slice; a column is a strided slice.
    """

    def __init__(self, items: Sequence[Item], bins: Sequence[Bin]) -> None:
        self.items: tuple[Item, ...] = tuple(items)
        self.bins: tuple[Bin, ...] = tuple(bins)
        self._item_index = {item: i for i, item in enumerate(self.items)}
        self._bin_index = {b: j for j, b in enumerate(self.bins)}
        if len(self._item_index) != len(self.items):
            raise ValueError("duplicate item in literal table")
        if len(self._bin_index) != len(self.bins):
            raise ValueError("duplicate bin in literal table")
        self._cells: list[Any] = [None] * (len(self.items) * len(self.bins))

    def __len__(self) -> int:
        return len(self._cells)

    def _offset(self, item: Item, b: Bin) -> int:
        return self._item_index[item] * len(self.bins) + self._bin_index[b]

    def set(self, item: Item, b: Bin, literal: Any) -> None:
        self._cells[self._offset(item, b)] = literal

    def get(self, item: Item, b: Bin) -> Any:
        """Literal for (item, bin). KeyError if the pair was never created."""
        literal = self._cells[self._offset(item, b)]
        if literal is None:
            raise KeyError(ItemBin(item, b))
        return literal

    def row(self, item: Item) -> list[Any]:
        """All literals for one item, in bin order."""
        start = self._item_index[item] * len(self.bins)
        return self._cells[start:start + len(self.bins)]

    def column(self, b: Bin) -> list[Any]:
        """All literals for one bin, in item order."""
        return self._cells[self._bin_index[b]::len(self.bins)]

    def pairs(self) -> Iterator[tuple[ItemBin, Any]]:
        """Every (ItemBin, literal) in item-major order."""
        n_bins = len(self.bins)
        for offset, literal in enumerate(self._cells):
            i, j = divmod(offset, n_bins)
            yield ItemBin(self.items[i], self.bins[j]), literal
