"""
models.py

The shared objects used in the huffcodec.

"""


from typing import Any, Dict, Iterable

import numpy as np

from .validators import validate_type, validate_non_negative


class FrequencyTable:
    """
    Accumulates occurrence counts per distinct symbol.

    Symbols must be hashable and support a total order; the order is used to
    break ties when the tree is built. A table is consumed once by
    ``finalize``.
    """
    def __init__(self) -> None:
        self._counts: Dict[Any, int] = {}
        self._finalized: bool = False

    @staticmethod
    def from_bytes(data: bytes) -> 'FrequencyTable':
        """
        Count every byte value of data in a single pass.

        Args:
            data (bytes): The raw bytes.

        Returns:
            FrequencyTable: Table keyed by byte values (ints 0-255).
        """
        validate_type(data, "Data", bytes)
        table = FrequencyTable()
        counts = np.bincount(np.frombuffer(data, dtype=np.uint8), minlength=256)
        for value in np.flatnonzero(counts):
            table.add(int(value), int(counts[value]))
        return table

    def add(self, symbol: Any, count: int = 1) -> None:
        """
        Add count occurrences of symbol. Repeated calls are additive.

        Raises:
            ValueError: If count is not a non-negative int or the table was finalized.
        """
        if self._finalized:
            raise ValueError("Frequency table has already been finalized")
        validate_non_negative(count, "Count")
        self._counts[symbol] = self._counts.get(symbol, 0) + count

    def add_from_iterable(self, symbols: Iterable[Any]) -> None:
        """Add one occurrence for each symbol produced by the iterable."""
        for symbol in symbols:
            self.add(symbol)

    def get(self, symbol: Any) -> int:
        return self._counts.get(symbol, 0)

    def finalize(self) -> Dict[Any, int]:
        """
        Consume the table and return its symbol to count mapping.

        An empty table is a valid result here.

        Returns:
            Dict[Any, int]: A copy of the counts.
        """
        if self._finalized:
            raise ValueError("Frequency table has already been finalized")
        self._finalized = True
        return dict(self._counts)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, symbol: Any) -> bool:
        return symbol in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyTable):
            return False
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"FrequencyTable({self._counts!r})"
