"""
errors.py

Exceptions raised by huffcodec. They all derive from ValueError so callers
that already guard input validation keep working.
"""


from typing import Any


class UnknownSymbolError(ValueError):
    """Raised when the encoder meets a symbol that has no codeword."""

    def __init__(self, symbol: Any) -> None:
        self.symbol = symbol
        super().__init__(f"Symbol has no codeword: {symbol!r}")


class EmptyInputError(ValueError):
    """Raised when there is nothing to build a tree from."""

    def __init__(self, message: str = "Input must contain at least one symbol") -> None:
        super().__init__(message)


class MalformedContainerError(ValueError):
    """Raised when a serialized container or tree is structurally invalid."""


class DecodeError(ValueError):
    """Raised when a bit sequence cannot be decoded with the given tree."""
