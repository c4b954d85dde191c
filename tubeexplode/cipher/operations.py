"""
Signature transform primitives.

The player applies a short sequence of string manipulations to a signature
before it may be used in a stream URL. Only three kinds exist: reverse,
swap of the first character with another position, and dropping a prefix.
These are replayed here in pure Python; nothing from the player is executed.
"""

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Iterable


class OperationKind(Enum):
    """Kinds of transform the player's operation container can implement."""
    REVERSE = "reverse"
    SWAP = "swap"
    SLICE = "slice"


class CipherOperation:
    """Base class for a single signature transform."""

    kind: OperationKind

    def apply(self, value: str) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Reverse(CipherOperation):
    """Reverses the whole string. JS: ``a.reverse()``"""

    kind = OperationKind.REVERSE

    def apply(self, value: str) -> str:
        return value[::-1]


@dataclass(frozen=True)
class Swap(CipherOperation):
    """
    Swaps the first character with the one at ``index % len(value)``.

    JS: ``var c=a[0];a[0]=a[b%a.length];a[b%a.length]=c``
    """

    index: int

    kind = OperationKind.SWAP

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"Swap index must be non-negative, got {self.index}")

    def apply(self, value: str) -> str:
        if not value:
            return value
        position = self.index % len(value)
        if position == 0:
            return value
        return value[position] + value[1:position] + value[0] + value[position + 1:]


@dataclass(frozen=True)
class Slice(CipherOperation):
    """Drops the first ``count`` characters. JS: ``a.splice(0,b)``"""

    count: int

    kind = OperationKind.SLICE

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"Slice count must be non-negative, got {self.count}")

    def apply(self, value: str) -> str:
        if self.count >= len(value):
            return ""
        return value[self.count:]


def apply_operation(operation: CipherOperation, value: str) -> str:
    """Apply a single operation to ``value``."""
    return operation.apply(value)


def decipher(signature: str, operations: Iterable[CipherOperation]) -> str:
    """
    Apply ``operations`` to ``signature`` in order.

    An empty sequence returns the signature unchanged.
    """
    return reduce(lambda acc, op: op.apply(acc), operations, signature)


def build_operation(kind: OperationKind, argument: int = 0) -> CipherOperation:
    """Create the operation for ``kind``; ``argument`` is ignored for reverse."""
    if kind is OperationKind.REVERSE:
        return Reverse()
    if kind is OperationKind.SWAP:
        return Swap(argument)
    return Slice(argument)
