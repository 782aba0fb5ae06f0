"""Element-wise validation for collection payloads.

A collection is validated by applying one item validator to every element and
aggregating the messages by index, so a caller sees every bad element at once
instead of only the first.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, TypeVar

T = TypeVar("T")

ItemValidator = Callable[[T], Iterable[str]]


@dataclass(frozen=True)
class CollectionItemError:
    index: int
    message: str

    def __str__(self) -> str:
        return f"items[{self.index}]: {self.message}"


class CollectionValidationError(ValueError):
    """Raised when one or more items of a collection fail validation."""

    def __init__(self, errors: Sequence[CollectionItemError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors))


def validate_collection(items: Iterable[T], item_validator: ItemValidator[T]) -> List[CollectionItemError]:
    """Run ``item_validator`` over each item and collect its messages by index."""
    errors: List[CollectionItemError] = []
    for index, item in enumerate(items):
        for message in item_validator(item):
            errors.append(CollectionItemError(index=index, message=message))
    return errors


def ensure_valid_collection(items: Sequence[T], item_validator: ItemValidator[T]) -> None:
    errors = validate_collection(items, item_validator)
    if errors:
        raise CollectionValidationError(errors)


__all__ = [
    "CollectionItemError",
    "CollectionValidationError",
    "ensure_valid_collection",
    "validate_collection",
]
