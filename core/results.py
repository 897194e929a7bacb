from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    row: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class StoreError:
    cause: Exception


# Lets callers tell "no such row" apart from "the query failed"
LookupResult = Union[Found[T], NotFound, StoreError]
