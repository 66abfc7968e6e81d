from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from maxcdn.errors import BatchPurgeError
from maxcdn.models.response import GenericResponse

T = TypeVar("T")


@dataclass
class PurgeResult(Generic[T]):
    """Outcome of purging a single zone or file."""

    target: T
    response: GenericResponse | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PurgeBatch(Generic[T]):
    """Results of a batch purge, in the order the targets were given."""

    results: list[PurgeResult[T]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    @property
    def responses(self) -> list[GenericResponse]:
        return [r.response for r in self.results if r.ok and r.response is not None]

    @property
    def errors(self) -> list[PurgeResult[T]]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def last_error(self) -> Exception | None:
        errors = self.errors
        return errors[-1].error if errors else None

    def raise_for_errors(self) -> PurgeBatch[T]:
        if not self.ok:
            raise BatchPurgeError(self)
        return self
