from dataclasses import dataclass
from typing import Any, Union

from models.errors import ExpenseTrackerError


@dataclass(frozen=True)
class Ok:
    value: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ExpenseTrackerError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Ok, Err]


@dataclass(frozen=True)
class ValidResult:
    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class InvalidResult:
    errors: dict[str, str]

    @property
    def is_valid(self) -> bool:
        return False


Valid = ValidResult()
ValidationResult = Union[ValidResult, InvalidResult]
