# Domain error contract consumed by Logger.error, and the facade's own errors.

from __future__ import annotations
from typing import Optional, Protocol


class DomainError(Protocol):
    def __str__(self) -> str: ...
    def error_code(self) -> str: ...
    def details(self) -> str: ...
    def original_error(self) -> Optional[BaseException]: ...


class TradingError(Exception):
    """Error carrying a stable code, free-form details and the wrapped cause."""

    def __init__(
        self,
        message: str,
        error_code: str = "",
        details: str = "",
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self._error_code = error_code
        self._details = details
        self._original_error = original_error

    def error_code(self) -> str:
        return self._error_code

    def details(self) -> str:
        return self._details

    def original_error(self) -> Optional[BaseException]:
        return self._original_error
