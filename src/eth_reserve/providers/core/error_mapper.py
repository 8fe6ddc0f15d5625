"""Domain concept for mapping pipeline and provider exceptions to HTTP responses."""
import asyncio
from dataclasses import dataclass

import httpx
from fastapi import HTTPException

from eth_reserve.exceptions import (BalanceUnavailableError,
                                    LedgerValidationError,
                                    PriceUnavailableError)


@dataclass(frozen=True)
class ErrorMapper:
    """Maps pipeline/provider exceptions to HTTP (status_code, detail).

    Inject one per router so operation names appear in upstream error details
    (e.g. "Daily snapshot", "Wallet refresh").
    """

    operation: str = "Operation"

    def to_http(self, exc: Exception) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTP responses.

        Args:
            exc: The exception raised by the service or provider.

        Returns:
            (status_code, detail) suitable for HTTPException(status_code=..., detail=...).
        """
        if isinstance(exc, LedgerValidationError):
            return (400, str(exc) or "Invalid request")
        if isinstance(exc, (PriceUnavailableError, BalanceUnavailableError)):
            return (502, f"{self.operation} failed: {exc}")
        if isinstance(exc, httpx.HTTPStatusError):
            return (502, f"{self.operation} failed: upstream returned {exc.response.status_code}")
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
            return (504, f"{self.operation} timed out")
        if isinstance(exc, httpx.HTTPError):
            return (502, f"{self.operation} failed: upstream unreachable")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc)
        raise HTTPException(status_code=status_code, detail=detail) from exc
