"""Domain exceptions raised by the reconciliation pipeline and purchase ledger."""


class ReserveError(Exception):
    """Base class for errors raised by eth_reserve."""


class PriceUnavailableError(ReserveError):
    """No ETH/USD price could be obtained. Fatal for a daily run.

    `partial` carries the company results a run produced before the price
    lookup failed, so callers can still report and alert on them.
    """

    def __init__(self, message: str, partial=None) -> None:  # noqa: ANN001
        super().__init__(message)
        self.partial = partial


class BalanceUnavailableError(ReserveError):
    """A wallet balance could not be resolved on any network."""


class LedgerValidationError(ReserveError, ValueError):
    """A purchase was rejected before anything was persisted."""


class CompanyNotFoundError(LedgerValidationError):
    """The purchase references a company that does not exist."""

    def __init__(self, company_id: int) -> None:
        super().__init__("Company not found")
        self.company_id = company_id
