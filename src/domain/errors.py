"""
Connector error taxonomy.

Every error carries a Mojaloop-style ``code`` and the HTTP status the API layer
should answer with. Validation errors are deterministic and never retried;
CBS / scheme-adapter errors are operational.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ConnectorError(Exception):
    code = "5000"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.payload = payload or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"statusCode": self.code, "message": self.message}


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class ValidationError(ConnectorError):
    code = "3100"
    http_status = 400


class UnsupportedIdTypeError(ValidationError):
    code = "3101"

    def __init__(self, id_type: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(f"Unsupported id type {id_type!r}", **kwargs)


class UnsupportedCurrencyError(ValidationError):
    code = "3201"

    def __init__(self, currency: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(f"Unsupported currency {currency!r}", **kwargs)


class AccountBarredError(ValidationError):
    code = "5400"
    http_status = 500

    def __init__(self, message: str = "Account is barred", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class PayeeBlockedError(AccountBarredError):
    def __init__(self, message: str = "Payee account is blocked", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidQuoteError(ValidationError):
    code = "5101"
    http_status = 500

    def __init__(self, message: str = "Quote amounts do not reconcile", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NotEnoughInformationError(ValidationError):
    code = "5000"
    http_status = 500


class QuoteNotDefinedError(ValidationError):
    code = "5000"
    http_status = 500

    def __init__(self, message: str = "Quote not defined", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class TransferIdNotDefinedError(ValidationError):
    code = "4000"
    http_status = 500

    def __init__(self, message: str = "Transfer id not defined", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidConversionQuoteError(ValidationError):
    code = "4000"
    http_status = 500

    def __init__(self, message: str = "Received conversion terms are invalid", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidReturnedQuoteError(ValidationError):
    code = "4000"
    http_status = 500

    def __init__(self, message: str = "Returned quote is invalid", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NoQuoteReturnedError(ValidationError):
    code = "4000"
    http_status = 500

    def __init__(self, message: str = "No quote returned by the scheme adapter", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class QuoteValidationError(ValidationError):
    """Returned quote is missing data the connector cannot validate without."""

    code = "4000"
    http_status = 500


class TransferNotCompletedError(ValidationError):
    code = "5000"
    http_status = 500

    def __init__(self, message: str = "Transfer is not in COMPLETED state", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class QuoteNotAcceptedError(ValidationError):
    code = "5104"

    def __init__(self, message: str = "Quote was not accepted by the payer", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


# ---------------------------------------------------------------------------
# Operational errors
# ---------------------------------------------------------------------------


class CBSError(ConnectorError):
    """Core banking system call failed or was rejected."""

    code = "5000"
    http_status = 502


class DisbursementFailedError(CBSError):
    """Disbursement failed and the compensating refund was issued."""


class SchemeAdapterError(ConnectorError):
    """SDK scheme adapter call failed or returned an unusable response."""

    code = "4000"
    http_status = 502
