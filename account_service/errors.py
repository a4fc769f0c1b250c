"""
Error Taxonomy Module

Domain exceptions raised by the account service. The API layer maps each
class to an HTTP status; services re-raise these verbatim and wrap anything
else in InternalError.
"""


class AccountServiceError(Exception):
    """Base class for all account service errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AccountServiceError):
    """Raised when an account or commission rule does not exist"""

    status_code = 404


class BusinessRuleViolation(AccountServiceError):
    """Raised when a request breaks a business rule"""

    status_code = 400


class InsufficientFundsError(BusinessRuleViolation):
    """Raised when the debited account cannot cover the operation"""
    pass


class ServiceUnavailableError(AccountServiceError):
    """
    Raised when the credit card service is unreachable or failing.

    Retryable by the caller; the service never retries internally.
    """

    status_code = 503


class InternalError(AccountServiceError):
    """Raised for unexpected storage or mapping failures"""

    status_code = 500
