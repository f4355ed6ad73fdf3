"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Form input rejected before anything is written"""

    def __init__(self, message: str, field: str = "amount"):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidAmount(ValidationError):
    """Monetary input could not be parsed or is not positive"""

    pass


class InvalidInstallmentPlan(ValidationError):
    """Installment total or count out of range"""

    def __init__(self, message: str, field: str = "installments_count"):
        super().__init__(message, field)


class DepositorNotFound(DomainException):
    """Selected depositor is not in the fetched list"""

    pass


class NotFound(DomainException):
    """Bill requested for editing does not exist"""

    pass


class ReferenceDataFetchFailed(DomainException):
    """Data the form needs before editing could not be loaded"""

    pass


class CategoryFetchFailed(ReferenceDataFetchFailed):
    pass


class DepositorFetchFailed(ReferenceDataFetchFailed):
    pass


class BillFetchFailed(ReferenceDataFetchFailed):
    """Bill opened for editing could not be read from the store"""

    pass


class RepositoryError(DomainException):
    """Backing store rejected or failed an operation"""

    pass


class SubmitFailed(DomainException):
    """Store failure during submit, carrying a user-facing message"""

    pass


class InvalidFormState(DomainException):
    """Operation not allowed in the current form state"""

    pass
