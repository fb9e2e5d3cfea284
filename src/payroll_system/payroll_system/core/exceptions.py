class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidInput(ValidationError):
    """Raised when salary calculation inputs are out of range."""


class AdvanceLimitExceeded(ValidationError):
    """Raised when a new advance would exceed the monthly advance limit."""


class AdvanceAlreadyPaid(ValidationError):
    """Raised when trying to settle an advance that is already paid."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""


class EmployeeNotFound(NotFoundError):
    pass


class AdvanceNotFound(NotFoundError):
    pass


class TimeEntryNotFound(NotFoundError):
    pass


class SalaryReportNotFound(NotFoundError):
    pass


class ConflictError(DomainError):
    """Raised when an operation clashes with existing state."""


class DuplicateEmployeeCode(ConflictError):
    pass


class DuplicateReport(ConflictError):
    """A salary report already exists for the employee and month."""


class AmortizationAlreadyApplied(ConflictError):
    """Advances were already amortized for this salary report."""
