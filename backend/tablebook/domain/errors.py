from typing import Sequence


class DomainError(Exception):
    pass


class RuleViolationError(DomainError):
    """Carries the ordered user-facing messages produced by the validators."""

    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class BookingValidationError(RuleViolationError):
    pass


class RegistrationError(RuleViolationError):
    pass


class BookingNotFoundError(DomainError):
    pass


class EmailAlreadyRegisteredError(DomainError):
    pass


class InvalidCredentialsError(DomainError):
    pass


class InvalidSessionError(DomainError):
    pass
