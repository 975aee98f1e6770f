class InvalidOptionsError(Exception):
    """Raised when synthesis options are invalid (unknown optimization type, negative iteration, unknown day)."""

    pass


class InvalidRecordError(Exception):
    """Raised when a historical performance record is unusable after parsing."""

    pass


class InputMismatchError(Exception):
    """Raised when roster entries contradict each other."""

    pass


class UnknownClassError(Exception):
    """Raised when a class id is not present in the schedule ledger."""


class DuplicateClassError(Exception):
    """Raised when a class id is committed to the schedule ledger twice."""


# Mapping of custom exceptions to HTTP status codes
CUSTOM_ERRORS = {
    InvalidOptionsError: 400,
    InvalidRecordError: 400,
    InputMismatchError: 400,
    UnknownClassError: 404,
    DuplicateClassError: 409,
}
