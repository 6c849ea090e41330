# backend/utils/errors.py
import enum


# Kinds of failure an operation can report to its boundary
class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    CONFIGURATION = "CONFIGURATION"


class RetailError(Exception):
    """Base error carrying an ErrorKind.

    Raised where the failure happens, after it has been logged there once.
    HTTP boundaries turn it into a response without logging it again.
    """

    kind: ErrorKind = ErrorKind.STORAGE_FAILURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(RetailError):
    kind = ErrorKind.VALIDATION


class NotFound(RetailError):
    kind = ErrorKind.NOT_FOUND


class StorageFailure(RetailError):
    kind = ErrorKind.STORAGE_FAILURE


class ConfigurationError(RetailError):
    kind = ErrorKind.CONFIGURATION


# HTTP status used at the boundary for each kind
STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_FAILURE: 500,
    ErrorKind.CONFIGURATION: 500,
}

GENERIC_FAILURE = "An error occurred while processing your request."


def public_detail(err: RetailError) -> str:
    # Storage/configuration internals are never shown to the caller
    if err.kind in (ErrorKind.STORAGE_FAILURE, ErrorKind.CONFIGURATION):
        return GENERIC_FAILURE
    return err.message
