"""Classified errors shared by every resource manager.

Backends fail in their own vocabulary (driver exceptions, ORM exceptions,
parse errors). Everything leaving a manager is translated into one of the
five kinds below so the transport layer can map them to stable statuses.
"""
import enum
import functools
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import exc as sa_exc

from resource_api.utils.logger import logger

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """The closed set of application error kinds"""
    DATA_ERROR = "DataError"
    RESOURCE_NOT_FOUND = "ResourceNotFound"
    OPERATION_NOT_AUTHORIZED = "OperationNotAuthorized"
    OPERATION_FORBIDDEN = "OperationForbidden"
    UNKNOWN_ERROR = "UnknownError"


class CoreError(Exception):
    """Base class of classified errors.

    Instances are immutable and compare equal when kind and message match.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.args[0]

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "CoreError":
        """Build the error subclass matching ``kind``"""
        return _KIND_TO_CLASS[ErrorKind(kind)](message)

    def __setattr__(self, name, value):
        if name in ("kind", "message", "args"):
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    def __eq__(self, other):
        if not isinstance(other, CoreError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self):
        return hash((self.kind, self.message))

    def __copy__(self):
        return CoreError.of(self.kind, self.message)

    def __deepcopy__(self, memo):
        return self.__copy__()

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"

    def __str__(self):
        return self.message


class DataError(CoreError):
    """Malformed input or constraint violation"""
    kind = ErrorKind.DATA_ERROR


class ResourceNotFound(CoreError):
    """Operation targeted an absent identifier"""
    kind = ErrorKind.RESOURCE_NOT_FOUND


class OperationNotAuthorized(CoreError):
    """Caller is not authenticated"""
    kind = ErrorKind.OPERATION_NOT_AUTHORIZED


class OperationForbidden(CoreError):
    """Caller is authenticated but not allowed"""
    kind = ErrorKind.OPERATION_FORBIDDEN


class UnknownError(CoreError):
    """Any backend failure that is not otherwise classifiable"""
    kind = ErrorKind.UNKNOWN_ERROR


_KIND_TO_CLASS = {
    ErrorKind.DATA_ERROR: DataError,
    ErrorKind.RESOURCE_NOT_FOUND: ResourceNotFound,
    ErrorKind.OPERATION_NOT_AUTHORIZED: OperationNotAuthorized,
    ErrorKind.OPERATION_FORBIDDEN: OperationForbidden,
    ErrorKind.UNKNOWN_ERROR: UnknownError,
}


def _describe(exc: BaseException) -> str:
    if isinstance(exc, sa_exc.DBAPIError) and exc.orig is not None:
        message = str(exc.orig)
    else:
        message = str(exc)
    return message or type(exc).__name__


def classify(exc: BaseException) -> CoreError:
    """Map any backend failure to exactly one classified error"""
    if isinstance(exc, CoreError):
        return exc
    if isinstance(exc, (sa_exc.IntegrityError, sa_exc.DataError)):
        return DataError(_describe(exc))
    if isinstance(exc, sa_exc.NoResultFound):
        return ResourceNotFound(_describe(exc))
    return UnknownError(_describe(exc))


def classify_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Re-raise every failure of an async operation as a classified error"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            error = classify(exc)
            if error.kind is ErrorKind.UNKNOWN_ERROR:
                logger.error(f"{func.__qualname__} failed: {error.message}")
            else:
                logger.warning(f"{func.__qualname__} rejected ({error.kind.value}): {error.message}")
            if error is exc:
                raise
            raise error from exc

    return wrapper
