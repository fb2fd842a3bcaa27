"""에러 분류 및 결과 타입

검증/저장소 계층은 Ok/Err를 반환하고, HTTP 경계에서만 unwrap()으로 예외화한다.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(Enum):
    BAD_REQUEST = (400, "Bad Request")
    UNAUTHORIZED = (401, "Unauthorized")
    NOT_FOUND = (404, "Not Found")
    CONFLICT = (409, "Conflict")
    SERVER_ERROR = (500, "Server Error")

    def __init__(self, status_code: int, label: str):
        self.status_code = status_code
        self.label = label

    @classmethod
    def from_status(cls, status_code: int) -> Optional["ErrorKind"]:
        for kind in cls:
            if kind.status_code == status_code:
                return kind
        return None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


class ApiError(Exception):
    """HTTP 경계에서 응답으로 변환되는 에러"""

    def __init__(self, kind: ErrorKind, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.headers = headers


def unwrap(result: Result, headers: Optional[Dict[str, str]] = None) -> Any:
    """Ok면 값 반환, Err면 ApiError 발생"""
    if isinstance(result, Err):
        raise ApiError(result.kind, result.message, headers)
    return result.value


def error_response(
    kind: Union[ErrorKind, int],
    message: str,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """{"error": 분류, "message": 설명} 응답"""
    if isinstance(kind, ErrorKind):
        status_code, label = kind.status_code, kind.label
    else:
        status_code = kind
        known = ErrorKind.from_status(status_code)
        label = known.label if known else HTTPStatus(status_code).phrase
    return JSONResponse(
        status_code=status_code,
        content={"error": label, "message": message},
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    """첫 번째 위반 항목만 메시지로 사용"""
    errors = exc.errors()
    if not errors:
        return "Invalid request."

    first = errors[0]
    error_type = first.get("type", "")
    if error_type == "json_invalid":
        return "Request body must be valid JSON."
    if error_type == "missing" and tuple(first.get("loc", ())) == ("body",):
        return "Request body is required."

    # 검증 계층에서 올라온 ValueError는 메시지를 그대로 사용
    cause = (first.get("ctx") or {}).get("error")
    if isinstance(cause, ValueError):
        return str(cause)

    message = first.get("msg", "Invalid value")
    if error_type == "value_error":
        return message.removeprefix("Value error, ")

    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    return f"{field}: {message}" if field else message


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.kind, exc.message, exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ErrorKind.BAD_REQUEST, _validation_message(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(ErrorKind.SERVER_ERROR, "Internal server error.")


def register_error_handlers(app) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
