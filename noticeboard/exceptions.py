"""공지사항 도메인 예외 체계와 HTTP 오류 응답 변환 핸들러를 정의합니다.

서비스 레이어는 HTTP를 알지 못하고 도메인 예외만 던집니다. 각 예외는 ErrorCode를
가지며, ErrorCode가 HTTP 상태와 기본 메시지를 결정합니다. 응답 본문은 항상
``{"errorCode", "message", "timestamp"}`` 형태입니다.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from noticeboard.schemas.notice import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorCode(enum.Enum):
    VALIDATION_ERROR = (status.HTTP_400_BAD_REQUEST, "Invalid parameter")
    NOTICE_NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Notice not found")
    INVALID_FILE_PROVIDED = (status.HTTP_400_BAD_REQUEST, "Invalid file provided")
    SAVE_FILE_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save file")
    NOTICE_CREATION_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create notice")
    NOTICE_UPDATE_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update notice")
    NOTICE_DELETION_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete notice")
    VIEW_COUNT_UPDATE_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update view count")
    UNAUTHORIZED = (status.HTTP_401_UNAUTHORIZED, "Authentication required")
    FORBIDDEN = (status.HTTP_403_FORBIDDEN, "Access denied")
    RESOURCE_NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Resource not found")
    METHOD_NOT_ALLOWED = (status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")
    BAD_REQUEST = (status.HTTP_400_BAD_REQUEST, "Bad request")
    INTERNAL_SERVER_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    def __init__(self, http_status: int, default_message: str):
        self.http_status = http_status
        self.default_message = default_message


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


class NoticeBoardError(Exception):
    error_code = ErrorCode.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None, error_code: ErrorCode | None = None):
        if error_code is not None:
            self.error_code = error_code
        self.message = message or self.error_code.default_message
        super().__init__(self.message)


class ValidationError(NoticeBoardError):
    error_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, violations: List[FieldViolation]):
        self.violations = list(violations)
        super().__init__(", ".join(v.message for v in self.violations) or None)


class NotFoundError(NoticeBoardError):
    error_code = ErrorCode.NOTICE_NOT_FOUND

    def __init__(self, notice_id: int):
        self.notice_id = notice_id
        super().__init__(f"Notice not found with id {notice_id}")


class AttachmentFailure(str, enum.Enum):
    EMPTY = "empty"
    INVALID_EXTENSION = "invalid_extension"
    TOO_LARGE = "too_large"
    DIRECTORY_CREATE_FAILED = "directory_create_failed"
    WRITE_FAILED = "write_failed"

    @property
    def error_code(self) -> ErrorCode:
        # 입력 형태 문제는 400, 파일 시스템 I/O 문제는 500
        if self in (AttachmentFailure.DIRECTORY_CREATE_FAILED, AttachmentFailure.WRITE_FAILED):
            return ErrorCode.SAVE_FILE_FAILED
        return ErrorCode.INVALID_FILE_PROVIDED


class AttachmentError(NoticeBoardError):
    def __init__(self, reason: AttachmentFailure, message: str):
        self.reason = reason
        super().__init__(message, reason.error_code)


class PersistenceError(NoticeBoardError):
    def __init__(self, error_code: ErrorCode, message: str | None = None):
        super().__init__(message, error_code)


class InternalError(NoticeBoardError):
    error_code = ErrorCode.INTERNAL_SERVER_ERROR


def error_body(code: str, message: str) -> dict:
    body = ErrorResponse(error_code=code, message=message, timestamp=datetime.now())
    return body.model_dump(mode="json", by_alias=True)


_HTTP_STATUS_CODES = {
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.RESOURCE_NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
}


def _code_for_status(status_code: int) -> ErrorCode:
    if status_code in _HTTP_STATUS_CODES:
        return _HTTP_STATUS_CODES[status_code]
    if status_code == status.HTTP_400_BAD_REQUEST:
        return ErrorCode.VALIDATION_ERROR
    if 400 < status_code < 500:
        return ErrorCode.BAD_REQUEST
    return ErrorCode.INTERNAL_SERVER_ERROR


async def handle_notice_board_error(request: Request, exc: NoticeBoardError):
    if exc.error_code.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(
        status_code=exc.error_code.http_status,
        content=error_body(exc.error_code.name, exc.message),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ErrorCode.VALIDATION_ERROR.name, ", ".join(messages)),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    code = _code_for_status(exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code.name, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    # 원본 메시지는 로그에만 남기고 클라이언트에는 일반 메시지를 돌려준다.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(
        status_code=error.error_code.http_status,
        content=error_body(error.error_code.name, error.message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NoticeBoardError, handle_notice_board_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
