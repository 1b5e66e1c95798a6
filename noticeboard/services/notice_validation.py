"""공지 등록/수정 입력의 필드 제약을 검증합니다."""

from datetime import datetime
from typing import List

from noticeboard.exceptions import FieldViolation
from noticeboard.schemas.notice import NoticeCommand

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 1000


def normalize_datetime(value: datetime | None) -> datetime | None:
    # timezone 포함 입력은 로컬 시각으로 바꾼 뒤 naive로 저장한다.
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _check_text(field: str, label: str, value: str | None, max_length: int) -> List[FieldViolation]:
    if value is None or not value.strip():
        return [FieldViolation(field, f"{label} is required")]
    if len(value) > max_length:
        return [FieldViolation(field, f"{label} can be up to {max_length} characters long")]
    return []


def validate_notice_command(command: NoticeCommand, now: datetime | None = None) -> List[FieldViolation]:
    now = now or datetime.now()
    violations: List[FieldViolation] = []
    violations += _check_text("title", "Title", command.title, TITLE_MAX_LENGTH)
    violations += _check_text("content", "Content", command.content, CONTENT_MAX_LENGTH)

    if command.start_date_time is None:
        violations.append(FieldViolation("startDateTime", "Start date and time is required"))

    end = normalize_datetime(command.end_date_time)
    if end is None:
        violations.append(FieldViolation("endDateTime", "End date and time is required"))
    elif end <= now:
        violations.append(FieldViolation("endDateTime", "End date and time must be in the future"))

    return violations
