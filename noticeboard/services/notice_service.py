"""Notice Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다.

- 입력 검증은 부수효과(파일 저장, DB 쓰기) 전에 끝낸다.
- 첨부 파일은 DB 쓰기 전에 저장하므로 DB 실패 시 파일이 남을 수 있다.
- 조회수 상위 목록 캐시는 등록/수정/삭제/조회수 증가마다 통째로 무효화한다.
"""

import logging
import math
from datetime import datetime
from typing import List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from noticeboard.cache import TOP_NOTICES_CACHE, notice_cache
from noticeboard.config import settings
from noticeboard.exceptions import (
    ErrorCode,
    FieldViolation,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from noticeboard.models.notice import Notice
from noticeboard.repositories import notice_repository
from noticeboard.schemas.notice import (
    NoticeCommand,
    NoticeDetailOut,
    NoticeOut,
    NoticePage,
    NoticeSummaryOut,
    UploadedFile,
)
from noticeboard.services.attachment_store import AttachmentStore, get_attachment_store
from noticeboard.services.notice_validation import normalize_datetime, validate_notice_command

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "id": Notice.id,
    "title": Notice.title,
    "createdDate": Notice.created_date,
    "viewCount": Notice.view_count,
    "author": Notice.author,
    "startDateTime": Notice.start_date_time,
    "endDateTime": Notice.end_date_time,
}
DEFAULT_SORT = ["createdDate,desc"]


def _validate(command: NoticeCommand, files: Sequence[UploadedFile]):
    violations = validate_notice_command(command)
    if len(files) > settings.MAX_FILES_PER_NOTICE:
        violations.append(
            FieldViolation("files", f"At most {settings.MAX_FILES_PER_NOTICE} files can be attached")
        )
    if violations:
        raise ValidationError(violations)


def _get_or_404(db: Session, notice_id: int) -> Notice:
    notice = notice_repository.find_by_id(db, notice_id)
    if not notice:
        raise NotFoundError(notice_id)
    return notice


def _save(db: Session, notice: Notice, error_code: ErrorCode, message: str) -> Notice:
    try:
        return notice_repository.save(db, notice)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s: %s", message, exc)
        raise PersistenceError(error_code, message) from exc


def create_notice(
    db: Session,
    command: NoticeCommand,
    files: Sequence[UploadedFile] | None,
    author: str,
    store: AttachmentStore | None = None,
) -> NoticeOut:
    files = list(files or [])
    _validate(command, files)

    store = store or get_attachment_store()
    attachment_paths = store.store_all(files, title=command.title)

    notice = Notice(
        title=command.title,
        content=command.content,
        start_date_time=normalize_datetime(command.start_date_time),
        end_date_time=normalize_datetime(command.end_date_time),
        attachment_paths=attachment_paths,
        created_date=datetime.now(),
        view_count=0,
        author=author,
    )
    notice = _save(db, notice, ErrorCode.NOTICE_CREATION_FAILED, "Failed to create notice")
    notice_cache.invalidate(TOP_NOTICES_CACHE)
    logger.info("notice %s created by %s with %d attachment(s)", notice.id, author, len(attachment_paths))
    return NoticeOut.model_validate(notice)


def update_notice(
    db: Session,
    notice_id: int,
    command: NoticeCommand,
    files: Sequence[UploadedFile] | None,
    store: AttachmentStore | None = None,
) -> NoticeOut:
    files = list(files or [])
    _validate(command, files)
    notice = _get_or_404(db, notice_id)

    store = store or get_attachment_store()
    # 기존 첨부에 덧붙이지 않고 이번 요청의 파일 목록으로 교체한다.
    attachment_paths = store.store_all(files, title=command.title)

    notice.title = command.title
    notice.content = command.content
    notice.start_date_time = normalize_datetime(command.start_date_time)
    notice.end_date_time = normalize_datetime(command.end_date_time)
    notice.attachment_paths = attachment_paths
    notice = _save(
        db, notice, ErrorCode.NOTICE_UPDATE_FAILED, f"Failed to update notice with ID {notice_id}"
    )
    notice_cache.invalidate(TOP_NOTICES_CACHE)
    logger.info("notice %s updated", notice_id)
    return NoticeOut.model_validate(notice)


def delete_notice(db: Session, notice_id: int) -> None:
    notice = _get_or_404(db, notice_id)
    try:
        notice_repository.delete(db, notice)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete notice with ID %s: %s", notice_id, exc)
        raise PersistenceError(
            ErrorCode.NOTICE_DELETION_FAILED, f"Failed to delete notice with ID {notice_id}"
        ) from exc
    notice_cache.invalidate(TOP_NOTICES_CACHE)
    logger.info("notice %s deleted", notice_id)


def get_notice(db: Session, notice_id: int) -> NoticeDetailOut:
    notice = _get_or_404(db, notice_id)
    # 커밋 후에는 엔티티가 만료되므로 증가 전에 응답을 스냅샷한다.
    view = NoticeDetailOut.model_validate(notice)

    try:
        updated = notice_repository.increment_view_count(db, notice_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to increment view count of notice %s: %s", notice_id, exc)
        raise PersistenceError(
            ErrorCode.VIEW_COUNT_UPDATE_FAILED, f"Failed to update view count of notice with ID {notice_id}"
        ) from exc
    if not updated:
        raise NotFoundError(notice_id)

    notice_cache.invalidate(TOP_NOTICES_CACHE)
    return view.model_copy(update={"view_count": view.view_count + 1})


def parse_sort(sort: Sequence[str] | None) -> list:
    order_by = []
    violations = []
    sorted_on = set()
    for entry in sort or DEFAULT_SORT:
        prop, _, direction = (part.strip() for part in entry.partition(","))
        direction = (direction or "asc").lower()
        column = SORTABLE_COLUMNS.get(prop)
        if column is None:
            violations.append(FieldViolation("sort", f"Unsupported sort property '{prop}'"))
            continue
        if direction not in ("asc", "desc"):
            violations.append(FieldViolation("sort", f"Unsupported sort direction '{direction}'"))
            continue
        order_by.append(column.desc() if direction == "desc" else column.asc())
        sorted_on.add(prop)
    if violations:
        raise ValidationError(violations)
    if "id" not in sorted_on:
        order_by.append(Notice.id.desc())
    return order_by


def get_all_notices(
    db: Session,
    page: int = 0,
    size: int | None = None,
    sort: Sequence[str] | None = None,
) -> NoticePage:
    size = size or settings.DEFAULT_PAGE_SIZE
    violations = []
    if page < 0:
        violations.append(FieldViolation("page", "Page index must not be negative"))
    if size < 1 or size > settings.MAX_PAGE_SIZE:
        violations.append(FieldViolation("size", f"Page size must be between 1 and {settings.MAX_PAGE_SIZE}"))
    if violations:
        raise ValidationError(violations)

    items, total = notice_repository.find_all(db, page, size, parse_sort(sort))
    return NoticePage(
        content=[NoticeSummaryOut.model_validate(notice) for notice in items],
        page=page,
        size=size,
        total_elements=total,
        total_pages=math.ceil(total / size) if total else 0,
    )


def get_top_notices(db: Session) -> List[NoticeSummaryOut]:
    def load():
        notices = notice_repository.find_top_by_view_count(db, settings.TOP_NOTICES_LIMIT)
        return [NoticeSummaryOut.model_validate(notice) for notice in notices]

    return notice_cache.get_or_compute(TOP_NOTICES_CACHE, load)
