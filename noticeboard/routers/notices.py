"""Notices 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from noticeboard.config import settings
from noticeboard.database import get_db
from noticeboard.middleware.auth_middleware import get_current_username
from noticeboard.schemas.notice import (
    ErrorResponse,
    NoticeCommand,
    NoticeDetailOut,
    NoticeOut,
    NoticePage,
    NoticeSummaryOut,
    UploadedFile,
)
from noticeboard.services import notice_service

router = APIRouter(prefix="/api/notices", tags=["notices"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "잘못된 요청"},
    404: {"model": ErrorResponse, "description": "공지사항을 찾을 수 없음"},
    500: {"model": ErrorResponse, "description": "서버 에러"},
}


def _read_uploads(files: List[UploadFile] | None) -> List[UploadedFile]:
    # 한도보다 1바이트만 더 읽어 두면 저장소가 크기 초과를 판정할 수 있다.
    limit = settings.MAX_UPLOAD_SIZE + 1
    uploads = []
    for upload in files or []:
        uploads.append(UploadedFile(filename=upload.filename or "", content=upload.file.read(limit)))
    return uploads


def _command(title: str, content: str, start_date_time: datetime, end_date_time: datetime) -> NoticeCommand:
    return NoticeCommand(
        title=title,
        content=content,
        start_date_time=start_date_time,
        end_date_time=end_date_time,
    )


@router.get("/top", response_model=List[NoticeSummaryOut], responses={500: ERROR_RESPONSES[500]})
def get_top_notices(db: Session = Depends(get_db)):
    return notice_service.get_top_notices(db)


@router.get("", response_model=NoticePage, responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]})
def list_notices(
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: List[str] | None = Query(None, description="예시: ?sort=createdDate,desc"),
    db: Session = Depends(get_db),
):
    return notice_service.get_all_notices(db, page=page, size=size, sort=sort)


@router.post("", response_model=NoticeOut, responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]})
def create_notice(
    title: str = Form(...),
    content: str = Form(...),
    start_date_time: datetime = Form(..., alias="startDateTime", examples=["2024-07-20T10:00:00"]),
    end_date_time: datetime = Form(..., alias="endDateTime", examples=["2024-07-20T18:00:00"]),
    files: List[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    current_username: str = Depends(get_current_username),
):
    command = _command(title, content, start_date_time, end_date_time)
    return notice_service.create_notice(db, command, _read_uploads(files), author=current_username)


@router.get("/{notice_id}", response_model=NoticeDetailOut, responses={404: ERROR_RESPONSES[404], 500: ERROR_RESPONSES[500]})
def get_notice(notice_id: int, db: Session = Depends(get_db)):
    return notice_service.get_notice(db, notice_id)


@router.put("/{notice_id}", response_model=NoticeOut, responses=ERROR_RESPONSES)
def update_notice(
    notice_id: int,
    title: str = Form(...),
    content: str = Form(...),
    start_date_time: datetime = Form(..., alias="startDateTime", examples=["2024-07-20T10:00:00"]),
    end_date_time: datetime = Form(..., alias="endDateTime", examples=["2024-07-20T18:00:00"]),
    files: List[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    current_username: str = Depends(get_current_username),
):
    _ = current_username  # authenticated users only
    command = _command(title, content, start_date_time, end_date_time)
    return notice_service.update_notice(db, notice_id, command, _read_uploads(files))


@router.delete(
    "/{notice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: ERROR_RESPONSES[404], 500: ERROR_RESPONSES[500]},
)
def delete_notice(
    notice_id: int,
    db: Session = Depends(get_db),
    current_username: str = Depends(get_current_username),
):
    _ = current_username  # authenticated users only
    notice_service.delete_notice(db, notice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
