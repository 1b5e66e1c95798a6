"""Notice 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from dataclasses import dataclass
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

CAMEL_CONFIG = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class NoticeCommand(BaseModel):
    """등록/수정 요청 입력. 제약 검증은 notice_validation에서 명시적으로 수행한다."""

    title: Optional[str] = None
    content: Optional[str] = None
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content: bytes


class NoticeOut(BaseModel):
    id: int
    title: str
    content: str
    start_date_time: datetime
    end_date_time: datetime
    attachment_paths: List[str] = []
    created_date: datetime
    view_count: int
    author: str

    model_config = CAMEL_CONFIG


class NoticeDetailOut(NoticeOut):
    pass


class NoticeSummaryOut(BaseModel):
    id: int
    title: str
    content: str
    created_date: datetime
    view_count: int
    author: str

    model_config = CAMEL_CONFIG


class NoticePage(BaseModel):
    content: List[NoticeSummaryOut]
    page: int
    size: int
    total_elements: int
    total_pages: int

    model_config = CAMEL_CONFIG


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    timestamp: datetime

    model_config = CAMEL_CONFIG
