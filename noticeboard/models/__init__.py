"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from noticeboard.models.notice import Notice, NoticeAttachment

__all__ = [
    "Notice", "NoticeAttachment",
]
