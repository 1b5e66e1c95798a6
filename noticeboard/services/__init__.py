"""서비스 레이어 패키지 초기화 모듈입니다."""

from noticeboard.services import (
    attachment_store,
    auth_service,
    notice_service,
    notice_validation,
)
