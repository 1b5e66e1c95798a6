"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./noticeboard.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # File upload
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50 MB
    MAX_FILES_PER_NOTICE: int = 10
    ALLOWED_EXTENSIONS: List[str] = [
        # images
        "jpg", "jpeg", "png", "gif", "bmp", "webp",
        # documents
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt",
        # archives
        "zip", "rar", "tar", "gz", "7z",
    ]

    # Paging / ranking
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    TOP_NOTICES_LIMIT: int = 5

    class Config:
        # 실행 cwd와 무관하게 프로젝트 루트의 .env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
