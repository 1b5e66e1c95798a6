"""FastAPI 애플리케이션 진입점. 미들웨어, 예외 핸들러, API 라우터, 첨부 파일 정적 서빙을 등록합니다."""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from noticeboard.config import settings
from noticeboard.database import Base, engine
from noticeboard.exceptions import register_exception_handlers
import noticeboard.models  # noqa: F401 - 모델 import로 metadata 등록
from noticeboard.routers import notices

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="공지사항 관리 시스템",
    description="공지사항 등록/수정/삭제/조회와 조회수 상위 공지를 제공하는 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(notices.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "공지사항 관리 시스템"}


# Static file serving for attachments
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
