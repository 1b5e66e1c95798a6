import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from noticeboard.cache import notice_cache
from noticeboard.config import settings
from noticeboard.database import Base, get_db
from noticeboard.main import app
from noticeboard.models.notice import Notice
from noticeboard.services.auth_service import create_access_token

TEST_DB_URL = "sqlite:///./test_noticeboard.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    notice_cache.clear()
    yield
    notice_cache.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    target.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    return target


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_notices(db):
    """조회수 [100, 80, 60, 40, 20, 10]인 공지 6건을 만든다."""
    now = datetime.now()
    notices = []
    for index, views in enumerate([100, 80, 60, 40, 20, 10]):
        notice = Notice(
            title=f"공지 {index + 1}",
            content=f"본문 {index + 1}",
            start_date_time=now,
            end_date_time=now + timedelta(days=7),
            created_date=now - timedelta(minutes=10 - index),
            view_count=views,
            author="admin",
        )
        db.add(notice)
        notices.append(notice)
    db.commit()
    for n in notices:
        db.refresh(n)
    return notices


def future(days: int = 1) -> str:
    return (datetime.now() + timedelta(days=days)).replace(microsecond=0).isoformat()


def notice_form(**overrides) -> dict:
    data = {
        "title": "정기 점검 안내",
        "content": "이번 주 토요일 10시에 정기 점검이 있습니다.",
        "startDateTime": datetime.now().replace(microsecond=0).isoformat(),
        "endDateTime": future(),
    }
    data.update(overrides)
    return data


def auth_headers(username: str = "admin") -> dict:
    return {"Authorization": f"Bearer {create_access_token(username)}"}
