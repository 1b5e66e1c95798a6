"""공지 생명주기 서비스(등록/수정/삭제/조회/목록/상위 5건 캐시) 회귀 테스트입니다."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from noticeboard.cache import TOP_NOTICES_CACHE, notice_cache
from noticeboard.exceptions import (
    AttachmentError,
    ErrorCode,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from noticeboard.models.notice import Notice
from noticeboard.repositories import notice_repository
from noticeboard.schemas.notice import NoticeCommand, UploadedFile
from noticeboard.services import notice_service


def _command(**overrides) -> NoticeCommand:
    now = datetime.now()
    values = {
        "title": "T",
        "content": "C",
        "start_date_time": now,
        "end_date_time": now + timedelta(days=1),
    }
    values.update(overrides)
    return NoticeCommand(**values)


def test_create_sets_defaults_and_author(db):
    started = datetime.now()

    created = notice_service.create_notice(db, _command(), [], author="alice")

    assert created.id is not None
    assert created.view_count == 0
    assert created.author == "alice"
    assert created.created_date >= started
    assert created.attachment_paths == []


def test_create_round_trip_at_length_limits(db):
    title, content = "가" * 100, "나" * 1000
    created = notice_service.create_notice(db, _command(title=title, content=content), None, author="alice")

    fetched = notice_service.get_notice(db, created.id)

    assert fetched.title == title
    assert fetched.content == content


def test_create_stores_attachments_in_order(db, upload_dir):
    files = [UploadedFile("a.txt", b"A"), UploadedFile("b.pdf", b"B")]

    created = notice_service.create_notice(db, _command(), files, author="alice")

    assert len(created.attachment_paths) == 2
    assert created.attachment_paths[0].endswith("_a.txt")
    assert created.attachment_paths[1].endswith("_b.pdf")
    for path in created.attachment_paths:
        assert (upload_dir / path).read_bytes() in (b"A", b"B")


def test_create_rejects_invalid_input_before_side_effects(db, upload_dir):
    with pytest.raises(ValidationError) as exc_info:
        notice_service.create_notice(
            db, _command(title="a" * 101), [UploadedFile("a.txt", b"A")], author="alice"
        )

    assert [v.field for v in exc_info.value.violations] == ["title"]
    assert db.query(Notice).count() == 0
    assert list(upload_dir.iterdir()) == []


def test_create_rejects_too_many_files(db, monkeypatch):
    monkeypatch.setattr(notice_service.settings, "MAX_FILES_PER_NOTICE", 1)
    files = [UploadedFile("a.txt", b"A"), UploadedFile("b.txt", b"B")]

    with pytest.raises(ValidationError) as exc_info:
        notice_service.create_notice(db, _command(), files, author="alice")
    assert exc_info.value.violations[0].field == "files"


def test_create_rejects_bad_attachment(db):
    with pytest.raises(AttachmentError):
        notice_service.create_notice(db, _command(), [UploadedFile("virus.exe", b"MZ")], author="alice")
    assert db.query(Notice).count() == 0


def test_create_wraps_store_failure(db, monkeypatch):
    def failing_save(db, notice):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(notice_repository, "save", failing_save)

    with pytest.raises(PersistenceError) as exc_info:
        notice_service.create_notice(db, _command(), [], author="alice")
    assert exc_info.value.error_code == ErrorCode.NOTICE_CREATION_FAILED
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_update_preserves_identity_fields_and_replaces_attachments(db):
    created = notice_service.create_notice(
        db, _command(), [UploadedFile("old.txt", b"old")], author="alice"
    )
    notice_service.get_notice(db, created.id)
    new_end = (datetime.now() + timedelta(days=3)).replace(microsecond=0)

    updated = notice_service.update_notice(
        db,
        created.id,
        _command(title="새 제목", content="새 본문", end_date_time=new_end),
        [UploadedFile("new.txt", b"new")],
    )

    assert updated.id == created.id
    assert updated.author == "alice"
    assert updated.created_date == created.created_date
    assert updated.view_count == 1
    assert updated.title == "새 제목"
    assert updated.content == "새 본문"
    assert updated.end_date_time == new_end
    assert len(updated.attachment_paths) == 1
    assert updated.attachment_paths[0].endswith("_new.txt")


def test_update_without_files_clears_attachments(db):
    created = notice_service.create_notice(db, _command(), [UploadedFile("a.txt", b"A")], author="alice")

    updated = notice_service.update_notice(db, created.id, _command(), None)

    assert updated.attachment_paths == []


def test_update_missing_notice_raises_not_found(db):
    with pytest.raises(NotFoundError):
        notice_service.update_notice(db, 404, _command(), [])


def test_delete_then_delete_again_raises_not_found(db):
    created = notice_service.create_notice(db, _command(), [], author="alice")

    notice_service.delete_notice(db, created.id)

    with pytest.raises(NotFoundError):
        notice_service.delete_notice(db, created.id)
    with pytest.raises(NotFoundError):
        notice_service.get_notice(db, created.id)


def test_delete_leaves_attachment_files_on_disk(db, upload_dir):
    created = notice_service.create_notice(db, _command(), [UploadedFile("keep.txt", b"K")], author="alice")

    notice_service.delete_notice(db, created.id)

    assert (upload_dir / created.attachment_paths[0]).exists()


def test_get_notice_returns_post_increment_count(db):
    created = notice_service.create_notice(db, _command(), [], author="alice")

    first = notice_service.get_notice(db, created.id)
    second = notice_service.get_notice(db, created.id)

    assert first.view_count == 1
    assert second.view_count == 2
    db.expire_all()
    assert notice_repository.find_by_id(db, created.id).view_count == 2


def test_get_all_notices_defaults_to_newest_first(db, seed_notices):
    page = notice_service.get_all_notices(db, page=0, size=4)

    assert page.total_elements == 6
    assert page.total_pages == 2
    assert [n.title for n in page.content] == ["공지 6", "공지 5", "공지 4", "공지 3"]

    last = notice_service.get_all_notices(db, page=1, size=4)
    assert [n.title for n in last.content] == ["공지 2", "공지 1"]


def test_get_all_notices_custom_sort(db, seed_notices):
    page = notice_service.get_all_notices(db, sort=["viewCount,asc"])

    assert [n.view_count for n in page.content] == [10, 20, 40, 60, 80, 100]


def test_get_all_notices_rejects_unknown_sort(db):
    with pytest.raises(ValidationError):
        notice_service.get_all_notices(db, sort=["password,desc"])
    with pytest.raises(ValidationError):
        notice_service.get_all_notices(db, sort=["title,sideways"])


def test_get_all_notices_empty(db):
    page = notice_service.get_all_notices(db)
    assert page.content == []
    assert page.total_elements == 0
    assert page.total_pages == 0


def test_top_notices_excludes_sixth(db, seed_notices):
    top = notice_service.get_top_notices(db)

    assert [n.view_count for n in top] == [100, 80, 60, 40, 20]


def test_top_notices_served_from_cache_until_mutation(db, seed_notices):
    first = notice_service.get_top_notices(db)
    assert TOP_NOTICES_CACHE in notice_cache

    # 캐시를 우회한 직접 갱신은 반영되지 않는다.
    db.query(Notice).filter(Notice.id == seed_notices[5].id).update({Notice.view_count: 500})
    db.commit()
    assert notice_service.get_top_notices(db) == first

    notice_service.get_notice(db, seed_notices[5].id)
    assert TOP_NOTICES_CACHE not in notice_cache
    refreshed = notice_service.get_top_notices(db)
    assert [n.view_count for n in refreshed] == [501, 100, 80, 60, 40]


@pytest.mark.parametrize("mutation", ["create", "update", "delete"])
def test_every_mutation_invalidates_top_notices(db, seed_notices, mutation):
    notice_service.get_top_notices(db)
    target = seed_notices[0].id

    if mutation == "create":
        notice_service.create_notice(db, _command(), [], author="bob")
    elif mutation == "update":
        notice_service.update_notice(db, target, _command(title="수정"), [])
    else:
        notice_service.delete_notice(db, target)

    assert TOP_NOTICES_CACHE not in notice_cache


def test_top_notices_with_fewer_than_five(db):
    notice_service.create_notice(db, _command(title="only"), [], author="alice")
    top = notice_service.get_top_notices(db)
    assert [n.title for n in top] == ["only"]
