"""Notice 영속성 접근 함수 모음입니다. 세션 하나에 대해 단일 엔티티 작업 단위로 커밋합니다."""

from typing import List, Sequence, Tuple

from sqlalchemy.orm import Session, selectinload
from noticeboard.models.notice import Notice


def find_by_id(db: Session, notice_id: int) -> Notice | None:
    return (
        db.query(Notice)
        .options(selectinload(Notice.attachments))
        .filter(Notice.id == notice_id)
        .first()
    )


def save(db: Session, notice: Notice) -> Notice:
    db.add(notice)
    db.commit()
    db.refresh(notice)
    return notice


def delete(db: Session, notice: Notice) -> None:
    db.delete(notice)
    db.commit()


def find_all(db: Session, page: int, size: int, order_by: Sequence) -> Tuple[List[Notice], int]:
    total = db.query(Notice).count()
    items = (
        db.query(Notice)
        .order_by(*order_by)
        .offset(page * size)
        .limit(size)
        .all()
    )
    return items, total


def find_top_by_view_count(db: Session, limit: int) -> List[Notice]:
    return (
        db.query(Notice)
        .order_by(Notice.view_count.desc(), Notice.id.asc())
        .limit(limit)
        .all()
    )


def increment_view_count(db: Session, notice_id: int) -> int:
    # 읽고-쓰기가 아닌 단일 UPDATE로 동시 조회 시 증가분 유실을 막는다.
    updated = (
        db.query(Notice)
        .filter(Notice.id == notice_id)
        .update({Notice.view_count: Notice.view_count + 1}, synchronize_session=False)
    )
    db.commit()
    return updated
