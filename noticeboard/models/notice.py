"""Notice 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from noticeboard.database import Base


class Notice(Base):
    __tablename__ = "notice"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    start_date_time = Column(DateTime, nullable=False)
    end_date_time = Column(DateTime, nullable=False)
    created_date = Column(DateTime, nullable=False)
    view_count = Column(Integer, nullable=False, default=0)
    author = Column(String(100), nullable=False)

    attachments = relationship(
        "NoticeAttachment",
        back_populates="notice",
        order_by="NoticeAttachment.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_notice_created", "created_date"),
        Index("idx_notice_view_count", "view_count"),
    )

    @property
    def attachment_paths(self) -> list[str]:
        return [attachment.path for attachment in self.attachments]

    @attachment_paths.setter
    def attachment_paths(self, paths: list[str]):
        self.attachments = [NoticeAttachment(position=index, path=path) for index, path in enumerate(paths)]


class NoticeAttachment(Base):
    __tablename__ = "notice_attachment"

    attachment_id = Column(Integer, primary_key=True, autoincrement=True)
    notice_id = Column(Integer, ForeignKey("notice.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    path = Column(String(500), nullable=False)  # 저장 루트 기준 상대 경로

    notice = relationship("Notice", back_populates="attachments")

    __table_args__ = (
        Index("idx_notice_attachment_notice", "notice_id", "position"),
    )
