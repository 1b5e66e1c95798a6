"""Attachment Store 서비스입니다. 업로드 파일을 검증하고 시간 단위 폴더에 저장합니다.

저장 경로는 ``<UPLOAD_DIR>/<YYYYMMDDHH>/<YYYYMMDDHHMMSS>_<원본파일명>`` 이며,
호출자에게는 저장 루트 기준 상대 경로만 돌려줍니다.
"""

import logging
import os
from datetime import datetime
from typing import Callable, Iterable, List

from noticeboard.config import settings
from noticeboard.exceptions import AttachmentError, AttachmentFailure
from noticeboard.schemas.notice import UploadedFile

logger = logging.getLogger(__name__)

FOLDER_FORMAT = "%Y%m%d%H"
FILE_PREFIX_FORMAT = "%Y%m%d%H%M%S"


def get_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


class AttachmentStore:
    def __init__(
        self,
        root: str,
        allowed_extensions: Iterable[str] | None = None,
        max_size: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.root = root
        self.allowed_extensions = {ext.lower() for ext in (allowed_extensions or settings.ALLOWED_EXTENSIONS)}
        self.max_size = max_size if max_size is not None else settings.MAX_UPLOAD_SIZE
        self.clock = clock

    def store(self, content: bytes, original_name: str) -> str:
        if not content:
            raise AttachmentError(AttachmentFailure.EMPTY, "File must not be empty")

        # 클라이언트가 보낸 디렉터리 성분은 버리고 파일명만 사용한다.
        filename = os.path.basename((original_name or "").replace("\\", "/"))
        ext = get_extension(filename)
        if not ext or ext not in self.allowed_extensions:
            raise AttachmentError(
                AttachmentFailure.INVALID_EXTENSION,
                f"Invalid file type: '{filename}'. Allowed: {', '.join(sorted(self.allowed_extensions))}",
            )
        if len(content) > self.max_size:
            raise AttachmentError(
                AttachmentFailure.TOO_LARGE,
                f"File '{filename}' exceeds {self.max_size // (1024 * 1024)} MB limit",
            )

        now = self.clock()
        folder = now.strftime(FOLDER_FORMAT)
        directory = os.path.join(self.root, folder)
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as exc:
            raise AttachmentError(
                AttachmentFailure.DIRECTORY_CREATE_FAILED,
                f"Failed to create directory: {os.path.abspath(directory)}",
            ) from exc

        stored_name = f"{now.strftime(FILE_PREFIX_FORMAT)}_{filename}"
        try:
            with open(os.path.join(directory, stored_name), "wb") as f:
                f.write(content)
        except OSError as exc:
            raise AttachmentError(AttachmentFailure.WRITE_FAILED, f"Failed to save file '{filename}'") from exc

        return f"{folder}/{stored_name}"

    def store_all(self, files: List[UploadedFile], title: str | None = None) -> List[str]:
        paths = []
        for upload in files:
            try:
                paths.append(self.store(upload.content, upload.filename))
            except AttachmentError as exc:
                logger.error("Failed to store attachment for notice with TITLE %s. Reason: %s", title, exc.message)
                raise
        return paths


def get_attachment_store() -> AttachmentStore:
    return AttachmentStore(settings.UPLOAD_DIR)
