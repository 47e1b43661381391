import os
import posixpath
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from observability.debug_log import log_debug
from services.storage.chat_image_files import (
    ensure_upload_dir,
    random_filename,
    relative_upload_path,
    save_upload,
    timestamped_filename,
)
from services.storage.chat_image_records import insert_record


class ErrorKind(Enum):
    MISSING_FILE = "missing_file"
    WRITE_FAILED = "write_failed"
    STORE_WRITE_FAILED = "store_write_failed"


MISSING_FILE_MESSAGE = "No image file received"
WRITE_FAILED_MESSAGE = "Failed to move uploaded file"


@dataclass
class UploadResult:
    url: Optional[str] = None
    filename: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_kind is None

    @classmethod
    def failed(cls, kind: ErrorKind, message: str, filename: str = None):
        return cls(filename=filename, error_kind=kind, error=message)

    def to_json(self) -> dict:
        if self.success:
            return {"success": True, "url": self.url}
        return {"success": False, "error": self.error}


def build_public_url(host: str, request_path: str, relative_path: str) -> str:
    """
    Absolute URL for a stored file: the directory of the current request path
    joined with the relative upload path. The scheme is always http.
    """
    base_dir = posixpath.dirname(request_path or "/").rstrip("/")
    return f"http://{host}{base_dir}/{relative_path}"


class UploadHandler:
    """
    Stores one uploaded chat image and records it.

    Steps run strictly in order and stop at the first failure:
    presence check, filename generation, directory ensure, file write,
    URL construction, record insert. The file write and the insert are not
    transactional; a failed insert leaves the file on disk unless
    remove_orphans is set.
    """

    def __init__(self, upload_root, database_url, filename_strategy="timestamp",
                 remove_orphans=False, clock=None):
        self.upload_root = upload_root
        self.database_url = database_url
        self.filename_strategy = filename_strategy
        self.remove_orphans = remove_orphans
        self._clock = clock or time.time

    @classmethod
    def from_config(cls, config, clock=None):
        return cls(
            upload_root=config["UPLOAD_ROOT"],
            database_url=config["DATABASE_URL"],
            filename_strategy=config.get("FILENAME_STRATEGY", "timestamp"),
            remove_orphans=config.get("REMOVE_ORPHANS", False),
            clock=clock,
        )

    def destination_filename(self, client_filename: str) -> str:
        if self.filename_strategy == "random":
            return random_filename(client_filename)
        return timestamped_filename(client_filename, now=self._clock())

    def handle(self, upload, host: str, request_path: str) -> UploadResult:
        if upload is None:
            return UploadResult.failed(ErrorKind.MISSING_FILE, MISSING_FILE_MESSAGE)
        if not upload.filename:
            # part present but no file chosen on the client
            return UploadResult.failed(ErrorKind.WRITE_FAILED, WRITE_FAILED_MESSAGE)

        filename = self.destination_filename(upload.filename)

        try:
            target_dir = ensure_upload_dir(self.upload_root)
            dest_path = save_upload(upload, os.path.join(target_dir, filename))
        except (OSError, ValueError) as e:
            # ValueError: the OS rejects the name, e.g. an embedded null byte
            log_debug(f"Write failed for {filename}: {e}")
            return UploadResult.failed(ErrorKind.WRITE_FAILED, WRITE_FAILED_MESSAGE, filename)

        url = build_public_url(host, request_path, relative_upload_path(filename))

        try:
            insert_record(self.database_url, filename, url)
        except SQLAlchemyError as e:
            log_debug(f"Store insert failed for {filename}: {e}")
            if self.remove_orphans:
                self._remove_orphan(dest_path)
            return UploadResult.failed(ErrorKind.STORE_WRITE_FAILED, str(e), filename)

        log_debug(f"Stored chat image {filename}")
        return UploadResult(url=url, filename=filename)

    def _remove_orphan(self, path):
        try:
            os.remove(path)
            log_debug(f"Removed orphaned file {path}")
        except OSError as e:
            log_debug(f"Could not remove orphaned file {path}: {e}")
