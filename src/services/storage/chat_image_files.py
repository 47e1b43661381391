import os
import posixpath
import time
import uuid
from urllib.parse import quote

# relative to the upload root; also the public path segment of image URLs
UPLOAD_SUBDIR = "uploads/chat_images"

ALLOWED_EXT = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}


def client_basename(filename: str) -> str:
    """
    Strip directory components from a client supplied filename.
    Nothing else is filtered: unsafe characters and double extensions pass through.
    """
    name = (filename or "").replace("\\", "/").rstrip("/")
    return posixpath.basename(name)


def timestamped_filename(filename: str, now: float = None) -> str:
    ts = int(time.time() if now is None else now)
    return f"{ts}_{client_basename(filename)}"


def random_filename(filename: str) -> str:
    _, ext = os.path.splitext(client_basename(filename).lower())
    if ext not in ALLOWED_EXT:
        ext = ""
    return f"{uuid.uuid4().hex}{ext}"


def upload_dir(upload_root: str) -> str:
    return os.path.join(upload_root, *UPLOAD_SUBDIR.split("/"))


def ensure_upload_dir(upload_root: str) -> str:
    path = upload_dir(upload_root)
    # exist_ok covers another request creating it first
    os.makedirs(path, mode=0o777, exist_ok=True)
    return path


def save_upload(upload, dest_path: str) -> str:
    """
    Write an uploaded werkzeug FileStorage to dest_path.
    An existing file at dest_path is overwritten.
    """
    upload.save(dest_path)
    return dest_path


def relative_upload_path(filename: str) -> str:
    """URL path of a stored file; the on-disk name is percent-encoded."""
    return f"{UPLOAD_SUBDIR}/{quote(filename, safe='')}"
