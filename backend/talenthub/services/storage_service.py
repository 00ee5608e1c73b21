import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from talenthub.config import settings
from talenthub.errors import NotFoundError, ValidationError
from talenthub.utils.filesystem import ensure_data_dirs, sanitize_filename

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


async def read_upload(file: UploadFile | None) -> IncomingFile | None:
    """Read a multipart upload into memory, enforcing the size cap while streaming."""
    if file is None or not file.filename:
        return None

    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise ValidationError(f"File too large (max {max_bytes} bytes)", filename=file.filename)
        chunks.append(chunk)

    return IncomingFile(filename=file.filename, content=b"".join(chunks), content_type=file.content_type)


def validate_upload(upload: IncomingFile):
    if upload.extension not in settings.allowed_upload_extensions:
        raise ValidationError(
            "Invalid file type. Only PDF, DOC, and DOCX files are allowed.",
            filename=upload.filename,
        )
    if not upload.content:
        raise ValidationError("Empty file", filename=upload.filename)
    if len(upload.content) > settings.max_upload_bytes:
        raise ValidationError(
            f"File too large (max {settings.max_upload_bytes} bytes)",
            filename=upload.filename,
        )


def store_upload(field: str, upload: IncomingFile) -> str:
    """Write an upload under a randomized name. Returns the stored filename."""
    validate_upload(upload)
    ensure_data_dirs()
    stored_name = f"{field}-{uuid.uuid4().hex}{upload.extension}"
    path = settings.uploads_dir / stored_name
    path.write_bytes(upload.content)
    os.chmod(path, 0o444)
    return stored_name


def remove_uploads(names):
    for name in names:
        if not name:
            continue
        path = settings.uploads_dir / sanitize_filename(name)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Upload %s already missing", name)


def resolve_upload(name: str) -> Path:
    safe_name = sanitize_filename(name)
    path = settings.uploads_dir / safe_name
    if safe_name != name or not path.is_file():
        raise NotFoundError("File not found")
    return path
