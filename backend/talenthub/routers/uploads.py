from fastapi import APIRouter
from fastapi.responses import FileResponse

from talenthub.services.storage_service import resolve_upload

router = APIRouter(prefix="/uploads", tags=["uploads"])

MEDIA_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@router.get("/{filename}")
async def download_upload(filename: str):
    path = resolve_upload(filename)
    return FileResponse(
        path=str(path),
        filename=path.name,
        media_type=MEDIA_TYPES.get(path.suffix.lower(), "application/octet-stream"),
    )
