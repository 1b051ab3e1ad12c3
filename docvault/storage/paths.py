import uuid

from docvault.ingestion.mime import normalize_mime

VALID_FOLDERS = frozenset({
    "general",
    "contratos",
    "certificados",
    "actas",
    "resoluciones",
    "informes",
    "correspondencia",
    "empleados",
})

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.ms-excel": "xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-powerpoint": "ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
    "text/plain": "txt",
    "text/csv": "csv",
    "application/zip": "zip",
    "application/x-rar-compressed": "rar",
    "application/x-7z-compressed": "7z",
}


def file_extension(filename: str, mime_type: str, from_mime: bool = False) -> str:
    """Extension from the filename when plausible, else from the MIME type."""
    if not from_mime and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext and len(ext) <= 5 and ext.isalnum():
            return ext
    return MIME_EXTENSIONS.get(normalize_mime(mime_type), "bin")


def object_path(
    owner_id: str,
    filename: str,
    mime_type: str,
    folder: str = "general",
    from_mime: bool = False,
) -> str:
    """Build '<folder>/<owner_id>/<uuid>.<ext>' with unknown folders mapped to 'general'."""
    safe_folder = folder.lower() if folder.lower() in VALID_FOLDERS else "general"
    ext = file_extension(filename, mime_type, from_mime=from_mime)
    return f"{safe_folder}/{owner_id}/{uuid.uuid4()}.{ext}"
