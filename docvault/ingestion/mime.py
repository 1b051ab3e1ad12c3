ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/tiff",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
    "text/csv",
    "application/zip",
    "application/x-rar-compressed",
    "application/x-7z-compressed",
})


def normalize_mime(mime_type: str) -> str:
    """Drop parameters and case: 'Application/PDF; charset=binary' -> 'application/pdf'."""
    return mime_type.split(";", 1)[0].strip().lower()


def is_allowed(mime_type: str) -> bool:
    return normalize_mime(mime_type) in ALLOWED_MIME_TYPES
