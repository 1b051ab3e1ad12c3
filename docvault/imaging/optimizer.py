"""Lossy size reduction for image uploads."""

import io

from PIL import Image, ImageOps

from docvault.ingestion.mime import normalize_mime
from docvault.logging.logger import Log


class BinaryOptimizer:
    """Downscales and re-encodes images; everything else passes through.

    Never raises: on any Pillow failure the original bytes are returned.
    Untouched input comes back as the same object; re-encoded images are
    always OUTPUT_MIME_TYPE.
    """

    OUTPUT_MIME_TYPE = "image/jpeg"

    def __init__(self, max_dimension: int = 2000, quality: int = 85) -> None:
        self._max_dimension = max_dimension
        self._quality = quality

    def optimize(self, data: bytes, mime_type: str) -> bytes:
        if not normalize_mime(mime_type).startswith("image/"):
            return data
        try:
            return self._reencode(data)
        except Exception as exc:
            Log.warning(f"Image optimization failed, keeping original bytes: {exc}")
            return data

    def _reencode(self, data: bytes) -> bytes:
        with Image.open(io.BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            # thumbnail() only shrinks, so smaller images keep their size
            img.thumbnail((self._max_dimension, self._max_dimension))
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            buf = io.BytesIO()
            img.save(buf, format="JPEG", quality=self._quality, progressive=True)
        return buf.getvalue()
