"""Upload validation and key generation in front of the object storage bridge."""

import base64
import binascii
import posixpath

from orpheus_common.config import StorageSettings
from orpheus_common.errors import BadRequestError, StorageNotConfiguredError
from orpheus_common.logging import get_logger
from orpheus_common.storage import ObjectStorage, StoredObject
from orpheus_common.utils import generate_id

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
_MB = 1024 * 1024


def build_key(prefix: str, filename: str) -> str:
    """`{prefix}/{random id}-{filename}`; directory parts of the filename are dropped."""
    name = posixpath.basename(filename.replace("\\", "/")).strip() or "file"
    return f"{prefix}/{generate_id()}-{name}"


def decode_payload(base64_data: str) -> bytes:
    """Decode base64 text, accepting an optional `data:<type>;base64,` prefix."""
    payload = base64_data.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    # MIME-style line wrapping is accepted
    payload = "".join(payload.split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadRequestError("Invalid base64 data") from exc


def _check_size(data: bytes, limit_mb: int, kind: str) -> None:
    if not data:
        raise BadRequestError(f"Empty {kind} upload")
    if len(data) > limit_mb * _MB:
        raise BadRequestError(f"{kind.capitalize()} exceeds the {limit_mb} MB limit")


def _require_storage(storage: ObjectStorage) -> None:
    if not storage.is_configured:
        raise StorageNotConfiguredError()


async def upload_image(
    storage: ObjectStorage,
    settings: StorageSettings,
    *,
    filename: str,
    content_type: str,
    base64_data: str,
) -> dict[str, str]:
    """
    Validate and store an image.

    Raises:
        BadRequestError: not an image/* type, bad base64, empty or too large
        StorageNotConfiguredError: storage credentials or bucket missing
    """
    if not content_type.lower().startswith("image/"):
        raise BadRequestError(f"Unsupported image content type: {content_type}")
    data = decode_payload(base64_data)
    _check_size(data, settings.max_image_mb, "image")
    _require_storage(storage)

    stored: StoredObject = await storage.put(build_key("images", filename), data, content_type)
    logger.info("image_uploaded", key=stored.key, size=len(data))
    return {"url": stored.url, "key": stored.key}


async def upload_pdf(
    storage: ObjectStorage,
    settings: StorageSettings,
    *,
    filename: str,
    base64_data: str,
    content_type: str | None = None,
) -> dict[str, str]:
    """Validate and store a PDF document; same failure modes as upload_image()."""
    if content_type is not None and content_type.lower() != PDF_CONTENT_TYPE:
        raise BadRequestError(f"Unsupported document content type: {content_type}")
    data = decode_payload(base64_data)
    _check_size(data, settings.max_pdf_mb, "pdf")
    _require_storage(storage)

    stored = await storage.put(build_key("pdfs", filename), data, PDF_CONTENT_TYPE)
    logger.info("pdf_uploaded", key=stored.key, size=len(data))
    return {"url": stored.url, "key": stored.key}
