"""
Image ingestion.

Validates an uploaded photo (media type, size), checks with Pillow that the
bytes really are an image, and encodes it as a base64 data URI.  The same
payload is used for the on-page preview and as the AI request body.
Nothing is ever written to disk.
"""
import asyncio
import base64
import io
import os

from PIL import Image
from pydantic import BaseModel, ConfigDict, field_validator

from errors import InvalidType, ReadError, TooLarge

MAX_IMAGE_BYTES = 20 * 1024 * 1024  # 20 MiB

# What the file picker offers; image/jpg is a common browser alias of image/jpeg
ACCEPTED_TYPES = ("image/jpeg", "image/png", "image/jpg", "image/webp")

_TYPE_ALIASES = {"image/jpg": "image/jpeg"}

# Fallback when the browser does not declare a usable content type
_EXT_TO_MIME = {
    "jpg":  "image/jpeg",
    "jpeg": "image/jpeg",
    "png":  "image/png",
    "webp": "image/webp",
}

_UNDECLARED = {"", "application/octet-stream"}


class ImagePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    media_type: str   # image/jpeg | image/png | image/webp
    size:       int   # original byte length
    data_uri:   str   # data:<media_type>;base64,<...>

    @field_validator("media_type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in _EXT_TO_MIME.values():
            raise ValueError(f"unsupported media type: {value}")
        return value

    @field_validator("size")
    @classmethod
    def _within_limit(cls, value: int) -> int:
        if value < 0 or value > MAX_IMAGE_BYTES:
            raise ValueError(f"image size out of range: {value}")
        return value

    def decode(self) -> bytes:
        """Return the raw image bytes carried by the data URI."""
        _, encoded = self.data_uri.split(",", 1)
        return base64.b64decode(encoded)


def resolve_media_type(declared: str | None, filename: str | None = None) -> str:
    """Map a declared content type (or, failing that, the file extension) to a payload type.

    Raises InvalidType for anything that is not a JPEG, PNG or WEBP image.
    """
    declared = (declared or "").split(";", 1)[0].strip().lower()
    if declared in _UNDECLARED and filename and "." in filename:
        declared = _EXT_TO_MIME.get(filename.rsplit(".", 1)[1].lower(), declared)
    if declared not in ACCEPTED_TYPES:
        raise InvalidType()
    return _TYPE_ALIASES.get(declared, declared)


def encode_data_uri(data: bytes, media_type: str) -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def _verify_image(data: bytes) -> None:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()  # raises on corrupt / non-image bytes
    except Exception as e:
        raise ReadError() from e


def payload_from_bytes(data: bytes, media_type: str) -> ImagePayload:
    """Validate raw bytes and wrap them in an ImagePayload (blocking)."""
    media_type = resolve_media_type(media_type)
    if len(data) > MAX_IMAGE_BYTES:
        raise TooLarge()
    _verify_image(data)
    return ImagePayload(
        media_type=media_type,
        size=len(data),
        data_uri=encode_data_uri(data, media_type),
    )


def load_image_file(path: str) -> ImagePayload:
    """Load an image shipped with the app (e.g. the default car photo)."""
    ext = path.rsplit(".", 1)[-1].lower()
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ReadError(f"Failed to load image: {os.path.basename(path)}") from e
    return payload_from_bytes(data, _EXT_TO_MIME.get(ext, ""))


def _declared_size(file) -> int | None:
    """Byte length of an upload, measured without reading it into memory."""
    stream = getattr(file, "stream", file)
    try:
        pos = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(pos)
        return size - pos
    except (AttributeError, OSError, ValueError):
        length = getattr(file, "content_length", None)
        return length or None


def _read_all(file) -> bytes:
    try:
        return file.read()
    except (OSError, ValueError) as e:
        raise ReadError() from e


async def ingest(file) -> ImagePayload:
    """Turn an uploaded file into an ImagePayload.

    Type and size are checked up front, before any byte is read.  Reading,
    verifying and base64-encoding then run in a worker thread so the event
    loop stays free.

    Raises:
        InvalidType: not a JPEG/PNG/WEBP image.
        TooLarge:    more than 20 MiB.
        ReadError:   the file could not be read or is not a decodable image.
    """
    declared = getattr(file, "mimetype", None) or getattr(file, "content_type", None)
    media_type = resolve_media_type(declared, getattr(file, "filename", None))

    size = _declared_size(file)
    if size is not None and size > MAX_IMAGE_BYTES:
        raise TooLarge()

    data = await asyncio.to_thread(_read_all, file)
    return await asyncio.to_thread(payload_from_bytes, data, media_type)
