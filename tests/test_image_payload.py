import io

import pytest
from PIL import Image
from pydantic import ValidationError as ModelValidationError

from errors import InvalidType, ReadError, TooLarge, ValidationError
from image_payload import (
    MAX_IMAGE_BYTES,
    ImagePayload,
    ingest,
    load_image_file,
    payload_from_bytes,
    resolve_media_type,
)


async def test_ingest_rejects_non_image_type(make_upload):
    upload = make_upload(b"just some text", filename="notes.txt", content_type="text/plain")

    with pytest.raises(InvalidType):
        await ingest(upload)


async def test_ingest_rejects_unsupported_image_type(png_bytes, make_upload):
    upload = make_upload(png_bytes, filename="car.gif", content_type="image/gif")

    with pytest.raises(ValidationError):
        await ingest(upload)


async def test_ingest_rejects_file_one_byte_over_limit(make_upload):
    upload = make_upload(b"\0" * (MAX_IMAGE_BYTES + 1))

    with pytest.raises(TooLarge, match="20MB"):
        await ingest(upload)


async def test_ingest_size_check_happens_before_reading(make_upload):
    upload = make_upload(b"\0" * (MAX_IMAGE_BYTES + 1))

    with pytest.raises(TooLarge):
        await ingest(upload)

    assert upload.stream.tell() == 0


async def test_ingest_png_round_trips_bytes(png_bytes, make_upload):
    payload = await ingest(make_upload(png_bytes))

    assert payload.media_type == "image/png"
    assert payload.size == len(png_bytes)
    assert payload.data_uri.startswith("data:image/png;base64,")
    assert payload.decode() == png_bytes


async def test_ingest_normalises_jpg_alias(jpeg_bytes, make_upload):
    payload = await ingest(make_upload(jpeg_bytes, filename="car.jpg", content_type="image/jpg"))

    assert payload.media_type == "image/jpeg"
    assert len(payload.decode()) == len(jpeg_bytes)


async def test_ingest_uses_extension_when_type_undeclared(jpeg_bytes, make_upload):
    upload = make_upload(jpeg_bytes, filename="CAR.JPG", content_type="application/octet-stream")

    payload = await ingest(upload)

    assert payload.media_type == "image/jpeg"


async def test_ingest_corrupt_image_raises_read_error(make_upload):
    upload = make_upload(b"\x89PNG\r\n\x1a\n definitely not a png")

    with pytest.raises(ReadError):
        await ingest(upload)


def test_resolve_media_type_strips_parameters():
    assert resolve_media_type("image/webp; charset=binary") == "image/webp"


def test_resolve_media_type_unknown_extension_fails():
    with pytest.raises(InvalidType):
        resolve_media_type("", "car.bmp")


def test_payload_from_bytes_rejects_oversized():
    with pytest.raises(TooLarge):
        payload_from_bytes(b"\0" * (MAX_IMAGE_BYTES + 1), "image/png")


def test_image_payload_model_enforces_media_type():
    with pytest.raises(ModelValidationError):
        ImagePayload(media_type="image/gif", size=1, data_uri="data:image/gif;base64,AA==")


def test_image_payload_is_frozen(png_bytes):
    payload = payload_from_bytes(png_bytes, "image/png")

    with pytest.raises(ModelValidationError):
        payload.size = 0


def test_load_image_file_reads_bundled_default():
    from default_content import DEFAULT_IMAGE_PATH

    payload = load_image_file(DEFAULT_IMAGE_PATH)

    assert payload.media_type == "image/jpeg"
    with Image.open(io.BytesIO(payload.decode())) as img:
        assert img.format == "JPEG"
        assert img.size == (960, 540)


def test_load_image_file_missing_raises_read_error(tmp_path):
    with pytest.raises(ReadError):
        load_image_file(str(tmp_path / "missing.png"))
