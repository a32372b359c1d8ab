from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from portal.core.exceptions import InvalidInputError
from portal.utils.image_processing import encode_pdf, fit_within, prepare_avatar


def _png(size: tuple[int, int], mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size).save(buf, format="PNG")
    return buf.getvalue()


def _decode(data_url: str) -> Image.Image:
    header, payload = data_url.split(",", 1)
    assert header == "data:image/jpeg;base64"
    return Image.open(io.BytesIO(base64.b64decode(payload)))


class TestFitWithin:
    def test_small_image_unchanged(self):
        assert fit_within((300, 200), 800) == (300, 200)

    def test_landscape(self):
        assert fit_within((1600, 900), 800) == (800, 450)

    def test_portrait(self):
        assert fit_within((900, 1800), 800) == (400, 800)

    def test_square(self):
        assert fit_within((1000, 1000), 800) == (800, 800)


class TestPrepareAvatar:
    def test_downsizes_to_jpeg(self):
        image = _decode(prepare_avatar(_png((1600, 1200))))
        assert image.format == "JPEG"
        assert image.size == (800, 600)

    def test_alpha_is_flattened(self):
        image = _decode(prepare_avatar(_png((100, 100), mode="RGBA")))
        assert image.mode == "RGB"

    def test_rejects_oversized_file(self):
        with pytest.raises(InvalidInputError):
            prepare_avatar(b"x" * 11, max_bytes=10)

    def test_rejects_non_image(self):
        with pytest.raises(InvalidInputError):
            prepare_avatar(b"definitely not an image")


class TestEncodePdf:
    def test_encodes(self):
        data_url = encode_pdf(b"%PDF-1.4 body")
        assert data_url.startswith("data:application/pdf;base64,")
        assert base64.b64decode(data_url.split(",", 1)[1]) == b"%PDF-1.4 body"

    def test_rejects_non_pdf(self):
        with pytest.raises(InvalidInputError):
            encode_pdf(b"PK\x03\x04 zip")

    def test_rejects_oversized(self):
        with pytest.raises(InvalidInputError):
            encode_pdf(b"%PDF" + b"0" * 20, max_bytes=10)
