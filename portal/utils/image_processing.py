from __future__ import annotations

import base64
import io

from PIL import Image, ImageOps, UnidentifiedImageError

from portal.core.exceptions import InvalidInputError


def fit_within(size: tuple[int, int], max_px: int) -> tuple[int, int]:
    """Scale (width, height) so neither side exceeds ``max_px``, keeping the ratio."""
    width, height = size
    if width > height:
        if width > max_px:
            height = round(height * max_px / width)
            width = max_px
    elif height > max_px:
        width = round(width * max_px / height)
        height = max_px
    return max(width, 1), max(height, 1)


def prepare_avatar(
    data: bytes,
    max_bytes: int = 5 * 1024 * 1024,
    max_px: int = 800,
    quality: int = 92,
) -> str:
    """Validate and shrink an avatar image, returning a JPEG data URL.

    Pipeline: size check -> decode -> EXIF orientation -> resize -> RGB -> JPEG.
    """
    if len(data) > max_bytes:
        raise InvalidInputError(
            message="Fichier trop volumineux",
            detail=f"size={len(data)} max={max_bytes}",
        )

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidInputError(message="Format d'image invalide", detail=str(exc)) from exc

    image = ImageOps.exif_transpose(image)
    target = fit_within(image.size, max_px)
    if target != image.size:
        image = image.resize(target, Image.LANCZOS)

    # JPEG has no alpha channel
    if image.mode != "RGB":
        image = image.convert("RGB")

    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=quality)
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


def encode_pdf(data: bytes, max_bytes: int = 5 * 1024 * 1024) -> str:
    """Base64 data URL for a PDF attachment, after size and magic-byte checks."""
    if not data.startswith(b"%PDF"):
        raise InvalidInputError(message="Le CV doit être au format PDF")
    if len(data) > max_bytes:
        raise InvalidInputError(
            message=f"Le CV ne doit pas dépasser {max_bytes // (1024 * 1024)} MB",
            detail=f"size={len(data)} max={max_bytes}",
        )
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:application/pdf;base64,{encoded}"
