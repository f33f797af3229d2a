"""Avatar upload: crop, square resize, JPEG encode and local storage."""
from __future__ import annotations

import io
import os
import time
import warnings
from typing import Any, Dict, Mapping, Optional

from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from eureka import config as app_config
from eureka.services import profiles_service
from eureka.utils.logging import get_logger

LOG = get_logger("avatar_service")

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_SIZE = 400
MAX_SIZE = 1024
JPEG_QUALITY = 95
AVATAR_SUBDIR = "avatars"


class AvatarValidationError(ValueError):
    """Raised when the uploaded image or crop box is unusable."""


def _crop_box(crop: Mapping[str, Any]) -> tuple:
    try:
        x = int(round(float(crop["x"])))
        y = int(round(float(crop["y"])))
        width = int(round(float(crop["width"])))
        height = int(round(float(crop["height"])))
    except (KeyError, TypeError, ValueError):
        raise AvatarValidationError("invalid_crop")
    if width <= 0 or height <= 0 or x < 0 or y < 0 or width != height:
        raise AvatarValidationError("invalid_crop")
    return x, y, x + width, y + height


def avatar_dir() -> str:
    return os.path.join(app_config.upload_dir(), AVATAR_SUBDIR)


def avatar_public_url(filename: str) -> str:
    return f"{app_config.public_base_url()}/media/{AVATAR_SUBDIR}/{filename}"


def render_avatar(file_bytes: bytes, crop: Mapping[str, Any], size: int = DEFAULT_SIZE) -> bytes:
    """Return JPEG bytes of the cropped region scaled to ``size`` x ``size``."""
    if not file_bytes:
        raise AvatarValidationError("file_required")
    if len(file_bytes) > MAX_UPLOAD_BYTES:
        raise AvatarValidationError("file_too_large")
    if not 0 < size <= MAX_SIZE:
        raise AvatarValidationError("invalid_size")
    box = _crop_box(crop)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", Image.DecompressionBombWarning)
            img = Image.open(io.BytesIO(file_bytes))
            img.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        Image.DecompressionBombWarning,
        OSError,
    ):
        raise AvatarValidationError("invalid_image")
    if box[2] > img.width or box[3] > img.height:
        raise AvatarValidationError("crop_out_of_bounds")
    img = img.convert("RGB").crop(box).resize((size, size), Image.LANCZOS)
    out = io.BytesIO()
    img.save(out, format="JPEG", quality=JPEG_QUALITY)
    return out.getvalue()


def upload_avatar(
    user_id: str,
    file_bytes: bytes,
    crop: Mapping[str, Any],
    size: int = DEFAULT_SIZE,
    *,
    now_ms: Optional[int] = None,
) -> Dict[str, Any]:
    data = render_avatar(file_bytes, crop, size)
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    filename = secure_filename(f"{user_id}-{stamp}.jpg")
    target_dir = avatar_dir()
    os.makedirs(target_dir, exist_ok=True)
    path = os.path.join(target_dir, filename)
    with open(path, "wb") as fh:
        fh.write(data)
    url = avatar_public_url(filename)
    profile = profiles_service.set_avatar_url(user_id, url)
    LOG.info("Stored avatar user_id=%s file=%s bytes=%s", user_id, filename, len(data))
    return {"avatar_url": url, "filename": filename, "profile": profile}


__all__ = [
    "MAX_UPLOAD_BYTES",
    "AvatarValidationError",
    "avatar_dir",
    "avatar_public_url",
    "render_avatar",
    "upload_avatar",
]
