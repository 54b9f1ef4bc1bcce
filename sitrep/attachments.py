"""
Image attachment pipeline.

Uploaded photos are shrunk so neither side exceeds the policy cap,
re-encoded as JPEG at a fixed quality and stored as data URLs. Each report
kind has its own policy: daily reports keep up to four evidence photos,
magazine articles a single profile photo.
"""

import asyncio
import base64
import binascii
import io
import logging
from typing import List, Sequence

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict

from .config import (
    ARTICLE_JPEG_QUALITY,
    ARTICLE_MAX_ATTACHMENTS,
    ARTICLE_MAX_DIMENSION,
    DAILY_JPEG_QUALITY,
    DAILY_MAX_ATTACHMENTS,
    DAILY_MAX_DIMENSION,
)
from .exceptions import AttachmentDecodeError, AttachmentLimitError, ImageProcessingError
from .models import MediaAttachment

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"

# Raster formats an office document can embed
EMBEDDABLE_FORMATS = {"JPEG", "PNG", "GIF", "BMP", "TIFF"}


class AttachmentPolicy(BaseModel):
    """Count, size and quality limits for one kind of upload."""
    model_config = ConfigDict(frozen=True)

    max_count: int
    max_dimension: int
    quality: float  # 0..1, as a canvas would take it


DAILY_REPORT_POLICY = AttachmentPolicy(
    max_count=DAILY_MAX_ATTACHMENTS,
    max_dimension=DAILY_MAX_DIMENSION,
    quality=DAILY_JPEG_QUALITY,
)

ARTICLE_POLICY = AttachmentPolicy(
    max_count=ARTICLE_MAX_ATTACHMENTS,
    max_dimension=ARTICLE_MAX_DIMENSION,
    quality=ARTICLE_JPEG_QUALITY,
)


# =============================================================================
# SINGLE IMAGE
# =============================================================================

def _fit_within(width: int, height: int, cap: int) -> tuple[int, int]:
    """Scale the longer side down to `cap`, keeping the aspect ratio."""
    if width > height:
        if width > cap:
            height = round(height * cap / width)
            width = cap
    elif height > cap:
        width = round(width * cap / height)
        height = cap
    return max(width, 1), max(height, 1)


def compress_image(raw: bytes, policy: AttachmentPolicy = DAILY_REPORT_POLICY) -> MediaAttachment:
    """
    Resize and re-encode one uploaded image.

    Args:
        raw: The uploaded file content
        policy: Size and quality limits to apply

    Returns:
        The encoded attachment

    Raises:
        ImageProcessingError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            width, height = _fit_within(img.width, img.height, policy.max_dimension)

            if img.mode in ("RGBA", "LA", "P"):
                img = img.convert("RGBA")
                background = Image.new("RGB", img.size, (255, 255, 255))
                background.paste(img, mask=img.split()[-1])
                img = background
            elif img.mode != "RGB":
                img = img.convert("RGB")

            if (width, height) != img.size:
                img = img.resize((width, height), Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=round(policy.quality * 100))
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageProcessingError(f"Could not process this image: {e}") from e

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return MediaAttachment(data_url=DATA_URL_PREFIX + encoded, width=width, height=height)


def decode_attachment(attachment: MediaAttachment) -> bytes:
    """
    Decode a stored attachment back to image bytes.

    Raises:
        AttachmentDecodeError: If the data URL is malformed or not an image
    """
    data_url = attachment.data_url
    if not data_url.startswith("data:") or "," not in data_url:
        raise AttachmentDecodeError("Attachment is not a data URL")

    payload = "".join(data_url.split(",", 1)[1].split())
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentDecodeError(f"Attachment is not valid base64: {e}") from e

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise AttachmentDecodeError(f"Attachment is not a readable image: {e}") from e

    if image_format not in EMBEDDABLE_FORMATS:
        raise AttachmentDecodeError(f"Unsupported image format: {image_format}")

    return image_bytes


# =============================================================================
# BATCH UPLOADS
# =============================================================================

def check_capacity(current: int, incoming: int, policy: AttachmentPolicy) -> None:
    """
    Raise if adding `incoming` images would exceed the policy cap.

    Raises:
        AttachmentLimitError: If the batch does not fit
    """
    if current + incoming > policy.max_count:
        raise AttachmentLimitError(
            f"Maximum {policy.max_count} images allowed "
            f"({current} attached, {incoming} selected)",
            limit=policy.max_count,
            current=current,
            requested=incoming,
        )


async def compress_images(
    raws: Sequence[bytes],
    policy: AttachmentPolicy = DAILY_REPORT_POLICY,
) -> List[MediaAttachment]:
    """
    Compress several uploads concurrently.

    Results come back in selection order regardless of which compression
    finishes first.

    Raises:
        ImageProcessingError: If any upload is unreadable; `index` names it
    """

    async def _one(index: int, raw: bytes) -> MediaAttachment:
        try:
            return await asyncio.to_thread(compress_image, raw, policy)
        except ImageProcessingError as e:
            e.index = index
            raise

    return list(await asyncio.gather(*(_one(i, raw) for i, raw in enumerate(raws))))


async def add_attachments(
    existing: Sequence[MediaAttachment],
    raws: Sequence[bytes],
    policy: AttachmentPolicy = DAILY_REPORT_POLICY,
) -> List[MediaAttachment]:
    """
    Append a batch of uploads to a report's attachments.

    The whole batch is rejected when it would exceed the cap or when any
    image cannot be processed; `existing` is never modified.

    Args:
        existing: Attachments already on the report
        raws: Newly selected files, in selection order
        policy: Limits for this report kind

    Returns:
        New attachment list: existing ones followed by the batch
    """
    check_capacity(len(existing), len(raws), policy)

    compressed = await compress_images(raws, policy)
    logger.info(f"Compressed {len(compressed)} image(s); {len(existing) + len(compressed)} attached")
    return [*existing, *compressed]


def remove_attachment(existing: Sequence[MediaAttachment], index: int) -> List[MediaAttachment]:
    """Return the attachments without the one at `index`."""
    if index < 0 or index >= len(existing):
        raise IndexError(f"No attachment at index {index}")
    return [a for i, a in enumerate(existing) if i != index]
