"""
Media library integration: compute the color value when image media is saved.

Collaborators are passed in explicitly:

    file_system   -- object with open_file(path) returning a binary stream
    media_service -- object with save(media, raise_events=False)

on_media_saving() never raises for a single bad item; every image produces a
ColorExtractionResult and failures are logged.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger
from PIL import Image

from most_used_colors import DEFAULT_FUZZINESS, DEFAULT_MAX_WIDTH, DEFAULT_MAX_HEIGHT
from primary_colors import calculate_color_value


# =============================================================================
# Constants
# =============================================================================

COLOR_PROPERTY = "color"
IMAGE_CONTENT_TYPE = "Image"

SUPPORTED_EXTENSIONS = {"jpg", "jpeg", "png"}
SUPPORTED_FORMATS = {"JPEG", "PNG"}

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side

UPDATED = "updated"
SKIPPED = "skipped"
FAILED = "failed"


class UnsupportedMediaError(ValueError):
    """The media is not an image format colors are extracted from."""


@dataclass
class MediaItem:
    """A media library entry."""
    id: int
    content_type: str
    extension: str
    file: str  # Relative path, or JSON like {"src": "/media/1001/a.jpg", ...}
    properties: dict = field(default_factory=dict)

    def get_value(self, alias: str) -> Optional[str]:
        return self.properties.get(alias)

    def set_value(self, alias: str, value: str) -> None:
        self.properties[alias] = value


@dataclass
class ColorExtractionResult:
    """Outcome of computing colors for one media item."""
    media_id: int
    status: str  # 'updated', 'skipped', 'failed'
    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != FAILED


# =============================================================================
# Storage
# =============================================================================

class LocalMediaFileSystem:
    """Media file system rooted at a local directory."""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def full_path(self, path: str) -> Path:
        full = (self.root / path.lstrip("/")).resolve()
        if full != self.root and self.root not in full.parents:
            raise ValueError(f"Path escapes media root: {path}")
        return full

    def open_file(self, path: str):
        return self.full_path(path).open("rb")


def resolve_media_path(file_value: Optional[str]) -> str:
    """Return the file path stored on a media item.

    Cropper-style values are JSON objects holding the path under "src".
    """
    file_value = file_value or ""
    if file_value.startswith("{"):
        src = json.loads(file_value).get("src")
        return "" if src is None else str(src)
    return file_value


def load_image(source) -> Image.Image:
    """
    Decode a JPEG or PNG image into RGB.

    Args:
        source: File path or binary stream

    Raises:
        FileNotFoundError: If image file doesn't exist
        UnsupportedMediaError: If the image is not JPEG or PNG
        ValueError: If the data is not a valid image or exceeds size limits
    """
    try:
        img = Image.open(source)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {source}")
    except Exception as e:
        raise ValueError(f"Could not open image: {e}") from e

    if img.format not in SUPPORTED_FORMATS:
        raise UnsupportedMediaError(f"Unsupported image format: {img.format}")

    width, height = img.size
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise ValueError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    if width * height > MAX_IMAGE_PIXELS:
        raise ValueError(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )

    return img.convert('RGB')


# =============================================================================
# Save hook
# =============================================================================

def calculate_primary_colors(media: MediaItem, file_system, media_service,
                             fuzziness: int = DEFAULT_FUZZINESS,
                             max_width: int = DEFAULT_MAX_WIDTH,
                             max_height: int = DEFAULT_MAX_HEIGHT) -> ColorExtractionResult:
    """
    Compute and store the color value of a single media item.

    Non JPEG/PNG media is skipped. Errors reading or decoding the file
    propagate to the caller.
    """
    logger.info(f"Calculating primary colors for media {media.id}")

    extension = (media.extension or "").lower()
    if extension not in SUPPORTED_EXTENSIONS:
        logger.debug(f"Skipping media {media.id}: extension {extension!r}")
        return ColorExtractionResult(media.id, SKIPPED)

    path = resolve_media_path(media.file)

    try:
        with file_system.open_file(path) as stream:
            image = load_image(stream)
    except UnsupportedMediaError as e:
        logger.debug(f"Skipping media {media.id}: {e}")
        return ColorExtractionResult(media.id, SKIPPED)

    existing_value = media.get_value(COLOR_PROPERTY) or ""
    value = calculate_color_value(image, existing_value, fuzziness, max_width, max_height)

    media.set_value(COLOR_PROPERTY, value)

    # Already inside a save; don't raise events again
    media_service.save(media, raise_events=False)

    return ColorExtractionResult(media.id, UPDATED, value=value)


def on_media_saving(saved_items, file_system, media_service, **options) -> list[ColorExtractionResult]:
    """
    Handle a media save batch.

    Runs calculate_primary_colors for every image item. A failing item is
    logged and reported as FAILED; the rest of the batch still runs.

    Returns:
        One result per image item, in input order
    """
    results = []

    for media in saved_items:
        if media.content_type != IMAGE_CONTENT_TYPE:
            continue

        try:
            result = calculate_primary_colors(media, file_system, media_service, **options)
        except Exception as e:
            logger.exception(f"Failed to calculate primary colors for media {media.id}")
            result = ColorExtractionResult(media.id, FAILED, error=f"{type(e).__name__}: {e}")

        results.append(result)

    return results


def summarize_results(results: list[ColorExtractionResult]) -> dict:
    """Count results by status."""
    summary = {UPDATED: 0, SKIPPED: 0, FAILED: 0}
    for result in results:
        summary[result.status] = summary.get(result.status, 0) + 1
    return summary
