"""
Image loading and resizing shared by the histogram and structural comparators.

Both comparators need the same two steps: decode a file from disk into an
RGB array, then cover-fit it into a small square so that images of any
size and aspect ratio become comparable.
"""

import os
import logging

import cv2
import numpy as np

from .errors import UnreadableImageError

logger = logging.getLogger(__name__)

# Files above this size are refused before decoding
IMAGE_MAX_BYTES = int(os.environ.get("IMAGE_MAX_BYTES", str(20 * 1024 * 1024)))


def normalize_image(image_np: np.ndarray) -> np.ndarray:
    """Ensure image is uint8."""
    if image_np.dtype != np.uint8:
        if image_np.max() <= 1.0:
            image_np = (image_np * 255).astype(np.uint8)
        else:
            image_np = np.clip(image_np, 0, 255).astype(np.uint8)
    return image_np


def load_rgb_image(path: str, max_bytes: int = None) -> np.ndarray:
    """
    Decode an image file into an RGB uint8 array.

    Raises:
        UnreadableImageError: If the file is missing, too large, or
            OpenCV cannot decode it.
    """
    max_bytes = max_bytes or IMAGE_MAX_BYTES

    if not path or not os.path.isfile(path):
        raise UnreadableImageError(path, "file not found")

    size = os.path.getsize(path)
    if size > max_bytes:
        raise UnreadableImageError(path, f"{size} bytes exceeds limit of {max_bytes}")

    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        raise UnreadableImageError(path)

    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def cover_fit(image_np: np.ndarray, size: int, allow_upscale: bool = True) -> np.ndarray:
    """
    Scale an image so it covers a size x size square, then center-crop.

    With allow_upscale=False an image smaller than the square keeps its
    scale and is only cropped, so the result can be smaller than
    size x size.
    """
    image_np = normalize_image(image_np)
    h, w = image_np.shape[:2]
    if h == 0 or w == 0:
        raise ValueError("Cannot resize an empty image")

    scale = max(size / w, size / h)
    if not allow_upscale:
        scale = min(scale, 1.0)

    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    if (new_w, new_h) != (w, h):
        interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
        image_np = cv2.resize(image_np, (new_w, new_h), interpolation=interpolation)

    crop_w, crop_h = min(size, new_w), min(size, new_h)
    x1 = (new_w - crop_w) // 2
    y1 = (new_h - crop_h) // 2
    return image_np[y1:y1 + crop_h, x1:x1 + crop_w]
