"""
RGB color histogram extraction and comparison.

Extracts a color fingerprint from an item photo: the image is cover-fit
into a small square (never upscaled) and three independent per-channel
histograms are built and normalized to probability distributions.

Size and bin count are configurable via environment variables
(HIST_SIZE, HIST_BINS). The histogram captures overall color
distribution only; the structural comparator supplies the layout signal.
"""

import os
import logging
from typing import Optional

import numpy as np

from .errors import UnreadableImageError
from .preprocessing import load_rgb_image, cover_fit

logger = logging.getLogger(__name__)

HIST_SIZE = int(os.environ.get("HIST_SIZE", "64"))
HIST_BINS = int(os.environ.get("HIST_BINS", "32"))


def compute_rgb_histogram(image_np: np.ndarray, bins: int = HIST_BINS) -> np.ndarray:
    """
    Per-channel histogram of an RGB image.

    Bin index for a channel value v is floor(v / 256 * bins). Each
    channel is divided by the pixel count, so every row sums to 1.

    Returns:
        Float64 array of shape (3, bins), rows ordered R, G, B.
    """
    pixels = image_np.reshape(-1, image_np.shape[-1])[:, :3].astype(np.int64)
    pixel_count = pixels.shape[0]
    if pixel_count == 0:
        return np.zeros((3, bins), dtype=np.float64)

    bin_index = (pixels * bins) // 256
    histogram = np.stack([
        np.bincount(bin_index[:, channel], minlength=bins)[:bins]
        for channel in range(3)
    ]).astype(np.float64)

    return histogram / pixel_count


def image_histogram(image_np: np.ndarray,
                    size: int = HIST_SIZE,
                    bins: int = HIST_BINS) -> np.ndarray:
    """Cover-fit a decoded RGB image into a size x size square (never upscaled) and histogram it."""
    resized = cover_fit(image_np, size, allow_upscale=False)
    return compute_rgb_histogram(resized, bins)


def extract_rgb_histogram(image_path: str,
                          size: int = HIST_SIZE,
                          bins: int = HIST_BINS) -> Optional[np.ndarray]:
    """
    Load an image and extract its normalized RGB histogram.

    Process:
        1. Decode from disk
        2. Cover-fit into a size x size square without upscaling
        3. Build R, G, B histograms with the configured bin count

    Returns:
        (3, bins) array, or None if the image cannot be read. Callers
        treat None as zero similarity.
    """
    try:
        image = load_rgb_image(image_path)
        return image_histogram(image, size, bins)
    except UnreadableImageError as e:
        logger.warning(f"Histogram extraction skipped: {e}")
        return None
    except Exception as e:
        logger.error(f"Histogram extraction failed for {image_path}: {e}")
        return None


def histogram_cosine(hist1: np.ndarray, hist2: np.ndarray) -> float:
    """Cosine similarity of two histogram vectors; 0.0 if either has zero magnitude."""
    v1 = np.asarray(hist1, dtype=np.float64).ravel()
    v2 = np.asarray(hist2, dtype=np.float64).ravel()

    magnitude1 = np.linalg.norm(v1)
    magnitude2 = np.linalg.norm(v2)
    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0

    return float(np.dot(v1, v2) / (magnitude1 * magnitude2))


def compare_histograms(hist1: np.ndarray, hist2: np.ndarray) -> float:
    """Mean of the per-channel cosine similarities of two (3, bins) histograms."""
    channel_scores = [histogram_cosine(hist1[c], hist2[c]) for c in range(3)]
    return float(np.mean(channel_scores))
