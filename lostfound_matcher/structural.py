"""
Edge-map correlation between two item photos.

Fills the gap where the color histogram sees which colors are present but
not where they are. Both images are reduced to small greyscale edge maps
with a 3x3 high-pass kernel and compared with Pearson correlation.
"""

import os
import logging

import cv2
import numpy as np

from .errors import UnreadableImageError
from .preprocessing import load_rgb_image, cover_fit

logger = logging.getLogger(__name__)

EDGE_SIZE = int(os.environ.get("EDGE_SIZE", "32"))

EDGE_KERNEL = np.array([
    [-1, -1, -1],
    [-1,  8, -1],
    [-1, -1, -1],
], dtype=np.float32)


def compute_edge_map(image_np: np.ndarray, size: int = EDGE_SIZE) -> np.ndarray:
    """
    Reduce an RGB image to a size x size edge map with values in [0, 1].

    Process:
        1. Cover-fit to exactly size x size
        2. Greyscale
        3. Stretch intensity to the full 0-255 range
        4. Convolve with the high-pass kernel, clipping to 0-255
    """
    resized = cover_fit(image_np, size, allow_upscale=True)

    if len(resized.shape) == 3:
        gray = cv2.cvtColor(resized, cv2.COLOR_RGB2GRAY)
    else:
        gray = resized

    gray = cv2.normalize(gray.astype(np.float32), None, 0, 255, cv2.NORM_MINMAX)

    edges = cv2.filter2D(gray, cv2.CV_32F, EDGE_KERNEL, borderType=cv2.BORDER_REPLICATE)
    edges = np.clip(edges, 0, 255)

    return edges / 255.0


def edge_correlation(edges1: np.ndarray, edges2: np.ndarray) -> float:
    """
    Pearson correlation of two edge maps mapped from [-1, 1] to [0, 1].

    Returns 0.0 when either map is constant.
    """
    v1 = edges1.astype(np.float64).ravel()
    v2 = edges2.astype(np.float64).ravel()
    if v1.shape != v2.shape:
        raise ValueError(f"Edge maps differ in shape: {edges1.shape} vs {edges2.shape}")

    std1 = v1.std()
    std2 = v2.std()
    if std1 == 0 or std2 == 0:
        return 0.0

    covariance = np.mean(v1 * v2) - v1.mean() * v2.mean()
    correlation = covariance / (std1 * std2)
    return float(np.clip((correlation + 1) / 2, 0.0, 1.0))


def structure_similarity(image1: np.ndarray, image2: np.ndarray, size: int = EDGE_SIZE) -> float:
    """Edge-map correlation of two decoded RGB images."""
    return edge_correlation(compute_edge_map(image1, size), compute_edge_map(image2, size))


def compare_structure(image_path1: str, image_path2: str, size: int = EDGE_SIZE) -> float:
    """
    Structural similarity of two image files in [0, 1].

    Returns 0.0 if either image cannot be read.
    """
    try:
        return structure_similarity(load_rgb_image(image_path1),
                                    load_rgb_image(image_path2), size)
    except UnreadableImageError as e:
        logger.warning(f"Structural comparison skipped: {e}")
        return 0.0
    except Exception as e:
        logger.error(f"Structural comparison failed: {e}")
        return 0.0
