"""
Image similarity between two item photos.

Combines the two image signals:
    1. Per-channel RGB histogram cosine similarity (70%)
    2. Edge-map structural correlation (30%)

A missing or unreadable photo on either side yields 0.0, never an error,
so a bad upload only removes the image signal from one pair.
"""

import os
import logging
from typing import Iterable, Optional

from .errors import UnreadableImageError
from .histograms import compare_histograms, image_histogram
from .image_paths import DEFAULT_HOST_PREFIXES, resolve_image_path
from .preprocessing import load_rgb_image
from .structural import structure_similarity

logger = logging.getLogger(__name__)

HISTOGRAM_WEIGHT = 0.7
STRUCTURE_WEIGHT = 0.3

DEFAULT_UPLOAD_ROOT = os.environ.get("IMAGE_UPLOAD_ROOT", os.getcwd())


class ImageSimilarityEngine:
    """
    Compares item photos stored under a local upload root.
    """

    def __init__(self,
                 upload_root: str = None,
                 host_prefixes: Iterable[str] = None):
        """
        Args:
            upload_root: Directory containing the uploads folder.
                Defaults to IMAGE_UPLOAD_ROOT or the working directory.
            host_prefixes: URL prefixes that map onto upload_root.
        """
        self.upload_root = upload_root or DEFAULT_UPLOAD_ROOT
        self.host_prefixes = tuple(host_prefixes) if host_prefixes is not None \
            else DEFAULT_HOST_PREFIXES

    def resolve(self, ref: Optional[str]) -> Optional[str]:
        return resolve_image_path(ref, self.upload_root, self.host_prefixes)

    def compare_images(self, image_path1: str, image_path2: str) -> float:
        """
        Similarity of two local image files in [0, 1].

        Each file is decoded once and shared by both comparators.
        Returns 0.0 if either path is missing or unreadable.
        """
        if not image_path1 or not image_path2:
            return 0.0

        try:
            image1 = load_rgb_image(image_path1)
            image2 = load_rgb_image(image_path2)

            color_score = compare_histograms(image_histogram(image1), image_histogram(image2))
            structure_score = structure_similarity(image1, image2)

            score = HISTOGRAM_WEIGHT * color_score + STRUCTURE_WEIGHT * structure_score
            logger.debug(
                f"Image comparison: histogram={color_score:.3f}, "
                f"structure={structure_score:.3f}, combined={score:.3f}"
            )
            return max(0.0, min(1.0, score))

        except UnreadableImageError as e:
            logger.warning(f"Image comparison skipped: {e}")
            return 0.0
        except Exception as e:
            logger.error(f"Image comparison failed for {image_path1} / {image_path2}: {e}")
            return 0.0

    def compare_item_images(self, ref1: Optional[str], ref2: Optional[str]) -> float:
        """Resolve two stored image references and compare them."""
        if not ref1 or not ref2:
            return 0.0

        path1 = self.resolve(ref1)
        path2 = self.resolve(ref2)
        if path1 is None or path2 is None:
            logger.warning(f"Could not resolve image reference: {ref1 if path1 is None else ref2}")
            return 0.0

        return self.compare_images(path1, path2)
