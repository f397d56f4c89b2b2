"""Shared test fixtures for matching engine tests."""

import os
from datetime import datetime, timezone

import numpy as np
import cv2
import pytest

from lostfound_matcher.models import Item, Location


@pytest.fixture
def red_square_image():
    """Generate a 200x200 red square on white background (RGB)."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    img[40:160, 40:160] = [200, 30, 30]  # Red square
    return img


@pytest.fixture
def blue_circle_image():
    """Generate a 200x200 blue circle on white background (RGB)."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    cv2.circle(img, (100, 100), 60, (30, 30, 200), -1)
    return img


@pytest.fixture
def textured_image():
    """Generate a 200x200 checkerboard, rich in edges."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 200
    for y in range(0, 200, 20):
        for x in range(0, 200, 20):
            if (x // 20 + y // 20) % 2 == 0:
                img[y:y+20, x:x+20] = [50, 50, 50]
    return img


@pytest.fixture
def noise_image():
    """Generate a 200x200 random noise image."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 255, (200, 200, 3), dtype=np.uint8)


@pytest.fixture
def upload_root(tmp_path):
    """Temporary upload root with an empty uploads folder."""
    (tmp_path / "uploads").mkdir()
    return tmp_path


@pytest.fixture
def write_image(upload_root):
    """Write an RGB array as a PNG into the uploads folder and return its filesystem path."""
    def _write(name, rgb):
        path = os.path.join(str(upload_root), "uploads", name)
        cv2.imwrite(path, cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
        return path
    return _write


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_item(now):
    """Factory for Items with sensible defaults."""
    counter = {"n": 0}

    def _make(type="lost", description="", category="Accessories", location=None,
              image_ref=None, user_email=None, created_at=None, status="active", id=None):
        counter["n"] += 1
        return Item(
            id=id or f"{type}-{counter['n']}",
            type=type,
            description=description,
            category=category,
            location=Location(*location) if location else None,
            image_ref=image_ref,
            user_email=user_email or f"{type}{counter['n']}@example.com",
            created_at=created_at or now,
            status=status,
        )
    return _make
