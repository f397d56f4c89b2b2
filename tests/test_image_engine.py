"""Tests for the combined image similarity engine."""

import shutil

import pytest

from lostfound_matcher import image_engine as image_engine_module
from lostfound_matcher.histograms import compare_histograms, image_histogram
from lostfound_matcher.image_engine import ImageSimilarityEngine
from lostfound_matcher.preprocessing import load_rgb_image


@pytest.fixture
def image_engine(upload_root):
    return ImageSimilarityEngine(upload_root=str(upload_root),
                                 host_prefixes=["http://localhost:3001"])


class TestCompareItemImages:

    def test_identical_bytes_score_one(self, image_engine, write_image, textured_image):
        first = write_image("a.png", textured_image)
        shutil.copyfile(first, first.replace("a.png", "b.png"))

        hist_a = image_histogram(load_rgb_image(image_engine.resolve("a.png")))
        hist_b = image_histogram(load_rgb_image(image_engine.resolve("b.png")))
        assert compare_histograms(hist_a, hist_b) == pytest.approx(1.0)
        assert image_engine.compare_item_images("a.png", "/uploads/b.png") == \
            pytest.approx(1.0, abs=1e-6)

    def test_url_reference(self, image_engine, write_image, textured_image):
        write_image("a.png", textured_image)
        score = image_engine.compare_item_images(
            "http://localhost:3001/uploads/a.png", "a.png"
        )
        assert score == pytest.approx(1.0, abs=1e-6)

    def test_different_images_lower(self, image_engine, write_image,
                                    textured_image, blue_circle_image):
        write_image("a.png", textured_image)
        write_image("b.png", blue_circle_image)
        score = image_engine.compare_item_images("a.png", "b.png")
        assert 0.0 <= score < 0.95

    @pytest.mark.parametrize("ref1, ref2", [
        (None, "a.png"),
        ("a.png", None),
        ("", ""),
    ])
    def test_missing_reference_is_zero(self, image_engine, write_image,
                                       textured_image, ref1, ref2):
        write_image("a.png", textured_image)
        assert image_engine.compare_item_images(ref1, ref2) == 0.0

    def test_missing_file_is_zero(self, image_engine, write_image, textured_image):
        write_image("a.png", textured_image)
        assert image_engine.compare_item_images("a.png", "ghost.png") == 0.0

    def test_corrupt_file_is_zero(self, image_engine, upload_root, write_image, textured_image):
        write_image("a.png", textured_image)
        (upload_root / "uploads" / "broken.jpg").write_bytes(b"not an image")
        assert image_engine.compare_item_images("a.png", "broken.jpg") == 0.0

    def test_foreign_url_is_zero(self, image_engine, write_image, textured_image):
        write_image("a.png", textured_image)
        assert image_engine.compare_item_images(
            "a.png", "https://elsewhere.org/uploads/a.png"
        ) == 0.0


class TestCompareImages:

    def test_empty_paths(self, image_engine):
        assert image_engine.compare_images("", "") == 0.0

    def test_score_bounded(self, image_engine, write_image, noise_image, red_square_image):
        a = write_image("noise.png", noise_image)
        b = write_image("red.png", red_square_image)
        assert 0.0 <= image_engine.compare_images(a, b) <= 1.0

    def test_each_file_decoded_once(self, image_engine, write_image, monkeypatch,
                                    textured_image, red_square_image):
        a = write_image("a.png", textured_image)
        b = write_image("b.png", red_square_image)
        decoded = []

        def counting_load(path, *args, **kwargs):
            decoded.append(path)
            return load_rgb_image(path, *args, **kwargs)

        monkeypatch.setattr(image_engine_module, "load_rgb_image", counting_load)
        image_engine.compare_images(a, b)

        assert sorted(decoded) == sorted([a, b])
