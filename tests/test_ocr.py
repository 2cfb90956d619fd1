"""Tests for ocr.py — image decoding and the easyocr adapter."""

import io
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from PIL import Image

from bgmi_stats.exceptions import OCRError
from bgmi_stats.ocr import bytes_hash, load_image_bytes, ocr_image_bytes, preprocess


def _png_bytes(width: int = 32, height: int = 16) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (255, 255, 255)).save(buf, format="PNG")
    return buf.getvalue()


class TestLoadImage:
    """Tests for load_image_bytes() and preprocess()."""

    def test_decodes_png(self) -> None:
        """A PNG upload becomes an RGB array."""
        img = load_image_bytes(_png_bytes())
        assert img.shape == (16, 32, 3)

    def test_garbage_raises(self) -> None:
        """Bytes that are not an image raise OCRError naming the file."""
        with pytest.raises(OCRError, match="shot.png"):
            load_image_bytes(b"not an image", "shot.png")

    def test_preprocess_is_single_channel(self) -> None:
        """Preprocessing yields a binarized grayscale image."""
        out = preprocess(np.zeros((8, 8, 3), dtype=np.uint8))
        assert out.shape == (8, 8)

    def test_hash_is_stable(self) -> None:
        """Same bytes, same digest."""
        assert bytes_hash(b"abc") == bytes_hash(b"abc")


class TestOcrText:
    """Tests for ocr_image_bytes() with the reader patched."""

    @patch("bgmi_stats.ocr.get_reader")
    def test_one_line_per_box(self, mock_reader: MagicMock) -> None:
        """Detected boxes are returned one per line, blanks dropped."""
        mock_reader.return_value.readtext.return_value = ["05", " Alpha /0 Eliminations ", "", "Bravo"]

        text = ocr_image_bytes(_png_bytes(), "lobby.png")

        assert text == "05\nAlpha /0 Eliminations\nBravo"
        mock_reader.return_value.readtext.assert_called_once()
