import io
import hashlib
import logging
from functools import lru_cache

import numpy as np
import cv2
from PIL import Image, UnidentifiedImageError

from .exceptions import OCRError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_reader():
  # easyocr loads its models on construction; build once, on first use
  import easyocr
  return easyocr.Reader(["en"], gpu=False)


def load_image_bytes(data: bytes, filename: str = ""):
  try:
    image = Image.open(io.BytesIO(data)).convert("RGB")
  except (UnidentifiedImageError, OSError) as e:
    raise OCRError(filename, str(e))
  return np.array(image)


def bytes_hash(data: bytes):
  return hashlib.sha256(data).hexdigest()


def preprocess(img):
  gray = cv2.cvtColor(img, cv2.COLOR_RGB2GRAY)
  return cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)[1]


def ocr_text(img):
  # one detected text box per line, top-to-bottom, so the parsers see screen rows
  result = get_reader().readtext(preprocess(img), detail=0, paragraph=False)
  return "\n".join(r.strip() for r in result if r and r.strip())


def ocr_image_bytes(data: bytes, filename: str = ""):
  text = ocr_text(load_image_bytes(data, filename))
  logger.info(f"OCR {filename or bytes_hash(data)[:12]}: {len(text.splitlines())} lines")
  return text
