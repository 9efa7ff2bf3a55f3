"""
OCR backends: given a BGR frame, produce recognized lines with confidence.
"""
import logging
from typing import Any, Dict, List, Protocol, Tuple

import cv2
import imutils
import numpy as np
import pytesseract

from .config import OCR_RESIZE_WIDTH, TESSERACT_CONFIG
from .models import RecognizedLine

logger = logging.getLogger(__name__)


class OCRBackend(Protocol):
    def recognize(self, frame: np.ndarray) -> List[RecognizedLine]:
        """Input: BGR image. Output: recognized lines in reading order."""
        ...


# ============================================================
#  TESSERACT
# ============================================================
class TesseractBackend:
    def __init__(self, config: str = TESSERACT_CONFIG, resize_width: int = OCR_RESIZE_WIDTH):
        self.config = config
        self.resize_width = resize_width

    def recognize(self, frame: np.ndarray) -> List[RecognizedLine]:
        gray = frame if frame.ndim == 2 else cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        if self.resize_width and gray.shape[1] != self.resize_width:
            gray = imutils.resize(gray, width=self.resize_width)

        data = pytesseract.image_to_data(gray, config=self.config, output_type=pytesseract.Output.DICT)
        return group_tesseract_words(data)


def group_tesseract_words(data: Dict[str, list]) -> List[RecognizedLine]:
    """
    Join tesseract word rows into lines.

    Words sharing (block_num, par_num, line_num) form one line; the line's
    confidence is the mean word confidence scaled to 0..1.
    """
    lines: Dict[Tuple[int, int, int], Tuple[List[str], List[float]]] = {}
    for i, word in enumerate(data["text"]):
        conf = float(data["conf"][i])
        if conf < 0 or not str(word).strip():
            continue
        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        words, confs = lines.setdefault(key, ([], []))
        words.append(str(word).strip())
        confs.append(conf)

    return [
        RecognizedLine(text=" ".join(words), confidence=float(np.mean(confs)) / 100.0)
        for words, confs in lines.values()
    ]


# ============================================================
#  PADDLEOCR
# ============================================================
class PaddleOCRBackend:
    def __init__(self, lang: str = "en", use_angle_cls: bool = True):
        from paddleocr import PaddleOCR
        self.ocr = PaddleOCR(use_angle_cls=use_angle_cls, lang=lang)

    def recognize(self, frame: np.ndarray) -> List[RecognizedLine]:
        return flatten_paddle_result(self.ocr.ocr(frame))


def flatten_paddle_result(result: Any) -> List[RecognizedLine]:
    """
    Flatten PaddleOCR pages into recognized lines.

    PaddleOCR 2.x returns `[[box, (text, score)], ...]` per page; 3.x returns
    dict-like pages carrying parallel `rec_texts` and `rec_scores` lists.
    """
    lines: List[RecognizedLine] = []
    for page in result or []:
        if isinstance(page, dict):
            items = zip(page.get("rec_texts") or [], page.get("rec_scores") or [])
        else:
            items = ((text, score) for _box, (text, score) in page or [])

        for text, score in items:
            text = str(text).strip() if text is not None else ""
            if text:
                lines.append(RecognizedLine(text=text, confidence=float(score)))
    return lines


BACKENDS = {
    "tesseract": TesseractBackend,
    "paddle": PaddleOCRBackend,
}


def create_backend(name: str, **kwargs) -> OCRBackend:
    try:
        backend_cls = BACKENDS[name]
    except KeyError:
        raise ValueError(f"Unknown OCR backend: {name!r} (choose from {', '.join(BACKENDS)})") from None
    logger.info("Using %s OCR backend", name)
    return backend_cls(**kwargs)
