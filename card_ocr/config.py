from dataclasses import dataclass, field
from typing import Tuple

# ============================================================
#  CONFIGURATION
# ============================================================
MIN_CONFIDENCE = 0.3
RETRY_LIMIT = 3

# Characters that frame a 4-digit group on quick-read card layouts
BOUNDARY_CHARS = frozenset(["\\", "/", "[", "]", "|"])

FIRST_NUMBER = {
    "3": "American Express",
    "4": "Visa",
    "5": "MasterCard",
    "6": "Discover Card"
}

# ISO/IEC 7810 ID-1 (85.60mm x 53.98mm)
CARD_ASPECT_RATIO = 8560 / 5398
CARD_WIDTH_RATIO = 0.9

# Camera settings
CAMERA_INDICES = (0, 1)
FRAME_WIDTH = 1280
FRAME_HEIGHT = 720

# OCR settings
OCR_RESIZE_WIDTH = 1000
TESSERACT_CONFIG = "--oem 3 --psm 11"

# Seconds to hold a result before handing it to the caller
EMIT_DELAY = 0.0


@dataclass
class ScannerConfig:
    """Tunables for a single scanner run."""
    camera_indices: Tuple[int, ...] = CAMERA_INDICES
    frame_width: int = FRAME_WIDTH
    frame_height: int = FRAME_HEIGHT
    min_confidence: float = MIN_CONFIDENCE
    retry_limit: int = RETRY_LIMIT
    emit_delay: float = EMIT_DELAY
    backend: str = "tesseract"
    backend_options: dict = field(default_factory=dict)

    @classmethod
    def from_args(cls, args) -> "ScannerConfig":
        """Build a config from parsed CLI arguments, keeping defaults for anything unset."""
        config = cls()
        camera = getattr(args, "camera", None)
        if camera is not None:
            config.camera_indices = (camera,)
        for name in ("min_confidence", "retry_limit", "emit_delay", "backend"):
            value = getattr(args, name, None)
            if value is not None:
                setattr(config, name, value)
        return config
