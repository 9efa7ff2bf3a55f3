import argparse
import json
import logging
import sys
from typing import Optional

import cv2
import imutils

from .config import CARD_ASPECT_RATIO, CARD_WIDTH_RATIO, ScannerConfig
from .errors import CardReaderError
from .models import CardRecord
from .ocr import create_backend
from .scanner import CardScanner

logger = logging.getLogger(__name__)

WINDOW_NAME = 'Credit Card OCR - Webcam'
PREVIEW_WIDTH = 960


# ============================================================
#  OUTPUT
# ============================================================
def print_record(record: Optional[CardRecord], title="EXTRACTION RESULTS"):
    print("\n" + "="*60)
    print(title)
    print("="*60)
    if record is None:
        print("Card Number      : Not detected")
    else:
        print(f"Card Number      : {record.card_number_display}")
        print(f"Card Type        : {record.card_type}")
        print(f"Expiration       : {record.expiration_date_display or 'Not detected'}")
    print("="*60)


def draw_overlay(frame, record: Optional[CardRecord], paused: bool):
    """Card guide rectangle plus the last result."""
    display_frame = frame.copy()
    h, w = display_frame.shape[:2]

    rect_w = int(w * CARD_WIDTH_RATIO)
    rect_h = int(rect_w / CARD_ASPECT_RATIO)
    x1, y1 = (w - rect_w) // 2, (h - rect_h) // 2
    color = (0, 255, 255) if paused else (0, 255, 0)
    cv2.rectangle(display_frame, (x1, y1), (x1 + rect_w, y1 + rect_h), color, 3)

    cv2.putText(display_frame, "R=Retry | Q=Quit", (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
    if record is not None:
        cv2.putText(display_frame, f"Number: {record.card_number_display}", (10, 70),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 255), 2)
        cv2.putText(display_frame, f"Expires: {record.expiration_date_display or '--/--'}", (10, 110),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 255), 2)
    return imutils.resize(display_frame, width=PREVIEW_WIDTH)


# ============================================================
#  WEBCAM MODE
# ============================================================
def run_webcam(args) -> int:
    config = ScannerConfig.from_args(args)
    backend = create_backend(config.backend, **config.backend_options)

    state = {'record': None, 'resume': None}

    def on_success(record, resume):
        state['record'] = record
        state['resume'] = resume
        print_record(record)
        print("Press 'r' to scan again or 'q' to quit")

    def on_failure(error):
        print(f"[ERROR] {error}")

    scanner = CardScanner(backend, on_success, on_failure=on_failure, config=config)

    print("\n" + "="*60)
    print("CREDIT CARD OCR - LIVE SCAN")
    print("="*60)
    print("- Hold card HORIZONTALLY within the rectangle")
    print("- Press 'r' to RETRY after a result")
    print("- Press 'q' to QUIT")
    print("="*60 + "\n")

    if not scanner.start():
        return 1

    try:
        while scanner.is_running:
            scanner.poll()
            frame = scanner.last_frame
            if frame is not None:
                cv2.imshow(WINDOW_NAME, draw_overlay(frame, state['record'], scanner.session.is_paused))

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                print("\nExiting...")
                break
            elif key == ord('r') and state['resume'] is not None:
                state['resume']()
                state['record'], state['resume'] = None, None
                print("[INFO] Scanning again...")
    finally:
        scanner.stop()
        cv2.destroyAllWindows()

    print("\nWebcam closed successfully!")
    return 0


# ============================================================
#  STILL IMAGE MODE
# ============================================================
def run_image(args) -> int:
    img = cv2.imread(args.image)
    if img is None:
        print(f"[ERROR] Could not load {args.image}")
        return 1

    config = ScannerConfig.from_args(args)
    backend = create_backend(config.backend, **config.backend_options)
    scanner = CardScanner(backend, on_success=lambda record, resume: None, config=config)
    candidate = scanner.scan_image(img)

    record = None if candidate.is_empty else CardRecord.from_candidate(candidate)
    if args.json:
        print(json.dumps(record.to_dict() if record else None, indent=2))
    else:
        print_record(record, title="FINAL RESULTS")
    return 0 if record else 1


# ============================================================
#  ENTRY POINT
# ============================================================
def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-b', '--backend', choices=['tesseract', 'paddle'], help="OCR backend")
    common.add_argument('--min-confidence', type=float, help="Ignore OCR lines at or below this confidence")
    common.add_argument('-d', '--debug', action='store_true', help="Verbose logging")

    ap = argparse.ArgumentParser(prog='card-ocr', description="Read payment card number and expiration with OCR")
    sub = ap.add_subparsers(dest='command', required=True)

    webcam = sub.add_parser('webcam', parents=[common], help="Scan a card held in front of the webcam")
    webcam.add_argument('-c', '--camera', type=int, help="Camera index (default: try 0 then 1)")
    webcam.add_argument('--retry-limit', type=int, help="Frames to wait for a missing expiration date")
    webcam.add_argument('--emit-delay', type=float, help="Seconds to hold a result before showing it")
    webcam.set_defaults(func=run_webcam)

    image = sub.add_parser('image', parents=[common], help="Read a card from a still image")
    image.add_argument('image', help="Path to input image")
    image.add_argument('--json', action='store_true', help="Print the result as JSON")
    image.set_defaults(func=run_image)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    )
    try:
        return args.func(args)
    except CardReaderError as e:
        print(f"[ERROR] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
