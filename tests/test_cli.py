"""Tests for the command line entry point."""
import json

import numpy as np
import pytest

from card_ocr import cli
from card_ocr.config import ScannerConfig



@pytest.fixture
def fake_image(monkeypatch):
    monkeypatch.setattr(cli.cv2, "imread", lambda path: np.zeros((10, 10, 3), dtype=np.uint8))


def use_backend(monkeypatch, backend, calls=None):
    def create_backend(name, **options):
        if calls is not None:
            calls.append((name, options))
        return backend
    monkeypatch.setattr(cli, "create_backend", create_backend)


class TestImageCommand:
    """Tests for `card-ocr image`."""

    def test_prints_result(self, monkeypatch, capsys, fake_image, fake_backend, make_lines):
        use_backend(monkeypatch, fake_backend(make_lines("4111 1234 5678 9010", "09/25")))

        assert cli.main(["image", "card.jpg"]) == 0
        out = capsys.readouterr().out
        assert "4111 1234 5678 9010" in out
        assert "Visa" in out
        assert "09/25" in out

    def test_json_output(self, monkeypatch, capsys, fake_image, fake_backend, make_lines):
        use_backend(monkeypatch, fake_backend(make_lines("5500 0000 0000 0004")))

        assert cli.main(["image", "card.jpg", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['card_number'] == "5500000000000004"
        assert data['expiration'] is None

    def test_nothing_detected(self, monkeypatch, capsys, fake_image, fake_backend, make_lines):
        use_backend(monkeypatch, fake_backend(make_lines("JOHN SMITH")))

        assert cli.main(["image", "card.jpg"]) == 1
        assert "Not detected" in capsys.readouterr().out

    def test_backend_options_are_passed_through(self, monkeypatch, fake_image, fake_backend, make_lines):
        calls = []
        use_backend(monkeypatch, fake_backend(make_lines("4111 1234 5678 9010")), calls)
        monkeypatch.setattr(cli.ScannerConfig, "from_args", classmethod(
            lambda cls, args: cls(backend="paddle", backend_options={"lang": "fr"})))

        assert cli.main(["image", "card.jpg"]) == 0
        assert calls == [("paddle", {"lang": "fr"})]

    def test_unreadable_image(self, monkeypatch, capsys):
        monkeypatch.setattr(cli.cv2, "imread", lambda path: None)

        assert cli.main(["image", "missing.jpg"]) == 1
        assert "[ERROR]" in capsys.readouterr().out


class TestParser:
    def test_webcam_arguments_build_config(self):
        args = cli.build_parser().parse_args(
            ["webcam", "--camera", "2", "--retry-limit", "5", "--min-confidence", "0.5", "-b", "paddle"])
        config = ScannerConfig.from_args(args)

        assert config.camera_indices == (2,)
        assert config.retry_limit == 5
        assert config.min_confidence == 0.5
        assert config.backend == "paddle"

    def test_defaults_are_kept(self):
        config = ScannerConfig.from_args(cli.build_parser().parse_args(["webcam"]))
        assert config == ScannerConfig()

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])
