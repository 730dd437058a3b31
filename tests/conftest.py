import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Widgets are never shown; keep Qt away from a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from threadcrop.crop.frame import CropFramePolicy, CropLayout  # noqa: E402
from threadcrop.crop.geometry import Size  # noqa: E402


@pytest.fixture
def wardrobe_layout() -> CropLayout:
    """3000x2000 photo in a 390x600 phone viewport with a 40pt margin frame."""
    return CropLayout.build(Size(3000, 2000), Size(390, 600), CropFramePolicy.margin(40))


@pytest.fixture(scope="session")
def qapp():
    pytest.importorskip("PySide6.QtWidgets", reason="Qt widgets not available", exc_type=ImportError)
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
