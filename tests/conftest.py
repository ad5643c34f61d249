import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from roicoder.libs.lut import LookupTable  # noqa: E402


@pytest.fixture
def isolated_settings_env(tmp_path, monkeypatch):
    """Run with no ROICODER_* overrides and outside the project pyproject.

    Returns the temporary working directory.
    """

    import os

    for key in list(os.environ):
        if key.startswith("ROICODER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ROICODER_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def blue_white_red() -> LookupTable:
    return LookupTable.from_colors(
        "blue_white_red", [(0, 0, 255), (255, 255, 255), (255, 0, 0)]
    )
