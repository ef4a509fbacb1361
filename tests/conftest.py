import io
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image

# Add src to sys.path so we can import ielts_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Widgets are exercised without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from ielts_toolkit.core.models.table import (  # noqa: E402
    BlankCell,
    TableColumn,
    TableRow,
    TableStructure,
    TextCell,
)
from ielts_toolkit.editor.upload import Uploader, UploadFile, UploadResult  # noqa: E402

DURABLE_URL = "https://cdn.example.com/ielts/flow-chart.png"


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def png_bytes():
    """PNG bytes large enough to pass the minimum upload size."""
    img = Image.effect_noise((64, 64), 80).convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image_upload(png_bytes):
    return UploadFile(name="chart.png", mime_type="image/png", data=png_bytes)


@pytest.fixture
def uploader():
    """Upload collaborator that always succeeds."""
    mock = MagicMock(spec=Uploader)
    mock.upload.return_value = UploadResult(url=DURABLE_URL, public_id="ielts/flow-chart")
    return mock


@pytest.fixture
def ocean_table():
    """Two-row table with blanks {1: "ocean", 2: "current"}."""
    return TableStructure(
        title="Ocean facts",
        columns=(TableColumn("Item"), TableColumn("Detail")),
        rows=(
            TableRow("row-1", ((TextCell("c1", "Covers most of the planet"),), (BlankCell("c2", 1, value="ocean"),))),
            TableRow("row-2", ((TextCell("c3", "Moves heat north"),), (BlankCell("c4", 2, value="current"),))),
        ),
    )
