"""Shared pytest fixtures for Lamina tests."""

import base64
import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Generator
from unittest.mock import Mock

import pytest
from PIL import Image

from lamina.core.config import LaminaConfig
from lamina.core.gallery_store import SavedImageStore
from lamina.core.gemini_client import GeminiImageClient
from lamina.core.models import FormFields
from lamina.ui.models import UIState


def _encoded_image(fmt: str, color: str) -> str:
    buffer = BytesIO()
    Image.new("RGB", (3, 4), color).save(buffer, format=fmt)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> LaminaConfig:
    """Create a test configuration with temporary directories.

    Returns:
        LaminaConfig instance for testing
    """
    return LaminaConfig(
        gemini_api_key="test-key",
        data_dir=str(temp_dir / "data"),
        outputs_dir=str(temp_dir / "outputs"),
        _env_file=None,
    )


@pytest.fixture
def jpeg_base64() -> str:
    """A tiny white JPEG, base64 encoded."""
    return _encoded_image("JPEG", "white")


@pytest.fixture
def improved_jpeg_base64() -> str:
    """A tiny black JPEG, base64 encoded."""
    return _encoded_image("JPEG", "black")


@pytest.fixture
def png_file(temp_dir: Path) -> Path:
    """A tiny PNG file on disk, as a template upload would be."""
    path = temp_dir / "template.png"
    Image.new("RGB", (3, 4), "red").save(path, format="PNG")
    return path


@pytest.fixture
def form_fields() -> FormFields:
    """Form with only a header and a first title line."""
    return FormFields(header="X", title_line1="Y")


@pytest.fixture
def fake_client(jpeg_base64: str, improved_jpeg_base64: str) -> Mock:
    """Mock GeminiImageClient returning valid images."""
    client = Mock(spec=GeminiImageClient)
    client.generate_from_text.return_value = jpeg_base64
    client.edit_with_directive.return_value = improved_jpeg_base64
    client.edit_image.return_value = (improved_jpeg_base64, "image/jpeg")
    client.generate_improvement_directive.return_value = "Make the title bold."
    return client


@pytest.fixture
def saved_store(temp_dir: Path) -> SavedImageStore:
    """Empty saved-lamina store backed by a temporary file."""
    return SavedImageStore(temp_dir / "data" / "saved_lamina.json")


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing."""
    return UIState()


@pytest.fixture
def initialized_state(fake_client: Mock, saved_store: SavedImageStore) -> UIState:
    """UI state with a mock client and a temporary store."""
    return UIState(client=fake_client, store=saved_store)
