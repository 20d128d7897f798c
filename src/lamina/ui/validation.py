"""Validation utilities for Lamina UI inputs."""

import logging
from pathlib import Path

from lamina.core.images import read_template_file
from lamina.core.models import TemplateAsset

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_template_upload(path: str | Path | None) -> TemplateAsset | None:
    """Load an uploaded template file as a TemplateAsset.

    Any image type Pillow or the file name identifies is accepted. No size
    limit is enforced.

    Args:
        path: Path of the uploaded file, or None when the upload was cleared

    Returns:
        TemplateAsset, or None if no file is selected

    Raises:
        ValidationError: If the file is missing or is not an image
    """
    if not path:
        return None

    path = Path(path)
    if not path.is_file():
        raise ValidationError(f"Template file not found: {path.name}")

    try:
        return read_template_file(path)
    except ValueError as e:
        logger.warning(f"Rejected template upload {path.name}: {e}")
        raise ValidationError(str(e)) from e
    except OSError as e:
        raise ValidationError(f"Could not read template file {path.name}: {e}") from e
