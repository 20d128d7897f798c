"""Configuration management for the Lamina Generator.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the LAMINA_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (LAMINA_* prefix)
2. .env file in the project root
3. Default values defined in LaminaConfig

The Gemini credential is the one exception to the prefix rule: besides
``LAMINA_GEMINI_API_KEY`` it is also read from the conventional
``GEMINI_API_KEY`` and ``GOOGLE_API_KEY`` variables used by the google-genai SDK.

Example .env file:
    LAMINA_GEMINI_API_KEY=your-key
    LAMINA_IMAGE_MODEL=imagen-4.0-generate-001
    LAMINA_DATA_DIR=data

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Constructing it never fails because of a missing credential; the UI entry
point calls :meth:`LaminaConfig.require_api_key` before launching and treats
a missing key as fatal.

Directory Management
--------------------
The configuration automatically creates required directories on initialization:
- data_dir: holds the saved-lamina collection (``saved_lamina.json``)
- outputs_dir: for images exported through the download buttons
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lamina.core.errors import MissingCredentialError


class LaminaConfig(BaseSettings):
    """Main configuration for the Lamina Generator.

    Attributes
    ----------
    Credentials:
        gemini_api_key : str | None
            API key for the Gemini API (required to launch the UI)

    Remote model settings:
        image_model : str
            Imagen model used for text-to-image generation
        edit_model : str
            Image-capable Gemini model used to edit images with a directive
        directive_model : str
            Text model that writes improvement directives
        aspect_ratio : str
            Aspect ratio requested from the image model
        output_mime_type : str
            Mime type requested for generated images

    Paths:
        data_dir : Path
            Directory holding the saved-lamina collection
        outputs_dir : Path
            Directory for downloaded images
        saved_images_filename : str
            File name of the saved-lamina collection inside data_dir
        max_exported_files : int
            Download files kept in outputs_dir; older ones are removed

    UI Settings:
        gradio_server_name : str
            Server bind address
        gradio_server_port : int
            Server port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Examples
    --------
        >>> custom_config = LaminaConfig(
        ...     gemini_api_key="test-key",
        ...     data_dir="/tmp/lamina-data",
        ... )
        >>> custom_config.saved_images_path.name
        'saved_lamina.json'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LAMINA_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Credentials
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key", "LAMINA_GEMINI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"
        ),
        description="API key for the Gemini API",
    )

    # Remote models
    image_model: str = Field(
        default="imagen-4.0-generate-001",
        description="Imagen model for text-to-image generation",
    )
    edit_model: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini image model for directive-based edits",
    )
    directive_model: str = Field(
        default="gemini-2.5-pro",
        description="Gemini text model that writes improvement directives",
    )
    aspect_ratio: str = Field(
        default="3:4",
        description="Aspect ratio requested for generated images",
    )
    output_mime_type: str = Field(
        default="image/jpeg",
        description="Mime type requested for generated images",
    )

    # Paths
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the saved-lamina collection",
    )
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory for downloaded images",
    )
    saved_images_filename: str = Field(
        default="saved_lamina.json",
        description="File name of the saved-lamina collection",
    )
    max_exported_files: int = Field(
        default=20,
        description="Download files kept in outputs_dir before the oldest are removed",
        ge=1,
    )

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create required directories.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def saved_images_path(self) -> Path:
        """Path of the JSON file holding the saved-lamina collection."""
        return self.data_dir / self.saved_images_filename

    def require_api_key(self) -> str:
        """Return the Gemini API key or fail.

        Raises:
            MissingCredentialError: If no key is configured
        """
        if not self.gemini_api_key or not self.gemini_api_key.strip():
            raise MissingCredentialError(
                "Gemini API key is required. Set LAMINA_GEMINI_API_KEY "
                "(or GEMINI_API_KEY / GOOGLE_API_KEY)."
            )
        return self.gemini_api_key.strip()


# Global configuration instance
config = LaminaConfig()
