"""Core functionality for lamina generation.

This package holds everything that is independent of the user interface:

- **config**: Configuration management using Pydantic Settings
- **models**: FormFields, TemplateAsset, GeneratedArtifact and SavedImage
- **prompt_builder**: Pure prompt templates for the three remote operations
- **gemini_client**: The single boundary to the remote Gemini image service
- **gallery_store**: JSON-file persistence of saved laminas
- **images**: base64 encoding, template file input and download export

Data flow
---------
form fields -> prompt_builder -> gemini_client -> (UI workflow holds the
result) -> gallery_store on save -> gallery view.
"""

from lamina.core.config import LaminaConfig, config
from lamina.core.errors import (
    DirectiveGenerationFailedError,
    EditFailedError,
    FlowBusyError,
    GenerationFailedError,
    LaminaError,
    MissingCredentialError,
    RemoteServiceError,
    StorageDecodeError,
)
from lamina.core.gallery_store import SavedImageStore
from lamina.core.gemini_client import GeminiImageClient
from lamina.core.models import (
    ArtifactStage,
    FormFields,
    GeneratedArtifact,
    SavedImage,
    TemplateAsset,
)

__all__ = [
    "ArtifactStage",
    "DirectiveGenerationFailedError",
    "EditFailedError",
    "FlowBusyError",
    "FormFields",
    "GeminiImageClient",
    "GeneratedArtifact",
    "GenerationFailedError",
    "LaminaConfig",
    "LaminaError",
    "MissingCredentialError",
    "RemoteServiceError",
    "SavedImage",
    "SavedImageStore",
    "StorageDecodeError",
    "TemplateAsset",
    "config",
]
