"""Lamina Generator - Form-driven Instagram graphics with Gemini image models."""

__version__ = "0.1.0"

from lamina.core.config import LaminaConfig, config
from lamina.core.gemini_client import GeminiImageClient
from lamina.core.models import FormFields, SavedImage

__all__ = [
    "FormFields",
    "GeminiImageClient",
    "LaminaConfig",
    "SavedImage",
    "config",
]
