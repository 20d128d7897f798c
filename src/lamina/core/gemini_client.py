"""Client for the remote Gemini image service.

:class:`GeminiImageClient` is the only module that talks to the network. It
exposes the three remote operations the application needs:

- ``generate_from_text``: Imagen text-to-image, exactly one image
- ``edit_with_directive``: image + directive to an image-capable Gemini model
  (``edit_image`` also returns the mime type of the result)
- ``generate_improvement_directive``: free text from a Gemini text model

Images are passed in and returned as base64 text; the SDK's raw bytes never
leave this module. Calls are single attempts: there is no retry, backoff or
client-side timeout, and SDK errors from the image operations propagate
unchanged so their message reaches the user.

Usage
-----
::

    from lamina.core.config import config
    from lamina.core.gemini_client import GeminiImageClient

    client = GeminiImageClient.from_config(config)
    image_base64 = client.generate_from_text("a minimalist poster", "3:4")
"""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any

from google import genai
from google.genai import types

from lamina.core.config import LaminaConfig
from lamina.core.errors import (
    DirectiveGenerationFailedError,
    EditFailedError,
    GenerationFailedError,
)
from lamina.core.images import decode_base64, detect_mime_type, encode_bytes
from lamina.core.models import FormFields
from lamina.core.prompt_builder import build_edit_instruction, build_improvement_directive_prompt

logger = logging.getLogger(__name__)


class GeminiImageClient:
    """Thin wrapper around ``google.genai.Client`` for the lamina workflow.

    Attributes:
        image_model: Imagen model id for text-to-image
        edit_model: Gemini image model id for directive edits
        directive_model: Gemini text model id for improvement directives
        output_mime_type: Mime type requested from the image model
    """

    def __init__(
        self,
        api_key: str,
        *,
        image_model: str = "imagen-4.0-generate-001",
        edit_model: str = "gemini-2.5-flash-image",
        directive_model: str = "gemini-2.5-pro",
        output_mime_type: str = "image/jpeg",
        client: Any | None = None,
    ) -> None:
        """Create the client.

        Args:
            api_key: Gemini API key
            image_model: Imagen model id
            edit_model: Gemini image-editing model id
            directive_model: Gemini text model id
            output_mime_type: Mime type requested for generated images
            client: Pre-built SDK client (tests inject a mock here)
        """
        self.image_model = image_model
        self.edit_model = edit_model
        self.directive_model = directive_model
        self.output_mime_type = output_mime_type
        self._client = client if client is not None else genai.Client(api_key=api_key)

    @classmethod
    def from_config(cls, config: LaminaConfig, client: Any | None = None) -> GeminiImageClient:
        """Build a client from configuration.

        Raises:
            MissingCredentialError: If no API key is configured
        """
        return cls(
            config.require_api_key(),
            image_model=config.image_model,
            edit_model=config.edit_model,
            directive_model=config.directive_model,
            output_mime_type=config.output_mime_type,
            client=client,
        )

    def generate_from_text(self, prompt: str, aspect_ratio: str = "3:4") -> str:
        """Generate exactly one image from a text prompt.

        Args:
            prompt: Full generation prompt
            aspect_ratio: Requested aspect ratio, e.g. ``"3:4"``

        Returns:
            Generated image as base64 text

        Raises:
            GenerationFailedError: If the service returned no images
        """
        t0 = perf_counter()
        logger.info(f"Generating image: model={self.image_model}, ratio={aspect_ratio}")

        response = self._client.models.generate_images(
            model=self.image_model,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type=self.output_mime_type,
                aspect_ratio=aspect_ratio,
            ),
        )

        generated = getattr(response, "generated_images", None) or []
        if not generated or generated[0].image is None or not generated[0].image.image_bytes:
            raise GenerationFailedError("Image generation failed. No images were returned.")

        latency_ms = int((perf_counter() - t0) * 1000)
        logger.info(f"Image generated in {latency_ms}ms")
        return encode_bytes(generated[0].image.image_bytes)

    def edit_with_directive(self, image_base64: str, mime_type: str, directive: str) -> str:
        """Apply a directive to an image with the image-editing model.

        The directive is wrapped in an instruction that requires the model to
        keep all original text. The client does not verify that it did.

        Args:
            image_base64: Source image as base64 text
            mime_type: Mime type of the source image
            directive: Natural-language change to apply

        Returns:
            Edited image as base64 text

        Raises:
            EditFailedError: If the response contains no image part
        """
        image, _ = self.edit_image(image_base64, mime_type, directive)
        return image

    def edit_image(self, image_base64: str, mime_type: str, directive: str) -> tuple[str, str]:
        """Like :meth:`edit_with_directive`, also returning the result's mime type.

        The mime type is the one the service declared for the image part. If
        it declared none, it is detected from the image bytes, and failing
        that the source mime type is assumed.

        Returns:
            Tuple of (edited image as base64 text, mime type)

        Raises:
            EditFailedError: If the response contains no image part
        """
        t0 = perf_counter()
        logger.info(f"Editing image: model={self.edit_model}, mime={mime_type}")

        image_part = types.Part.from_bytes(data=decode_base64(image_base64), mime_type=mime_type)
        response = self._client.models.generate_content(
            model=self.edit_model,
            contents=[image_part, build_edit_instruction(directive)],
            config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
        )

        inline_data = _first_inline_image(response)
        if inline_data is None:
            raise EditFailedError("Image editing failed. No image was returned.")

        data = inline_data.data
        raw = decode_base64(data) if isinstance(data, str) else data
        result_mime = inline_data.mime_type or detect_mime_type(raw) or mime_type

        latency_ms = int((perf_counter() - t0) * 1000)
        logger.info(f"Image edited in {latency_ms}ms ({result_mime})")
        return (data if isinstance(data, str) else encode_bytes(data)), result_mime

    def generate_improvement_directive(self, fields: FormFields) -> str:
        """Ask the text model for a creative improvement directive.

        Args:
            fields: Form content, supplied as context for tone

        Returns:
            The directive text, verbatim

        Raises:
            DirectiveGenerationFailedError: If the remote call raises or
                returns no text
        """
        prompt = build_improvement_directive_prompt(fields)
        logger.info(f"Requesting improvement directive: model={self.directive_model}")

        try:
            response = self._client.models.generate_content(
                model=self.directive_model,
                contents=prompt,
            )
        except Exception as e:
            logger.error(f"Directive generation failed: {e}")
            raise DirectiveGenerationFailedError(
                f"Improvement directive generation failed: {e}"
            ) from e

        text = response.text
        if not text:
            raise DirectiveGenerationFailedError(
                "Improvement directive generation failed. No text was returned."
            )

        logger.debug(f"Improvement directive: {text}")
        return text


def _first_inline_image(response: Any) -> Any | None:
    """Return the inline data (``data`` and ``mime_type``) of the first image part."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return None

    for part in candidates[0].content.parts or []:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return inline_data
    return None
