"""Lamina generation, improvement and template handlers.

Generate and Improve are generator handlers: they first yield the busy
render (status message, disabled buttons) and then the result once the
remote calls return.
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import gradio as gr
from PIL import Image

from lamina.core.config import config
from lamina.core.errors import FlowBusyError, LaminaError
from lamina.core.images import decode_image, export_artifact, prune_exports
from lamina.core.models import FormFields, GeneratedArtifact

from .. import workflow
from ..components import format_status, style_field_updates
from ..models import GENERATED_DOWNLOAD_NAME, IMPROVED_DOWNLOAD_NAME, UIState
from ..state import initialize_ui_state
from ..validation import ValidationError, validate_template_upload

logger = logging.getLogger(__name__)


def _to_image(artifact: GeneratedArtifact | None) -> Image.Image | None:
    if artifact is None:
        return None
    try:
        return decode_image(artifact.image_base64)
    except Exception as e:
        logger.error(f"Could not decode {artifact.stage.value} lamina for display: {e}")
        return None


def _discard(*paths: str | None) -> None:
    """Remove superseded download files from outputs_dir."""
    outputs_dir = config.outputs_dir.resolve()
    for path in paths:
        if not path:
            continue
        file_path = Path(path).resolve()
        if file_path.parent != outputs_dir:
            continue
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove old download {file_path}: {e}")


def _export(artifact: GeneratedArtifact | None, name: str) -> str | None:
    if artifact is None:
        return None
    try:
        path = export_artifact(artifact, config.outputs_dir, name)
        prune_exports(config.outputs_dir, config.max_exported_files)
    except (OSError, ValueError) as e:
        logger.error(f"Could not export {artifact.stage.value} lamina: {e}")
        return None
    return str(path) if path.exists() else None


def render_results(state: UIState) -> tuple[Any, ...]:
    """Build the result-area outputs from the state.

    Returns:
        Tuple of (generated_image, generated_actions_update, generated_download_update,
        improved_group_update, improved_image, improved_download_update, status_markdown,
        generate_button_update)
    """
    has_generated = state.generated is not None and not state.is_busy
    show_improved = state.improved is not None

    return (
        _to_image(state.generated),
        gr.update(visible=has_generated),
        gr.update(value=state.generated_download, visible=state.generated_download is not None),
        gr.update(visible=show_improved),
        _to_image(state.improved),
        gr.update(value=state.improved_download, visible=state.improved_download is not None),
        format_status(state),
        gr.update(interactive=not state.is_busy),
    )


def generate_lamina(fields: FormFields, state: UIState) -> Iterator[tuple[Any, ...]]:
    """Run the Generate flow from the UI.

    Args:
        fields: Form content
        state: UI state

    Yields:
        Tuples of render_results(state) outputs followed by the updated state:
        the busy render, then the result
    """
    previous = (state.generated_download, state.improved_download)

    try:
        state = initialize_ui_state(state)
        workflow.start_generate(state, fields, state.template)
    except FlowBusyError as e:
        gr.Warning(str(e))
        yield (*render_results(state), state)
        return
    except LaminaError as e:
        logger.error(f"Cannot generate lamina: {e}")
        state.error = str(e)
        yield (*render_results(state), state)
        return

    yield (*render_results(state), state)

    state = workflow.run_generate(state)
    _discard(*previous)
    if state.generated is not None:
        state.generated_download = _export(state.generated, GENERATED_DOWNLOAD_NAME)

    yield (*render_results(state), state)


def improve_lamina(fields: FormFields, state: UIState) -> Iterator[tuple[Any, ...]]:
    """Run the Improve flow from the UI.

    Does nothing when no lamina has been generated yet.

    Args:
        fields: Current form content, used as context for the directive
        state: UI state

    Yields:
        Tuples of render_results(state) outputs followed by the updated state
    """
    if state.generated is None:
        yield (*render_results(state), state)
        return

    previous = state.improved_download

    try:
        state = initialize_ui_state(state)
        started = workflow.start_improve(state)
    except FlowBusyError as e:
        gr.Warning(str(e))
        yield (*render_results(state), state)
        return
    except LaminaError as e:
        logger.error(f"Cannot improve lamina: {e}")
        state.error = str(e)
        yield (*render_results(state), state)
        return

    yield (*render_results(state), state)
    if not started:
        return

    state = workflow.run_improve(state, fields)
    _discard(previous)
    if state.improved is not None:
        state.improved_download = _export(state.improved, IMPROVED_DOWNLOAD_NAME)

    yield (*render_results(state), state)


def select_template_file(path: str | None, state: UIState) -> tuple[Any, ...]:
    """Handle a template upload or removal.

    A selected template disables and blanks the style fields, because the
    template replaces them.

    Args:
        path: Uploaded file path, or None when the upload was cleared
        state: UI state

    Returns:
        Tuple of (style field updates..., template_info_markdown, updated_state)
    """
    try:
        template = validate_template_upload(path)
    except ValidationError as e:
        logger.warning(f"Template rejected: {e}")
        workflow.select_template(state, None)
        return (
            *style_field_updates(template_selected=False, clear=False),
            f"❌ **Invalid template**\n\n{e}",
            state,
        )

    state = workflow.select_template(state, template)
    if template is None:
        return (
            *style_field_updates(template_selected=False, clear=False),
            "*No template selected*",
            state,
        )

    return (
        *style_field_updates(template_selected=True, clear=True),
        f"📄 **Template:** {template.filename}\n\n"
        "*Color, texture and design detail fields are ignored while a template is selected.*",
        state,
    )
