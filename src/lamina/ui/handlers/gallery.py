"""Saved-lamina gallery handlers: save, browse and delete."""

import logging
from datetime import datetime
from typing import Any

import gradio as gr

from lamina.core.errors import LaminaError
from lamina.core.images import decode_image
from lamina.core.models import ArtifactStage, SavedImage

from .. import workflow
from ..models import UIState
from ..state import initialize_ui_state

logger = logging.getLogger(__name__)


def _format_saved_at(saved_at: int) -> str:
    return datetime.fromtimestamp(saved_at / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _gallery_items(images: list[SavedImage]) -> tuple[list[tuple[Any, str]], list[str]]:
    """Decode records for a gr.Gallery, skipping undecodable images.

    Returns:
        Tuple of (gallery items, ids in the same order)
    """
    items = []
    ids = []
    for image in images:
        try:
            picture = decode_image(image.image_base64)
        except Exception as e:
            logger.warning(f"Skipping saved lamina {image.id}: {e}")
            continue
        items.append((picture, f"{image.id} · {_format_saved_at(image.saved_at)}"))
        ids.append(image.id)
    return items, ids


def _selection_markdown(state: UIState) -> str:
    if not state.selected_saved_id:
        return "*Select a lamina to delete it*"
    return f"**Selected:** {state.selected_saved_id}"


def render_galleries(state: UIState) -> tuple[list, list, str]:
    """Build both gallery views from the store.

    Returns:
        Tuple of (normal_items, improved_items, selection_markdown)
    """
    normal, improved = state.store.galleries()
    normal_items, normal_ids = _gallery_items(normal)
    improved_items, improved_ids = _gallery_items(improved)
    state.gallery_ids = {
        ArtifactStage.NORMAL.value: normal_ids,
        ArtifactStage.IMPROVED.value: improved_ids,
    }
    if state.selected_saved_id and state.store.get(state.selected_saved_id) is None:
        state.selected_saved_id = None
    return normal_items, improved_items, _selection_markdown(state)


def refresh_saved_galleries(state: UIState) -> tuple[list, list, str, UIState]:
    """Load the galleries when the saved tab is opened.

    Returns:
        Tuple of (normal_items, improved_items, selection_markdown, updated_state)
    """
    try:
        state = initialize_ui_state(state)
    except LaminaError as e:
        logger.error(f"Cannot load saved laminas: {e}")
        return [], [], f"❌ {e}", state

    return (*render_galleries(state), state)


def _save(state: UIState, stage: ArtifactStage) -> tuple[list, list, str, UIState]:
    try:
        state = initialize_ui_state(state)
    except LaminaError as e:
        gr.Warning(str(e))
        return [], [], f"❌ {e}", state

    record = workflow.save_artifact(state, stage)
    if record is None:
        gr.Warning("There is no lamina to save yet.")
    else:
        gr.Info("Lamina saved!")
    return (*render_galleries(state), state)


def save_generated_lamina(state: UIState) -> tuple[list, list, str, UIState]:
    """Save the generated lamina to the normal gallery."""
    return _save(state, ArtifactStage.NORMAL)


def save_improved_lamina(state: UIState) -> tuple[list, list, str, UIState]:
    """Save the AI-improved lamina to the improved gallery."""
    return _save(state, ArtifactStage.IMPROVED)


def _select(index: int, image_type: ArtifactStage, state: UIState) -> tuple[str, UIState]:
    ids = state.gallery_ids.get(image_type.value, [])
    if index is None or index >= len(ids):
        state.selected_saved_id = None
    else:
        state.selected_saved_id = ids[index]
    return _selection_markdown(state), state


def select_normal_image(evt: gr.SelectData, state: UIState) -> tuple[str, UIState]:
    """Select a lamina in the normal gallery."""
    return _select(evt.index, ArtifactStage.NORMAL, state)


def select_improved_image(evt: gr.SelectData, state: UIState) -> tuple[str, UIState]:
    """Select a lamina in the improved gallery."""
    return _select(evt.index, ArtifactStage.IMPROVED, state)


def delete_selected_image(confirmed: bool, state: UIState) -> tuple[list, list, str, bool, UIState]:
    """Delete the selected lamina after the user ticked the confirmation box.

    Args:
        confirmed: State of the "confirm delete" checkbox
        state: UI state

    Returns:
        Tuple of (normal_items, improved_items, selection_markdown,
        confirm_checkbox_value, updated_state)
    """
    try:
        state = initialize_ui_state(state)
    except LaminaError as e:
        gr.Warning(str(e))
        return [], [], f"❌ {e}", False, state

    if not state.selected_saved_id:
        gr.Warning("Select a lamina to delete first.")
        return (*render_galleries(state), confirmed, state)

    if not confirmed:
        gr.Warning("Tick 'Yes, delete this lamina' to confirm.")
        return (*render_galleries(state), False, state)

    image_id = state.selected_saved_id
    if workflow.delete_saved(state, image_id, confirmed=True):
        gr.Info(f"Deleted {image_id}")
    return (*render_galleries(state), False, state)
