"""Workflow orchestration for the generate, improve and save/delete flows.

Each function takes the session :class:`UIState`, applies one user action and
returns the state. They hold no Gradio code, so the flows can be exercised
directly in tests; ``lamina.ui.handlers`` translates the results into UI
updates.

Generate and Improve each come in two steps. ``start_*`` claims the flow
(checking and setting the status under one lock) and clears the previous
results; ``run_*`` makes the remote calls. ``generate`` and ``improve`` run
both steps. The UI handlers render the busy state between the two.

State transitions
-----------------
Generate::

    IDLE | READY | ERROR -> GENERATING -> READY (generated set)
                                       -> ERROR (generated unset)

Improve (requires a generated artifact)::

    READY | ERROR -> IMPROVING -> READY (improved set)
                               -> ERROR (generated kept)

While GENERATING or IMPROVING both flows reject new triggers with
:class:`FlowBusyError`. Remote errors are not retried; their message goes to
the single error slot, which every new attempt clears first.
"""

from __future__ import annotations

import logging
import threading

from lamina.core.config import config
from lamina.core.errors import FlowBusyError
from lamina.core.models import (
    ArtifactStage,
    FormFields,
    GeneratedArtifact,
    SavedImage,
    TemplateAsset,
)
from lamina.core.prompt_builder import build_generation_prompt, build_template_edit_prompt

from .models import FlowStatus, UIState

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

# Serializes the busy check and the status change of every session
_status_lock = threading.Lock()


def _error_message(error: Exception) -> str:
    return str(error) or UNKNOWN_ERROR_MESSAGE


def _claim(state: UIState, flow: str, status: FlowStatus) -> None:
    """Move an idle state to ``status``, atomically.

    Raises:
        FlowBusyError: If a generate or improve flow is already running
    """
    with _status_lock:
        if state.is_busy:
            logger.warning(f"Rejected {flow} while {state.status.value}")
            raise FlowBusyError(
                f"Please wait: the lamina is still {state.status.value}. "
                f"Try {flow} again when it finishes."
            )
        state.status = status


def select_template(state: UIState, template: TemplateAsset | None) -> UIState:
    """Set or clear the template asset.

    Selecting a template blanks the style fields, which the template replaces.
    """
    state.template = template
    if template is not None:
        state.fields = state.fields.without_style()
        logger.info(f"Template selected: {template.filename} ({template.mime_type})")
    else:
        logger.info("Template cleared")
    return state


def start_generate(
    state: UIState, fields: FormFields, template: TemplateAsset | None = None
) -> UIState:
    """Claim the Generate flow and clear the previous results.

    Raises:
        FlowBusyError: If a generate or improve flow is already running
    """
    _claim(state, "generating", FlowStatus.GENERATING)

    state.fields = fields
    state.template = template
    state.error = None
    state.generated = None
    state.improved = None
    state.generated_download = None
    state.improved_download = None
    return state


def run_generate(state: UIState) -> UIState:
    """Make the remote call of a started Generate flow.

    With a template the form text is written onto the template through the
    image-editing model; otherwise a new image is generated from text.

    Returns:
        Updated state (READY with ``generated`` set, or ERROR)
    """
    fields = state.fields
    template = state.template

    try:
        if template is not None:
            logger.info(f"Generating lamina from template {template.filename}")
            image_base64, mime_type = state.client.edit_image(
                template.image_base64,
                template.mime_type,
                build_template_edit_prompt(fields),
            )
        else:
            logger.info("Generating lamina from text")
            image_base64 = state.client.generate_from_text(
                build_generation_prompt(fields), config.aspect_ratio
            )
            mime_type = config.output_mime_type
    except Exception as e:
        logger.error(f"Generate flow failed: {e}", exc_info=True)
        state.error = _error_message(e)
        state.status = FlowStatus.ERROR
        return state

    state.generated = GeneratedArtifact(
        image_base64=image_base64,
        stage=ArtifactStage.NORMAL,
        mime_type=mime_type,
    )
    state.status = FlowStatus.READY
    logger.info("Generate flow complete")
    return state


def generate(
    state: UIState, fields: FormFields, template: TemplateAsset | None = None
) -> UIState:
    """Run the Generate flow.

    Args:
        state: Initialized UI state
        fields: Form content to render
        template: Optional template image

    Returns:
        Updated state (READY with ``generated`` set, or ERROR)

    Raises:
        FlowBusyError: If a generate or improve flow is already running
    """
    start_generate(state, fields, template)
    return run_generate(state)


def start_improve(state: UIState) -> bool:
    """Claim the Improve flow and clear the previous improved result.

    Returns:
        False, leaving the state untouched, if there is no generated artifact

    Raises:
        FlowBusyError: If a generate or improve flow is already running
    """
    if state.generated is None:
        logger.debug("Improve requested without a generated lamina, ignoring")
        return False

    _claim(state, "improving", FlowStatus.IMPROVING)

    state.error = None
    state.improved = None
    state.improved_download = None
    return True


def run_improve(state: UIState, fields: FormFields | None = None) -> UIState:
    """Make the remote calls of a started Improve flow.

    The improvement directive is requested first; the edit only runs if that
    succeeds.

    Args:
        state: State with a claimed Improve flow
        fields: Current form content for the directive (defaults to the
            content of the last Generate)

    Returns:
        Updated state (READY with ``improved`` set, or ERROR with
        ``generated`` unchanged)
    """
    source = state.generated

    try:
        directive = state.client.generate_improvement_directive(
            fields if fields is not None else state.fields
        )
        logger.info("Applying improvement directive")
        image_base64, mime_type = state.client.edit_image(
            source.image_base64, source.mime_type, directive
        )
    except Exception as e:
        logger.error(f"Improve flow failed: {e}", exc_info=True)
        state.error = _error_message(e)
        state.status = FlowStatus.ERROR
        return state

    state.improved = GeneratedArtifact(
        image_base64=image_base64,
        stage=ArtifactStage.IMPROVED,
        mime_type=mime_type,
    )
    state.status = FlowStatus.READY
    logger.info("Improve flow complete")
    return state


def improve(state: UIState, fields: FormFields | None = None) -> UIState:
    """Run the Improve flow on the current generated artifact.

    Without a generated artifact this is a no-op.

    Args:
        state: Initialized UI state
        fields: Current form content for the directive

    Returns:
        Updated state

    Raises:
        FlowBusyError: If a generate or improve flow is already running
    """
    if not start_improve(state):
        return state
    return run_improve(state, fields)


def current_artifact(state: UIState, stage: ArtifactStage) -> GeneratedArtifact | None:
    """Return the artifact shown for ``stage``."""
    return state.improved if stage == ArtifactStage.IMPROVED else state.generated


def save_artifact(state: UIState, stage: ArtifactStage) -> SavedImage | None:
    """Persist the current artifact of ``stage``.

    Returns:
        The saved record, or None if there is nothing to save
    """
    artifact = current_artifact(state, stage)
    if artifact is None:
        logger.warning(f"No {stage.value} lamina to save")
        return None
    return state.store.add(artifact.image_base64, stage)


def delete_saved(state: UIState, image_id: str | None, confirmed: bool) -> bool:
    """Delete a saved lamina once the user has confirmed.

    Returns:
        True if a record was removed
    """
    if not image_id:
        return False
    if not confirmed:
        logger.info(f"Delete of {image_id} not confirmed, ignoring")
        return False

    removed = state.store.delete(image_id)
    if removed and state.selected_saved_id == image_id:
        state.selected_saved_id = None
    return removed
