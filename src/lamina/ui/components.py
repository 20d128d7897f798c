"""Reusable UI components for the Lamina Gradio interface."""

from typing import Any

import gradio as gr

from lamina.core.models import FORM_FIELD_NAMES, STYLE_FIELD_NAMES, FormFields

from .models import FORM_SECTIONS, FlowStatus, UIState


class FormSectionUI:
    """One labeled section of the lamina form.

    Each section renders a title and one textbox per field. Sections with
    more than three fields (the body) are laid out as rows of three, one row
    per bullet group.
    """

    def __init__(self, title: str, field_specs: list[tuple[str, str]], initial: FormFields):
        """Initialize a form section.

        Args:
            title: Section title (e.g. "3. Sheet Title")
            field_specs: (field name, label) pairs in display order
            initial: Initial field values
        """
        self.title = title
        self.textboxes: dict[str, gr.Textbox] = {}

        with gr.Group():
            gr.Markdown(f"### {title}")
            if len(field_specs) > 3:
                for start in range(0, len(field_specs), 3):
                    with gr.Row():
                        for name, label in field_specs[start : start + 3]:
                            self._add_textbox(name, label, initial)
            else:
                for name, label in field_specs:
                    self._add_textbox(name, label, initial)

    def _add_textbox(self, name: str, label: str, initial: FormFields) -> None:
        self.textboxes[name] = gr.Textbox(
            label=label,
            value=getattr(initial, name),
            lines=1,
            elem_id=f"field-{name.replace('_', '-')}",
        )


class LaminaFormUI:
    """All form sections of the generator tab.

    Components are exposed in :data:`FORM_FIELD_NAMES` order so handler
    inputs can be converted with :meth:`FormFields.from_values`.
    """

    def __init__(self, initial: FormFields | None = None):
        initial = initial or FormFields.defaults()
        self.sections = [FormSectionUI(title, specs, initial) for title, specs in FORM_SECTIONS]
        self.textboxes: dict[str, gr.Textbox] = {}
        for section in self.sections:
            self.textboxes.update(section.textboxes)

    def get_field_components(self) -> list[gr.Textbox]:
        """Return the textboxes ordered like FORM_FIELD_NAMES."""
        return [self.textboxes[name] for name in FORM_FIELD_NAMES]

    def get_style_components(self) -> list[gr.Textbox]:
        """Return the textboxes a template image overrides."""
        return [self.textboxes[name] for name in STYLE_FIELD_NAMES]


def style_field_updates(template_selected: bool, clear: bool) -> list[dict[str, Any]]:
    """Updates for the style textboxes when a template is set or cleared.

    Args:
        template_selected: Whether a template image is now selected
        clear: Whether to blank the textbox values

    Returns:
        One update per style field, in STYLE_FIELD_NAMES order
    """
    updates = []
    for _ in STYLE_FIELD_NAMES:
        if clear:
            updates.append(gr.update(value="", interactive=not template_selected))
        else:
            updates.append(gr.update(interactive=not template_selected))
    return updates


def format_status(state: UIState) -> str:
    """Format the flow status and error slot as markdown."""
    if state.error:
        return f"❌ **Error**\n\n{state.error}"
    if state.status == FlowStatus.GENERATING:
        return "⏳ *Generating your lamina...*"
    if state.status == FlowStatus.IMPROVING:
        return "⏳ *Improving your lamina with AI...*"
    if state.improved is not None:
        return "✅ **Improved lamina ready**"
    if state.generated is not None:
        return "✅ **Lamina ready** - download it, save it, or improve it with AI"
    return "*Your lamina will appear here*"
