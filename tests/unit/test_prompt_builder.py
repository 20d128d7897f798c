"""Unit tests for the prompt templates."""

from dataclasses import fields as dataclass_fields

from lamina.core.models import FormFields
from lamina.core.prompt_builder import (
    DEFAULT_OTHER_DETAILS,
    DEFAULT_SHEET_COLOR,
    DEFAULT_TEXTURE,
    build_edit_instruction,
    build_generation_prompt,
    build_improvement_directive_prompt,
    build_template_edit_prompt,
)

TEXT_FIELDS = [
    f.name
    for f in dataclass_fields(FormFields)
    if f.name not in ("sheet_color", "texture", "other_details")
]


def _distinct_fields() -> FormFields:
    """Every field set to a unique marker."""
    return FormFields(**{f.name: f"<{f.name}>" for f in dataclass_fields(FormFields)})


class TestBuildGenerationPrompt:
    """Tests for build_generation_prompt."""

    def test_contains_every_field_verbatim(self):
        fields = _distinct_fields()
        prompt = build_generation_prompt(fields)
        for value in fields.to_values():
            assert value in prompt

    def test_deterministic(self):
        fields = FormFields.defaults()
        assert build_generation_prompt(fields) == build_generation_prompt(fields)

    def test_states_aspect_ratio_and_alignment(self):
        prompt = build_generation_prompt(FormFields())
        assert "1080x1440" in prompt
        assert "3:4" in prompt
        assert "left-aligned" in prompt

    def test_empty_text_fields_keep_their_slots(self):
        prompt = build_generation_prompt(FormFields())
        assert '**Header (Top Section, smaller text):**\n""' in prompt
        assert '- Line 3: ""' in prompt
        assert '- Point 4: "  "' in prompt
        assert '- ""' in prompt

    def test_empty_style_fields_fall_back(self):
        prompt = build_generation_prompt(FormFields())
        assert f"Background Color: {DEFAULT_SHEET_COLOR}" in prompt
        assert f"Texture/Style: {DEFAULT_TEXTURE}" in prompt
        assert f"Other Design Details: {DEFAULT_OTHER_DETAILS}" in prompt

    def test_bullet_lines_are_joined(self):
        fields = FormFields(bullet3_line1="Deep", bullet3_line2="Work", bullet3_line3="Now")
        assert '- Point 3: "Deep Work Now"' in build_generation_prompt(fields)

    def test_braces_in_field_text_are_literal(self):
        fields = FormFields(header="{title_line1} {0}")
        assert '"{title_line1} {0}"' in build_generation_prompt(fields)


class TestBuildTemplateEditPrompt:
    """Tests for build_template_edit_prompt."""

    def test_contains_text_fields(self):
        fields = _distinct_fields()
        prompt = build_template_edit_prompt(fields)
        for name in TEXT_FIELDS:
            assert f"<{name}>" in prompt

    def test_ignores_style_fields(self):
        prompt = build_template_edit_prompt(_distinct_fields())
        assert "<sheet_color>" not in prompt
        assert "<texture>" not in prompt
        assert "<other_details>" not in prompt

    def test_uses_pixel_safe_area(self):
        prompt = build_template_edit_prompt(FormFields())
        assert "1030x1300 pixels" in prompt
        assert "provided image template" in prompt

    def test_ends_with_footer_slot(self):
        prompt = build_template_edit_prompt(FormFields(footer="@handle"))
        assert prompt.endswith('- "@handle"')


class TestBuildImprovementDirectivePrompt:
    """Tests for build_improvement_directive_prompt."""

    def test_contains_text_content(self):
        fields = FormFields(header="X", title_line1="Y", footer="Z")
        prompt = build_improvement_directive_prompt(fields)
        assert '- Header: "X"' in prompt
        assert '"Y", "", ""' in prompt
        assert '- Footer: "Z"' in prompt

    def test_asks_for_instruction_only(self):
        prompt = build_improvement_directive_prompt(FormFields())
        assert "art director" in prompt
        assert "ONLY the instruction" in prompt


class TestBuildEditInstruction:
    """Tests for build_edit_instruction."""

    def test_wraps_directive(self):
        instruction = build_edit_instruction("Add a gold border.")
        assert '"Add a gold border."' in instruction

    def test_requires_text_preservation(self):
        instruction = build_edit_instruction("anything")
        assert "MUST preserve all original text content" in instruction
