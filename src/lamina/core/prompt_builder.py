"""Prompt templates for the three remote operations.

Every function here is pure: the same FormFields always produce the same
prompt, and no input can make them fail. Empty text fields are rendered as
empty quoted slots rather than omitted, so the layout the model is asked to
produce never changes shape.

Prompts
-------
build_generation_prompt
    Text-to-image prompt for a blank 1080x1440 (3:4) Instagram graphic.
build_template_edit_prompt
    Directive asking the image-editing model to write the text onto a
    user-supplied template. It states its own 1030x1300 pixel safe area.
build_improvement_directive_prompt
    Meta-prompt asking a text model, acting as art director, to write one
    enhancement directive for the image-editing model.
build_edit_instruction
    Envelope around any directive sent to the image-editing model; it
    requires the model to keep the original text content.

Usage
-----
::

    fields = FormFields(header="X", title_line1="Y")
    prompt = build_generation_prompt(fields)
"""

from __future__ import annotations

from lamina.core.models import FormFields

# Fallbacks for empty visual-style fields in the generation prompt
DEFAULT_SHEET_COLOR = "light gray"
DEFAULT_TEXTURE = "minimalist and clean"
DEFAULT_OTHER_DETAILS = "none"

_GENERATION_TEMPLATE = """\
Create a visually appealing graphic for an Instagram post, with dimensions of 1080x1440 pixels (a 3:4 aspect ratio).

**Visual Style:**
- Background Color: {sheet_color}
- Texture/Style: {texture}
- Other Design Details: {other_details}

**Text Content and Layout:**
The entire text block must be contained within a safe area, ensuring clear margins from all edges. All text must be strictly left-aligned. Use a clean, modern, and highly readable font.

**Header (Top Section, smaller text):**
"{header}"

**Title (Main Focus, prominent text):**
- Line 1: "{title_line1}"
- Line 2: "{title_line2}"
- Line 3: "{title_line3}"

**Main Body (Middle Section):**
Organize the following points clearly, for example with bullet points or subtle separators.
- Point 1: "{point1}"
- Point 2: "{point2}"
- Point 3: "{point3}"
- Point 4: "{point4}"

**Footer (Bottom Section):**
- "{footer}"

Generate the image based on these detailed instructions. Do not add any text or elements not specified here."""

_TEMPLATE_EDIT_TEMPLATE = """\
Take the provided image template and add the following text content onto it.
The text must be perfectly integrated, respecting the original design, style, and color palette.
All text must be strictly left-aligned and placed within a safe area of 1030x1300 pixels to ensure margins.
Use a font that complements the template's existing typography.

**Header:**
- "{header}"

**Title:**
- Line 1: "{title_line1}"
- Line 2: "{title_line2}"
- Line 3: "{title_line3}"

**Body:**
- Point 1: "{point1}"
- Point 2: "{point2}"
- Point 3: "{point3}"
- Point 4: "{point4}"

**Footer:**
- "{footer}\""""

_IMPROVEMENT_TEMPLATE = """\
You are a world-class graphic designer and art director. Your task is to generate a clear, direct, and impactful instruction for an image editing AI. This instruction must creatively enhance an existing Instagram graphic.

Instead of subtle tweaks, propose a noticeable visual upgrade. Focus on one or two of these areas:
- **Typography:** Suggest a more dynamic font pairing or a different weight/style for the title to make it pop.
- **Color Palette:** Propose a complementary accent color or a slight shift in the background hue to improve mood and readability.
- **Layout:** Suggest a minor adjustment in spacing or alignment to create a better visual flow.
- **Graphic Elements:** Suggest adding a subtle, non-intrusive graphic element (like a geometric shape, a gradient overlay, or a border) that complements the theme.

Your output must be ONLY the instruction/prompt itself. Be specific.

Here is the text content of the graphic:
- Header: "{header}"
- Title: "{title_line1}", "{title_line2}", "{title_line3}"
- Body Point 1: "{point1}"
- Body Point 2: "{point2}"
- Body Point 3: "{point3}"
- Body Point 4: "{point4}"
- Footer: "{footer}"

Example of a strong instruction: "Change the title font to a bold, elegant serif to create more contrast. Introduce a soft gradient to the background using a slightly darker shade of the current color. Add thin, clean lines to separate the bullet points for better organization."

Generate the enhancement prompt now."""

_EDIT_INSTRUCTION_TEMPLATE = """\
You are an advanced image editing AI. You have received an image and a creative directive from an art director. Your mission is to apply this directive to the image.

**Art Director's Directive:**
"{directive}"

Execute this directive precisely. You MUST preserve all original text content and its wording. The goal is to visually transform and enhance the existing image according to the directive, not to create a new one from scratch."""


def _text_slots(fields: FormFields) -> dict[str, str]:
    """Values for the text placeholders shared by every template."""
    return {
        "header": fields.header,
        "title_line1": fields.title_line1,
        "title_line2": fields.title_line2,
        "title_line3": fields.title_line3,
        "point1": fields.bullet_point(1),
        "point2": fields.bullet_point(2),
        "point3": fields.bullet_point(3),
        "point4": fields.bullet_point(4),
        "footer": fields.footer,
    }


def build_generation_prompt(fields: FormFields) -> str:
    """Build the text-to-image prompt for a new lamina.

    Args:
        fields: Form content. Empty style fields fall back to neutral defaults,
            empty text fields are rendered as empty slots.

    Returns:
        The complete generation prompt.
    """
    return _GENERATION_TEMPLATE.format(
        sheet_color=fields.sheet_color or DEFAULT_SHEET_COLOR,
        texture=fields.texture or DEFAULT_TEXTURE,
        other_details=fields.other_details or DEFAULT_OTHER_DETAILS,
        **_text_slots(fields),
    )


def build_template_edit_prompt(fields: FormFields) -> str:
    """Build the directive that writes the form text onto a template image.

    The style fields are not used: the template supplies the visual style.
    """
    return _TEMPLATE_EDIT_TEMPLATE.format(**_text_slots(fields))


def build_improvement_directive_prompt(fields: FormFields) -> str:
    """Build the meta-prompt that asks a text model for an improvement directive.

    The form text is included as context for tone, not for rendering.
    """
    return _IMPROVEMENT_TEMPLATE.format(**_text_slots(fields))


def build_edit_instruction(directive: str) -> str:
    """Wrap a directive in the instruction sent to the image-editing model."""
    return _EDIT_INSTRUCTION_TEMPLATE.format(directive=directive)
