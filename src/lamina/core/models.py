"""Data models shared by the prompt builder, the remote client and the store.

FormFields, TemplateAsset and GeneratedArtifact are transient session data
and are plain dataclasses. SavedImage is persisted as JSON and is a Pydantic
model so the stored collection is validated on load. Its JSON keys keep the
camelCase names of the storage format (``imageBase64``, ``savedAt``).
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class FormFields:
    """Text content and style descriptors of one lamina.

    Every field is an independent, optional string. Empty strings are valid
    and still occupy their slot in the generated prompts.
    """

    sheet_color: str = ""
    header: str = ""
    title_line1: str = ""
    title_line2: str = ""
    title_line3: str = ""
    bullet1_line1: str = ""
    bullet1_line2: str = ""
    bullet1_line3: str = ""
    bullet2_line1: str = ""
    bullet2_line2: str = ""
    bullet2_line3: str = ""
    bullet3_line1: str = ""
    bullet3_line2: str = ""
    bullet3_line3: str = ""
    bullet4_line1: str = ""
    bullet4_line2: str = ""
    bullet4_line3: str = ""
    footer: str = ""
    texture: str = ""
    other_details: str = ""

    @classmethod
    def defaults(cls) -> FormFields:
        """Return the demo content a new session starts with."""
        return cls(
            sheet_color="White with a subtle grain texture",
            header="UNLOCK YOUR POTENTIAL",
            title_line1="The Art of Productivity",
            title_line2="Master Your Day",
            bullet1_line1="Morning Routine: Start your day with intention.",
            bullet1_line2="Set clear, achievable goals.",
            bullet2_line1="Time Blocking: Allocate specific time slots for tasks.",
            bullet2_line2="Eliminate distractions.",
            bullet3_line1="Deep Work: Focus on one high-impact task at a time.",
            bullet3_line2="Take regular breaks to recharge.",
            footer="yourhandle | yourwebsite.com",
            texture="Modern, clean, sans-serif fonts, with gold accents.",
            other_details="Include minimalist line art icons for each bullet point.",
        )

    @classmethod
    def from_values(cls, values) -> FormFields:
        """Build from values ordered like :data:`FORM_FIELD_NAMES`.

        ``None`` values (cleared Gradio textboxes) become empty strings.
        """
        values = list(values)
        if len(values) != len(FORM_FIELD_NAMES):
            raise ValueError(
                f"Expected {len(FORM_FIELD_NAMES)} form values, got {len(values)}"
            )
        return cls(**{name: value or "" for name, value in zip(FORM_FIELD_NAMES, values)})

    def to_values(self) -> list[str]:
        """Return field values ordered like :data:`FORM_FIELD_NAMES`."""
        return [getattr(self, name) for name in FORM_FIELD_NAMES]

    def bullet_point(self, number: int) -> str:
        """Join the three lines of bullet group ``number`` (1-4) with spaces."""
        if number not in (1, 2, 3, 4):
            raise ValueError(f"Bullet group must be 1-4, got {number}")
        return " ".join(getattr(self, f"bullet{number}_line{line}") for line in (1, 2, 3))

    def without_style(self) -> FormFields:
        """Copy with the fields a template image replaces blanked out."""
        return replace(self, sheet_color="", texture="", other_details="")


FORM_FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(FormFields))

# Fields ignored when a template image is supplied
STYLE_FIELD_NAMES: tuple[str, ...] = ("sheet_color", "texture", "other_details")


@dataclass(frozen=True)
class TemplateAsset:
    """User-supplied template image, base64 encoded."""

    image_base64: str
    mime_type: str
    filename: str = ""


class ArtifactStage(str, Enum):
    """Pipeline stage that produced an artifact. Values match SavedImage.type."""

    NORMAL = "normal"
    IMPROVED = "improved"


@dataclass(frozen=True)
class GeneratedArtifact:
    """Result of a successful remote generate or edit call."""

    image_base64: str
    stage: ArtifactStage = ArtifactStage.NORMAL
    mime_type: str = "image/jpeg"


class SavedImage(BaseModel):
    """One persisted lamina.

    Attributes:
        id: Unique id within the collection (``lamina-<saved_at>``).
        type: ``"normal"`` or ``"improved"``.
        image_base64: Encoded image bytes.
        saved_at: Save time in milliseconds since the epoch.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    type: Literal["normal", "improved"]
    image_base64: str = Field(..., alias="imageBase64")
    saved_at: int = Field(..., alias="savedAt")

    def to_storage(self) -> dict:
        """Serialise with the storage format's camelCase keys."""
        return self.model_dump(by_alias=True)
