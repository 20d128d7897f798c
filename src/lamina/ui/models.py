"""Data models for the Lamina UI session state."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lamina.core.models import FormFields, GeneratedArtifact, TemplateAsset

logger = logging.getLogger(__name__)


class FlowStatus(str, Enum):
    """Status of the generate/improve flows.

    Generate and Improve share one result area, so a single status is kept
    for both. GENERATING and IMPROVING are busy states in which neither flow
    may start.
    """

    IDLE = "idle"
    GENERATING = "generating"
    IMPROVING = "improving"
    READY = "ready"
    ERROR = "error"

    @property
    def is_busy(self) -> bool:
        return self in (FlowStatus.GENERATING, FlowStatus.IMPROVING)


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each user session gets its own UIState instance. All event handlers take
    the state as input and return it as output; nothing is kept in globals.

    Attributes
    ----------
    fields : FormFields
        Form content at the last submit
    template : TemplateAsset | None
        Uploaded template image, kept until replaced or cleared
    status : FlowStatus
        Status of the generate/improve flows
    generated : GeneratedArtifact | None
        Result of the last successful Generate flow
    improved : GeneratedArtifact | None
        Result of the last successful Improve flow
    error : str | None
        The single user-visible error slot
    client : Any | None
        GeminiImageClient instance
    store : Any | None
        SavedImageStore instance
    generated_download : str | None
        Exported file of the generated lamina
    improved_download : str | None
        Exported file of the improved lamina
    gallery_ids : dict[str, list[str]]
        Ids shown in each gallery ("normal", "improved"), in display order
    selected_saved_id : str | None
        Saved lamina currently selected in the gallery view
    """

    fields: FormFields = field(default_factory=FormFields.defaults)
    template: TemplateAsset | None = None

    # Generate/Improve flow state
    status: FlowStatus = FlowStatus.IDLE
    generated: GeneratedArtifact | None = None
    improved: GeneratedArtifact | None = None
    error: str | None = None

    # Core components
    client: Any | None = None  # GeminiImageClient instance
    store: Any | None = None  # SavedImageStore instance

    # Exported files backing the download buttons
    generated_download: str | None = None
    improved_download: str | None = None

    # Gallery view state
    gallery_ids: dict[str, list[str]] = field(default_factory=dict)  # Displayed ids per type
    selected_saved_id: str | None = None

    def is_initialized(self) -> bool:
        """Check if the remote client and the store are ready.

        Returns:
            True if client and store are set
        """
        return self.client is not None and self.store is not None

    @property
    def is_busy(self) -> bool:
        """True while a generate or improve flow is in flight."""
        return self.status.is_busy

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(initialized={self.is_initialized()}, "
            f"status={self.status.value}, "
            f"generated={self.generated is not None}, "
            f"improved={self.improved is not None}, "
            f"template={self.template.filename if self.template else None})"
        )


# Form layout: (section title, [(field name, label), ...])
FORM_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    ("1. Sheet Color", [("sheet_color", "Background color and overall style")]),
    ("2. Sheet Header", [("header", "Header text")]),
    (
        "3. Sheet Title",
        [
            ("title_line1", "First line"),
            ("title_line2", "Second line"),
            ("title_line3", "Third line"),
        ],
    ),
    (
        "4. Sheet Body",
        [
            (f"bullet{number}_line{line}", f"Bullet {number} - line {line}")
            for number in (1, 2, 3, 4)
            for line in (1, 2, 3)
        ],
    ),
    ("5. Sheet Footer", [("footer", "Footer text")]),
    ("6. Texture and Style", [("texture", "Texture, font style, accents")]),
    ("7. Other Design Details", [("other_details", "Icons, graphic elements, etc.")]),
]

TEMPLATE_SECTION_TITLE = "8. Upload Sheet Template (Optional)"

# Download file name stems
GENERATED_DOWNLOAD_NAME = "lamina-generada"
IMPROVED_DOWNLOAD_NAME = "lamina-mejorada-ia"
