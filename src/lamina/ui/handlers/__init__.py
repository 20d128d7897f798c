"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events:
- generation: Generate and Improve flows, template upload
- gallery: Saving laminas, the saved galleries and deletion
"""

from .gallery import (
    delete_selected_image,
    refresh_saved_galleries,
    render_galleries,
    save_generated_lamina,
    save_improved_lamina,
    select_improved_image,
    select_normal_image,
)
from .generation import (
    generate_lamina,
    improve_lamina,
    render_results,
    select_template_file,
)

__all__ = [
    # Generation handlers
    "generate_lamina",
    "improve_lamina",
    "render_results",
    "select_template_file",
    # Gallery handlers
    "delete_selected_image",
    "refresh_saved_galleries",
    "render_galleries",
    "save_generated_lamina",
    "save_improved_lamina",
    "select_improved_image",
    "select_normal_image",
]
