"""Gradio UI for the Lamina Generator."""

import logging
import sys

import gradio as gr

from lamina.core.config import config
from lamina.core.errors import MissingCredentialError
from lamina.core.models import FormFields

from .adapters import split_form_inputs
from .components import LaminaFormUI
from .handlers import (
    delete_selected_image,
    generate_lamina,
    improve_lamina,
    refresh_saved_galleries,
    save_generated_lamina,
    save_improved_lamina,
    select_improved_image,
    select_normal_image,
    select_template_file,
)
from .models import TEMPLATE_SECTION_TITLE, UIState

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> tuple[gr.Blocks, str]:
    """Create the Gradio UI.

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    custom_css = """
    .lamina-result img {
        object-fit: contain;
    }
    """

    app = gr.Blocks(title="Lamina Generator")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            """
            # Instagram Post Generator AI
            ### Create Instagram laminas in seconds with Gemini
            """
        )

        with gr.Tabs():
            with gr.Tab("Generator", id="generator_tab"):
                saved_outputs = create_generator_tab(ui_state)

            with gr.Tab("Saved Laminas", id="saved_tab") as saved_tab:
                gallery_components = create_saved_tab(ui_state)

                saved_tab.select(
                    fn=refresh_saved_galleries,
                    inputs=[ui_state],
                    outputs=[
                        gallery_components["normal_gallery"],
                        gallery_components["improved_gallery"],
                        gallery_components["selection_info"],
                        ui_state,
                    ],
                )

        gallery_outputs = [
            gallery_components["normal_gallery"],
            gallery_components["improved_gallery"],
            gallery_components["selection_info"],
            ui_state,
        ]
        saved_outputs["save_generated_btn"].click(
            fn=save_generated_lamina,
            inputs=[ui_state],
            outputs=gallery_outputs,
        )
        saved_outputs["save_improved_btn"].click(
            fn=save_improved_lamina,
            inputs=[ui_state],
            outputs=gallery_outputs,
        )

    return app, custom_css


def create_generator_tab(ui_state) -> dict:
    """Create the form and result area.

    Args:
        ui_state: UI state component

    Returns:
        Dictionary with the save buttons, wired up once the gallery exists
    """
    with gr.Row():
        # Form column
        with gr.Column(scale=1):
            form = LaminaFormUI(FormFields.defaults())

            with gr.Group():
                gr.Markdown(f"### {TEMPLATE_SECTION_TITLE}")
                template_input = gr.Image(
                    label="Template image",
                    type="filepath",
                    sources=["upload"],
                    height=250,
                )
                template_info = gr.Markdown(
                    "*If you upload a template, the color, texture and details fields are ignored.*"
                )

            generate_btn = gr.Button("Generate Lamina", variant="primary", size="lg")

        # Results column
        with gr.Column(scale=1):
            status_output = gr.Markdown(value="*Your lamina will appear here*")

            generated_image = gr.Image(
                label="GENERATED LAMINA",
                type="pil",
                interactive=False,
                height=600,
                elem_classes="lamina-result",
            )

            with gr.Column(visible=False) as generated_actions:
                download_generated_btn = gr.DownloadButton("Download Lamina", visible=False)
                save_generated_btn = gr.Button("Save Lamina")
                improve_btn = gr.Button(
                    "Improve and Review Lamina with AI", variant="secondary"
                )

            with gr.Column(visible=False) as improved_group:
                improved_image = gr.Image(
                    label="AI-IMPROVED LAMINA",
                    type="pil",
                    interactive=False,
                    height=600,
                    elem_classes="lamina-result",
                )
                download_improved_btn = gr.DownloadButton("Download", visible=False)
                save_improved_btn = gr.Button("Save AI-Improved Lamina")

    result_outputs = [
        generated_image,
        generated_actions,
        download_generated_btn,
        improved_group,
        improved_image,
        download_improved_btn,
        status_output,
        generate_btn,
        ui_state,
    ]
    form_inputs = [*form.get_field_components(), ui_state]

    def generate_wrapper(*values):
        """Convert flat form values and run the Generate flow."""
        fields, state = split_form_inputs(list(values))
        yield from generate_lamina(fields, state)

    def improve_wrapper(*values):
        """Convert flat form values and run the Improve flow."""
        fields, state = split_form_inputs(list(values))
        yield from improve_lamina(fields, state)

    generate_btn.click(
        fn=generate_wrapper,
        inputs=form_inputs,
        outputs=result_outputs,
    )

    improve_btn.click(
        fn=improve_wrapper,
        inputs=form_inputs,
        outputs=result_outputs,
    )

    template_input.change(
        fn=select_template_file,
        inputs=[template_input, ui_state],
        outputs=[*form.get_style_components(), template_info, ui_state],
    )

    return {
        "save_generated_btn": save_generated_btn,
        "save_improved_btn": save_improved_btn,
    }


def create_saved_tab(ui_state) -> dict:
    """Create the saved-lamina galleries.

    Args:
        ui_state: UI state component

    Returns:
        Dictionary of gallery components for event handling
    """
    gr.Markdown("## Normal Laminas")
    normal_gallery = gr.Gallery(
        label="Normal laminas",
        columns=4,
        height="auto",
        object_fit="contain",
        allow_preview=False,
    )

    gr.Markdown("## AI-Improved Laminas")
    improved_gallery = gr.Gallery(
        label="AI-improved laminas",
        columns=4,
        height="auto",
        object_fit="contain",
        allow_preview=False,
    )

    with gr.Row():
        selection_info = gr.Markdown("*Select a lamina to delete it*")
        confirm_delete = gr.Checkbox(label="Yes, delete this lamina", value=False)
        delete_btn = gr.Button("Delete", variant="stop")

    normal_gallery.select(
        fn=select_normal_image,
        inputs=[ui_state],
        outputs=[selection_info, ui_state],
    )
    improved_gallery.select(
        fn=select_improved_image,
        inputs=[ui_state],
        outputs=[selection_info, ui_state],
    )
    delete_btn.click(
        fn=delete_selected_image,
        inputs=[confirm_delete, ui_state],
        outputs=[normal_gallery, improved_gallery, selection_info, confirm_delete, ui_state],
    )

    return {
        "normal_gallery": normal_gallery,
        "improved_gallery": improved_gallery,
        "selection_info": selection_info,
    }


def main():
    """Main entry point for the application."""
    logger.info("Starting Lamina Generator...")
    logger.info(f"Configuration: {config.model_dump(exclude={'gemini_api_key'})}")

    try:
        config.require_api_key()
    except MissingCredentialError as e:
        logger.critical(str(e))
        sys.exit(1)

    app, custom_css = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
        css=custom_css,
    )


if __name__ == "__main__":
    main()
