"""Gradio user interface for the Lamina Generator."""
