"""Adapter functions for converting between UI values and business objects."""

from lamina.core.models import FORM_FIELD_NAMES, FormFields

from .models import UIState


def split_form_inputs(values: list) -> tuple[FormFields, UIState]:
    """Split the combined handler input list into form fields and state.

    Args:
        values: Field values in FORM_FIELD_NAMES order followed by the UIState

    Returns:
        Tuple of (fields, state)
    """
    count = len(FORM_FIELD_NAMES)
    if len(values) != count + 1:
        raise ValueError(f"Expected {count} field values and the UI state, got {len(values)} values")
    return FormFields.from_values(values[:count]), values[count]
