"""Form state for the capture tabs."""
from supportlog.forms.state import EDITABLE_FIELDS, FormState, validate_draft

__all__ = ["EDITABLE_FIELDS", "FormState", "validate_draft"]
