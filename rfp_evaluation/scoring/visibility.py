"""
Visibility Gate
rfp_evaluation/scoring/visibility.py

Blind-evaluation rules for presentation layers. The revealed flag is held by
the caller; nothing here reads or writes scores, so consensus is identical
whether or not a vendor's identity is shown.
"""

from typing import Optional

from rfp_evaluation.config import get_settings
from rfp_evaluation.models.evaluation import EvaluationInstance


def reveal_vendor_identity(revealed: bool) -> bool:
    """Toggle the caller-held reveal flag ("Show Vendor" / "Hide Vendor")."""
    return not revealed


def is_identity_visible(evaluation: EvaluationInstance, revealed: bool) -> bool:
    """Vendor identity is visible unless the evaluation is blind and not revealed."""
    return not evaluation.is_blind or revealed


def vendor_display_name(
    evaluation: EvaluationInstance,
    revealed: bool,
    masked_label: Optional[str] = None,
) -> str:
    """Vendor name (or id) when visible, otherwise the masked label."""
    if is_identity_visible(evaluation, revealed):
        return evaluation.vendor_name or evaluation.vendor_id
    return masked_label if masked_label is not None else get_settings().MASKED_VENDOR_LABEL
