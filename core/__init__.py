"""ProposalGen Core - fee computation, validation and proposal assembly"""

from .models import (
    MANDATES,
    Bio,
    FeeLine,
    FeeSummary,
    FormState,
    Mandate,
    ProjectSummary,
    ProposalPayload,
    UploadedDocument,
    get_mandate,
)
from .fees import (
    FeeLinePatch,
    compute_line,
    summarize,
    update_line,
)
from .validation import (
    DocumentTarget,
    gate_submission,
    validate,
    validate_email,
)
from .address import AddressResolutionCoordinator, default_selection
from .bios import resolve, to_ids
from .assembly import PAGE_BREAK_XML, SERVICE_OPTIONS, assemble, layout_directives

__all__ = [
    "MANDATES",
    "Bio",
    "FeeLine",
    "FeeSummary",
    "FormState",
    "Mandate",
    "ProjectSummary",
    "ProposalPayload",
    "UploadedDocument",
    "get_mandate",
    "FeeLinePatch",
    "compute_line",
    "summarize",
    "update_line",
    "DocumentTarget",
    "gate_submission",
    "validate",
    "validate_email",
    "AddressResolutionCoordinator",
    "default_selection",
    "resolve",
    "to_ids",
    "PAGE_BREAK_XML",
    "SERVICE_OPTIONS",
    "assemble",
    "layout_directives",
]
