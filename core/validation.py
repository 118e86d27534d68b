"""
ProposalGen Form Validation
Required-field and email checks gating document generation
"""

import re
from enum import Enum
from typing import Any, Callable, Iterable, List, Sequence, Tuple

from core.exceptions import InvalidEmailError, ProposalValidationError
from core.models import MANDATES, FormState, Mandate, get_mandate


class DocumentTarget(str, Enum):
    """Which document the form is being submitted for"""
    PDF = "pdf"              # Project summary
    PROPOSAL = "proposal"    # Full DOCX proposal


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"

# (label, getter) in form order; the getter receives (form, resolved_address)
_Field = Tuple[str, Callable[[FormState, str], Any]]

_PROPOSAL_FIELDS: List[_Field] = [
    ("Project Name", lambda f, a: f.project_name),
    ("Billing Entity", lambda f, a: f.billing_entity),
    ("Client Email", lambda f, a: f.client_email),
    ("Client Name", lambda f, a: f.client_name),
    ("Client Company Address", lambda f, a: f.client_company_address),
    ("Asset Class", lambda f, a: f.asset_class),
    ("Project Description", lambda f, a: f.project_description),
    ("Proposed Mandates", lambda f, a: f.proposed_mandates),
    ("List of Services", lambda f, a: f.list_of_services),
    ("Address", lambda f, a: a),
    ("Bios", lambda f, a: f.bios),
]

_PDF_FIELDS: List[_Field] = [
    ("Project Name", lambda f, a: f.project_name),
    ("Billing Entity", lambda f, a: f.billing_entity),
    ("Proposed Mandates", lambda f, a: f.proposed_mandates),
    ("List of Services", lambda f, a: f.list_of_services),
    ("Address", lambda f, a: a),
]

REQUIRED_FIELDS = {
    DocumentTarget.PROPOSAL: _PROPOSAL_FIELDS,
    DocumentTarget.PDF: _PDF_FIELDS,
}


def is_missing(value: Any) -> bool:
    """Empty-after-trim strings, empty collections and None are missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def validate(
    form: FormState,
    resolved_address: str,
    target: DocumentTarget = DocumentTarget.PROPOSAL,
) -> List[str]:
    """Return the labels of missing required fields, in form order. Never raises."""
    return [
        label
        for label, getter in REQUIRED_FIELDS[target]
        if is_missing(getter(form, resolved_address))
    ]


def validate_email(value: str) -> bool:
    """Permissive check: non-whitespace @ non-whitespace . non-whitespace"""
    return bool(value) and EMAIL_PATTERN.match(value) is not None


def email_feedback(value: str) -> str:
    """On-blur message for the email input; blank input is not an error."""
    if value and not validate_email(value):
        return INVALID_EMAIL_MESSAGE
    return ""


def missing_fields_message(labels: List[str]) -> str:
    return f"Missing required fields: {', '.join(labels)}"


def gate_submission(
    form: FormState,
    resolved_address: str,
    target: DocumentTarget = DocumentTarget.PROPOSAL,
) -> None:
    """
    Submission gate run before assembly.

    Raises:
        ProposalValidationError: listing every missing label
        InvalidEmailError: when the client email is malformed (for the PDF
            summary only when an email was entered)
    """
    missing = validate(form, resolved_address, target)
    if missing:
        raise ProposalValidationError(missing, missing_fields_message(missing))

    if target is DocumentTarget.PDF and not form.client_email:
        return
    if not validate_email(form.client_email):
        raise InvalidEmailError()


def check_mandates(names: Iterable[str], mandates: Sequence[Mandate] = MANDATES) -> None:
    """
    Raises:
        UnknownMandateError: for the first name that is not in the catalog
    """
    for name in names:
        get_mandate(name, tuple(mandates))
