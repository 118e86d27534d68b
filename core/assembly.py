"""
ProposalGen Proposal Assembly
Merges validated form state, the resolved address, fees and bios into the
immutable payload handed to a document renderer.

assemble() does not re-validate: callers run core.validation first.
"""

from datetime import date as date_type, datetime
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from core.exceptions import ProposalValidationError
from core.models import Bio, FeeSummary, FormState, ProposalPayload

# Service tag -> display label, in template order
SERVICE_OPTIONS: Dict[str, str] = {
    "concept_to_completion": "Concept To Completion",
    "cost_planning": "Cost Planning",
    "project_monitoring": "Project Monitoring",
}

# Raw WordprocessingML paragraph holding a page break; passed to the template as-is
PAGE_BREAK_XML = '<w:p><w:r><w:br w:type="page"/></w:r></w:p>'


def layout_directives(list_of_services: Iterable[str]) -> Dict[str, Any]:
    """
    Section flags and page-break markers for the optional services.

    For every known service emits has_<service> and has_<service>_break; the
    break is PAGE_BREAK_XML when the service is selected, "" otherwise.
    """
    selected = set(list_of_services or [])
    directives: Dict[str, Any] = {}
    for service in SERVICE_OPTIONS:
        flag = service in selected
        directives[f"has_{service}"] = flag
        directives[f"has_{service}_break"] = PAGE_BREAK_XML if flag else ""
    return directives


def normalize_date(
    value: Union[str, date_type, datetime, None],
    today: Optional[date_type] = None,
) -> str:
    """
    ISO calendar date (YYYY-MM-DD) with any time component dropped.

    Empty values default to today.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date_type):
        return value.isoformat()
    if value is None or not str(value).strip():
        return (today or date_type.today()).isoformat()

    text = str(value).strip()
    try:
        return date_type.fromisoformat(text[:10]).isoformat()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        raise ProposalValidationError(["Date"], f"Invalid date: {text}")


def _unique(values: Sequence[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(v.strip() for v in values if v and v.strip()))


def assemble(
    form: FormState,
    resolved_address: str,
    fee_summary: FeeSummary,
    resolved_bios: Sequence[Bio],
    today: Optional[date_type] = None,
) -> ProposalPayload:
    """Build the document payload from an already validated form."""
    services = _unique(form.list_of_services)
    return ProposalPayload(
        project_name=form.project_name.strip(),
        billing_entity=form.billing_entity.strip(),
        date=normalize_date(form.date, today),
        address=resolved_address.strip(),
        client_email=form.client_email.strip(),
        client_name=form.client_name.strip(),
        client_company_address=form.client_company_address.strip(),
        asset_class=form.asset_class.strip(),
        project_description=form.project_description.strip(),
        proposed_mandates=_unique(form.proposed_mandates),
        list_of_services=services,
        fee=fee_summary,
        bios=tuple(resolved_bios),
        directives=layout_directives(services),
    )
