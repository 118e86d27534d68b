"""
ProposalGen Domain Models
Immutable fee, bio and payload types plus the client-owned form state
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import UnknownMandateError


# ============== Money Helpers ==============

_CENTS = Decimal("0.01")


def round2(value: float) -> float:
    """
    Round to two decimals, half-up on the cents boundary.

    Goes through the shortest repr of the float so that values such as
    1.005 round the way they are displayed rather than the way they are stored.
    """
    return float(Decimal(repr(float(value))).quantize(_CENTS, rounding=ROUND_HALF_UP))


def format_currency(value: float) -> str:
    return f"${value:.2f}"


def format_hours(value: float) -> str:
    return f"{value:g}"


# ============== Reference Data ==============

MANDATE_NAMES: Tuple[str, ...] = ("Estimating", "Proforma", "Project Monitoring")


@dataclass(frozen=True)
class Mandate:
    """A named scope-of-work category with a default billing rate."""
    id: str
    name: str
    default_rate: float = 0.0

    def __post_init__(self):
        if self.name not in MANDATE_NAMES:
            raise UnknownMandateError(f"Unknown mandate: {self.name}")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "defaultRate": self.default_rate}


MANDATES: Tuple[Mandate, ...] = tuple(
    Mandate(id=name, name=name, default_rate=0.0) for name in MANDATE_NAMES
)


def get_mandate(name: str, mandates: Tuple[Mandate, ...] = MANDATES) -> Mandate:
    """Look up a mandate by id or name."""
    for mandate in mandates:
        if mandate.id == name or mandate.name == name:
            return mandate
    raise UnknownMandateError(f"Unknown mandate: {name}")


# ============== Fees ==============

@dataclass(frozen=True)
class FeeLine:
    """
    One billable row.

    line_total is derived from hours and rate; it is not an init argument, so
    a line can only change by being rebuilt.
    """
    staff_id: str
    staff_name: str
    hours: float = 0.0
    rate: float = 0.0
    line_total: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "line_total", round2(self.hours * self.rate))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "staffId": self.staff_id,
            "staffName": self.staff_name,
            "hours": self.hours,
            "rate": self.rate,
            "lineTotal": self.line_total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeLine":
        """Build a line from wire data; any client-sent lineTotal is ignored."""
        return cls(
            staff_id=str(data.get("staffId") or ""),
            staff_name=str(data.get("staffName") or ""),
            hours=float(data.get("hours") or 0),
            rate=float(data.get("rate") or 0),
        )


@dataclass(frozen=True)
class FeeSummary:
    """Ordered fee lines and their grand total (derived, never stored apart)."""
    lines: Tuple[FeeLine, ...] = ()
    total: float = field(init=False)

    def __post_init__(self):
        lines = tuple(self.lines)
        object.__setattr__(self, "lines", lines)
        object.__setattr__(self, "total", round2(sum(line.line_total for line in lines)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeSummary":
        return cls(tuple(FeeLine.from_dict(line) for line in data.get("lines") or []))


# ============== Bios ==============

@dataclass(frozen=True)
class Bio:
    """Immutable snapshot of a staff biography record."""
    id: str
    name: str
    industry_experience: str = ""
    accreditations: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "industry_experience": self.industry_experience,
            "accreditations": self.accreditations,
        }

    def to_template(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "industry_experience": self.industry_experience,
            "accreditations": self.accreditations,
        }


# ============== Uploads ==============

@dataclass(frozen=True)
class UploadedDocument:
    """A document selected for address extraction."""
    filename: str
    content: bytes
    content_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.content)


# ============== Form State ==============

@dataclass
class FormState:
    """Mutable form owned by the client until submission."""
    project_name: str = ""
    billing_entity: str = ""
    address: str = ""
    date: str = ""
    client_email: str = ""
    client_name: str = ""
    client_company_address: str = ""
    asset_class: str = ""
    project_description: str = ""
    proposed_mandates: List[str] = field(default_factory=list)
    list_of_services: List[str] = field(default_factory=list)
    fee: Optional[FeeSummary] = None
    bios: List[Bio] = field(default_factory=list)


# ============== Documents ==============

@dataclass(frozen=True)
class ProjectSummary:
    """Flat input of the PDF project summary."""
    project_name: str
    billing_entity: str
    address: str
    date: str
    fee: FeeSummary
    client_email: str = ""
    client_name: str = ""
    client_company_address: str = ""
    asset_class: str = ""
    project_description: str = ""
    proposed_mandates: Tuple[str, ...] = ()

    def fields(self) -> List[Tuple[str, str]]:
        """Label/value pairs in print order."""
        return [
            ("Project Name", self.project_name),
            ("Billing Entity", self.billing_entity),
            ("Location / Address", self.address),
            ("Date", self.date),
            ("Client Email", self.client_email),
            ("Client Name", self.client_name),
            ("Client Company Address", self.client_company_address),
            ("Asset Class", self.asset_class),
            ("Project Description", self.project_description),
            ("Proposed Mandate", ",".join(self.proposed_mandates)),
        ]


@dataclass(frozen=True)
class ProposalPayload:
    """The assembled, validated structure handed to a document renderer."""
    project_name: str
    billing_entity: str
    date: str
    address: str
    client_email: str
    client_name: str
    client_company_address: str
    asset_class: str
    project_description: str
    proposed_mandates: Tuple[str, ...]
    list_of_services: Tuple[str, ...]
    fee: FeeSummary
    bios: Tuple[Bio, ...]
    directives: Dict[str, Any] = field(default_factory=dict)

    def to_summary(self) -> ProjectSummary:
        return ProjectSummary(
            project_name=self.project_name,
            billing_entity=self.billing_entity,
            address=self.address,
            date=self.date,
            fee=self.fee,
            client_email=self.client_email,
            client_name=self.client_name,
            client_company_address=self.client_company_address,
            asset_class=self.asset_class,
            project_description=self.project_description,
            proposed_mandates=self.proposed_mandates,
        )

    def template_context(self) -> Dict[str, Any]:
        """Snake-case mapping merged into the DOCX template."""
        context = {
            "project_name": self.project_name,
            "billing_entity": self.billing_entity,
            "date": self.date,
            "address": self.address,
            "client_email": self.client_email,
            "client_name": self.client_name,
            "client_company_address": self.client_company_address,
            "asset_class": self.asset_class,
            "project_description": self.project_description,
            "proposed_mandates": ", ".join(self.proposed_mandates),
            "list_of_services": ", ".join(self.list_of_services),
            "fee_lines": [
                {
                    "staff_name": line.staff_name,
                    "hours": format_hours(line.hours),
                    "rate": format_currency(line.rate),
                    "line_total": format_currency(line.line_total),
                }
                for line in self.fee.lines
            ],
            "fee_total": format_currency(self.fee.total),
            "bios": [bio.to_template() for bio in self.bios],
        }
        context.update(self.directives)
        return context

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectName": self.project_name,
            "billingEntity": self.billing_entity,
            "date": self.date,
            "address": self.address,
            "clientEmail": self.client_email,
            "clientName": self.client_name,
            "clientCompanyAddress": self.client_company_address,
            "assetClass": self.asset_class,
            "projectDescription": self.project_description,
            "proposedMandates": list(self.proposed_mandates),
            "listOfServices": list(self.list_of_services),
            "fee": self.fee.to_dict(),
            "bios": [bio.to_dict() for bio in self.bios],
        }
