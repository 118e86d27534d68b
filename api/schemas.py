"""
ProposalGen API Schemas
Pydantic request/response models (camelCase on the wire)

Required fields are declared optional here and checked after parsing,
so that a missing field is reported as HTTP 400 with the field labels.
"""

from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import ProposalValidationError
from core.fees import rebuild_summary
from core.models import Bio, FeeSummary, FormState


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FeeLineModel(_WireModel):
    staff_id: str = Field("", alias="staffId")
    staff_name: str = Field("", alias="staffName")
    hours: float = Field(0, ge=0)
    rate: float = Field(0, ge=0)
    line_total: Optional[float] = Field(None, alias="lineTotal")  # recomputed server side


class FeeSummaryModel(_WireModel):
    lines: List[FeeLineModel] = Field(default_factory=list)
    total: Optional[float] = None  # recomputed server side

    def to_domain(self) -> FeeSummary:
        """Re-derive totals from hours and rate; client totals are ignored."""
        return rebuild_summary(self.model_dump(by_alias=True))


class _ProposalFields(_WireModel):
    project_name: Optional[str] = Field(None, alias="projectName")
    billing_entity: Optional[str] = Field(None, alias="billingEntity")
    address: Optional[str] = None
    date: Optional[str] = None
    client_email: Optional[str] = Field(None, alias="clientEmail")
    client_name: Optional[str] = Field(None, alias="clientName")
    client_company_address: Optional[str] = Field(None, alias="clientCompanyAddress")
    asset_class: Optional[str] = Field(None, alias="assetClass")
    project_description: Optional[str] = Field(None, alias="projectDescription")
    proposed_mandates: Optional[List[str]] = Field(None, alias="proposedMandates")
    fee: Optional[FeeSummaryModel] = None

    def to_form(self) -> FormState:
        return FormState(
            project_name=self.project_name or "",
            billing_entity=self.billing_entity or "",
            address=self.address or "",
            date=self.date or "",
            client_email=self.client_email or "",
            client_name=self.client_name or "",
            client_company_address=self.client_company_address or "",
            asset_class=self.asset_class or "",
            project_description=self.project_description or "",
            proposed_mandates=list(self.proposed_mandates or []),
            fee=self.fee.to_domain() if self.fee else None,
        )


class GeneratePdfRequest(_ProposalFields):
    """Body of POST /api/generate-pdf"""

    REQUIRED: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("projectName", "project_name"),
        ("billingEntity", "billing_entity"),
        ("address", "address"),
        ("fee", "fee"),
    )

    def check_required(self) -> None:
        missing = [
            wire_name
            for wire_name, attr in self.REQUIRED
            if getattr(self, attr) is None
            or (isinstance(getattr(self, attr), str) and not getattr(self, attr).strip())
        ]
        if missing:
            raise ProposalValidationError(missing, "Missing required fields")


class GenerateProposalRequest(_ProposalFields):
    """Body of POST /api/generate-proposal; bios is a list of bio ids."""
    list_of_services: Optional[List[str]] = Field(None, alias="listOfServices")
    bios: List[Union[str, int]] = Field(default_factory=list)

    def to_form(self, resolved_bios: Optional[List[Bio]] = None) -> FormState:
        form = super().to_form()
        form.list_of_services = list(self.list_of_services or [])
        form.bios = list(resolved_bios or [])
        return form


class BioResponse(BaseModel):
    id: str
    name: str
    industry_experience: Optional[str] = None
    accreditations: Optional[str] = None


class ExtractResponse(BaseModel):
    result: List[str]


class MandateResponse(BaseModel):
    id: str
    name: str
    defaultRate: float


class ServiceResponse(BaseModel):
    id: str
    label: str


def error_body(error: str, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error}
    if message is not None:
        body["message"] = message
    body.update({key: value for key, value in extra.items() if value is not None})
    return body
