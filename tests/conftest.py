"""
ProposalGen Test Configuration
==============================

Fixtures:
- Sample form, bios and wire payloads (Ancaster project)
- In-memory bio repository
- Stub address extractor and places client
- FastAPI TestClient over create_app()
- PDF/DOCX document builders
"""

import io
import os
import sys
from typing import Any, Dict, List, Optional

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from docx import Document
from fastapi.testclient import TestClient
from reportlab.pdfgen import canvas

from api.config import Settings
from api.main import create_app
from core.fees import seed_lines, update_line, FeeLinePatch, summarize
from core.models import Bio, FormState, UploadedDocument
from database.repositories import InMemoryBioRepository
from tools.docx_renderer import build_default_template


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP app and clients)")


# =============================================================================
# Sample Data
# =============================================================================

PROJECT_NAME = "Ancaster Mixed-Use Residential Development"
PROJECT_ADDRESS = "1021 Garner Road East, Ancaster, Ontario, Canada"

SAMPLE_BIOS = [
    Bio(
        id="2",
        name="Sarah Whitfield",
        industry_experience="15 years leading cost planning for mid-rise residential projects.",
        accreditations="PQS, MRICS",
    ),
    Bio(
        id="1",
        name="Daniel Okafor",
        industry_experience="Project monitoring for lenders across the Greater Toronto Area.",
        accreditations=None,
    ),
    Bio(
        id="3",
        name="Priya Raman",
        industry_experience="Estimating lead for institutional and mixed-use developments.",
        accreditations="PQS",
    ),
]


def sample_fee_wire() -> Dict[str, Any]:
    return {
        "lines": [
            {"staffId": "Estimating", "staffName": "Estimating", "hours": 10, "rate": 150, "lineTotal": 1500},
        ],
        "total": 1500,
    }


def sample_pdf_body(**overrides) -> Dict[str, Any]:
    body = {
        "projectName": PROJECT_NAME,
        "billingEntity": "Finnegan Marshall Inc.",
        "address": PROJECT_ADDRESS,
        "date": "2025-03-14",
        "clientEmail": "john.doe@abcdevelopments.ca",
        "clientName": "John Doe",
        "clientCompanyAddress": "200 James Street North, Hamilton, Ontario",
        "assetClass": "Mixed-Use Residential",
        "projectDescription": "Eight-storey mixed-use building with ground floor retail.",
        "proposedMandates": ["Estimating"],
        "fee": sample_fee_wire(),
    }
    body.update(overrides)
    return body


def sample_proposal_body(**overrides) -> Dict[str, Any]:
    body = sample_pdf_body()
    body.update({
        "listOfServices": ["cost_planning"],
        "bios": ["2", "1"],
    })
    body.update(overrides)
    return body


@pytest.fixture
def sample_bios() -> List[Bio]:
    return list(SAMPLE_BIOS)


@pytest.fixture
def sample_form(sample_bios) -> FormState:
    """A form that passes full proposal validation"""
    lines = seed_lines(["Estimating"])
    lines = update_line(lines, 0, FeeLinePatch(hours=10, rate=150))
    return FormState(
        project_name=PROJECT_NAME,
        billing_entity="Finnegan Marshall Inc.",
        address=PROJECT_ADDRESS,
        date="2025-03-14",
        client_email="john.doe@abcdevelopments.ca",
        client_name="John Doe",
        client_company_address="200 James Street North, Hamilton, Ontario",
        asset_class="Mixed-Use Residential",
        project_description="Eight-storey mixed-use building with ground floor retail.",
        proposed_mandates=["Estimating"],
        list_of_services=["cost_planning"],
        fee=summarize(lines),
        bios=sample_bios[:2],
    )


@pytest.fixture
def bio_repository(sample_bios) -> InMemoryBioRepository:
    return InMemoryBioRepository(sample_bios)


# =============================================================================
# Documents
# =============================================================================

def make_pdf(pages: List[List[str]]) -> bytes:
    """A PDF with one list of text lines per page."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer)
    for lines in pages:
        y = 780
        for line in lines:
            pdf.drawString(72, y, line)
            y -= 20
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def make_docx(paragraphs: List[str], table_rows: Optional[List[List[str]]] = None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for row, values in zip(table.rows, table_rows):
            for cell, value in zip(row.cells, values):
                cell.text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


ADDRESS_PAGE = [
    "Issued for Tender",
    "1021 Garner Road East",
    "Ancaster, Ontario, L9G 3K9",
]


@pytest.fixture
def address_pdf() -> bytes:
    return make_pdf([ADDRESS_PAGE, ["Drawing list"]])


@pytest.fixture
def address_docx() -> bytes:
    return make_docx(ADDRESS_PAGE)


@pytest.fixture
def template_path(tmp_path):
    return build_default_template(tmp_path / "proposal_template.docx")


# =============================================================================
# Stubs
# =============================================================================

class StubExtractor:
    """Address source returning canned candidates or raising a canned error"""

    def __init__(self, candidates: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.candidates = list(candidates or [])
        self.error = error
        self.documents: List[UploadedDocument] = []

    async def extract_candidates(self, document: UploadedDocument) -> List[str]:
        self.documents.append(document)
        if self.error:
            raise self.error
        return list(self.candidates)


class StubPlaces:
    def __init__(self, payload: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.payload = payload or {"predictions": [], "status": "ZERO_RESULTS"}
        self.error = error
        self.queries: List[str] = []

    async def autocomplete(self, text: str) -> Dict[str, Any]:
        self.queries.append(text)
        if self.error:
            raise self.error
        return self.payload


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def settings(template_path) -> Settings:
    settings = Settings()
    settings.environment = "development"
    settings.debug = True
    settings.database_url = ""
    settings.template_path = template_path
    return settings


@pytest.fixture
def extractor() -> StubExtractor:
    return StubExtractor([PROJECT_ADDRESS, "200 James Street North, Hamilton, Ontario"])


@pytest.fixture
def places() -> StubPlaces:
    return StubPlaces({"predictions": [{"description": PROJECT_ADDRESS}], "status": "OK"})


@pytest.fixture
def app(settings, bio_repository, extractor, places):
    return create_app(
        settings=settings,
        bio_repository=bio_repository,
        address_extractor=extractor,
        places_client=places,
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
