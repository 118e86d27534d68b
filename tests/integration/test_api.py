"""
ProposalGen Integration Tests: HTTP API
=======================================

Tests:
- POST /api/generate-pdf and /api/generate-proposal (success and 400s)
- GET /api/bios, /api/map-places, /api/mandates, /api/services, /api/health
- POST /api/extract (upload checks, 404/502 mapping)
- Error body shape, request ids and security headers
"""

import io
import pytest
import sys
import os
from unittest.mock import AsyncMock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from docx import Document
from fastapi.testclient import TestClient
from pypdf import PdfReader

from agents.integrations.places_client import PLACES_FAILED_MESSAGE
from api.main import create_app
from api.routers.places import MISSING_INPUT_MESSAGE
from api.uploads import MISSING_FILE_MESSAGE
from core.address import NO_ADDRESS_MESSAGE
from core.exceptions import BioStoreError, ExtractorResponseError, UpstreamServiceError
from tests.conftest import PROJECT_ADDRESS, sample_pdf_body, sample_proposal_body

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _pdf_text(content):
    return "\n".join(page.extract_text() or "" for page in PdfReader(io.BytesIO(content)).pages)


def _docx_paragraphs(content):
    return [p.text for p in Document(io.BytesIO(content)).paragraphs]


# =============================================================================
# Project Summary PDF
# =============================================================================

@pytest.mark.integration
class TestGeneratePdf:
    """Tests for POST /api/generate-pdf"""

    def test_success(self, client):
        response = client.post("/api/generate-pdf", json=sample_pdf_body())

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            'attachment; filename="project-summary-Ancaster Mixed-Use Residential Development.pdf"'
        )
        assert response.headers["cache-control"] == "no-store"
        assert response.content.startswith(b"%PDF")

    def test_fee_totals_are_recomputed(self, client):
        body = sample_pdf_body()
        body["fee"]["lines"][0]["lineTotal"] = 9999
        body["fee"]["total"] = 9999

        response = client.post("/api/generate-pdf", json=body)

        text = _pdf_text(response.content)
        assert "$1500.00" in text
        assert "$9999.00" not in text

    def test_missing_fee(self, client):
        body = sample_pdf_body()
        del body["fee"]

        response = client.post("/api/generate-pdf", json=body)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields",
            "message": "Missing required fields",
            "fields": ["fee"],
        }

    def test_blank_required_fields(self, client):
        body = sample_pdf_body(projectName="  ", address="")

        response = client.post("/api/generate-pdf", json=body)

        assert response.status_code == 400
        assert response.json()["fields"] == ["projectName", "address"]

    def test_optional_fields_may_be_omitted(self, client):
        body = {
            "projectName": "Ancaster Mixed-Use Residential Development",
            "billingEntity": "Finnegan Marshall Inc.",
            "address": PROJECT_ADDRESS,
            "fee": {"lines": [], "total": 0},
        }

        response = client.post("/api/generate-pdf", json=body)

        assert response.status_code == 200

    def test_negative_hours_rejected(self, client):
        body = sample_pdf_body()
        body["fee"]["lines"][0]["hours"] = -5

        response = client.post("/api/generate-pdf", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"
        assert "fee.lines.0.hours" in response.json()["fields"]

    def test_unknown_mandate(self, client):
        response = client.post("/api/generate-pdf", json=sample_pdf_body(proposedMandates=["Appraisal"]))

        assert response.status_code == 400
        assert response.json()["error"] == "Unknown mandate"

    def test_malformed_json(self, client):
        response = client.post(
            "/api/generate-pdf",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400


# =============================================================================
# Proposal DOCX
# =============================================================================

@pytest.mark.integration
class TestGenerateProposal:
    """Tests for POST /api/generate-proposal"""

    def test_success(self, client):
        response = client.post("/api/generate-proposal", json=sample_proposal_body())

        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_MEDIA_TYPE
        assert response.headers["content-disposition"] == (
            'attachment; filename="proposal-Ancaster_Mixed_Use_Residential_Development.docx"'
        )

        paragraphs = _docx_paragraphs(response.content)
        assert "Proposal: Ancaster Mixed-Use Residential Development" in paragraphs
        assert "Cost Planning" in paragraphs
        assert paragraphs.index("Sarah Whitfield") < paragraphs.index("Daniel Okafor")
        assert "Priya Raman" not in paragraphs

    def test_numeric_bio_ids(self, client):
        response = client.post("/api/generate-proposal", json=sample_proposal_body(bios=[3]))

        assert response.status_code == 200
        assert "Priya Raman" in _docx_paragraphs(response.content)

    def test_missing_fields(self, client):
        response = client.post(
            "/api/generate-proposal",
            json=sample_proposal_body(clientName="", listOfServices=[]),
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields",
            "message": "Missing required fields: Client Name, List of Services",
            "fields": ["Client Name", "List of Services"],
        }

    def test_unknown_bios_count_as_missing(self, client):
        response = client.post("/api/generate-proposal", json=sample_proposal_body(bios=["404"]))

        assert response.status_code == 400
        assert response.json()["fields"] == ["Bios"]

    def test_invalid_email(self, client):
        response = client.post(
            "/api/generate-proposal",
            json=sample_proposal_body(clientEmail="john.doe@abcdevelopments"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid email"
        assert response.json()["message"] == "Please enter a valid email address"

    def test_missing_template(self, settings, bio_repository, extractor, places, tmp_path):
        settings.template_path = tmp_path / "missing.docx"
        app = create_app(settings, bio_repository, extractor, places)

        response = TestClient(app).post("/api/generate-proposal", json=sample_proposal_body())

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Template file not found"
        assert "missing.docx" in body["message"]
        assert "stack" in body

    def test_no_stack_outside_debug(self, settings, bio_repository, extractor, places, tmp_path):
        settings.template_path = tmp_path / "missing.docx"
        settings.debug = False
        app = create_app(settings, bio_repository, extractor, places)

        response = TestClient(app).post("/api/generate-proposal", json=sample_proposal_body())

        assert response.status_code == 500
        assert "stack" not in response.json()


# =============================================================================
# Bios
# =============================================================================

@pytest.mark.integration
class TestBios:
    """Tests for GET /api/bios"""

    def test_ordered_by_name(self, client):
        response = client.get("/api/bios")

        assert response.status_code == 200
        assert [bio["name"] for bio in response.json()] == [
            "Daniel Okafor",
            "Priya Raman",
            "Sarah Whitfield",
        ]
        assert response.json()[0] == {
            "id": "1",
            "name": "Daniel Okafor",
            "industry_experience": "Project monitoring for lenders across the Greater Toronto Area.",
            "accreditations": None,
        }

    def test_store_failure(self, settings, extractor, places):
        repository = AsyncMock()
        repository.list_bios.side_effect = BioStoreError("connection refused")
        app = create_app(settings, repository, extractor, places)

        response = TestClient(app).get("/api/bios")

        assert response.status_code == 500
        assert response.json()["error"] == "Database Error"
        assert response.json()["message"] == "connection refused"

    def test_unexpected_failure(self, settings, extractor, places):
        repository = AsyncMock()
        repository.list_bios.side_effect = RuntimeError("pool exhausted")
        app = create_app(settings, repository, extractor, places)

        response = TestClient(app, raise_server_exceptions=False).get("/api/bios")

        assert response.status_code == 500
        assert response.json()["error"] == "Service Error"
        assert response.json()["message"] == "pool exhausted"


# =============================================================================
# Places
# =============================================================================

@pytest.mark.integration
class TestMapPlaces:
    """Tests for GET /api/map-places"""

    def test_passthrough(self, client, places):
        response = client.get("/api/map-places", params={"input": "1021 Garner"})

        assert response.status_code == 200
        assert response.json() == {"predictions": [{"description": PROJECT_ADDRESS}], "status": "OK"}
        assert places.queries == ["1021 Garner"]

    def test_missing_input(self, client, places):
        response = client.get("/api/map-places")

        assert response.status_code == 400
        assert response.json() == {"error": MISSING_INPUT_MESSAGE}
        assert places.queries == []

    def test_upstream_failure(self, client, places):
        places.error = UpstreamServiceError(PLACES_FAILED_MESSAGE)

        response = client.get("/api/map-places", params={"input": "1021"})

        assert response.status_code == 502
        assert response.json() == {"error": "Upstream Error", "message": PLACES_FAILED_MESSAGE}


# =============================================================================
# Extraction
# =============================================================================

@pytest.mark.integration
class TestExtract:
    """Tests for POST /api/extract"""

    def test_pdf(self, client, extractor, address_pdf):
        response = client.post(
            "/api/extract",
            files={"file": ("drawings.pdf", address_pdf, "application/pdf")},
        )

        assert response.status_code == 200
        assert response.json() == {"result": extractor.candidates}
        assert extractor.documents[0].filename == "drawings.pdf"

    def test_docx(self, client, extractor, address_docx):
        response = client.post(
            "/api/extract",
            files={"file": ("report.docx", address_docx, DOCX_MEDIA_TYPE)},
        )

        assert response.status_code == 200
        assert extractor.documents[0].content_type == DOCX_MEDIA_TYPE

    def test_path_is_stripped_from_filename(self, client, extractor, address_pdf):
        client.post(
            "/api/extract",
            files={"file": ("../../etc/drawings.pdf", address_pdf, "application/pdf")},
        )

        assert extractor.documents[0].filename == "drawings.pdf"

    def test_no_address(self, client, extractor, address_pdf):
        extractor.candidates = []

        response = client.post("/api/extract", files={"file": ("drawings.pdf", address_pdf, "application/pdf")})

        assert response.status_code == 404
        assert response.json() == {"error": "No address found", "message": NO_ADDRESS_MESSAGE}

    def test_bad_model_output(self, client, extractor, address_pdf):
        extractor.error = ExtractorResponseError("Invalid JSON from Gemini: Expecting value")

        response = client.post("/api/extract", files={"file": ("drawings.pdf", address_pdf, "application/pdf")})

        assert response.status_code == 502
        assert response.json()["error"] == "Extractor Error"

    def test_missing_file(self, client):
        response = client.post("/api/extract")

        assert response.status_code == 400
        assert response.json()["message"] == MISSING_FILE_MESSAGE

    def test_empty_file(self, client):
        response = client.post("/api/extract", files={"file": ("drawings.pdf", b"", "application/pdf")})

        assert response.status_code == 400

    def test_unsupported_type(self, client, extractor):
        response = client.post("/api/extract", files={"file": ("notes.txt", b"1021 Garner Road", "text/plain")})

        assert response.status_code == 400
        assert response.json()["message"] == "Unsupported file type. Only PDF/DOCX allowed."
        assert extractor.documents == []

    def test_renamed_file_is_rejected(self, client):
        response = client.post(
            "/api/extract",
            files={"file": ("drawings.pdf", b"PK\x03\x04not really a pdf", "application/pdf")},
        )

        assert response.status_code == 400

    def test_too_large(self, client, settings, address_pdf):
        settings.max_file_size = 64

        response = client.post("/api/extract", files={"file": ("drawings.pdf", address_pdf, "application/pdf")})

        assert response.status_code == 413


# =============================================================================
# Reference Data and Health
# =============================================================================

@pytest.mark.integration
class TestReference:

    def test_mandates(self, client):
        response = client.get("/api/mandates")

        assert [m["name"] for m in response.json()] == ["Estimating", "Proforma", "Project Monitoring"]

    def test_services(self, client):
        response = client.get("/api/services")

        assert response.json() == [
            {"id": "concept_to_completion", "label": "Concept To Completion"},
            {"id": "cost_planning", "label": "Cost Planning"},
            {"id": "project_monitoring", "label": "Project Monitoring"},
        ]

    def test_health(self, client):
        response = client.get("/api/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["components"]["database"] == "not configured"
        assert body["components"]["template"] == "ready"
        assert body["components"]["address_extractor"] == "StubExtractor"


@pytest.mark.integration
class TestMiddleware:

    def test_request_id_generated(self, client):
        response = client.get("/api/services")

        assert response.headers["x-request-id"]

    def test_request_id_preserved(self, client):
        response = client.get("/api/services", headers={"X-Request-ID": "req-123"})

        assert response.headers["x-request-id"] == "req-123"

    def test_security_headers(self, client):
        response = client.get("/api/services")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert "cache-control" not in response.headers
