"""
ProposalGen API Client

Async httpx client for the ProposalGen endpoints, performing the same calls
as the browser form. It also serves as the AddressSource of an
AddressResolutionCoordinator on the client side.

Usage:
    async with ProposalApiClient("http://localhost:3000") as api:
        coordinator = AddressResolutionCoordinator(api)
        await coordinator.load_document(document)
        pdf = await api.generate_pdf(payload)
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from core.address import EXTRACTION_FAILED_MESSAGE, extract_address_from_document
from core.bios import to_ids
from core.exceptions import AddressExtractionError, UpstreamServiceError
from core.models import Bio, ProposalPayload, UploadedDocument

logger = logging.getLogger(__name__)


class ProposalApiClient:
    """Thin async wrapper over the HTTP API."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ProposalApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ============== Extraction ==============

    async def extract_candidates(self, document: UploadedDocument) -> List[str]:
        """Raw candidate list from /api/extract (may be empty)."""
        files = {"file": (document.filename, document.content, document.content_type)}
        try:
            response = await self._client.post("/api/extract", files=files)
        except httpx.HTTPError as e:
            logger.error(f"Extract request failed: {e}")
            raise AddressExtractionError(EXTRACTION_FAILED_MESSAGE) from e

        if not response.is_success:
            raise AddressExtractionError(EXTRACTION_FAILED_MESSAGE)

        return list(response.json().get("result") or [])

    async def extract_address_from_document(self, document: UploadedDocument) -> List[str]:
        """
        Candidate addresses for a document.

        Raises:
            AddressExtractionError: "Document data extraction failed" on a
                failed request, "No address found in the document." when the
                result is empty
        """
        return await extract_address_from_document(self, document)

    # ============== Reference Data ==============

    async def get_bios(self) -> List[Bio]:
        response = await self._client.get("/api/bios")
        if not response.is_success:
            raise UpstreamServiceError("Failed to fetch bios")
        return [
            Bio(
                id=str(item["id"]),
                name=item["name"],
                industry_experience=item.get("industry_experience") or "",
                accreditations=item.get("accreditations"),
            )
            for item in response.json()
        ]

    async def places(self, text: str) -> Dict[str, Any]:
        """Raw autocomplete JSON from /api/map-places."""
        response = await self._client.get("/api/map-places", params={"input": text})
        if not response.is_success:
            raise UpstreamServiceError(_error_message(response, "Failed to fetch suggestions"))
        return response.json()

    # ============== Documents ==============

    async def generate_pdf(self, payload: ProposalPayload) -> bytes:
        body = payload.to_dict()
        body.pop("bios", None)
        body.pop("listOfServices", None)
        return await self._download("/api/generate-pdf", body)

    async def download_proposal(self, payload: ProposalPayload) -> bytes:
        body = payload.to_dict()
        body["bios"] = list(to_ids(payload.bios))
        return await self._download("/api/generate-proposal", body)

    async def _download(self, path: str, body: Dict[str, Any]) -> bytes:
        logger.info(f"Doc render request {path} for '{body.get('projectName')}'")
        response = await self._client.post(path, json=body)
        if not response.is_success:
            raise UpstreamServiceError(_error_message(response, "Failed to generate"))
        return response.content


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    return data.get("message") or data.get("error") or default
