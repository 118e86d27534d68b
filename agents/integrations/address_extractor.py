"""
Address Extractors

Turn an uploaded document into candidate project addresses.

- GeminiAddressExtractor: sends the first pages of the document to Gemini and
  asks for a JSON array of addresses (used when GOOGLE_API_KEY is set)
- PatternAddressExtractor: offline fallback that finds
  "street / city, province, postal code" blocks in the document text

Usage:
    extractor = create_address_extractor(settings)
    candidates = await extractor.extract_candidates(document)
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import google.generativeai as genai

from core.exceptions import ExtractorResponseError, UploadValidationError
from core.models import UploadedDocument
from parsing.document_parser import DocumentParser, DocumentType, detect_type, first_pages_pdf

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = (
    "Extract the most likely project address from this document. "
    "The project address is the location of the site or building the document "
    "is about, not the address of a contractor, consultant or architect. "
    "Return a JSON array of strings, most likely address first. "
    "Return an empty array if the document has no project address."
)


# ============== Pattern Extraction ==============

ADDRESS_PATTERN = re.compile(
    r"(?P<street>.+)\n"
    r"(?P<city>[A-Za-z\s]+),\s*"
    r"(?P<province>[A-Za-z\s]+),\s*"
    r"(?P<postal>[A-Z]\d[A-Z]\s?\d[A-Z]\d)"
)


@dataclass(frozen=True)
class ParsedAddress:
    """A Canadian street address found in document text."""
    street: str
    city: str
    province: str
    postal_code: str

    @property
    def full_address(self) -> str:
        return f"{self.street}, {self.city}, {self.province}, {self.postal_code}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "street": self.street,
            "city": self.city,
            "province": self.province,
            "postalCode": self.postal_code,
            "fullAddress": self.full_address,
        }


def parse_addresses(text: str) -> List[ParsedAddress]:
    """All address blocks in the text, first occurrence order, duplicates dropped."""
    seen = set()
    results: List[ParsedAddress] = []
    for match in ADDRESS_PATTERN.finditer(text):
        address = ParsedAddress(
            street=match.group("street").strip(),
            city=match.group("city").strip(),
            province=match.group("province").strip(),
            postal_code=match.group("postal").strip(),
        )
        if address.full_address not in seen:
            seen.add(address.full_address)
            results.append(address)
    return results


class PatternAddressExtractor:
    """Regex-based extractor over the text of the first pages."""

    def __init__(self, max_pages: int = 3):
        self.parser = DocumentParser(max_pages=max_pages)

    async def extract_candidates(self, document: UploadedDocument) -> List[str]:
        parsed = await asyncio.to_thread(
            self.parser.parse_bytes, document.content, document.filename
        )
        addresses = parse_addresses(parsed.full_text)
        logger.info(f"Pattern extractor found {len(addresses)} address(es) in {document.filename}")
        return [address.full_address for address in addresses]


# ============== Gemini Extraction ==============

def parse_model_output(text: Optional[str]) -> List[str]:
    """
    Decode the model's JSON answer into a list of address strings.

    Raises:
        ExtractorResponseError: on an empty answer or anything but a JSON
            array of strings
    """
    if not text or not text.strip():
        raise ExtractorResponseError("Empty response from Gemini")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractorResponseError(f"Invalid JSON from Gemini: {e}") from e

    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ExtractorResponseError("Expected a JSON array of strings from Gemini")

    return [item.strip() for item in data if item.strip()]


class GeminiAddressExtractor:
    """
    Gemini-backed extractor.

    PDFs are trimmed to their first max_pages pages and sent inline; DOCX
    uploads are sent as extracted text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-lite",
        max_pages: int = 3,
    ):
        self._model_name = model
        self.max_pages = max_pages
        self.parser = DocumentParser(max_pages=max_pages)

        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model_name=model)
        self._generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=List[str],
            temperature=0.0,
        )
        logger.info(f"Gemini address extractor initialized with model: {model}")

    @property
    def model_name(self) -> str:
        return self._model_name

    def _build_contents(self, document: UploadedDocument) -> List[Any]:
        doc_type = detect_type(document.content, document.filename)
        if doc_type == DocumentType.PDF:
            data = first_pages_pdf(document.content, self.max_pages)
            return [EXTRACTION_PROMPT, {"mime_type": "application/pdf", "data": data}]
        if doc_type == DocumentType.DOCX:
            parsed = self.parser.parse_bytes(document.content, document.filename)
            return [EXTRACTION_PROMPT, parsed.full_text]
        raise UploadValidationError(f"Unsupported document type: {document.filename}")

    async def extract_candidates(self, document: UploadedDocument) -> List[str]:
        contents = await asyncio.to_thread(self._build_contents, document)

        try:
            response = await asyncio.to_thread(
                self._model.generate_content,
                contents,
                generation_config=self._generation_config,
            )
        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            raise ExtractorResponseError(f"Gemini request failed: {e}") from e

        text = ""
        if response.candidates and response.candidates[0].content.parts:
            text = response.candidates[0].content.parts[0].text

        candidates = parse_model_output(text)
        logger.info(f"Gemini found {len(candidates)} address(es) in {document.filename}")
        return candidates


def create_address_extractor(settings) -> Any:
    """Gemini when an API key is configured, the pattern extractor otherwise."""
    if settings.google_api_key:
        return GeminiAddressExtractor(
            api_key=settings.google_api_key,
            model=settings.gemini_model,
            max_pages=settings.extract_max_pages,
        )
    logger.warning("GOOGLE_API_KEY not set. Using pattern-based address extraction.")
    return PatternAddressExtractor(max_pages=settings.extract_max_pages)
