"""
ProposalGen Address Resolution
Chooses the effective project address from extracted candidates or manual entry
"""

import logging
from typing import List, Optional, Protocol, Sequence

from core.exceptions import AddressExtractionError, ManualEntryDisabledError
from core.models import UploadedDocument

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Document data extraction failed"
NO_ADDRESS_MESSAGE = "No address found in the document."


class AddressSource(Protocol):
    """Anything that can turn a document into candidate address strings."""

    async def extract_candidates(self, document: UploadedDocument) -> List[str]:
        ...


def default_selection(candidates: Sequence[str]) -> Optional[str]:
    """The first candidate is the default pick; None when there are none."""
    return candidates[0] if candidates else None


async def extract_address_from_document(
    source: AddressSource,
    document: UploadedDocument,
) -> List[str]:
    """
    Run the extractor for a document.

    Raises:
        AddressExtractionError: if the extractor fails or finds nothing
    """
    try:
        candidates = await source.extract_candidates(document)
    except AddressExtractionError:
        raise
    except Exception as e:
        logger.error(f"Address extraction failed for {document.filename}: {e}")
        raise AddressExtractionError(EXTRACTION_FAILED_MESSAGE) from e

    candidates = [c.strip() for c in candidates or [] if c and c.strip()]
    if not candidates:
        raise AddressExtractionError(NO_ADDRESS_MESSAGE)
    return candidates


class AddressResolutionCoordinator:
    """
    Tracks the uploaded document, its candidate addresses and the user's pick.

    Once a document produced candidates, manual entry is locked until clear()
    is called. Candidates, selection and document are reset together.
    """

    def __init__(self, source: AddressSource):
        self._source = source
        self._generation = 0
        self.candidates: List[str] = []
        self.selected: str = ""
        self.manual_address: str = ""
        self.document: Optional[UploadedDocument] = None
        self.error: Optional[str] = None
        self.is_loading = False

    @property
    def manual_entry_enabled(self) -> bool:
        return not self.candidates

    def set_manual_address(self, value: str) -> None:
        if not self.manual_entry_enabled:
            raise ManualEntryDisabledError(
                "Address entry is disabled while extracted addresses are available"
            )
        self.manual_address = value

    def select(self, address: str) -> None:
        if address not in self.candidates:
            raise ValueError(f"Address is not one of the extracted candidates: {address}")
        self.selected = address

    def resolve_effective_address(self) -> str:
        return self.selected or self.manual_address

    async def load_document(self, document: UploadedDocument) -> List[str]:
        """
        Extract candidates for a newly selected document.

        Candidates and selection from a previous document are dropped before
        extraction starts. A result arriving after clear() or a newer upload is
        discarded and an empty list is returned. On failure the document
        selection is rolled back, error is set and the AddressExtractionError is
        re-raised.
        """
        self._generation += 1
        generation = self._generation
        self.document = document
        self.candidates = []
        self.selected = ""
        self.error = None
        self.is_loading = True

        try:
            candidates = await extract_address_from_document(self._source, document)
        except AddressExtractionError as e:
            if generation != self._generation:
                logger.info(f"Discarding stale extraction error for {document.filename}")
                return []
            self.document = None
            self.error = e.message
            self.is_loading = False
            raise

        if generation != self._generation:
            logger.info(f"Discarding stale extraction result for {document.filename}")
            return []

        self.candidates = candidates
        self.selected = default_selection(candidates) or ""
        self.is_loading = False
        return list(candidates)

    def clear(self) -> None:
        self._generation += 1
        self.candidates = []
        self.selected = ""
        self.document = None
        self.error = None
        self.is_loading = False
