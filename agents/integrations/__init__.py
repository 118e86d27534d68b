"""
ProposalGen External Integrations

Third-party services used by the API:
- Address extraction from uploaded documents (Gemini, or a pattern fallback)
- Google Places address autocomplete
"""

from .address_extractor import (
    GeminiAddressExtractor,
    ParsedAddress,
    PatternAddressExtractor,
    create_address_extractor,
    parse_addresses,
    parse_model_output,
)
from .places_client import (
    PLACES_FAILED_MESSAGE,
    PlacesClient,
    create_places_client,
)

__all__ = [
    # Address extraction
    "GeminiAddressExtractor",
    "ParsedAddress",
    "PatternAddressExtractor",
    "create_address_extractor",
    "parse_addresses",
    "parse_model_output",
    # Places
    "PLACES_FAILED_MESSAGE",
    "PlacesClient",
    "create_places_client",
]
