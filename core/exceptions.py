"""
ProposalGen Exceptions
Domain error hierarchy shared by the core engines, adapters and API layer
"""

from typing import List, Optional


class ProposalError(Exception):
    """Base class for all proposal generation errors"""

    status_code = 500
    error = "Service Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProposalValidationError(ProposalError):
    """Raised when required form fields are missing or malformed"""

    status_code = 400
    error = "Missing required fields"

    def __init__(self, fields: List[str], message: Optional[str] = None):
        self.fields = list(fields)
        if message is None:
            message = f"Missing required fields: {', '.join(self.fields)}"
        super().__init__(message)


class InvalidEmailError(ProposalValidationError):
    """Raised when the client email does not look like an address"""

    error = "Invalid email"

    def __init__(self):
        super().__init__(["Client Email"], "Please enter a valid email address")


class UnknownMandateError(ProposalError):
    """Raised when a mandate name is not part of the catalog"""

    status_code = 400
    error = "Unknown mandate"


class ManualEntryDisabledError(ProposalError):
    """Raised when typing an address while extracted candidates exist"""

    status_code = 409
    error = "Manual entry disabled"


class AddressExtractionError(ProposalError):
    """Raised when a document yields no usable address"""

    status_code = 404
    error = "No address found"


class ExtractorResponseError(ProposalError):
    """Raised when the extraction model returns an unusable result"""

    status_code = 502
    error = "Extractor Error"


class UpstreamServiceError(ProposalError):
    """Raised when an external service (places, model) fails"""

    status_code = 502
    error = "Upstream Error"


class UploadValidationError(ProposalError):
    """Raised when an uploaded file fails type or size checks"""

    status_code = 400
    error = "Invalid upload"

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class TemplateNotFoundError(ProposalError):
    """Raised when the DOCX proposal template cannot be located"""

    error = "Template file not found"

    def __init__(self, template_path: str):
        super().__init__(f"Template file not found: {template_path}")
        self.template_path = template_path


class RenderError(ProposalError):
    """Raised when a renderer fails to produce a document"""

    error = "Render Error"


class BioStoreError(ProposalError):
    """Raised when the bio store cannot be queried"""

    error = "Database Error"
