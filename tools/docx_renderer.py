"""
ProposalGen DOCX Renderer
Merges a proposal payload into a Word template with docxtpl (Jinja2 over python-docx)

Template tags:
- {{ name }}                         value substitution (missing values render as "")
- {%p if flag %} ... {%p endif %}    keep the paragraphs between when flag is truthy
- {%p for bio in bios %} ...         repeat the paragraphs between per item
- {%tr for line in fee_lines %}      repeat the table row between per item
- {{p name|safe }}                   replace the paragraph with raw WordprocessingML

Values are XML-escaped and never re-read as template code.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, Mapping, Optional, Union

from docx import Document
from docxtpl import DocxTemplate
from jinja2 import Environment, TemplateError

from core.assembly import SERVICE_OPTIONS
from core.exceptions import RenderError, TemplateNotFoundError
from core.models import ProposalPayload

logger = logging.getLogger(__name__)


TemplateSource = Union[str, Path, BinaryIO]


def _blank_none(value: Any) -> Any:
    return "" if value is None else value


def create_jinja_env() -> Environment:
    """Environment for proposal templates: escaped output, default Undefined."""
    return Environment(autoescape=True, finalize=_blank_none)


def render_template(template: TemplateSource, context: Mapping[str, Any]) -> bytes:
    """Render a .docx template with context and return the document bytes."""
    if isinstance(template, Path):
        template = str(template)

    doc = DocxTemplate(template)
    try:
        doc.render(dict(context), jinja_env=create_jinja_env())
    except TemplateError as e:
        raise RenderError(f"Invalid template: {e}") from e

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


class DocxRenderer:
    """Renders a ProposalPayload into the proposal template."""

    def __init__(self, template_path: Union[str, Path]):
        self.template_path = Path(template_path)

    def render(self, payload: ProposalPayload) -> bytes:
        if not self.template_path.exists():
            logger.error(f"Template not found at: {self.template_path}")
            raise TemplateNotFoundError(str(self.template_path))

        try:
            content = render_template(self.template_path, payload.template_context())
        except RenderError as e:
            logger.error(f"DOCX render failed for '{payload.project_name}': {e.message}")
            raise
        except Exception as e:
            logger.error(f"DOCX render failed for '{payload.project_name}': {e}")
            raise RenderError(f"DOCX render failed: {e}") from e

        logger.info(f"Rendered proposal for '{payload.project_name}' ({len(payload.bios)} bios)")
        return content


# ============== Default Template ==============

SERVICE_DESCRIPTIONS = {
    "concept_to_completion": (
        "We provide cost consulting from the earliest concept through to final "
        "completion, including estimates at each design stage and change management."
    ),
    "cost_planning": (
        "Our cost planning service establishes the project budget, tracks design "
        "development against it and reports variances as the design evolves."
    ),
    "project_monitoring": (
        "Project monitoring covers monthly site reviews, draw reviews and reporting "
        "on schedule, budget and contingency on behalf of the lender or owner."
    ),
}


def build_default_template(path: Union[str, Path]) -> Path:
    """Write the stock proposal template used when none is supplied."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    doc = Document()
    doc.add_heading("Proposal: {{ project_name }}", level=0)
    doc.add_paragraph("Date: {{ date }}")
    doc.add_paragraph("Prepared for: {{ client_name }}")
    doc.add_paragraph("{{ client_company_address }}")
    doc.add_paragraph("{{ client_email }}")
    doc.add_paragraph("Billing Entity: {{ billing_entity }}")
    doc.add_paragraph("Project Address: {{ address }}")
    doc.add_paragraph("Asset Class: {{ asset_class }}")

    doc.add_heading("Project Description", level=1)
    doc.add_paragraph("{{ project_description }}")
    doc.add_paragraph("Proposed Mandates: {{ proposed_mandates }}")

    for service, label in SERVICE_OPTIONS.items():
        doc.add_paragraph(f"{{{{p has_{service}_break|safe }}}}")
        doc.add_paragraph(f"{{%p if has_{service} %}}")
        doc.add_heading(label, level=1)
        doc.add_paragraph(SERVICE_DESCRIPTIONS[service])
        doc.add_paragraph("{%p endif %}")

    doc.add_heading("Proposed Fees", level=1)
    table = doc.add_table(rows=4, cols=4)
    table.style = "Table Grid"
    for cell, label in zip(table.rows[0].cells, ("Staff", "Hours", "Rate", "Line Total")):
        cell.text = label
    table.rows[1].cells[0].text = "{%tr for line in fee_lines %}"
    for cell, tag in zip(
        table.rows[2].cells,
        ("{{ line.staff_name }}", "{{ line.hours }}", "{{ line.rate }}", "{{ line.line_total }}"),
    ):
        cell.text = tag
    table.rows[3].cells[0].text = "{%tr endfor %}"
    doc.add_paragraph("Total: {{ fee_total }}")

    doc.add_heading("Project Team", level=1)
    doc.add_paragraph("{%p for bio in bios %}")
    doc.add_heading("{{ bio.name }}", level=2)
    doc.add_paragraph("{{ bio.industry_experience }}")
    doc.add_paragraph("{%p if bio.accreditations %}")
    doc.add_paragraph("Accreditations: {{ bio.accreditations }}")
    doc.add_paragraph("{%p endif %}")
    doc.add_paragraph("{%p endfor %}")

    doc.save(str(path))
    return path


def create_docx_renderer(template_path: Optional[Union[str, Path]] = None) -> DocxRenderer:
    """Factory function to create the DOCX renderer from settings"""
    if template_path is None:
        from api.config import get_settings
        template_path = get_settings().template_path
    return DocxRenderer(template_path)
