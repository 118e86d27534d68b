#!/usr/bin/env python3
"""
ProposalGen CLI - Command Line Interface
========================================

Commands:
  proposalgen serve                          Start the API server
  proposalgen init-template [path]           Write the default DOCX template
  proposalgen render <payload.json>          Render a project summary or proposal
  proposalgen extract <file>                 List candidate addresses in a document
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from agents.integrations.address_extractor import create_address_extractor
from api.config import get_settings
from api.schemas import GenerateProposalRequest
from core.address import extract_address_from_document
from core.assembly import assemble
from core.exceptions import ProposalError
from core.models import Bio, FeeSummary, UploadedDocument
from core.validation import DocumentTarget, check_mandates, gate_submission
from tools.docx_renderer import DocxRenderer, build_default_template
from tools.pdf_renderer import create_pdf_renderer

console = Console()


def print_output(message, style=None):
    """Print output with optional styling"""
    console.print(message, style=style)


def load_payload(path: str):
    """
    Read a JSON payload in the /api/generate-proposal shape.

    Bios are given inline as {id, name, industry_experience, accreditations}
    objects since the CLI has no bio store.
    """
    with open(path, "r") as f:
        data = json.load(f)

    bios = [
        Bio(
            id=str(item.get("id") or index),
            name=item.get("name", ""),
            industry_experience=item.get("industry_experience", ""),
            accreditations=item.get("accreditations"),
        )
        for index, item in enumerate(data.get("bios") or [], start=1)
    ]
    request = GenerateProposalRequest.model_validate({**data, "bios": [bio.id for bio in bios]})
    return request.to_form(bios), bios


def cmd_init_template(args):
    """Write the default proposal template"""
    path = Path(args.path or get_settings().template_path)
    if path.exists() and not args.force:
        print_output(f"Template already exists: {path} (use --force to overwrite)", "yellow")
        sys.exit(1)

    build_default_template(path)
    print_output(f"✓ Wrote template: {path}", "green")


def cmd_render(args):
    """Render a payload file to PDF or DOCX"""
    form, bios = load_payload(args.payload)
    target = DocumentTarget.PDF if args.format == "pdf" else DocumentTarget.PROPOSAL

    gate_submission(form, form.address, target)
    check_mandates(form.proposed_mandates)
    payload = assemble(form, form.address, form.fee or FeeSummary(), bios)

    if target is DocumentTarget.PDF:
        content = create_pdf_renderer().render(payload.to_summary())
    else:
        template = args.template or get_settings().template_path
        content = DocxRenderer(template).render(payload)

    output = Path(args.output or f"{args.format}-output.{args.format}")
    output.write_bytes(content)

    table = Table(title=f"Rendered: {payload.project_name}", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Output", str(output))
    table.add_row("Date", payload.date)
    table.add_row("Address", payload.address)
    table.add_row("Fee lines", str(len(payload.fee.lines)))
    table.add_row("Fee total", f"${payload.fee.total:.2f}")
    table.add_row("Bios", str(len(payload.bios)))
    console.print(table)


def cmd_extract(args):
    """List candidate project addresses found in a document"""
    path = Path(args.file)
    document = UploadedDocument(filename=path.name, content=path.read_bytes())
    extractor = create_address_extractor(get_settings())

    candidates = asyncio.run(extract_address_from_document(extractor, document))

    table = Table(title=f"Addresses in {path.name}", box=box.ROUNDED)
    table.add_column("#", style="cyan")
    table.add_column("Address", style="white")
    for index, candidate in enumerate(candidates, start=1):
        table.add_row(str(index), candidate)
    console.print(table)


def cmd_serve(args):
    """Start the API server"""
    import uvicorn
    from api.main import app

    print_output(f"Starting ProposalGen API server on {args.host}:{args.port}...", "cyan")
    uvicorn.run(app, host=args.host, port=args.port)


def main():
    """Main CLI entry point"""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="ProposalGen - project summary and proposal generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  proposalgen init-template
  proposalgen render proposal.json --format docx -o proposal.docx
  proposalgen render proposal.json --format pdf
  proposalgen extract drawings.pdf
  proposalgen serve --port 3000
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default=settings.host, help="Host to bind")
    serve_parser.add_argument("--port", "-p", type=int, default=settings.port, help="Port to bind")

    # init-template command
    template_parser = subparsers.add_parser("init-template", help="Write the default DOCX template")
    template_parser.add_argument("path", nargs="?", help="Template path (default: PROPOSAL_TEMPLATE_PATH)")
    template_parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing file")

    # render command
    render_parser = subparsers.add_parser("render", help="Render a payload JSON file")
    render_parser.add_argument("payload", help="Path to payload JSON")
    render_parser.add_argument("--format", choices=["pdf", "docx"], default="docx", help="Output format")
    render_parser.add_argument("--output", "-o", help="Output file path")
    render_parser.add_argument("--template", "-t", help="DOCX template path")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract candidate addresses")
    extract_parser.add_argument("file", help="Path to PDF or DOCX document")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Route to command handler
    commands = {
        "serve": cmd_serve,
        "init-template": cmd_init_template,
        "render": cmd_render,
        "extract": cmd_extract,
    }

    try:
        commands[args.command](args)
    except ProposalError as e:
        print_output(f"Error: {e.message}", "red")
        sys.exit(1)


if __name__ == "__main__":
    main()
