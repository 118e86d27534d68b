"""
ProposalGen Unit Tests: CLI
===========================

Tests:
- init-template writes (and refuses to overwrite) the template
- render produces PDF and DOCX files from a payload JSON
- extract lists addresses from a document
- Domain errors exit with status 1
"""

import json
import pytest
import sys
import os
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import cli
from tests.conftest import SAMPLE_BIOS, sample_proposal_body


def run_cli(*args):
    with patch.object(sys, "argv", ["proposalgen", *args]):
        cli.main()


@pytest.fixture
def payload_file(tmp_path):
    body = sample_proposal_body(bios=[bio.to_dict() for bio in SAMPLE_BIOS[:2]])
    path = tmp_path / "proposal.json"
    path.write_text(json.dumps(body))
    return path


@pytest.mark.unit
class TestCli:

    def test_init_template(self, tmp_path):
        path = tmp_path / "template.docx"

        run_cli("init-template", str(path))

        assert path.exists()

    def test_init_template_refuses_overwrite(self, tmp_path):
        path = tmp_path / "template.docx"
        path.write_bytes(b"keep me")

        with pytest.raises(SystemExit) as exc_info:
            run_cli("init-template", str(path))

        assert exc_info.value.code == 1
        assert path.read_bytes() == b"keep me"

    def test_render_docx(self, tmp_path, payload_file, template_path):
        output = tmp_path / "proposal.docx"

        run_cli("render", str(payload_file), "--format", "docx", "-o", str(output), "-t", str(template_path))

        assert output.read_bytes().startswith(b"PK")

    def test_render_pdf(self, tmp_path, payload_file):
        output = tmp_path / "summary.pdf"

        run_cli("render", str(payload_file), "--format", "pdf", "-o", str(output))

        assert output.read_bytes().startswith(b"%PDF")

    def test_render_invalid_payload_exits(self, tmp_path):
        path = tmp_path / "incomplete.json"
        path.write_text(json.dumps({"projectName": "Ancaster"}))

        with pytest.raises(SystemExit) as exc_info:
            run_cli("render", str(path), "-o", str(tmp_path / "out.docx"))

        assert exc_info.value.code == 1

    def test_load_payload_keeps_bio_order(self, payload_file):
        form, bios = cli.load_payload(str(payload_file))

        assert [bio.name for bio in bios] == ["Sarah Whitfield", "Daniel Okafor"]
        assert form.bios == bios
        assert form.fee.total == 1500.0

    def test_extract(self, tmp_path, address_docx, capsys):
        path = tmp_path / "report.docx"
        path.write_bytes(address_docx)

        with patch.object(cli, "get_settings") as get_settings:
            get_settings.return_value.google_api_key = ""
            get_settings.return_value.extract_max_pages = 3
            run_cli("extract", str(path))

        assert "1021 Garner Road East" in capsys.readouterr().out

    def test_no_command(self):
        with pytest.raises(SystemExit):
            run_cli()
