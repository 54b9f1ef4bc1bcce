"""Tests for the command line entry point."""

import json
from unittest.mock import MagicMock, patch

import pytest

import cli_runner


class TestCompileCommand:

    def test_writes_all_outputs(self, tmp_path, sample_fields, make_image):
        fields_path = tmp_path / "day3.json"
        fields_path.write_text(sample_fields.model_dump_json(), encoding="utf-8")
        image_path = tmp_path / "patrol.png"
        image_path.write_bytes(make_image(800, 600))
        out = tmp_path / "out"

        exit_code = cli_runner.main([
            "compile", str(fields_path), "--image", str(image_path), "--output-dir", str(out),
        ])

        report_dir = out / "day3"
        assert exit_code == 0
        assert (report_dir / "report.txt").read_text(encoding="utf-8").startswith("*SITUATION REPORT")
        assert "<!DOCTYPE html>" in (report_dir / "report.html").read_text(encoding="utf-8")
        assert (report_dir / "Situation Report Alpha Company 16 FEB 26.docx").exists()

    def test_invalid_fields(self, tmp_path):
        fields_path = tmp_path / "bad.json"
        fields_path.write_text(json.dumps({"unit_name": "Alpha"}), encoding="utf-8")
        assert cli_runner.main(["compile", str(fields_path), "--output-dir", str(tmp_path)]) == 1

    def test_bad_image(self, tmp_path, sample_fields):
        fields_path = tmp_path / "day.json"
        fields_path.write_text(sample_fields.model_dump_json(), encoding="utf-8")
        image_path = tmp_path / "broken.jpg"
        image_path.write_bytes(b"not an image")

        exit_code = cli_runner.main([
            "compile", str(fields_path), "--image", str(image_path), "--output-dir", str(tmp_path),
        ])
        assert exit_code == 1


class TestRenderCommand:

    def test_renders_fragment(self, tmp_path, capsys):
        markup_path = tmp_path / "notes.txt"
        markup_path.write_text("*HEADING*\n. item", encoding="utf-8")

        assert cli_runner.main(["render", str(markup_path), "--output-dir", str(tmp_path)]) == 0
        fragment = (tmp_path / "notes.html").read_text(encoding="utf-8")
        assert '<h3 class="section-title">HEADING</h3>' in fragment
        assert "<li>item</li>" in fragment

        printed = capsys.readouterr().out.splitlines()
        assert printed == ["HEADING  HEADING", "BULLET   item"]


class TestConsolidateCommand:

    def test_days_required(self, tmp_path):
        with pytest.raises(SystemExit):
            cli_runner.main(["consolidate", str(tmp_path / "records.json")])


class TestWeeklyCommand:

    def test_dates_required(self, tmp_path):
        with pytest.raises(SystemExit):
            cli_runner.main(["weekly", str(tmp_path / "week.txt"), "--start", "2026-02-16"])

    def test_writes_summary_and_document(self, tmp_path):
        reports_path = tmp_path / "week.txt"
        reports_path.write_text("Day one\n---\nDay two", encoding="utf-8")
        summary = {
            "overall_security_situation": "Calm.",
            "recurring_challenges": [],
            "common_recommendations": [],
            "weekly_summary": "A steady week.",
        }
        model = MagicMock()
        model.generate_content.return_value = MagicMock(text=json.dumps(summary))

        with patch("cli_runner.validate_config", return_value=(True, [])), \
                patch("cli_runner.configure_gemini", return_value=model):
            exit_code = cli_runner.main([
                "weekly", str(reports_path), "--start", "2026-02-16", "--end", "2026-02-22",
                "--output-dir", str(tmp_path),
            ])

        assert exit_code == 0
        assert (tmp_path / "weekly_2026-02-16_2026-02-22.json").exists()
        assert (tmp_path / "WEEKLY EXECUTIVE SUMMARY 2026-02-16 TO 2026-02-22.docx").exists()

    def test_blank_file(self, tmp_path):
        reports_path = tmp_path / "week.txt"
        reports_path.write_text("  \n---\n", encoding="utf-8")
        with patch("cli_runner.validate_config", return_value=(True, [])), \
                patch("cli_runner.configure_gemini", return_value=MagicMock()):
            exit_code = cli_runner.main([
                "weekly", str(reports_path), "--start", "2026-02-16", "--end", "2026-02-22",
                "--output-dir", str(tmp_path),
            ])
        assert exit_code == 1
