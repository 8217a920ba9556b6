from __future__ import annotations

import io
import json
from argparse import Namespace

import pytest

import exemplar
from exemplar.cmdline import execute, process_options, read_document
from exemplar.exceptions import UsageError
from exemplar.settings import Settings
from tests import tests_datadir

COURSES = f"{tests_datadir}/exemplar/courses.html"


def run_exemplar(*args: str) -> int:
    with pytest.raises(SystemExit) as excinfo:
        execute(["exemplar", *args])
    return excinfo.value.code


def options(**kwargs) -> Namespace:
    defaults = {
        "set": [],
        "logfile": None,
        "loglevel": None,
        "nolog": False,
        "exact_tables": None,
        "start_tags": None,
        "end_tags": None,
        "best_effort": False,
    }
    defaults.update(kwargs)
    return Namespace(**defaults)


class TestExecute:
    def test_text_output(self, capsys):
        assert run_exemplar("--nolog", COURSES) == 0
        out, err = capsys.readouterr()
        assert err == ""
        assert "title     /course/102 Organic Chemistry" in out
        assert out.count("provider  ") == 3
        assert out.endswith("\n\n")

    def test_jsonlines_output(self, tmp_path, capsys):
        output = tmp_path / "records.jl"
        assert run_exemplar("--nolog", "-t", "jsonlines", "-o", str(output), COURSES) == 0
        assert capsys.readouterr().out == ""
        lines = output.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line) for line in lines] == [
            {"title": "/course/101 Intro to Astronomy", "provider": "Open University", "price": "$120"},
            {"title": "/course/102 Organic Chemistry", "provider": "State College", "price": "$80"},
            {"title": "/course/103 Medieval History", "provider": "Night School", "price": "$45"},
        ]

    def test_stdin(self, monkeypatch, capsys):
        document = "(((BEGIN)))(((title)))Alpha(((END)))(((BEGIN)))(((title)))Beta(((END)))"
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(document.encode())))
        assert run_exemplar("--nolog", "-t", "jsonlines", "-") == 0
        out = capsys.readouterr().out
        assert out.splitlines() == ['{"title": "Alpha"}', '{"title": "Beta"}']

    def test_encoding(self, tmp_path, capsys):
        path = tmp_path / "latin1.html"
        path.write_bytes("<p>(((BEGIN)))(((name)))café(((END)))</p>".encode("latin-1"))
        assert run_exemplar("--nolog", "--encoding", "latin-1", "-t", "jsonlines", str(path)) == 0
        assert json.loads(capsys.readouterr().out) == {"name": "café"}

    def test_logging_to_stderr(self, capsys):
        assert run_exemplar("-L", "INFO", COURSES) == 0
        err = capsys.readouterr().err
        assert f"Exemplar {exemplar.__version__} started" in err
        assert "Extracted 3 records (0 skipped)" in err

    def test_logfile(self, tmp_path, capsys):
        log_file = tmp_path / "exemplar.log"
        assert run_exemplar("--logfile", str(log_file), COURSES) == 0
        assert capsys.readouterr().err == ""
        assert "Extracted 3 records" in log_file.read_text(encoding="utf-8")

    def test_set_option(self, capsys):
        assert run_exemplar("--nolog", "-s", "RENDER_FIELD_INDENT=: ", COURSES) == 0
        assert "provider: State College" in capsys.readouterr().out

    def test_invalid_set_option(self, capsys):
        assert run_exemplar("--nolog", "-s", "START_TAGS", COURSES) == 2
        assert "Invalid -s value, use -s NAME=VALUE" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert run_exemplar("--nolog", str(tmp_path / "missing.html")) == 2
        assert "Cannot read" in capsys.readouterr().err

    def test_missing_exemplar(self, capsys):
        unannotated = f"{tests_datadir}/exemplar/unannotated.html"
        assert run_exemplar("--nolog", unannotated) == 1
        err = capsys.readouterr().err
        assert "exemplar: error: No (((BEGIN))) marker found in document" in err

    def test_invalid_anchor_width(self, capsys):
        assert run_exemplar("--nolog", "--start-tags", "0", COURSES) == 1
        assert "START_TAGS must be at least 1, got 0" in capsys.readouterr().err

    def test_invalid_output_format(self, capsys):
        assert run_exemplar("-t", "xml", COURSES) == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_version(self, capsys):
        assert run_exemplar("--version") == 0
        assert capsys.readouterr().out.strip() == f"Exemplar {exemplar.__version__}"


class TestProcessOptions:
    def test_extraction_options(self):
        settings = Settings()
        process_options(
            settings,
            options(exact_tables=False, start_tags=3, end_tags=2, best_effort=True),
        )
        assert settings.getbool("EXACT_TABLES") is False
        assert settings.getint("START_TAGS") == 3
        assert settings.getint("END_TAGS") == 2
        assert settings.getbool("BEST_EFFORT") is True
        assert settings.getpriority("START_TAGS") == 40

    def test_defaults_untouched(self):
        settings = Settings()
        process_options(settings, options())
        assert settings.getpriority("START_TAGS") == 0
        assert settings.getpriority("EXACT_TABLES") == 0

    def test_log_options(self):
        settings = Settings()
        process_options(settings, options(loglevel="DEBUG", logfile="out.log"))
        assert settings["LOG_LEVEL"] == "DEBUG"
        assert settings["LOG_FILE"] == "out.log"
        assert settings.getbool("LOG_ENABLED") is True

    def test_nolog(self):
        settings = Settings()
        process_options(settings, options(nolog=True))
        assert settings.getbool("LOG_ENABLED") is False

    def test_set_overrides_project_settings(self):
        settings = Settings({"START_TAGS": 4})
        process_options(settings, options(set=["START_TAGS=1"]))
        assert settings.getint("START_TAGS") == 1

    def test_invalid_set(self):
        with pytest.raises(UsageError, match="Invalid -s value") as excinfo:
            process_options(Settings(), options(set=["START_TAGS"]))
        assert excinfo.value.print_help is False


class TestReadDocument:
    def test_meta_charset(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_bytes(
            '<html><head><meta charset="latin-1"></head><body>caf\xe9</body></html>'.encode(
                "latin-1"
            )
        )
        assert "café" in read_document(str(path))

    def test_utf8_default(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_bytes("<p>naïve</p>".encode())
        assert read_document(str(path)) == "<p>naïve</p>"

    def test_missing(self, tmp_path):
        with pytest.raises(UsageError, match="Cannot read"):
            read_document(str(tmp_path / "missing.html"))
