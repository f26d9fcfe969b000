from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from article_pdf import main
from article_pdf.core.errors import SetupError
from article_pdf.core.pipeline import RunSummary


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda debug=False, log_file=None: None)


def parse(*argv):
    return main.create_parser().parse_args(list(argv))


def test_flags_override_config_file(tmp_path):
    path = tmp_path / "scraper.json"
    path.write_text(json.dumps({"startUrl": "https://example.com/a", "delay": 9000}), encoding="utf-8")

    args = parse(
        "run", "--config", str(path),
        "--url", "https://example.com/b",
        "--start-from", "20",
        "--max-articles", "5",
        "--exclude", "#", "--exclude", "javascript:",
        "--allow-external",
        "--headless",
    )
    config = main.build_config(args)

    assert config.start_url == "https://example.com/b"
    assert config.delay == 9.0
    assert config.start_from == 20
    assert config.max_articles == 5
    assert config.exclude_patterns == ("#", "javascript:")
    assert config.only_internal_links is False
    assert config.headless is True


def test_unset_flags_keep_defaults():
    config = main.build_config(parse("run", "--url", "https://example.com"))

    assert config.headless is False
    assert config.only_internal_links is True
    assert config.exclude_patterns == ("#", "javascript:", "mailto:", "tel:")


def test_no_command_prints_help(capsys):
    assert main.cli([]) == 1
    assert "usage" in capsys.readouterr().out


def test_run_returns_zero_with_per_article_failures(monkeypatch):
    class FakeScraper:
        def __init__(self, config, confirm):
            self.config = config

        def run(self):
            return RunSummary(total_candidates=3)

    monkeypatch.setattr("article_pdf.scraper.ArticleScraper", FakeScraper)

    assert main.cli(["run", "--url", "https://example.com"]) == 0


def test_setup_error_exits_non_zero(monkeypatch):
    class FailingScraper:
        def __init__(self, config, confirm):
            pass

        def run(self):
            raise SetupError("Cannot create folder")

    monkeypatch.setattr("article_pdf.scraper.ArticleScraper", FailingScraper)

    assert main.cli(["run", "--url", "https://example.com"]) == 1


def test_unexpected_error_exits_non_zero(monkeypatch):
    class CrashingScraper:
        def __init__(self, config, confirm):
            pass

        def run(self):
            raise RuntimeError("Browser closed unexpectedly")

    monkeypatch.setattr("article_pdf.scraper.ArticleScraper", CrashingScraper)

    assert main.cli(["run", "--url", "https://example.com"]) == 1


def test_invalid_option_exits_non_zero():
    assert main.cli(["run", "--url", "https://example.com", "--start-from", "-2"]) == 1


def test_links_prints_candidates(monkeypatch, capsys):
    class ListingScraper:
        def __init__(self, config, confirm):
            pass

        def discover(self):
            return ["https://example.com/p/1", "https://example.com/p/2"]

    monkeypatch.setattr("article_pdf.scraper.ArticleScraper", ListingScraper)

    assert main.cli(["links", "--url", "https://example.com"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "https://example.com/p/1",
        "https://example.com/p/2",
    ]


def test_status_counts_articles_and_errors(tmp_path, capsys):
    out = tmp_path / "out"
    out.mkdir()
    for number in (1, 2, 4):
        (out / f"article_{number:04d}.pdf").write_bytes(b"%PDF")
    (out / "errors.json").write_text(json.dumps([
        {"number": 3, "link": "https://example.com/p/3", "error": "Timeout"}
    ]), encoding="utf-8")

    assert main.cli(["status", "--output", str(out)]) == 0

    text = capsys.readouterr().out
    assert "Articles: 3" in text
    assert "Last: article_0004.pdf" in text
    assert "[3] https://example.com/p/3" in text


def test_status_without_output_folder(tmp_path, capsys):
    assert main.cli(["status", "--output", str(tmp_path / "missing")]) == 0
    assert "not downloaded" in capsys.readouterr().out


def test_wait_for_enter_accepts_eof(monkeypatch):
    def raise_eof():
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)

    main.wait_for_enter()


def test_log_file_is_written(tmp_path, monkeypatch):
    monkeypatch.undo()
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / "logs" / "run.log"

    try:
        main.setup_logging(log_file=log_file)
        main.logger.info("hello")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)

    assert "hello" in Path(log_file).read_text(encoding="utf-8")
