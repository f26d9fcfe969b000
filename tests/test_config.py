from __future__ import annotations

import json
from pathlib import Path

import pytest
from fakes import FakeExporter

from article_pdf.config import PdfOptions, ScraperConfig, config_from_dict, load_config
from article_pdf.core.errors import ConfigError
from article_pdf.core.pipeline import ExportPipeline


def test_defaults():
    config = ScraperConfig()

    assert config.link_selector == "a[href]"
    assert config.exclude_patterns == ("#", "javascript:", "mailto:", "tel:")
    assert config.only_internal_links is True
    assert config.start_from == 0
    assert config.max_articles is None
    assert config.output_folder == Path("downloaded_articles")


def test_pdf_options_for_playwright():
    assert PdfOptions().to_playwright() == {
        "format": "A4",
        "print_background": True,
        "margin": {"top": "20px", "bottom": "20px", "left": "20px", "right": "20px"},
    }


def test_load_config_accepts_camel_case_option_names(tmp_path):
    path = tmp_path / "scraper.json"
    path.write_text(json.dumps({
        "startUrl": "https://example.com/archive",
        "filterPattern": "/p/",
        "delay": 2500,
        "settleDelay": 1500,
        "outputFolder": "out",
        "excludePatterns": ["#", "mailto:"],
        "onlyInternalLinks": False,
        "maxArticles": 10,
        "startFrom": 3,
        "pdfOptions": {
            "format": "Letter",
            "printBackground": False,
            "margin": {"top": "1cm", "bottom": "1cm"},
        },
    }), encoding="utf-8")

    config = load_config(path)

    assert config.start_url == "https://example.com/archive"
    assert config.filter_pattern == "/p/"
    assert config.delay == 2.5
    assert config.settle_delay == 1.5
    assert config.output_folder == Path("out")
    assert config.exclude_patterns == ("#", "mailto:")
    assert config.only_internal_links is False
    assert config.max_articles == 10
    assert config.start_from == 3
    assert config.pdf_options == PdfOptions(
        format="Letter", print_background=False, margin_top="1cm", margin_bottom="1cm"
    )


def test_file_delays_are_milliseconds(tmp_path, no_sleep):
    path = tmp_path / "scraper.json"
    path.write_text(json.dumps({
        "startUrl": "https://s/x",
        "delay": 4000,
        "settleDelay": 3000,
        "navigationTimeout": 60000,
    }), encoding="utf-8")

    config = load_config(path)
    assert config.navigation_timeout == 60.0

    pipeline = ExportPipeline(tmp_path, {}, delay=config.delay, settle_delay=config.settle_delay)
    pipeline.run(["https://s/a", "https://s/b"], FakeExporter())

    assert no_sleep == [3.0, 4.0, 3.0]


def test_non_numeric_delay_is_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({"delay": "4s"})


def test_unknown_option_is_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({"start_url": "https://example.com", "retries": 3})


def test_unknown_pdf_option_is_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({"pdf_options": {"scale": 0.8}})


@pytest.mark.parametrize("options", [
    {"start_from": -1},
    {"max_articles": 0},
    {"delay": -1},
    {"navigation_timeout": 0},
    {"start_from": "two"},
])
def test_invalid_values_are_rejected(options):
    with pytest.raises(ConfigError):
        config_from_dict(options)


def test_bad_json_file(tmp_path):
    path = tmp_path / "scraper.json"
    path.write_text("{", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.json")


def test_overrides_skip_none():
    config = ScraperConfig(start_url="https://example.com", delay=1.0)

    updated = config.with_overrides(delay=None, start_from=5, output_folder="pdfs")

    assert updated.delay == 1.0
    assert updated.start_from == 5
    assert updated.output_folder == Path("pdfs")
    assert config.start_from == 0


def test_empty_filter_means_no_filter():
    assert ScraperConfig(filter_pattern="").filter_pattern is None
