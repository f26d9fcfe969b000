from __future__ import annotations

import pytest


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("article_pdf.core.pipeline.time.sleep", sleeps.append)
    return sleeps
