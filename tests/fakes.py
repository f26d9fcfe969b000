from __future__ import annotations

from pathlib import Path


class FakeExporter:
    """Records every browser call; fails navigation for URLs in `fail`."""

    def __init__(self, fail=None, screenshot_error=None):
        self.fail = dict(fail or {})
        self.screenshot_error = screenshot_error
        self.calls = []

    def navigate(self, url):
        self.calls.append(("navigate", url))
        if url in self.fail:
            raise self.fail[url]
        return {"url": url}

    def export_pdf(self, page, path: Path, options):
        self.calls.append(("pdf", path.name))
        data = b"%PDF-1.4 " + page["url"].encode("utf-8")
        path.write_bytes(data)
        return len(data)

    def screenshot(self, page, path: Path):
        self.calls.append(("screenshot", path.name))
        if self.screenshot_error is not None:
            raise self.screenshot_error
        path.write_bytes(b"PNG")

    @property
    def navigations(self):
        return [arg for name, arg in self.calls if name == "navigate"]


class FakeBrowser(FakeExporter):
    """Stands in for BrowserSession: serves one listing page and its cookies."""

    def __init__(self, html="", cookies=None, **kwargs):
        super().__init__(**kwargs)
        self.html = html
        self.url = None
        self.jar = list(cookies or [])
        self.added_cookies = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def add_cookies(self, cookies):
        self.added_cookies.extend(cookies)

    def cookies(self):
        return self.jar

    def open(self, url):
        self.url = url
        self.calls.append(("open", url))

    def snapshot(self):
        return self.html, self.url
