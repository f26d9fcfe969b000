"""
Global configuration constants and the scraper configuration value
"""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .core.errors import ConfigError

# Default settings
DEFAULT_LINK_SELECTOR = "a[href]"
DEFAULT_DELAY = 4.0           # Pause between articles (seconds)
DEFAULT_SETTLE_DELAY = 3.0    # Wait for dynamic content after navigation (seconds)
DEFAULT_NAVIGATION_TIMEOUT = 60.0
DEFAULT_OUTPUT_FOLDER = Path("downloaded_articles")
DEFAULT_SESSION_FILE = Path("session.json")
DEFAULT_EXCLUDE_PATTERNS = ("#", "javascript:", "mailto:", "tel:")

# User-Agent
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_VIEWPORT = (1920, 1080)

# Number of discovered links echoed before the download starts
PREVIEW_LINKS = 5


@dataclass(frozen=True)
class PdfOptions:
    """Page format and margins used when printing an article"""
    format: str = "A4"
    print_background: bool = True
    margin_top: str = "20px"
    margin_bottom: str = "20px"
    margin_left: str = "20px"
    margin_right: str = "20px"

    def to_playwright(self) -> Dict[str, Any]:
        """Keyword arguments for Playwright's page.pdf()"""
        return {
            'format': self.format,
            'print_background': self.print_background,
            'margin': {
                'top': self.margin_top,
                'bottom': self.margin_bottom,
                'left': self.margin_left,
                'right': self.margin_right,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PdfOptions":
        """
        Build options from a JSON object

        Accepts both the flat field names and the nested
        ``{"format", "printBackground", "margin": {...}}`` shape.
        """
        if not isinstance(data, dict):
            raise ConfigError("pdf_options must be an object")

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == 'format':
                kwargs['format'] = value
            elif key in ('print_background', 'printBackground'):
                kwargs['print_background'] = bool(value)
            elif key == 'margin':
                if not isinstance(value, dict):
                    raise ConfigError("pdf_options.margin must be an object")
                for side in ('top', 'bottom', 'left', 'right'):
                    if side in value:
                        kwargs[f'margin_{side}'] = str(value[side])
            elif key.startswith('margin_') and key in _PDF_FIELDS:
                kwargs[key] = str(value)
            else:
                raise ConfigError(f"Unknown pdf option: {key}")
        return cls(**kwargs)


_PDF_FIELDS = {f.name for f in fields(PdfOptions)}


@dataclass(frozen=True)
class ScraperConfig:
    """Immutable settings for one scraper run"""
    start_url: str = ""
    link_selector: str = DEFAULT_LINK_SELECTOR
    filter_pattern: Optional[str] = None
    delay: float = DEFAULT_DELAY
    settle_delay: float = DEFAULT_SETTLE_DELAY
    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT
    output_folder: Path = DEFAULT_OUTPUT_FOLDER
    headless: bool = False
    session_file: Path = DEFAULT_SESSION_FILE
    exclude_patterns: Tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    only_internal_links: bool = True
    max_articles: Optional[int] = None
    start_from: int = 0
    pdf_options: PdfOptions = field(default_factory=PdfOptions)
    user_agent: str = DEFAULT_USER_AGENT
    viewport: Tuple[int, int] = DEFAULT_VIEWPORT

    def __post_init__(self):
        # Normalise loosely-typed values coming from JSON or argparse
        object.__setattr__(self, 'output_folder', Path(self.output_folder))
        object.__setattr__(self, 'session_file', Path(self.session_file))
        object.__setattr__(self, 'exclude_patterns', tuple(self.exclude_patterns))
        object.__setattr__(self, 'viewport', tuple(self.viewport))
        if self.filter_pattern == "":
            object.__setattr__(self, 'filter_pattern', None)

        if self.start_from < 0:
            raise ConfigError(f"start_from must be >= 0, got {self.start_from}")
        if self.max_articles is not None and self.max_articles <= 0:
            raise ConfigError(f"max_articles must be positive, got {self.max_articles}")
        if self.delay < 0 or self.settle_delay < 0:
            raise ConfigError("delays must not be negative")
        if self.navigation_timeout <= 0:
            raise ConfigError("navigation_timeout must be positive")
        if len(self.viewport) != 2:
            raise ConfigError("viewport must be [width, height]")

    def with_overrides(self, **overrides: Any) -> "ScraperConfig":
        """Return a copy with every non-None override applied"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)


_CONFIG_FIELDS = {f.name for f in fields(ScraperConfig)}

# camelCase option names accepted in config files
_CAMEL_CASE_KEYS = {
    'startUrl': 'start_url',
    'linkSelector': 'link_selector',
    'filterPattern': 'filter_pattern',
    'outputFolder': 'output_folder',
    'sessionFile': 'session_file',
    'excludePatterns': 'exclude_patterns',
    'onlyInternalLinks': 'only_internal_links',
    'maxArticles': 'max_articles',
    'startFrom': 'start_from',
    'pdfOptions': 'pdf_options',
    'settleDelay': 'settle_delay',
    'navigationTimeout': 'navigation_timeout',
    'userAgent': 'user_agent',
}

# Durations in config files are milliseconds; ScraperConfig holds seconds
_MILLISECOND_FIELDS = ('delay', 'settle_delay', 'navigation_timeout')


def config_from_dict(data: Dict[str, Any]) -> ScraperConfig:
    """
    Build a ScraperConfig from a plain mapping

    Args:
        data: Option names (snake_case or camelCase) to values; delay,
            settle_delay and navigation_timeout are in milliseconds

    Returns:
        Validated configuration
    """
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        name = _CAMEL_CASE_KEYS.get(key, key)
        if name not in _CONFIG_FIELDS:
            raise ConfigError(f"Unknown configuration option: {key}")
        if name == 'pdf_options' and not isinstance(value, PdfOptions):
            value = PdfOptions.from_dict(value)
        elif name in _MILLISECOND_FIELDS and value is not None:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{key} must be a number of milliseconds")
            value = value / 1000
        kwargs[name] = value

    try:
        return ScraperConfig(**kwargs)
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Path) -> ScraperConfig:
    """
    Load configuration from a JSON file

    Args:
        path: Path to the JSON file

    Returns:
        Validated configuration
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    return config_from_dict(data)
