"""
Core modules for link discovery and article export
"""

from .errors import ScraperError, ConfigError, SetupError, SessionCorruptError
from .utils import ensure_dir, article_filename, screenshot_filename
from .links import LinkFilterConfig, extract_hrefs, collect
from .pipeline import ExportJob, ExportOutcome, ExportPipeline, OutcomeStatus, RunSummary, plan_jobs
from .report import ErrorLog
from .session import SessionStore, normalize_cookies
