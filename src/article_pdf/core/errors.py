"""
Exception types raised outside the per-article isolation boundary
"""


class ScraperError(Exception):
    """Base class for fatal scraper errors"""


class ConfigError(ScraperError):
    """Invalid or unreadable configuration"""


class SetupError(ScraperError):
    """Run cannot start: output folder or session file unusable"""


class SessionCorruptError(SetupError):
    """Session file exists but does not hold a list of cookie records"""
