"""
Article PDF Scraper

Collects the article links of a listing page behind a saved login session
and exports each article to a numbered PDF, resuming where a previous run
stopped.
"""

__version__ = "1.0.0"

from .config import ScraperConfig, PdfOptions, load_config
