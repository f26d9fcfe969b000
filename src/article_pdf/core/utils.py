"""
Utility functions for output file naming and handling
"""

from pathlib import Path

from .errors import SetupError

ARTICLE_FILENAME = "article_{number:04d}.pdf"
ARTICLE_GLOB = "article_*.pdf"
SCREENSHOT_FILENAME = "error_{number}.png"


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, create if not

    Args:
        path: Directory path

    Returns:
        The path
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SetupError(f"Cannot create folder {path}: {e}") from e
    return path


def article_filename(number: int) -> str:
    """File name of the PDF for a 1-based article number"""
    return ARTICLE_FILENAME.format(number=number)


def screenshot_filename(number: int) -> str:
    """File name of the diagnostic screenshot for a failed article"""
    return SCREENSHOT_FILENAME.format(number=number)


def format_size(size: int) -> str:
    """Human readable size in KB, as printed in progress lines"""
    return f"{size / 1024:.2f} KB"
