"""
Persistence of the browser session (cookies) between runs
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import SessionCorruptError, SetupError

logger = logging.getLogger(__name__)

# Keys accepted by Playwright's BrowserContext.add_cookies()
COOKIE_KEYS = ('name', 'value', 'url', 'domain', 'path', 'expires', 'httpOnly', 'secure', 'sameSite')
SAME_SITE_VALUES = ('Strict', 'Lax', 'None')


def normalize_cookies(cookies: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Reduce stored cookie records to what the browser accepts

    Records written by other tools (e.g. Puppeteer's page.cookies()) carry
    extra keys such as ``size`` or ``session``; those are dropped.

    Args:
        cookies: Cookie records as loaded from the session file

    Returns:
        Cookie records safe to pass to add_cookies()
    """
    result = []
    for cookie in cookies:
        if not cookie.get('name') or 'value' not in cookie:
            continue
        if not cookie.get('url') and not cookie.get('domain'):
            continue

        clean = {k: cookie[k] for k in COOKIE_KEYS if k in cookie}
        if clean.get('sameSite') not in SAME_SITE_VALUES:
            clean.pop('sameSite', None)
        expires = clean.get('expires')
        if expires is not None and (not isinstance(expires, (int, float)) or expires <= 0):
            clean.pop('expires')
        if 'url' in clean:
            # Playwright rejects url together with domain/path
            clean.pop('domain', None)
            clean.pop('path', None)
        else:
            clean.setdefault('path', '/')
        result.append(clean)
    return result


class SessionStore:
    """Saves and restores the cookie set of an authenticated browser session"""

    def __init__(self, path: Path):
        """
        Initialize session store

        Args:
            path: Session file (JSON list of cookie records)
        """
        self.path = Path(path)

    def load(self) -> Optional[List[Dict[str, Any]]]:
        """
        Load saved cookies

        Returns:
            Cookie records, or None if no session file exists

        Raises:
            SessionCorruptError: the file exists but is not a JSON list of objects
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                cookies = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SessionCorruptError(f"Session file {self.path} is unreadable: {e}") from e

        if not isinstance(cookies, list) or not all(isinstance(c, dict) for c in cookies):
            raise SessionCorruptError(f"Session file {self.path} is not a list of cookies")

        logger.info(f"Loaded {len(cookies)} cookies from {self.path}")
        return cookies

    def save(self, cookies: List[Dict[str, Any]]) -> None:
        """
        Overwrite the session file with the given cookies

        The file is written to a temporary sibling and renamed into place, so
        a reader never sees a partial file.

        Args:
            cookies: Cookie records from the browser context
        """
        temp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(cookies, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(self.path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise SetupError(f"Cannot save session to {self.path}: {e}") from e

        logger.info(f"Session saved to {self.path} ({len(cookies)} cookies)")
