"""
Error log of a run (errors.json in the output folder)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .pipeline import RunSummary

logger = logging.getLogger(__name__)

ERROR_LOG_FILENAME = "errors.json"


class ErrorLog:
    """Reads and writes the structured list of failed articles"""

    def __init__(self, output_folder: Path):
        """
        Initialize error log

        Args:
            output_folder: Folder holding the exported PDFs
        """
        self.path = Path(output_folder) / ERROR_LOG_FILENAME

    def save(self, summary: RunSummary) -> Optional[Path]:
        """
        Write failures of a run

        Args:
            summary: Finished run summary

        Returns:
            Path of the written log, or None when the run had no failures
        """
        if summary.error_count == 0:
            # Failures of an earlier run are stale once a run finishes clean
            if self.path.exists():
                self.path.unlink()
                logger.info(f"Removed previous error log: {self.path}")
            return None

        temp_path = self.path.with_suffix('.tmp')
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(summary.error_records(), f, ensure_ascii=False, indent=2)
        temp_path.replace(self.path)

        logger.info(f"Error log saved: {self.path}")
        return self.path

    def load(self) -> List[Dict[str, Any]]:
        """Records of the last run with failures, or [] if there is no log"""
        if not self.path.exists():
            return []
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)
