"""
Sequential, resumable export of article pages to PDF
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .utils import article_filename, format_size, screenshot_filename

logger = logging.getLogger(__name__)


class PageExporter(Protocol):
    """Rendering capability the pipeline drives, one call at a time"""

    def navigate(self, url: str) -> Any: ...

    def export_pdf(self, page: Any, path: Path, options: Dict[str, Any]) -> int: ...

    def screenshot(self, page: Any, path: Path) -> None: ...


@dataclass(frozen=True)
class ExportJob:
    """One article to export"""
    number: int
    url: str
    target_path: Path


class OutcomeStatus(Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ExportOutcome:
    """Result of processing one ExportJob"""
    job: ExportJob
    status: OutcomeStatus
    file_size: Optional[int] = None
    error: Optional[str] = None
    screenshot_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED


@dataclass
class RunSummary:
    """Tally of one pipeline run"""
    total_candidates: int = 0
    outcomes: List[ExportOutcome] = field(default_factory=list)

    def record(self, outcome: ExportOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status is OutcomeStatus.SKIPPED)

    @property
    def downloaded_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status is OutcomeStatus.SUCCEEDED)

    @property
    def failures(self) -> List[ExportOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.FAILED]

    def error_records(self) -> List[Dict[str, Any]]:
        """Failures in the errors.json record shape"""
        return [
            {'number': o.job.number, 'link': o.job.url, 'error': o.error}
            for o in self.failures
        ]


def plan_jobs(
    candidates: Sequence[str],
    output_folder: Path,
    start_from: int = 0,
    max_articles: Optional[int] = None,
) -> List[ExportJob]:
    """
    Slice the candidate list and number each kept article

    Numbers are absolute positions in the candidate list (1-based), so a
    resumed run writes the same file names as the first one.

    Args:
        candidates: Candidate article URLs
        output_folder: Folder the PDFs are written to
        start_from: Number of leading candidates to skip
        max_articles: Maximum number of jobs (None = all)

    Returns:
        Jobs in processing order
    """
    selected = list(candidates)[start_from:]
    if max_articles is not None:
        selected = selected[:max_articles]

    jobs = []
    for index, url in enumerate(selected):
        number = start_from + index + 1
        jobs.append(ExportJob(
            number=number,
            url=url,
            target_path=output_folder / article_filename(number),
        ))
    return jobs


class ExportPipeline:
    """
    Exports candidate articles one at a time

    Every job resolves (skipped, succeeded or failed) before the next one
    starts. A failure is recorded and the run moves on; existing target
    files are treated as done without re-validating them.
    """

    def __init__(
        self,
        output_folder: Path,
        pdf_options: Dict[str, Any],
        delay: float = 4.0,
        settle_delay: float = 3.0,
        exists: Callable[[Path], bool] = Path.exists,
    ):
        """
        Initialize pipeline

        Args:
            output_folder: Folder for PDFs and error screenshots
            pdf_options: Options passed to the exporter with each PDF
            delay: Pause between consecutive articles in seconds
            settle_delay: Wait after navigation for dynamic content in seconds
            exists: Existence check for target files
        """
        self.output_folder = Path(output_folder)
        self.pdf_options = pdf_options
        self.delay = delay
        self.settle_delay = settle_delay
        self.exists = exists

    def run(
        self,
        candidates: Sequence[str],
        exporter: PageExporter,
        start_from: int = 0,
        max_articles: Optional[int] = None,
    ) -> RunSummary:
        """
        Export the selected slice of candidates

        Args:
            candidates: Candidate article URLs in listing order
            exporter: Rendering capability
            start_from: Number of leading candidates to skip
            max_articles: Maximum number of articles (None = all)

        Returns:
            Summary of every processed job
        """
        summary = RunSummary(total_candidates=len(candidates))
        if not candidates:
            return summary

        jobs = plan_jobs(candidates, self.output_folder, start_from, max_articles)
        if start_from > 0:
            logger.info(f"Starting from article #{start_from + 1}")
        if max_articles is not None:
            logger.info(f"Limit: downloading {max_articles} articles")

        logger.info("=" * 60)
        logger.info(f"Beginning download of {len(jobs)} articles")
        logger.info("=" * 60)

        for i, job in enumerate(jobs):
            outcome = self._process(job, exporter, summary.total_candidates)
            summary.record(outcome)

            if outcome.status is not OutcomeStatus.SKIPPED and i < len(jobs) - 1:
                logger.debug(f"Waiting {self.delay:.1f}s...")
                time.sleep(self.delay)

        return summary

    def _process(self, job: ExportJob, exporter: PageExporter, total: int) -> ExportOutcome:
        """
        Resolve a single job

        Args:
            job: Job to process
            exporter: Rendering capability
            total: Candidate count, for progress lines

        Returns:
            Outcome of the job
        """
        name = job.target_path.name

        if self.exists(job.target_path):
            logger.info(f"[{job.number}/{total}] Skipped (exists): {name}")
            return ExportOutcome(job=job, status=OutcomeStatus.SKIPPED)

        logger.info(f"[{job.number}/{total}] {job.url}")

        page = None
        try:
            page = exporter.navigate(job.url)
            time.sleep(self.settle_delay)
            size = exporter.export_pdf(page, job.target_path, self.pdf_options)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"[{job.number}/{total}] Error: {message}")
            return ExportOutcome(
                job=job,
                status=OutcomeStatus.FAILED,
                error=message,
                screenshot_path=self._screenshot(exporter, page, job.number),
            )

        logger.info(f"✓ Saved: {name} ({format_size(size)})")
        return ExportOutcome(job=job, status=OutcomeStatus.SUCCEEDED, file_size=size)

    def _screenshot(self, exporter: PageExporter, page: Any, number: int) -> Optional[Path]:
        path = self.output_folder / screenshot_filename(number)
        try:
            exporter.screenshot(page, path)
        except Exception as e:
            logger.debug(f"Screenshot failed: {e}")
            return None
        logger.info(f"Error screenshot: {path.name}")
        return path
