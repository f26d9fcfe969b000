"""
Unified CLI entry point for article-pdf

Usage:
    # Export every article linked from a listing page
    python -m article_pdf run --url https://example.com/archive

    # Continue a previous run from the 21st article, 10 at a time
    python -m article_pdf run --config scraper.json --start-from 20 --max-articles 10

    # Only list the links that would be exported
    python -m article_pdf links --url https://example.com/archive --filter /p/

    # Check what has been downloaded
    python -m article_pdf status --output ./downloaded_articles
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ScraperConfig, load_config
from .core.errors import ScraperError
from .core.report import ErrorLog
from .core.utils import ARTICLE_GLOB

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure root logging on stdout, plus an optional log file"""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def wait_for_enter() -> None:
    """Block until the user presses Enter (EOF counts as confirmation)"""
    try:
        input()
    except EOFError:
        pass


def build_config(args) -> ScraperConfig:
    """
    Build configuration from an optional config file and CLI flags

    Args:
        args: Parsed arguments

    Returns:
        Configuration with CLI flags taking precedence
    """
    config = load_config(args.config) if args.config else ScraperConfig()

    return config.with_overrides(
        start_url=args.url,
        link_selector=args.selector,
        filter_pattern=args.filter,
        delay=args.delay,
        output_folder=args.output,
        headless=True if args.headless else None,
        session_file=args.session,
        exclude_patterns=tuple(args.exclude) if args.exclude else None,
        only_internal_links=False if args.allow_external else None,
        max_articles=args.max_articles,
        start_from=args.start_from,
    )


def cmd_run(args) -> int:
    """Export articles command"""
    from .scraper import ArticleScraper

    config = build_config(args)

    logger.info("Article Scraper - automatic article-to-PDF downloader")
    logger.info(f"  Folder: {config.output_folder}")
    logger.info(f"  Delay: {config.delay}s")
    logger.info(f"  Filter: {config.filter_pattern or 'none'}")

    scraper = ArticleScraper(config, confirm=wait_for_enter)
    summary = scraper.run()

    if summary.total_candidates and summary.error_count == 0:
        logger.info("Done! All articles downloaded.")
    return 0


def cmd_links(args) -> int:
    """List candidate links command"""
    from .scraper import ArticleScraper

    config = build_config(args)
    scraper = ArticleScraper(config, confirm=wait_for_enter)

    for link in scraper.discover():
        print(link)
    return 0


def cmd_status(args) -> int:
    """Show status command"""
    config = build_config(args)
    folder = config.output_folder

    print("\n" + "=" * 60)
    print("Article Export Status")
    print("=" * 60)

    if not folder.exists():
        print(f"\n  {folder}: (not downloaded)\n")
        return 0

    pdfs = sorted(folder.glob(ARTICLE_GLOB))
    print(f"\n  Folder: {folder.resolve()}")
    print(f"  Articles: {len(pdfs)}")
    if pdfs:
        print(f"  Last: {pdfs[-1].name}")

    errors = ErrorLog(folder).load()
    if errors:
        print(f"\n  Errors from last run: {len(errors)}")
        for record in errors:
            print(f"    [{record.get('number')}] {record.get('link')}")
            print(f"         -> {record.get('error')}")

    print()
    return 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--config', type=Path,
                        help='JSON configuration file')
    parser.add_argument('--url', type=str,
                        help='Listing page with links to articles')
    parser.add_argument('--selector', type=str,
                        help='CSS selector for link elements (default: a[href])')
    parser.add_argument('--filter', type=str,
                        help='Keep only links containing this text (e.g. /article/)')
    parser.add_argument('--delay', type=float,
                        help='Delay between articles in seconds (config files use milliseconds)')
    parser.add_argument('--output', type=Path,
                        help='Folder to save PDFs')
    parser.add_argument('--headless', action='store_true',
                        help='Hide the browser window')
    parser.add_argument('--session', type=Path,
                        help='Session cookies file')
    parser.add_argument('--exclude', action='append',
                        help='Reject links starting with this prefix (repeatable)')
    parser.add_argument('--allow-external', action='store_true',
                        help='Keep links to other domains')
    parser.add_argument('--max-articles', type=int,
                        help='Maximum number of articles to download')
    parser.add_argument('--start-from', type=int,
                        help='Skip this many links (continue a previous run)')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug output')
    parser.add_argument('--log-file', type=Path,
                        help='Also write log messages to this file')


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='article-pdf',
        description='Download the articles linked from a page as PDF files',
        epilog='''
Examples:
  # Export all articles from a listing page
  %(prog)s run --url https://example.com/archive

  # Resume from the 21st article
  %(prog)s run --config scraper.json --start-from 20

  # Preview links matching a pattern
  %(prog)s links --url https://example.com/archive --filter /p/

  # Check status
  %(prog)s status
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Login, collect links and export PDFs')
    add_common_arguments(run_parser)

    links_parser = subparsers.add_parser('links', help='Login and list the links to export')
    add_common_arguments(links_parser)

    status_parser = subparsers.add_parser('status', help='Show download status')
    add_common_arguments(status_parser)

    return parser


def cli(argv=None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.debug, args.log_file)

    commands = {
        'run': cmd_run,
        'links': cmd_links,
        'status': cmd_status,
    }

    try:
        return commands[args.command](args)
    except ScraperError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted - run again to resume, finished articles are skipped")
        return 130
    except Exception:
        logger.exception("Critical error")
        return 1


if __name__ == '__main__':
    sys.exit(cli())
