"""Command-line interface handlers."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from citebot.config import Settings
from citebot.console import ConsoleUI
from citebot.database.repository import CitationCache
from citebot.models.paper import sort_by_citations
from citebot.services.citation_service import CitationPipeline, PipelineConfig
from citebot.services.fetcher import PageFetcher
from citebot.services.markdown_service import parse_markdown_papers
from citebot.services.scholar_service import ScholarService

logger = logging.getLogger("citebot")


def configure_logging(debug: bool = False) -> None:
    """Route citebot's loggers through Rich."""
    handler = RichHandler(show_path=False, markup=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False


class CitebotCLI:
    """CLI application for citebot."""

    def __init__(self, settings: Optional[Settings] = None, ui: Optional[ConsoleUI] = None):
        """Initialize CLI with settings.

        Args:
            settings: Application settings (loads from .metadata if not provided)
            ui: Console UI (a default Rich console if not provided)
        """
        self.settings = settings or Settings.load()
        self.ui = ui or ConsoleUI()

    def cmd_run(self, markdown_path: Path, force: bool = False) -> int:
        """Resolve citation counts for every paper in a markdown file.

        Args:
            markdown_path: Bibliography to read
            force: Ignore cached entries

        Returns:
            Process exit status (1 when the run hit a rate limit)
        """
        try:
            papers = parse_markdown_papers(markdown_path)
        except FileNotFoundError:
            self.ui.error(f"File not found: {markdown_path}")
            return 2
        self.ui.loaded(len(papers), markdown_path)

        config = PipelineConfig(
            force_refresh=force,
            delay=self.settings.request_delay,
            debug=self.settings.debug,
        )

        results = []
        with PageFetcher(timeout=self.settings.request_timeout) as fetcher, \
                CitationCache(self.settings.db_path) as cache:
            scholar = ScholarService(fetcher, search_url=self.settings.scholar_search_url)
            pipeline = CitationPipeline(fetcher, cache, scholar=scholar, config=config)
            with Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                console=self.ui.console,
                transient=True,
            ) as progress:
                task = progress.add_task("Resolving citations...", total=len(papers))
                for paper in pipeline.run(papers):
                    results.append(paper)
                    progress.update(
                        task,
                        advance=1,
                        description=f"Processed {len(results)}/{len(papers)} papers",
                    )

        self.ui.display_papers(sort_by_citations(results))
        known = sum(1 for p in results if p.citations.is_known)
        self.ui.run_complete(known, len(results))

        if pipeline.rate_limited is not None:
            self.ui.rate_limited(str(pipeline.rate_limited))
            return 1
        return 0

    def cmd_list(self, query: str = "", limit: int = 50) -> int:
        """Show cached papers without touching the network.

        Args:
            query: Filter on title/abstract substring
            limit: Maximum papers to display
        """
        with CitationCache(self.settings.db_path) as cache:
            papers = cache.find_page(query=query, limit=limit)
            total = cache.count(query)
        title = f"Cached papers ({len(papers)} of {total})"
        self.ui.display_papers(papers, title=title)
        return 0

    def cmd_serve(self, host: Optional[str] = None, port: Optional[int] = None) -> int:
        """Start the web view."""
        import uvicorn

        from citebot.gui.app import app

        host = host or self.settings.host
        port = port or self.settings.port
        logger.info("Serving %s at http://%s:%d", self.settings.db_path, host, port)
        uvicorn.run(app, host=host, port=port)
        return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="citebot",
        description="Markdown bibliography → arXiv / ACL / Google Scholar → SQLite → report",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to SQLite cache file (default: from settings, paper_cache.db)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every resolution step",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # run command
    run_parser = subparsers.add_parser("run", help="Resolve citation counts for a markdown file")
    run_parser.add_argument("markdown", type=Path, help="Markdown file with [[paper](url)] links")
    run_parser.add_argument(
        "--force",
        action="store_true",
        help="Ignore cached results and fetch everything again",
    )
    run_parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between papers that need the network (default: 2)",
    )

    # list command
    list_parser = subparsers.add_parser("list", help="Show cached papers")
    list_parser.add_argument("--query", "-q", default="", help="Filter by title/abstract")
    list_parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum papers to display (default: 50)",
    )

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the web view")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: 8080)")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = Settings.load()
    if args.db is not None:
        settings.update(db_path=args.db)
    if args.debug:
        settings.update(debug=True)
    if getattr(args, "delay", None) is not None:
        settings.update(request_delay=args.delay)
    configure_logging(settings.debug)

    cli = CitebotCLI(settings)

    if args.command == "run":
        return cli.cmd_run(args.markdown, force=args.force)
    elif args.command == "list":
        return cli.cmd_list(args.query, args.limit)
    elif args.command == "serve":
        return cli.cmd_serve(args.host, args.port)
    return 2


def run_cli() -> None:
    sys.exit(main())
