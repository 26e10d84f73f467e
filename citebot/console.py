"""Console UI for terminal output using Rich."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from citebot.models.paper import Paper


class ConsoleUI:
    """Rich-based console UI for the citation report and notifications."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize console.

        Args:
            console: Rich console to print to (a new one if omitted)
        """
        self.console = console or Console()

    def info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message in red."""
        self.console.print(f"[red]Error:[/red] {message}")

    def loaded(self, count: int, source: Path) -> None:
        """Print how many entries were read from the bibliography."""
        self.console.print(f"[bold]Loaded[/bold] {count} papers from {source}")

    def run_complete(self, resolved: int, total: int) -> None:
        """Print run summary."""
        self.console.print(
            f"\n[green]Done.[/green] Citation counts known for "
            f"[bold]{resolved}[/bold] of {total} papers"
        )

    def rate_limited(self, message: str) -> None:
        """Print the rate-limit notice that ends a run."""
        self.console.print(
            f"\n[bold red]Rate limited:[/bold red] {message}\n"
            "Remaining papers were not fetched. Re-run later to fill them in."
        )

    def display_papers(self, papers: list[Paper], title: str = "Results sorted by citation count") -> None:
        """Display papers in a formatted table.

        Args:
            papers: Papers in the order they should be listed
            title: Table title
        """
        if not papers:
            self.console.print("No papers found.")
            return

        table = Table(title=title)
        table.add_column("#", justify="right")
        table.add_column("Title", overflow="fold")
        table.add_column("Citations", justify="right")
        table.add_column("Links", overflow="fold")

        for i, paper in enumerate(papers, 1):
            citations = str(paper.citations)
            if not paper.citations.is_known:
                citations = f"[dim]{citations}[/dim]"
            table.add_row(str(i), paper.title, citations, self._links(paper))

        self.console.print(table)

    @staticmethod
    def _links(paper: Paper) -> str:
        links = [paper.url]
        if paper.arxiv_abs_url and paper.arxiv_abs_url != paper.url:
            links.append(f"arXiv: {paper.arxiv_abs_url}")
        if paper.scholar_url:
            links.append(f"Scholar: {paper.scholar_url}")
        return "\n".join(links)
