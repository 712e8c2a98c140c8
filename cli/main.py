"""
Sprint Dashboard CLI

Command-line client for the sprint dashboard API.

Usage:
    python -m cli.main repos
    python -m cli.main backlog octo-org/dashboard
    python -m cli.main sprint octo-org/dashboard 12
    python -m cli.main export octo-org/dashboard 12 --format html
"""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
import httpx
from datetime import datetime

from sprintboard.config import settings
from sprintboard.pyd_models.project_models import SprintDetails
from sprintboard.services.table_exporter import ExportFormat, field_display

# Create Typer app
app = typer.Typer(
    name="sprintboard",
    help="🏃 Sprint Dashboard CLI",
    add_completion=False,
)

console = Console()

# Default API URL
DEFAULT_API_URL = f"http://localhost:{settings.api_port}"

UrlOption = typer.Option(DEFAULT_API_URL, "--url", "-u", help="Dashboard API URL")
TokenOption = typer.Option(None, "--token", "-t", envvar="GITHUB_TOKEN", help="GitHub token sent as a bearer token")


def get_label_color(label_name: str) -> str:
    """
    Return a color for a label based on its type.

    Red: Bugs and Errors
    Blue: Features and improvements
    Cyan: Documentation
    Bold-red: Critical Issues
    Yellow: Everything else
    """
    label_lower = label_name.lower()

    if any(word in label_lower for word in ["bug", "error", "crash", "fail"]):
        return "red"
    elif any(word in label_lower for word in ["feature", "enhancement", "improve"]):
        return "blue"
    elif any(word in label_lower for word in ["doc", "documentation"]):
        return "cyan"
    elif any(word in label_lower for word in ["critical", "urgent", "high"]):
        return "bold red"
    else:
        return "yellow"


def format_date(value: Optional[str]) -> str:
    """Format an ISO timestamp from the API as YYYY-MM-DD."""
    if not value:
        return "-"
    return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")


def api_get(url: str, path: str, token: Optional[str], params: Optional[dict] = None) -> httpx.Response:
    """
    GET ``path`` from the dashboard API.

    Exits with status 1 and prints the API's error message on failure.
    """
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    try:
        response = httpx.get(f"{url}{path}", params=params, headers=headers, timeout=120.0)
    except httpx.HTTPError as e:
        console.print(f"❌ [red]Could not reach the dashboard API: {e}[/red]")
        raise typer.Exit(1)

    if response.status_code >= 400:
        try:
            message = response.json().get("error", response.text)
        except ValueError:
            message = response.text
        console.print(f"❌ [red]{response.status_code}: {message}[/red]")
        raise typer.Exit(1)

    return response


def check_repo(repo: str) -> str:
    if repo.count("/") != 1 or not all(repo.split("/")):
        console.print("❌ [red]Invalid repo format. Use: owner/repo[/red]")
        raise typer.Exit(1)
    return repo


@app.command()
def repos(url: str = UrlOption, token: Optional[str] = TokenOption):
    """
    List repositories you contributed to.
    """
    with console.status("[bold green]Fetching repositories...", spinner="dots"):
        repositories = api_get(url, "/repositories", token).json()

    if not repositories:
        console.print("📭 [yellow]No repositories found.[/yellow]")
        return

    table = Table(
        title="Repositories",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Repository", style="cyan")
    table.add_column("Language", style="yellow", width=14)
    table.add_column("Stars", justify="right", style="blue", width=8)
    table.add_column("Updated", justify="right", style="dim", width=12)

    for repo in repositories:
        table.add_row(
            repo["full_name"],
            repo.get("language") or "-",
            str(repo.get("stargazers_count", 0)),
            format_date(repo.get("updated_at")),
        )

    console.print(table)


@app.command()
def backlog(
    repo: str = typer.Argument(..., help="Repository in 'owner/repo' format"),
    url: str = UrlOption,
    token: Optional[str] = TokenOption,
):
    """
    Show backlog statistics for the last 30 days.

    Examples:
        sprintboard backlog octo-org/dashboard
    """
    repo = check_repo(repo)
    console.print(f"\n📊 Backlog statistics for [bold cyan]{repo}[/bold cyan]\n")

    with console.status("[bold green]Collecting issues...", spinner="dots"):
        stats = api_get(url, "/backlog-stats", token, params={"repo": repo}).json()

    summary_panel = Panel(
        f"New PBIs: [bold green]{stats['new_pbis']['count']}[/bold green]\n"
        f"Labeled '{stats['label']}': [bold yellow]{stats['labeled_pbis']['count']}[/bold yellow]\n"
        f"Completed: [bold blue]{stats['completed_pbis']['count']}[/bold blue]\n"
        f"Since: [dim]{format_date(stats['since'])}[/dim]",
        title="📊 Summary",
        border_style="green",
    )
    console.print(summary_panel)

    for key, title in (("new_pbis", "New PBIs"), ("completed_pbis", "Completed PBIs")):
        issues = stats[key]["issues"]
        if not issues:
            continue
        table = Table(title=title, box=box.ROUNDED, header_style="bold magenta")
        table.add_column("#", style="cyan", width=8)
        table.add_column("Title", style="white", no_wrap=False)
        table.add_column("Created", justify="right", style="dim", width=12)
        table.add_column("Closed", justify="right", style="dim", width=12)
        for issue in issues:
            table.add_row(
                f"#{issue['number']}",
                issue["title"],
                format_date(issue.get("created_at")),
                format_date(issue.get("closed_at")),
            )
        console.print(table)


@app.command()
def sprint(
    repo: str = typer.Argument(..., help="Repository in 'owner/repo' format"),
    number: str = typer.Argument(..., help="Sprint number (matches the iteration 'Sprint <n>')"),
    project: Optional[int] = typer.Option(None, "--project", "-p", help="Project number to use"),
    url: str = UrlOption,
    token: Optional[str] = TokenOption,
):
    """
    Show the items of one sprint.

    Examples:
        sprintboard sprint octo-org/dashboard 12
        sprintboard sprint octo-org/dashboard 12 --project 3
    """
    repo = check_repo(repo)
    params = {"repo": repo, "sprint": number}
    if project is not None:
        params["project"] = project

    with console.status("[bold green]Paging project items...", spinner="dots"):
        details = SprintDetails(**api_get(url, "/sprint-details", token, params=params).json())

    console.print(Panel(
        f"Project: [cyan]#{details.project.number} {details.project.title}[/cyan]\n"
        f"Field: [yellow]{details.sprint_field}[/yellow]\n"
        f"Items: [bold green]{details.total_items}[/bold green]",
        title=f"🏃 {details.sprint}",
        border_style="green",
    ))

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", width=8)
    table.add_column("Title", style="white", no_wrap=False)
    table.add_column("Assignee", style="green", width=16)
    table.add_column("Status", style="blue", width=14)
    table.add_column("Estimate", justify="right", width=9)
    table.add_column("Labels", style="yellow", width=25)

    for item in details.items:
        content = item.content
        labels_str = " ".join(
            f"[{get_label_color(lbl.name)}]{lbl.name}[/{get_label_color(lbl.name)}]"
            for lbl in (content.labels if content else [])
        ) or "[dim]none[/dim]"
        table.add_row(
            f"#{content.number}" if content else "-",
            content.title if content else "(no linked issue)",
            content.assignees[0].login if content and content.assignees else "Unassigned",
            field_display(item, "Status"),
            field_display(item, "Estimate"),
            labels_str,
        )

    console.print(table)
    console.print(f"\n💡 [dim]Tip: Use 'sprintboard export {repo} {number}' to copy this as a table[/dim]\n")


@app.command()
def export(
    repo: str = typer.Argument(..., help="Repository in 'owner/repo' format"),
    number: str = typer.Argument(..., help="Sprint number"),
    format: ExportFormat = typer.Option(ExportFormat.MARKDOWN, "--format", "-f", help="markdown (chat) or html (email)"),
    project: Optional[int] = typer.Option(None, "--project", "-p", help="Project number to use"),
    url: str = UrlOption,
    token: Optional[str] = TokenOption,
):
    """
    Print the sprint table as Markdown or HTML, ready to paste.

    Examples:
        sprintboard export octo-org/dashboard 12 | pbcopy
        sprintboard export octo-org/dashboard 12 --format html > sprint.html
    """
    repo = check_repo(repo)
    params = {"repo": repo, "sprint": number, "format": format.value}
    if project is not None:
        params["project"] = project

    response = api_get(url, "/sprint-details/export", token, params=params)
    # Plain output so the table can be piped straight into a clipboard tool
    typer.echo(response.text)


if __name__ == "__main__":
    app()
