"""
Provisioning CLI

Command-line interface for the Repository & Board Provisioning API.
Every command is one HTTP call to the running API.

Usage:
    python -m provisioner_cli.main ado-create Platform billing-api
    python -m provisioner_cli.main gh-generate octocat/service-template my-service --private
    python -m provisioner_cli.main jira-board "Payments Team"
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import httpx
import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from provisioner import __version__
from provisioner.config import settings

# Create Typer app
app = typer.Typer(
    name="provisioner",
    help="🏗️  Repository & Board Provisioning CLI",
    add_completion=False,
)

console = Console()

DEFAULT_API_URL = f"http://{settings.api_host}:{settings.api_port}"


def split_repo(repo: str) -> Tuple[str, str]:
    """Split 'owner/repo', exiting with an error on any other shape."""
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        console.print("❌ [red]Invalid repo format. Use: owner/repo[/red]")
        raise typer.Exit(1)
    return parts[0], parts[1]


def call_api(method: str, url: str, action: str, json_data: Optional[Dict[str, Any]] = None) -> Any:
    """
    Send one request to the API and return the decoded body.

    On an error response the API's `detail.message` is printed and the
    command exits with status 1.
    """
    try:
        response = httpx.request(method, url, json=json_data, timeout=60.0)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        console.print(f"❌ [red]Failed to {action}: HTTP {e.response.status_code}[/red]")
        try:
            detail = e.response.json().get("detail", {})
        except ValueError:
            detail = {}
        if isinstance(detail, dict) and detail.get("message"):
            console.print(f"   [dim]{detail['message']}[/dim]")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"❌ [red]Failed to {action}: {e}[/red]")
        raise typer.Exit(1)

    return response.json()


def format_date(value: Optional[str]) -> str:
    if not value:
        return "unknown"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return value[:10]


def print_repositories(repositories, title: str):
    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Name", style="cyan")
    table.add_column("Visibility", width=10)
    table.add_column("Description", style="white", no_wrap=False)
    table.add_column("Created", justify="right", style="dim", width=12)

    for repo in repositories:
        visibility = "[yellow]private[/yellow]" if repo.get("private") else "[green]public[/green]"
        table.add_row(
            repo.get("full_name") or repo.get("name", "?"),
            visibility,
            repo.get("description") or "[dim]-[/dim]",
            format_date(repo.get("created_at")),
        )

    console.print(table)


# Azure DevOps

@app.command("ado-create")
def ado_create(
    project: str = typer.Argument(..., help="Azure DevOps project name"),
    repo: str = typer.Argument(..., help="Name of the repository to create"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Create a Git repository in an Azure DevOps project."""
    with console.status("[bold green]Creating repository...", spinner="dots"):
        data = call_api(
            "POST",
            f"{url}/azure-devops/projects/{project}/repositories",
            "create repository",
            json_data={"repoName": repo},
        )

    console.print(Panel(
        f"[bold]Name:[/bold] {data.get('name', repo)}\n"
        f"[bold]Id:[/bold] {data.get('id', '?')}\n"
        f"[bold]Clone URL:[/bold] {data.get('remoteUrl', '-')}",
        title=f"✅ Repository created in {project}",
        border_style="green",
    ))


@app.command("ado-delete")
def ado_delete(
    project: str = typer.Argument(..., help="Azure DevOps project name"),
    repo: str = typer.Argument(..., help="Name of the repository to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Delete a Git repository from an Azure DevOps project."""
    if not yes:
        typer.confirm(f"Delete repository '{repo}' from '{project}'?", abort=True)

    data = call_api(
        "DELETE",
        f"{url}/azure-devops/projects/{project}/repositories/{repo}",
        "delete repository",
    )
    console.print(f"🗑️  [green]{data.get('message', 'Repository deleted')}[/green]")


@app.command("ado-rename")
def ado_rename(
    project: str = typer.Argument(..., help="Azure DevOps project name"),
    repo: str = typer.Argument(..., help="Current repository name"),
    new_name: str = typer.Argument(..., help="New repository name"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Rename a Git repository in an Azure DevOps project."""
    data = call_api(
        "PATCH",
        f"{url}/azure-devops/projects/{project}/repositories/{repo}",
        "rename repository",
        json_data={"newName": new_name},
    )
    console.print(f"✏️  [green]{repo} renamed to {data.get('name', new_name)}[/green]")


# GitHub

@app.command("gh-generate")
def gh_generate(
    template: str = typer.Argument(..., help="Template repository in 'owner/repo' format"),
    name: str = typer.Argument(..., help="Name of the new repository"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner of the new repository"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Repository description"),
    private: bool = typer.Option(False, "--private", help="Create a private repository"),
    all_branches: bool = typer.Option(False, "--all-branches", help="Copy every branch of the template"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """
    Create a repository from a template.

    Examples:
        provisioner gh-generate octocat/service-template payments-api --private
    """
    template_owner, template_repo = split_repo(template)

    body = {
        "name": name,
        "owner": owner,
        "description": description,
        "private": private,
        "includeAllBranches": all_branches,
    }
    with console.status("[bold green]Generating repository...", spinner="dots"):
        data = call_api(
            "POST",
            f"{url}/github/templates/{template_owner}/{template_repo}/generate",
            "generate repository",
            json_data=body,
        )

    console.print(f"✅ Created [cyan]{data.get('full_name', name)}[/cyan]")
    if data.get("html_url"):
        console.print(f"🔗 {data['html_url']}")


@app.command("gh-create")
def gh_create(
    name: str = typer.Argument(..., help="Name of the new repository"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Repository description"),
    private: bool = typer.Option(False, "--private", help="Create a private repository"),
    auto_init: bool = typer.Option(False, "--auto-init", help="Initialize with a README"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Create a repository for the authenticated GitHub user."""
    body = {
        "name": name,
        "description": description,
        "private": private,
        "autoInit": auto_init,
    }
    data = call_api("POST", f"{url}/github/repositories", "create repository", json_data=body)

    console.print(f"✅ Created [cyan]{data.get('full_name', name)}[/cyan]")
    if data.get("html_url"):
        console.print(f"🔗 {data['html_url']}")


@app.command("gh-repos")
def gh_repos(
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """List the authenticated user's repositories (first 100)."""
    repositories = call_api("GET", f"{url}/github/user/repositories", "list repositories")

    if not repositories:
        console.print("📭 [yellow]No repositories found.[/yellow]")
        return

    print_repositories(repositories, f"Your repositories ({len(repositories)})")


@app.command("gh-derived")
def gh_derived(
    template: str = typer.Argument(..., help="Template repository in 'owner/repo' format"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """
    List repositories that may have been generated from a template.

    This is a guess based on creation dates, not a guarantee.
    """
    template_owner, template_repo = split_repo(template)
    repositories = call_api(
        "GET",
        f"{url}/github/templates/{template_owner}/{template_repo}/repositories",
        "list derived repositories",
    )

    if not repositories:
        console.print("📭 [yellow]No repositories created after the template.[/yellow]")
        return

    print_repositories(repositories, f"Possibly generated from {template}")
    console.print("\n💡 [dim]Matches are based on creation dates only[/dim]\n")


# Jira

@app.command("jira-test")
def jira_test(
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Check that the API can reach Jira with its credentials."""
    data = call_api("GET", f"{url}/jira/test-connection", "test Jira connection")

    if data.get("success"):
        console.print("🟢 [green]Jira connection OK[/green]")
    else:
        console.print("🔴 [red]Jira connection failed (see API logs)[/red]")
        raise typer.Exit(1)


@app.command("jira-board")
def jira_board(
    name: str = typer.Argument(..., help="Board name (also used for the project and filter)"),
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Create a Jira project (if needed), filter and Scrum board."""
    with console.status("[bold green]Provisioning Jira board...", spinner="dots"):
        data = call_api("POST", f"{url}/jira/create-board/{name}", "create board")

    project = data.get("project", {})
    filter_ = data.get("filter", {})
    board = data.get("board", {})

    console.print(Panel(
        f"[bold]Project:[/bold] {project.get('name', name)} ([cyan]{project.get('key', '?')}[/cyan])\n"
        f"[bold]Filter:[/bold] {filter_.get('name', '?')} (id {filter_.get('id', '?')})\n"
        f"[bold]Board:[/bold] {board.get('name', name)} (id {board.get('id', '?')})",
        title="📋 Board created",
        border_style="green",
    ))


@app.command()
def health(
    url: str = typer.Option(DEFAULT_API_URL, "--api-url", "-u", help="API URL"),
):
    """Show which providers the API has credentials for."""
    data = call_api("GET", f"{url}/health", "check API health")

    for provider in ("azure_devops", "github", "jira"):
        configured = data.get(f"{provider}_configured")
        mark = "✅" if configured else "⚠️ "
        console.print(f"{mark} {provider.replace('_', ' ')}: {'configured' if configured else 'not configured'}")


@app.command()
def version():
    """Show version information."""
    console.print("\n[bold cyan]Repository & Board Provisioning CLI[/bold cyan]")
    console.print(f"Version: [green]{__version__}[/green]")
    console.print(f"API: [yellow]{DEFAULT_API_URL}[/yellow]")
    console.print()


if __name__ == "__main__":
    app()
