import json
import os
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kex.types import PodInfo

# Global console for UI functions
_console = Console()

# Plain output for terminals that do not render panels well
_use_simple_ui = os.getenv("KEX_SIMPLE_UI") == "1"


def render_pods_table(pods: list[PodInfo]):
    table = Table()

    table.add_column("Pod Name", style="cyan", no_wrap=True)
    table.add_column("Namespace", style="magenta")
    table.add_column("Status", style="green")
    table.add_column("Runner", style="dim")

    for pod in pods:
        table.add_row(pod.name, pod.namespace, pod.status, pod.labels.get("runner", ""))

    _console.print(table)


def print_manifest(manifest: dict[str, Any]):
    """Print a pod manifest as highlighted JSON."""
    _console.print_json(json.dumps(manifest))


def print_success(message: str, prefix: str = "✅"):
    """Print a success message."""
    _console.print(f"[green]{prefix}[/green] {message}")


def print_info(message: str, prefix: str = "ℹ️"):
    """Print an info message."""
    _console.print(f"[blue]{prefix}[/blue]  {message}")


def print_step(message: str, prefix: str = "🔧"):
    """Print a step/progress message."""
    _console.print(f"[cyan]{prefix}[/cyan] {message}")


def print_warning(message: str, prefix: str = "⚠️"):
    """Print a non-fatal warning."""
    _console.print(f"[yellow]{prefix}[/yellow]  {message}")


def print_session_banner(pod_name: str, container: str, command: list[str]):
    """Print where the interactive session is about to attach."""
    command_line = " ".join(command)
    _console.print()

    if _use_simple_ui:
        _console.print("[green]" + "=" * 42 + "[/green]")
        _console.print("[green bold]🐚 Debug session[/green bold]")
        _console.print(
            f"Pod: [blue]{pod_name}[/blue]  Container: [cyan]{container}[/cyan]"
        )
        _console.print(f"Command: [cyan bold]{command_line}[/cyan bold]")
        _console.print("[green]" + "=" * 42 + "[/green]")
    else:
        _console.print(
            Panel(
                f"[green bold]🐚 Debug session[/green bold]\n\n"
                f"Pod: [blue]{pod_name}[/blue]\n"
                f"Container: [cyan]{container}[/cyan]\n"
                f"Command: [cyan bold]{command_line}[/cyan bold]",
                border_style="green",
                expand=False,
            )
        )

    _console.print("\n[dim]The pod is deleted when the session ends.[/dim]\n")
