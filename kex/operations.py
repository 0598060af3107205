"""Fetching the pod a debug session is derived from."""

import subprocess

import typer

from kex.errors import NotFoundError
from kex.kubectl import Kubectl
from kex.types import PodTemplate


def app_label_selector(app_name: str) -> str:
    return f"app={app_name}"


def fetch_pod_template(kubectl: Kubectl, app_name: str) -> PodTemplate:
    """Return the spec of the first pod labelled ``app=<app_name>``.

    Issues exactly one query and does not retry.

    Raises:
        NotFoundError: If no pod matches the selector.
        subprocess.CalledProcessError: If kubectl fails.
    """
    selector = app_label_selector(app_name)
    items = kubectl.get_pods(selector)
    if not items:
        raise NotFoundError(f"No pods found matching selector '{selector}'.")
    return PodTemplate.from_json(items[0])


def fetch_pod_template_handler(kubectl: Kubectl, app_name: str) -> PodTemplate:
    try:
        return fetch_pod_template(kubectl, app_name)
    except NotFoundError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)
    except subprocess.CalledProcessError as e:
        typer.echo(
            f"❌ Failed to list pods for '{app_name}': {(e.stderr or '').strip()}",
            err=True,
        )
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.echo(f"❌ kubectl not found: {e}", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(
            f"❌ Could not parse kubectl output for '{app_name}': {e}", err=True
        )
        raise typer.Exit(code=1)
