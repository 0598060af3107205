import sys

import typer

from kex.config import KexConfig, resolve_runner
from kex.errors import KexError
from kex.kubectl import Kubectl
from kex.operations import fetch_pod_template_handler
from kex.session import run_session
from kex.transform import transform
from kex.ui import print_manifest, print_step

app = typer.Typer()


def split_passthrough(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv on the first ``--`` into (kubectl options, kex arguments)."""
    if "--" not in argv:
        return [], list(argv)
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1 :]


@app.command(
    help="Start a throwaway debug pod cloned from APP_NAME and open a shell in it.",
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
)
def debug(
    ctx: typer.Context,
    app_name: str = typer.Argument(
        ..., help="Value of the 'app' label of the pods to clone."
    ),
    command: list[str] = typer.Argument(
        None, help="Command to run in the debug container (default: /bin/sh)."
    ),
    container: str = typer.Option(
        None,
        "--container",
        "-c",
        help="Container to debug. Defaults to the app name.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the debug pod manifest without creating it."
    ),
):
    kubectl = Kubectl(ctx.obj)
    target = container or app_name

    try:
        config = KexConfig.from_env()
        runner = resolve_runner()

        template = fetch_pod_template_handler(kubectl, app_name)
        print_step(
            f"Cloning pod [blue]{template.name}[/blue] for runner [cyan]{runner}[/cyan]"
        )
        spec = transform(template, target, runner, config)

        if dry_run:
            print_manifest(spec.to_manifest())
            return

        exit_code = run_session(
            kubectl, spec, target, command or list(config.default_command), config
        )
    except KexError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    if exit_code != 0:
        raise typer.Exit(code=exit_code)


def main() -> None:
    kubectl_options, args = split_passthrough(sys.argv[1:])
    app(args=args, obj=kubectl_options, prog_name="kex")


if __name__ == "__main__":
    main()
