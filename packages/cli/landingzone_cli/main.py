import typer

from landingzone_cli import __version__
from landingzone_cli.commands.catalog_cmd import features, tiers
from landingzone_cli.commands.estimate import estimate
from landingzone_cli.commands.export import export
from landingzone_cli.commands.refresh_cmd import refresh
from landingzone_cli.commands.serve_cmd import serve
from landingzone_cli.utils import configure_logging


def _version_callback(value: bool) -> None:
    if value:
        print(f"landingzone {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="landingzone",
    help="AWS landing-zone cost estimates for presales",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    configure_logging(verbose)


app.command()(tiers)
app.command()(features)
app.command()(estimate)
app.command()(export)
app.command()(refresh)
app.command()(serve)
