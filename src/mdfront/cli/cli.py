"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdfront.cli.commands import check_cmd, list_cmd, normalize_cmd


app = typer.Typer(name="mdfront", no_args_is_help=True, help="Front-matter loader and metadata validator")

app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="normalize")(normalize_cmd)
