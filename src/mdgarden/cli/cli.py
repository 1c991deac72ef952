"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdgarden.cli.commands import build_cmd, compile_cmd, images_cmd, init_cmd, status_cmd


app = typer.Typer(name="mdgarden", no_args_is_help=True, help="Compile linked notes into a publishable garden")

app.command(name="build")(build_cmd)
app.command(name="compile")(compile_cmd)
app.command(name="images")(images_cmd)
app.command(name="status")(status_cmd)
app.command(name="init")(init_cmd)
