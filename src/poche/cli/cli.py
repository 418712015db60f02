"""CLI entrypoint: Typer app definition and command registration"""

import typer

from poche.cli.commands import build_cmd, inline_cmd, main_callback, resolve_cmd, tokenize_cmd


app = typer.Typer(name="poche", no_args_is_help=True, help="Markdown tokenizer for saved articles")

app.callback()(main_callback)
app.command(name="tokenize")(tokenize_cmd)
app.command(name="inline")(inline_cmd)
app.command(name="resolve")(resolve_cmd)
app.command(name="build")(build_cmd)
