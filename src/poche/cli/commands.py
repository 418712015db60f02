"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import BaseModel

from poche.config import Settings, load_config
from poche.core.document import build_document
from poche.core.inline import parse_inline
from poche.core.tokenize import tokenize
from poche.core.utils.urls import resolve_url


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


def _dump(payload, indent: int) -> str:
    """Serialize models (or lists of models) with wire-format aliases, omitting unset fields."""
    def plain(value):
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json", by_alias=True, exclude_none=True)
        return [plain(v) for v in value]
    return json.dumps(plain(payload), indent=indent or None, ensure_ascii=False)


def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    """Configure logging before any command runs."""
    settings = _settings(overrides={"log_level": log_level})
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, settings.log_level), force=True)


def tokenize_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file")],
    ):
    """Print the block tokens of a markdown file as JSON."""
    settings = _settings()
    tokens = tokenize(_read(path))
    logger.info("Tokenized %s into %d block(s)", path, len(tokens))
    typer.echo(_dump(tokens, settings.json_indent))


def inline_cmd(
    text: Annotated[str, typer.Argument(help="Inline markdown text")],
    ):
    """Print the inline token tree of a text span as JSON."""
    settings = _settings()
    typer.echo(_dump(parse_inline(text), settings.json_indent))


def resolve_cmd(
    href: Annotated[str, typer.Argument(help="Link or image URL to resolve")],
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Absolute URL of the article")] = None,
    ):
    """Print href as an absolute URL; exit 1 if it cannot be resolved."""
    settings = _settings(overrides={"base_url": base_url})
    url = resolve_url(href, settings.base_url)
    if url is None:
        _fail(f"Cannot resolve {href!r}" + (f" against {settings.base_url}" if settings.base_url else ""))
    typer.echo(url)


def build_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file")],
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Absolute URL of the article")] = None,
    decode: Annotated[Optional[bool], typer.Option("--decode-entities/--keep-entities", help="Decode HTML entities in text")] = None,
    out_file: Annotated[Optional[Path], typer.Option("--out-file", "-o", help="Write JSON here instead of stdout")] = None,
    ):
    """Build the render-ready document tree (inline parsed, URLs resolved) as JSON."""
    settings = _settings(overrides={"base_url": base_url, "decode_entities": decode})
    doc = build_document(_read(path), base_url=settings.base_url, decode_entities=settings.decode_entities)
    text = _dump(doc, settings.json_indent)

    if out_file is None:
        typer.echo(text)
        return
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot write {out_file}", e)
    typer.echo(f"  {path} -> {out_file} ({len(doc.blocks)} block(s))")
