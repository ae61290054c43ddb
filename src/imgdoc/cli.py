"""Command-line access to imgdoc documents.

Creates, inspects and extends text + image document pairs without an editor
window.
"""

import sys
from pathlib import Path
from typing import Optional, assert_never

import structlog
import typer

from imgdoc.config import Settings
from imgdoc.errors import DocumentError
from imgdoc.models.document import Document
from imgdoc.models.elements import ImageElement, TextElement
from imgdoc.services.factory import create_editor, create_gateway, new_document
from imgdoc.services.images import ImageIntake
from imgdoc.services.persistence import PersistenceGateway

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=lambda name: structlog.PrintLogger(file=sys.stderr),
    wrapper_class=structlog.BoundLogger,
    context_class=dict,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

app = typer.Typer(
    name="imgdoc",
    help="""Create and inspect plain-text documents with embedded images.

Each document is a pair: PATH holds the text with `[img_load("<id>")]`
placeholders and PATH.meta holds the base64 image payloads.

Examples:

  # Start an empty document
  imgdoc new notes.txt

  # Append a PNG after the last line
  imgdoc add-image notes.txt diagram.png

  # Print the document with image markers
  imgdoc show notes.txt""",
    rich_markup_mode="markdown",
)


def _gateway(no_atomic: bool = False) -> PersistenceGateway:
    settings = Settings(atomic_writes=False) if no_atomic else Settings()
    return create_gateway(settings=settings)


def _load_or_exit(gateway: PersistenceGateway, path: Path) -> Document:
    try:
        return gateway.load(path)
    except DocumentError as exc:
        logger.error("load_failed", path=str(path), code=exc.code, error=exc.message)
        raise typer.Exit(1) from exc


def _save_or_exit(gateway: PersistenceGateway, document: Document, path: Path) -> None:
    try:
        gateway.save(document, path)
    except DocumentError as exc:
        logger.error("save_failed", path=str(path), code=exc.code, error=exc.message)
        raise typer.Exit(1) from exc


@app.command()
def new(
    path: Path = typer.Argument(..., help="Text file to create"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing document"),
) -> None:
    """Write an empty document pair."""
    if path.exists() and not force:
        logger.error("document_exists", path=str(path))
        typer.echo(f"{path} already exists; use --force to overwrite.")
        raise typer.Exit(1)

    _save_or_exit(_gateway(), new_document(), path)
    typer.echo(f"Created {path}")


@app.command()
def show(
    path: Path = typer.Argument(..., help="Document to print"),
    numbers: bool = typer.Option(False, "--numbers", "-n", help="Prefix each line with its number"),
) -> None:
    """Print a document, rendering images as markers."""
    document = _load_or_exit(_gateway(), path)

    for index, element in enumerate(document):
        match element:
            case TextElement(line=line):
                rendered = line
            case ImageElement(id=image_id, width=width, height=height):
                rendered = f"<image {image_id} {width}x{height}>"
            case _:
                assert_never(element)
        if numbers:
            rendered = f"{document.line_number_of(index):>4}  {rendered}"
        typer.echo(rendered)


@app.command()
def stats(path: Path = typer.Argument(..., help="Document to summarize")) -> None:
    """Show line, character and image counts."""
    document = _load_or_exit(_gateway(), path)
    summary = create_editor(document).stats()

    typer.echo(f"Lines: {summary.line_count}")
    typer.echo(f"Characters: {summary.char_count}")
    typer.echo(f"Images: {len(document.image_ids())}")


@app.command("add-image")
def add_image(
    path: Path = typer.Argument(..., help="Document to extend"),
    image: Path = typer.Argument(..., help="Image file whose bytes are embedded"),
    after: Optional[int] = typer.Option(
        None,
        "--after",
        min=0,
        help="Line number the image follows, 0 for the top (default: last line)",
    ),
    width: Optional[int] = typer.Option(None, "--width", "-W", min=0, help="Declared width"),
    height: Optional[int] = typer.Option(None, "--height", "-H", min=0, help="Declared height"),
    no_atomic: bool = typer.Option(False, "--no-atomic", help="Write files in place"),
) -> None:
    """Embed an image file after a line and save the document."""
    gateway = _gateway(no_atomic)
    document = _load_or_exit(gateway, path)

    try:
        data = image.read_bytes()
    except OSError as exc:
        logger.error("image_read_failed", image=str(image), error=str(exc))
        raise typer.Exit(1) from exc

    image_id = _insert(document, data, after, width, height)
    _save_or_exit(gateway, document, path)
    typer.echo(f"Added image {image_id} to {path}")


@app.command("add-sample")
def add_sample(
    path: Path = typer.Argument(..., help="Document to extend"),
    after: Optional[int] = typer.Option(
        None,
        "--after",
        min=0,
        help="Line number the image follows, 0 for the top (default: last line)",
    ),
) -> None:
    """Embed a generated gradient image and save the document."""
    gateway = _gateway()
    document = _load_or_exit(gateway, path)
    intake = ImageIntake()

    image_id = _insert(document, intake.create_sample_image(), after, None, None, intake=intake)
    _save_or_exit(gateway, document, path)
    typer.echo(f"Added sample image {image_id} to {path}")


@app.command()
def check(path: Path = typer.Argument(..., help="Document to verify")) -> None:
    """Load a document pair and report whether it is consistent."""
    document = _load_or_exit(_gateway(), path)
    typer.echo(f"OK: {document.element_count()} lines, {len(document.image_ids())} images")


@app.command()
def version() -> None:
    """Show version information."""
    from imgdoc import __version__

    typer.echo(f"imgdoc {__version__}")


def _insert(
    document: Document,
    data: bytes,
    after: int | None,
    width: int | None,
    height: int | None,
    intake: ImageIntake | None = None,
) -> str:
    intake = intake or ImageIntake()
    try:
        record = intake.from_bytes(data, width=width, height=height)
    except DocumentError as exc:
        logger.error("image_insert_failed", code=exc.code, error=exc.message)
        raise typer.Exit(1) from exc

    index = document.element_count() if after is None else after
    document.insert_image(index, record.id, record.width, record.height, data=record.data)
    return record.id
