import json
from pathlib import Path
from typing import Dict, List

import typer

from .config import Settings
from .errors import CropbookError, RegionFileError
from .logging import get_logger
from .pdf.ingestion import EncryptedPdfError, PdfOpenError
from .regions.geometry import Point
from .session import ExportSession

app = typer.Typer(help="cropbook – stamp marked PDF regions and gather them into a gallery appendix", no_args_is_help=True)


def safe_echo(message: str) -> None:
    """Echo message with an ASCII fallback for consoles without Unicode support."""
    try:
        typer.echo(message)
    except UnicodeEncodeError:
        typer.echo(message.encode("ascii", "replace").decode("ascii"))


def load_region_file(path: Path) -> Dict[int, List[dict]]:
    """
    Read a JSON list of ``{"page", "x1", "y1", "x2", "y2"}`` objects.

    Returns regions grouped by page number, in file order.

    Raises:
        RegionFileError: If the file is not valid JSON or an entry is malformed
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise RegionFileError(f"Cannot read region file {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise RegionFileError(f"Region file {path} must contain a JSON list")

    grouped: Dict[int, List[dict]] = {}
    for i, entry in enumerate(raw):
        try:
            page = int(entry["page"])
            region = {key: float(entry[key]) for key in ("x1", "y1", "x2", "y2")}
        except (KeyError, TypeError, ValueError) as exc:
            raise RegionFileError(f"Region #{i} in {path} is malformed: {entry!r}") from exc
        grouped.setdefault(page, []).append(region)
    return grouped


def replay_regions(session: ExportSession, grouped: Dict[int, List[dict]]) -> int:
    """Feed regions through each page's capture as drag gestures; returns how many were kept."""
    kept = 0
    for page_number, regions in grouped.items():
        capture = session.capture(page_number)
        for region in regions:
            capture.start(Point(region["x1"], region["y1"]))
            capture.update(Point(region["x2"], region["y2"]))
            if capture.commit() is not None:
                kept += 1
    return kept


@app.command()
def render(
    pdf_path: Path = typer.Argument(..., exists=True, readable=True, help="Path to the source PDF"),
    regions: Path = typer.Option(..., "--regions", "-r", exists=True, readable=True, help="JSON file with marked regions"),
    out: Path = typer.Option(Path("output.pdf"), "--out", "-o", help="Where to write the new PDF"),
    watermark: bool = typer.Option(False, "--watermark/--no-watermark", help="Add a caption to every appendix page"),
    image_format: str = typer.Option("jpeg", help="Crop encoding: 'jpeg' or 'png'"),
    raster_scale: float = typer.Option(3.0, help="Page rasterization zoom for crops (1.0 = 72 DPI)"),
) -> None:
    """
    Stamp numbered boxes over the marked regions and append a gallery of their crops.
    """
    logger = get_logger(__name__)
    settings = Settings(image_format=image_format, raster_scale=raster_scale)
    session = ExportSession(settings)

    try:
        grouped = load_region_file(regions)
    except RegionFileError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=2) from exc

    try:
        logger.info(f"Opening PDF: {pdf_path}")
        session.load(pdf_path)
    except EncryptedPdfError as exc:
        logger.error(f"Cannot process encrypted PDF: {exc}")
        raise typer.Exit(code=2) from exc
    except PdfOpenError as exc:
        logger.error(f"Failed to open PDF: {exc}")
        raise typer.Exit(code=1) from exc

    kept = replay_regions(session, grouped)
    total = sum(len(r) for r in grouped.values())
    if kept < total:
        logger.warning(f"Discarded {total - kept} region(s) below the minimum size")

    try:
        data = session.render_sync(watermark=watermark)
    except CropbookError as exc:
        logger.error(f"Render failed: {exc}")
        raise typer.Exit(code=1) from exc

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)

    safe_echo("✅ Render complete!")
    safe_echo(f"📄 Source: {pdf_path}")
    safe_echo(f"🖼️  Regions: {kept}")
    safe_echo(f"📁 Output: {out}")


@app.command()
def info(
    pdf_path: Path = typer.Argument(..., exists=True, readable=True, help="Path to the PDF"),
) -> None:
    """
    Show page count and page sizes.
    """
    logger = get_logger(__name__)
    session = ExportSession()
    try:
        session.load(pdf_path)
    except EncryptedPdfError as exc:
        logger.error(f"Cannot process encrypted PDF: {exc}")
        raise typer.Exit(code=2) from exc
    except PdfOpenError as exc:
        logger.error(f"Failed to open PDF: {exc}")
        raise typer.Exit(code=1) from exc

    safe_echo(f"Pages: {session.page_count}")
    for number in range(1, session.page_count + 1):
        width, height = session.page_dimensions(number)
        safe_echo(f"  {number}: {width:.2f} x {height:.2f} pt")
    session.unload()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
