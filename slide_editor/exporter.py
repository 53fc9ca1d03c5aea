#!/usr/bin/env python3
"""
Export orchestration: PDF, PPTX and JSON files from an editor document.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

import httpx

from .assets import ImageLoader
from .config import EditorSettings
from .models import EditorState, Presentation
from .page_renderer import PageRenderer
from .paths import build_export_filename, prepare_output_dir, resolve_output_path
from .pdf_renderer import ExportInProgressError, PDFEncoder
from .persistence import DEFAULT_JSON_NAME, save_state_file
from .pptx_renderer import PPTXRenderer

logger = logging.getLogger(__name__)

Exportable = Union[EditorState, Presentation]


def _presentation_of(source: Exportable) -> Presentation:
    return source.presentation if isinstance(source, EditorState) else source


class PresentationExporter:
    """
    Export presentations to files.

    Only one export runs at a time per exporter; a second request while one
    is in flight raises :class:`ExportInProgressError`.
    """

    def __init__(
        self,
        *,
        output_dir,
        settings: Optional[EditorSettings] = None,
        base_dir: Optional[Path] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Create a new :class:`PresentationExporter`.

        Parameters
        ----------
        output_dir
            Directory where exported files are written.  *Required*.
        settings
            Page size, font and fetch timeout.  Defaults to
            :meth:`EditorSettings.from_env`.
        base_dir
            Base directory for resolving relative image paths.  Defaults to
            the current working directory.
        client
            Optional shared ``httpx.AsyncClient`` for remote images.
        """
        self.settings = settings or EditorSettings.from_env()
        self.output_dir = prepare_output_dir(output_dir)
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.client = client
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @contextmanager
    def _exclusive(self):
        if self._busy:
            raise ExportInProgressError("An export is already running")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _loader(self) -> ImageLoader:
        return ImageLoader(base_dir=self.base_dir, timeout=self.settings.fetch_timeout, client=self.client)

    async def render_pdf(self, source: Exportable) -> bytes:
        """Render *source* to PDF bytes without writing anything."""
        with self._exclusive():
            return await self._render_pdf(_presentation_of(source))

    async def _render_pdf(self, presentation: Presentation) -> bytes:
        # Resolve the font before fetching anything: it is the one fatal step
        encoder = PDFEncoder(self.settings.resolve_font())
        async with self._loader() as loader:
            renderer = PageRenderer(loader, self.settings.page_width, self.settings.page_height)
            pages = await renderer.render(presentation)
        return encoder.encode(pages, title=presentation.title)

    async def export_pdf(self, source: Exportable, output_path=None) -> Path:
        """
        Export to PDF.

        Args:
            source: Editor state or presentation to export
            output_path: Destination; defaults to ``<sanitized title>.pdf``
                inside the output directory

        Returns:
            Path: Path to the written PDF
        """
        with self._exclusive():
            presentation = _presentation_of(source)
            path = resolve_output_path(
                output_path, self.output_dir, build_export_filename(presentation.title, "pdf")
            )
            data = await self._render_pdf(presentation)
            path.write_bytes(data)
            logger.info("✅ PDF written to %s (%d pages)", path, len(presentation.slides))
            return path

    async def export_pptx(self, source: Exportable, output_path=None) -> Path:
        with self._exclusive():
            presentation = _presentation_of(source)
            path = resolve_output_path(
                output_path, self.output_dir, build_export_filename(presentation.title, "pptx")
            )
            async with self._loader() as loader:
                renderer = PPTXRenderer(loader, self.settings.page_width, self.settings.page_height)
                await renderer.render(presentation, path)
            logger.info("✅ PPTX written to %s (%d slides)", path, len(presentation.slides))
            return path

    def export_json(self, state: EditorState, file_name: Optional[str] = None) -> Path:
        """Write the raw editor document, by default as ``presentation.json``."""
        path = resolve_output_path(file_name or None, self.output_dir, DEFAULT_JSON_NAME)
        save_state_file(state, path)
        logger.info("✅ JSON written to %s", path)
        return path


def main():
    """Command-line entry point for the slide editor exporter."""
    import argparse
    import asyncio
    import sys

    from .persistence import load_state_file
    from .pdf_renderer import ExportError
    from .schema import DocumentValidationError

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="slide-editor", description="Validate and export slide editor documents.")
        sub = p.add_subparsers(dest="command", required=True)

        for name, fmt in (("pdf", "PDF"), ("pptx", "PowerPoint")):
            cmd = sub.add_parser(name, help=f"Export a document to {fmt}")
            cmd.add_argument("document", type=Path, help="Editor JSON document")
            cmd.add_argument("--output", "-o", type=Path, help="Destination file (default: <title>.%s)" % name)
            cmd.add_argument("--output-dir", type=Path, default=Path("output"), help="Directory for exported files")
            cmd.add_argument("--font", type=Path, help="TrueType font to embed (PDF only)")
            cmd.add_argument("--timeout", type=float, help="Seconds to wait for each remote image")
            cmd.add_argument("--asset-base", type=Path, help="Base directory for relative image paths (default: document's directory)")
            cmd.add_argument("--debug", action="store_true", help="Enable verbose logging")

        check = sub.add_parser("validate", help="Check a document against the editor schema")
        check.add_argument("document", type=Path, help="Editor JSON document")
        return p

    async def _export_async(args) -> int:
        doc_path: Path = args.document
        if not doc_path.exists():
            logger.error(f"Document '{doc_path}' not found")
            return 1
        try:
            state = load_state_file(doc_path)
        except DocumentValidationError as exc:
            logger.error("%s: %s", doc_path, exc)
            return 2

        settings = EditorSettings.from_env(font_path=args.font, fetch_timeout=args.timeout, debug=args.debug or None)
        exporter = PresentationExporter(
            output_dir=args.output_dir,
            settings=settings,
            base_dir=args.asset_base or doc_path.parent,
        )
        try:
            if args.command == "pdf":
                await exporter.export_pdf(state, args.output)
            else:
                await exporter.export_pptx(state, args.output)
        except ExportError as exc:
            logger.error("Export failed: %s", exc)
            return 1
        return 0

    def _validate(args) -> int:
        try:
            load_state_file(args.document)
        except FileNotFoundError:
            logger.error(f"Document '{args.document}' not found")
            return 1
        except DocumentValidationError as exc:
            print(f"[NG] {args.document} is not a valid editor document")
            for i, error in enumerate(exc.errors or [str(exc)], 1):
                print(f"  {i}. {error}")
            return 2
        print(f"[OK] {args.document} is a valid editor document")
        return 0

    parser = _build_parser()
    args = parser.parse_args()

    debug = getattr(args, "debug", False) or EditorSettings.from_env().debug
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format="%(levelname)s  %(message)s")

    if args.command == "validate":
        sys.exit(_validate(args))
    sys.exit(asyncio.run(_export_async(args)))


if __name__ == "__main__":
    main()
