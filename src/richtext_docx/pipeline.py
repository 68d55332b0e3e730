"""Pipeline orchestrator: render -> extract -> resolve images -> map -> generate.

Each export call builds its own reference-id generator, document model and
image payloads; nothing is shared between concurrent exports.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Mapping, Optional

import httpx

from richtext_docx.config import Config
from richtext_docx.exceptions import GenerationError, ParseError
from richtext_docx.extract.extractor import extract_document
from richtext_docx.extract.lists import ReferenceIdGenerator
from richtext_docx.generators.image_handler import omit_unresolved_images, resolve_images
from richtext_docx.generators.mapper import PrimitiveMapper
from richtext_docx.generators.word_generator import WordGenerator
from richtext_docx.ir.report import ExportReport
from richtext_docx.ir.schema import DocumentModel
from richtext_docx.templating import RenderResult, render_preview, render_template

logger = logging.getLogger(__name__)


class ExportPipeline:
    """Orchestrates template/markup -> DocumentModel -> Word conversion."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()
        self.last_report: ExportReport | None = None
        self.last_model: DocumentModel | None = None

    def render(self, template: str, values: Optional[Mapping[str, Any]] = None) -> str:
        """Expand a template. Raises TemplateRenderError on malformed sections."""
        return render_template(template, values)

    def preview(self, template: str, values: Optional[Mapping[str, Any]] = None) -> RenderResult:
        """Expand a template for display; failures become diagnostic text."""
        return render_preview(template, values)

    def extract(self, html: str) -> DocumentModel:
        """Stage 1: markup -> DocumentModel, with a fresh reference-id generator."""
        return extract_document(html, self.config, ReferenceIdGenerator())

    async def export_bytes(
        self,
        html: str,
        client: httpx.AsyncClient | None = None,
        base_dir: Path | None = None,
    ) -> bytes:
        """Full export of one markup document to .docx bytes.

        Args:
            html: Rendered markup.
            client: HTTP client for remote images. A private one is created
                when omitted.
            base_dir: Base directory for relative image paths.

        Returns:
            The .docx file content.
        """
        t0 = time.monotonic()
        model = self.extract(html)
        t1 = time.monotonic()

        payloads = await resolve_images(model, self.config.image, client=client, base_dir=base_dir)
        final_model = omit_unresolved_images(model, payloads)
        t2 = time.monotonic()

        mapped = PrimitiveMapper(self.config).map(final_model, payloads)
        try:
            blob = WordGenerator(self.config).to_bytes(mapped)
        except (OSError, ValueError) as exc:
            raise GenerationError(f"Failed to generate document: {exc}") from exc
        t3 = time.monotonic()

        report = ExportReport.from_model(final_model)
        report.omitted_image_count = len(model.images()) - len(final_model.images())
        if report.omitted_image_count:
            report.warnings.append(f"{report.omitted_image_count} image(s) could not be resolved")
        report.extract_time_seconds = t1 - t0
        report.resolve_time_seconds = t2 - t1
        report.generate_time_seconds = t3 - t2
        report.total_time_seconds = t3 - t0
        self.last_report = report
        self.last_model = final_model

        return blob

    def export(
        self,
        html: str,
        output_path: Path,
        base_dir: Path | None = None,
        save_model: bool = False,
        model_path: Path | None = None,
        save_report: bool = False,
        report_path: Path | None = None,
    ) -> Path:
        """Export markup to a .docx file.

        Args:
            html: Rendered markup.
            output_path: Output .docx file.
            base_dir: Base dir for resolving relative image paths.
            save_model: Whether to save the final model as a JSON checkpoint.
            model_path: Custom path for the model JSON. Defaults to {output_stem}.model.json.
            save_report: Whether to save an export report JSON.
            report_path: Custom path for report JSON. Defaults to {output_stem}.report.json.

        Returns:
            Path to the generated .docx file.
        """
        output_path = Path(output_path)
        logger.info("Exporting %s", output_path)

        blob = asyncio.run(self.export_bytes(html, base_dir=base_dir))
        try:
            output_path.write_bytes(blob)
        except OSError as exc:
            raise GenerationError(f"Failed to save document: {exc}") from exc

        if save_model and self.last_model is not None:
            if model_path is None:
                model_path = output_path.with_suffix(".model.json")
            self.save_model(self.last_model, model_path)

        if save_report and self.last_report is not None:
            if report_path is None:
                report_path = output_path.with_suffix(".report.json")
            Path(report_path).write_text(self.last_report.to_json(), encoding="utf-8")
            logger.info("Saved report to %s", report_path)

        return output_path

    def export_template(
        self,
        template: str,
        values: Optional[Mapping[str, Any]],
        output_path: Path,
        **kwargs: Any,
    ) -> Path:
        """Render a template, then export the result to a .docx file."""
        return self.export(self.render(template, values), output_path, **kwargs)

    def inspect(self, html: str) -> str:
        """Extract markup and return the model as formatted JSON."""
        return self.extract(html).to_json()

    def from_model(self, model_path: Path, output_path: Path) -> Path:
        """Generate .docx from a saved model JSON file.

        Relative image paths resolve against the model file's directory.
        """
        model_path = Path(model_path)
        output_path = Path(output_path)

        logger.info("Loading model from %s", model_path)
        try:
            model = DocumentModel.from_json(model_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ParseError(f"Model file not found: {model_path}")
        except ValueError as exc:
            raise ParseError(f"Failed to load model from {model_path}: {exc}") from exc

        async def _run() -> bytes:
            payloads = await resolve_images(model, self.config.image, base_dir=model_path.parent)
            mapped = PrimitiveMapper(self.config).map(model, payloads)
            return WordGenerator(self.config).to_bytes(mapped)

        blob = asyncio.run(_run())
        try:
            output_path.write_bytes(blob)
        except OSError as exc:
            raise GenerationError(f"Failed to save document: {exc}") from exc
        self.last_report = ExportReport.from_model(model)
        return output_path

    @staticmethod
    def save_model(model: DocumentModel, path: Path) -> Path:
        """Save a model to a JSON file."""
        path = Path(path)
        logger.info("Saving model to %s", path)
        path.write_text(model.to_json(), encoding="utf-8")
        return path
