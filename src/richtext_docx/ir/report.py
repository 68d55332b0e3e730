"""Export report: diagnostics and statistics from an export run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from richtext_docx.ir.schema import DocumentModel, ImageBlock, ParagraphBlock, TableBlock


@dataclass
class ExportReport:
    """Summary of one markup-to-Word export."""

    # Timing
    extract_time_seconds: float = 0.0
    resolve_time_seconds: float = 0.0
    generate_time_seconds: float = 0.0
    total_time_seconds: float = 0.0

    # Block counts
    paragraph_count: int = 0
    heading_count: int = 0
    list_item_count: int = 0
    list_run_count: int = 0
    table_count: int = 0
    image_count: int = 0
    omitted_image_count: int = 0

    # Heading level distribution: {level: count}
    headings_by_level: dict[int, int] = field(default_factory=dict)

    # Warnings collected during export
    warnings: list[str] = field(default_factory=list)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self._to_dict(), indent=indent)

    def _to_dict(self) -> dict:
        return {
            "timing": {
                "extract_seconds": round(self.extract_time_seconds, 3),
                "resolve_seconds": round(self.resolve_time_seconds, 3),
                "generate_seconds": round(self.generate_time_seconds, 3),
                "total_seconds": round(self.total_time_seconds, 3),
            },
            "block_counts": {
                "paragraphs": self.paragraph_count,
                "headings": self.heading_count,
                "list_items": self.list_item_count,
                "list_runs": self.list_run_count,
                "tables": self.table_count,
                "images": self.image_count,
                "omitted_images": self.omitted_image_count,
            },
            "headings_by_level": {
                str(k): v for k, v in sorted(self.headings_by_level.items())
            },
            "warnings": self.warnings,
        }

    @classmethod
    def from_model(cls, model: DocumentModel) -> ExportReport:
        """Build a report by counting the blocks of a document model."""
        report = cls()
        for block in model.blocks:
            if isinstance(block, ParagraphBlock):
                report.paragraph_count += 1
                if block.heading_level is not None:
                    report.heading_count += 1
                    report.headings_by_level[block.heading_level] = (
                        report.headings_by_level.get(block.heading_level, 0) + 1
                    )
            elif isinstance(block, TableBlock):
                report.table_count += 1
            elif isinstance(block, ImageBlock):
                report.image_count += 1
        metadata = model.list_metadata()
        report.list_item_count = len(metadata)
        report.list_run_count = len({meta.reference_id for meta in metadata})
        return report
