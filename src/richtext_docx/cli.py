"""Click CLI for the rich-text exporter.

Commands:
    render      Expand a Mustache template and print the markup
    export      Markup (or template + values) -> .docx
    inspect     Print the extracted document model as JSON (for debugging)
    from-model  Generate .docx from a saved model JSON file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import yaml

from richtext_docx.config import Config
from richtext_docx.exceptions import ConfigError, RichTextDocxError
from richtext_docx.pipeline import ExportPipeline


def _load_values(path: Path | None) -> dict:
    """Load template values from a YAML (or JSON) file."""
    if path is None:
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid values file {path}: {exc}")
    if not isinstance(data, dict):
        raise ConfigError(f"Values file {path} must contain a mapping")
    return data


def _load_markup(pipeline: ExportPipeline, input_file: Path, values_path: Path | None) -> str:
    text = input_file.read_text(encoding="utf-8")
    if values_path is None:
        return text
    return pipeline.render(text, _load_values(values_path))


values_option = click.option(
    "--values",
    "values_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML/JSON values; treats INPUT as a template and renders it first.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to a YAML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Rich-text markup to Word document exporter."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = Config.load(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    if verbose:
        config.verbose = True

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["pipeline"] = ExportPipeline(config)


@main.command()
@click.argument("template_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--values",
    "values_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML/JSON file with template values.",
)
@click.pass_context
def render(ctx: click.Context, template_file: Path, values_path: Path | None) -> None:
    """Render a Mustache template and print the resulting markup."""
    pipeline: ExportPipeline = ctx.obj["pipeline"]

    try:
        values = _load_values(values_path)
    except RichTextDocxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    result = pipeline.preview(template_file.read_text(encoding="utf-8"), values)
    click.echo(result.html)
    if result.is_error:
        raise SystemExit(1)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.argument("output_docx", type=click.Path(path_type=Path), required=False)
@values_option
@click.option("--save-model", is_flag=True, help="Save the document model JSON alongside output.")
@click.option(
    "--model-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom path for the model JSON file.",
)
@click.option("--report", is_flag=True, help="Save export report JSON alongside output.")
@click.option(
    "--report-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom path for the report JSON file.",
)
@click.pass_context
def export(
    ctx: click.Context,
    input_file: Path,
    output_docx: Path | None,
    values_path: Path | None,
    save_model: bool,
    model_path: Path | None,
    report: bool,
    report_path: Path | None,
) -> None:
    """Export rich-text markup to a Word document."""
    pipeline: ExportPipeline = ctx.obj["pipeline"]

    if output_docx is None:
        output_docx = input_file.with_suffix(".docx")

    try:
        html = _load_markup(pipeline, input_file, values_path)
        result = pipeline.export(
            html,
            output_docx,
            base_dir=input_file.parent,
            save_model=save_model,
            model_path=model_path,
            save_report=report,
            report_path=report_path,
        )
        click.echo(f"Generated: {result}")

        if report and pipeline.last_report:
            rpt = pipeline.last_report
            click.echo(
                f"Report: {rpt.paragraph_count} paragraphs, "
                f"{rpt.table_count} tables, {rpt.image_count} images, "
                f"{rpt.omitted_image_count} omitted images"
            )
    except RichTextDocxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@values_option
@click.pass_context
def inspect(ctx: click.Context, input_file: Path, values_path: Path | None) -> None:
    """Extract markup and output its document model as JSON (for debugging)."""
    pipeline: ExportPipeline = ctx.obj["pipeline"]

    try:
        html = _load_markup(pipeline, input_file, values_path)
        click.echo(pipeline.inspect(html))
    except RichTextDocxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


@main.command("from-model")
@click.argument("model_json", type=click.Path(exists=True, path_type=Path))
@click.argument("output_docx", type=click.Path(path_type=Path))
@click.pass_context
def from_model(ctx: click.Context, model_json: Path, output_docx: Path) -> None:
    """Generate a Word document from a saved model JSON file."""
    pipeline: ExportPipeline = ctx.obj["pipeline"]

    try:
        result = pipeline.from_model(model_json, output_docx)
        click.echo(f"Generated: {result}")
    except RichTextDocxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
