"""Exception hierarchy for the rich-text to Word exporter."""


class RichTextDocxError(Exception):
    """Base exception for all richtext-docx errors."""


class TemplateRenderError(RichTextDocxError):
    """Raised when a template has malformed section nesting."""


class ParseError(RichTextDocxError):
    """Raised when markup or a saved document model cannot be loaded."""


class GenerationError(RichTextDocxError):
    """Raised when Word document generation fails."""


class ConfigError(RichTextDocxError):
    """Raised when configuration is invalid or missing."""


class ImageError(GenerationError):
    """Raised when an image payload cannot be decoded or loaded."""
