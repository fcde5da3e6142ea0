"""Errors raised by the PDF document generator.

Only DocumentGenerationError (and its subclasses) ever leaves
generate_meal_plan_pdf; callers can catch that one type.
"""

FONT_ERROR_MARKERS = ('font', '.afm', '.ttf', 'helvetica', 'enoent', 'no such file')


class DocumentGenerationError(Exception):
    """The PDF could not be produced."""


class ResourceInitializationError(DocumentGenerationError):
    """Font resources could not be made available (non-fatal, logged)."""


class DocumentConstructionError(DocumentGenerationError):
    """The rendering library could not be initialized."""


class RenderStreamError(DocumentGenerationError):
    """Writing the finished document into the output buffer failed."""


def is_font_error(error: BaseException) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in FONT_ERROR_MARKERS)


__all__ = [
    'DocumentGenerationError', 'ResourceInitializationError',
    'DocumentConstructionError', 'RenderStreamError', 'is_font_error',
]
