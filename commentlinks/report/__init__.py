"""Variant selection and report rendering."""

from .completeness import evaluate
from .composer import NONE_SENTINEL, ReportComposer, substitute
from .loader import TemplateLoader

__all__ = ["NONE_SENTINEL", "ReportComposer", "TemplateLoader", "evaluate", "substitute"]
