"""Plain-language output built on top of the calculators."""

from .insights import generate_insights

__all__ = ["generate_insights"]
