"""Markdown rendering of documentation models."""

from .renderer import RenderError, RenderedPackage, TemplateRenderer
from .site import SiteBuilder

__all__ = ["RenderError", "RenderedPackage", "SiteBuilder", "TemplateRenderer"]
