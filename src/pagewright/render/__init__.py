"""
Template loading and document rendering.
"""

from .renderer import SUPPORTED_TYPE, check_type, render_document
from .templates import TemplateRegistry, TemplateRegistryBuilder, load_registry, template_name

__all__ = [
    "SUPPORTED_TYPE",
    "TemplateRegistry",
    "TemplateRegistryBuilder",
    "check_type",
    "load_registry",
    "render_document",
    "template_name",
]
