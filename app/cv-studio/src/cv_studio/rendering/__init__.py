"""CV presentation templates."""

from .renderer import TEMPLATES, TemplateStyle, get_template_style, render_cv_html
from .translations import get_translations

__all__ = ["TEMPLATES", "TemplateStyle", "get_template_style", "render_cv_html", "get_translations"]
