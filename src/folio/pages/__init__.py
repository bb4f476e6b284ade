"""Project page generation from Jinja2 templates."""

from folio.pages.generator import PageGenerator, PageResults, create_environment
from folio.pages.templates import DEFAULT_PROJECT_TEMPLATE, bootstrap_template

__all__ = [
    "PageGenerator",
    "PageResults",
    "create_environment",
    "DEFAULT_PROJECT_TEMPLATE",
    "bootstrap_template",
]
