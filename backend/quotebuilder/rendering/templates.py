"""
Jinja2 environment shared by the rendering module.

HTML templates are autoescaped; text templates are rendered as-is.
"""
import logging
from pathlib import Path
from typing import Any

import jinja2

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

template_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=jinja2.select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=jinja2.StrictUndefined,
)


def render_template(template_name: str, **context: Any) -> str:
    """Renders a template from the rendering/templates directory.

    Raises:
        jinja2.TemplateNotFound: if the template file does not exist.
    """
    try:
        template = template_env.get_template(template_name)
    except jinja2.TemplateNotFound:
        logger.error(f"[Templates] Template '{template_name}' not found in {TEMPLATE_DIR}")
        raise
    return template.render(**context)
