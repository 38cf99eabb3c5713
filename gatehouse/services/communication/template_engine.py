"""
Jinja2 rendering of email bodies from ``gatehouse/templates``.
"""

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "templates"


class TemplateEngine:
    """Email template engine"""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.env.get_template(template_name).render(**context)

    def render_pair(self, name: str, context: Dict[str, Any]) -> Dict[str, str]:
        """Render ``<name>.html`` and its ``<name>.txt`` fallback."""
        return {
            "html": self.render(f"{name}.html", context),
            "text": self.render(f"{name}.txt", context),
        }


template_engine = TemplateEngine()
