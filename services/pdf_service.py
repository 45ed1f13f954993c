from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Dict, Any, List

from config.settings import settings

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class PDFService:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """Render a template to HTML"""
        template = self.env.get_template(template_name)
        return template.render(
            school_name=settings.SCHOOL_NAME,
            school_address=settings.SCHOOL_ADDRESS,
            **data,
        )

    def _html_to_pdf(self, html_content: str) -> bytes:
        """Convert HTML to PDF"""
        # imported here: WeasyPrint loads pango/cairo when the module is imported
        import weasyprint

        return weasyprint.HTML(string=html_content, base_url=settings.WEASYPRINT_FONT_DIR).write_pdf()

    def render_exam_marksheet(self, data: Dict[str, Any]) -> str:
        return self._render_template("marksheet.html", data)

    def generate_exam_marksheet_pdf(self, data: Dict[str, Any]) -> bytes:
        """Single exam transcript of one student"""
        return self._html_to_pdf(self.render_exam_marksheet(data))

    def render_yearly_marksheets(self, students: List[Dict[str, Any]]) -> str:
        return self._render_template("yearly_marksheet.html", {"students": students})

    def generate_yearly_marksheets_pdf(self, students: List[Dict[str, Any]]) -> bytes:
        """Subject x exam sheets, one page per student"""
        return self._html_to_pdf(self.render_yearly_marksheets(students))
