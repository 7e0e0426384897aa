"""
Jinja2 템플릿 렌더링 모듈
"""

import logging
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ...config import settings

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """이메일 템플릿 렌더러"""

    def __init__(self, template_dir: str = None):
        if template_dir is None:
            template_dir = Path(__file__).parent.parent.parent / "templates"

        self.template_dir = Path(template_dir)

        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, context: dict) -> str:
        """범용 템플릿 렌더링"""
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            logger.error(f"템플릿 렌더링 실패 ({template_name}): {e}")
            raise

    def render_resource_email(self, resource_title: str, resource_link: str) -> str:
        """리소스 이메일 렌더링"""
        return self.render("resource_email.html", {
            "resource_title": resource_title,
            "resource_link": resource_link,
            "site_title": settings.site_title,
            "site_url": settings.site_url,
            "site_author": settings.site_author,
            "site_domain": settings.site_domain,
            "year": datetime.now().year,
        })
