"""Template loading for report variants."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, cast

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..errors import TemplateMissingError
from ..logging import get_logger
from ..models import ReportVariant

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")
LINK_PARTIAL = "partials/link.md.j2"


class TemplateLoader:
    """Resolves variant templates from a custom directory, then the packaged defaults."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self.logger = get_logger("templates")
        self._env = self._create_env(templates_dir)

    @property
    def search_path(self) -> List[str]:
        return list(self._loader.searchpath)

    def template_name(self, variant: ReportVariant) -> str:
        return f"{variant.value}.md"

    def load(self, variant: ReportVariant) -> str:
        """Return the raw text of the variant template (no jinja rendering)."""
        name = self.template_name(variant)
        try:
            source, filename, _ = self._loader.get_source(self._env, name)
        except TemplateNotFound as exc:
            raise TemplateMissingError(name) from exc
        self.logger.debug("Loaded %s template from %s", variant.value, filename)
        return source

    def render_link(self, **context: Any) -> str:
        template = self._env.get_template(LINK_PARTIAL)
        return template.render(**context)

    @property
    def _loader(self) -> FileSystemLoader:
        return cast(FileSystemLoader, self._env.loader)

    @staticmethod
    def _create_env(templates_dir: Optional[Path]) -> Environment:
        directories: List[str] = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        directories.append(str(DEFAULT_TEMPLATES_DIR))
        ordered = list(dict.fromkeys(directories))
        return Environment(
            loader=FileSystemLoader(ordered),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )


__all__ = ["DEFAULT_TEMPLATES_DIR", "LINK_PARTIAL", "TemplateLoader"]
