"""
Template renderers.

Renderer is the contract TemplateCache consumes: render a template file
against a mapping of variables and return text, raising RenderError when the
template is missing or fails. JinjaRenderer is the default implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    Undefined,
)

from viewcache.exceptions import RenderError
from viewcache.logging import get_logger

logger = get_logger(__name__)


class Renderer(ABC):
    """Renders a template file to text."""

    @abstractmethod
    def render(self, template_path: str | Path, variables: Mapping[str, Any]) -> str:
        """Render ``template_path`` with ``variables``.

        Raises:
            RenderError: If the template is missing, unreadable or fails.
        """
        ...


class JinjaRenderer(Renderer):
    """Jinja2-backed renderer.

    Keeps one Environment per template directory so Jinja's compiled
    template cache is reused across calls.
    """

    def __init__(
        self,
        autoescape: bool = False,
        strict_undefined: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        self.autoescape = autoescape
        self.strict_undefined = strict_undefined
        self.encoding = encoding
        self._environments: dict[Path, Environment] = {}

    def _get_environment(self, directory: Path) -> Environment:
        env = self._environments.get(directory)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(str(directory), encoding=self.encoding),
                autoescape=self.autoescape,
                undefined=StrictUndefined if self.strict_undefined else Undefined,
                keep_trailing_newline=True,
            )
            self._environments[directory] = env
        return env

    def render(self, template_path: str | Path, variables: Mapping[str, Any]) -> str:
        path = Path(template_path)
        context = {"template": str(path)}

        if not path.is_file():
            raise RenderError(f"The template file '{path}' does not exist", context=context)

        env = self._get_environment(path.parent.resolve())
        try:
            template = env.get_template(path.name)
            # Mapping passed positionally so a variable may be called "self"
            return template.render(dict(variables))
        except TemplateNotFound as e:
            # Raised for the outer template or for one it includes
            raise RenderError(
                f"The template file '{e.name}' does not exist",
                context={**context, "missing": e.name},
            ) from e
        except TemplateError as e:
            logger.error("Template execution failed", template=str(path), error=str(e))
            raise RenderError(f"Template rendering failed: {e}", context=context) from e
        except (OSError, UnicodeDecodeError) as e:
            raise RenderError(
                f"The template file '{path}' could not be read", context=context
            ) from e
