"""YAML-backed prompt template loader.

``PromptManager`` reads templates from a YAML file.  Templates live under a
top-level ``prompts`` key, each with ``system`` and ``user`` sub-keys whose
``{placeholders}`` are filled from keyword arguments.

Usage::

    from src.ai.prompts import PromptManager

    pm = PromptManager()
    system = pm.get_system("reorder_analysis", restaurant_name="Amen", currency="ETB")
    user   = pm.get_user("reorder_analysis", items_json="[...]", currency="ETB")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from src.utils.logger import get_logger

log = get_logger(__name__, component="prompts")

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class _KeepMissing(dict):  # type: ignore[type-arg]
    """dict subclass that leaves unknown ``{placeholders}`` untouched."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class PromptManager:
    """Load prompt templates from a YAML file and render them with kwargs.

    Parameters
    ----------
    prompts_path:
        Path to the YAML file.  Relative paths are resolved against the
        project root.
    """

    def __init__(self, prompts_path: str = "config/prompts.yaml") -> None:
        path = Path(prompts_path)
        if not path.is_absolute():
            path = _PROJECT_ROOT / path
        self._templates: dict[str, dict[str, str]] = self._load(path)
        log.info("prompts.loaded", path=str(path), template_count=len(self._templates))

    @staticmethod
    def _load(path: Path) -> dict[str, dict[str, str]]:
        if not path.is_file():
            raise FileNotFoundError(f"Prompts file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        if not isinstance(data, dict) or "prompts" not in data:
            raise ValueError(
                f"Prompts file must contain a top-level 'prompts' key: {path}"
            )
        return data["prompts"]

    def _part(self, template_name: str, part: str) -> str:
        if template_name not in self._templates:
            available = ", ".join(sorted(self._templates))
            raise KeyError(
                f"Unknown prompt template '{template_name}'. "
                f"Available templates: {available}"
            )
        template = self._templates[template_name]
        if part not in template:
            raise KeyError(f"Template '{template_name}' does not have a '{part}' key")
        return template[part]

    def get_system(self, template_name: str, **kwargs: Any) -> str:
        """Return the rendered system instruction of *template_name*."""
        return self._part(template_name, "system").format_map(_KeepMissing(**kwargs)).strip()

    def get_user(self, template_name: str, **kwargs: Any) -> str:
        """Return the rendered user prompt of *template_name*."""
        return self._part(template_name, "user").format_map(_KeepMissing(**kwargs)).strip()
