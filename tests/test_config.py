"""Tests for settings and prompt templates."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.ai.prompts import PromptManager


class TestSettings:

    def test_env_values(self, settings) -> None:
        assert settings.gemini_api_key == "test-key-not-real"
        assert settings.max_attempts == 3
        assert settings.user_id == "user-1"
        assert settings.abs_db_path == Path(":memory:")

    def test_defaults(self, settings) -> None:
        assert settings.retry_base_delay_s == 1.0
        assert settings.currency == "ETB"
        assert settings.gemini_endpoint.endswith(
            "/v1beta/models/gemini-2.5-flash-preview-09-2025:generateContent"
        )

    def test_api_key_required(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        from pydantic import ValidationError

        from config.settings import Settings

        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ValidationError):
            Settings()


class TestPromptManager:

    def test_reorder_template_renders(self) -> None:
        pm = PromptManager()
        system = pm.get_system("reorder_analysis", restaurant_name="Cafe Lucy", currency="USD")
        user = pm.get_user("reorder_analysis", items_json='[{"name": "Teff"}]', currency="USD")

        assert system.startswith("You are the Cafe Lucy Supply Chain Analyst.")
        assert "{" not in system
        assert user.endswith('[{"name": "Teff"}]')

    def test_missing_placeholders_left_intact(self) -> None:
        pm = PromptManager()
        assert "{items_json}" in pm.get_user("reorder_analysis", currency="ETB")

    def test_unknown_template(self) -> None:
        with pytest.raises(KeyError, match="Unknown prompt template"):
            PromptManager().get_system("nope")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            PromptManager(str(tmp_path / "absent.yaml"))

    def test_requires_prompts_key(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("templates: {}\n", encoding="utf-8")
        with pytest.raises(ValueError, match="top-level 'prompts'"):
            PromptManager(str(path))
