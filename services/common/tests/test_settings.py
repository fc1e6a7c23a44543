"""
Tests for the lightweight settings base class.
"""

import os
from typing import List, Optional

import pytest

from services.common.settings import (
    AliasChoices,
    BaseSettings,
    Field,
    SettingsConfigDict,
)


class ExampleSettings(BaseSettings):
    db_url: str = Field(
        default=...,
        validation_alias=AliasChoices("EXAMPLE_DB_URL", "DATABASE_URL"),
    )
    timezone_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("EXAMPLE_TZ")
    )
    concurrency: int = Field(default=8, validation_alias="EXAMPLE_CONCURRENCY")
    debug: bool = Field(default=False, validation_alias="EXAMPLE_DEBUG")
    origins: List[str] = Field(default=[], validation_alias="EXAMPLE_ORIGINS")

    model_config = SettingsConfigDict(case_sensitive=False)


ENV_NAMES = [
    "EXAMPLE_DB_URL",
    "DATABASE_URL",
    "EXAMPLE_TZ",
    "EXAMPLE_CONCURRENCY",
    "EXAMPLE_DEBUG",
    "EXAMPLE_ORIGINS",
]


class TestBaseSettings:
    def setup_method(self):
        self._saved = {name: os.environ.pop(name, None) for name in ENV_NAMES}

    def teardown_method(self):
        for name, value in self._saved.items():
            os.environ.pop(name, None)
            if value is not None:
                os.environ[name] = value

    def test_required_field_missing(self):
        with pytest.raises(ValueError, match="db_url"):
            ExampleSettings()

    def test_keyword_arguments_win(self):
        os.environ["EXAMPLE_DB_URL"] = "sqlite:///env.db"

        settings = ExampleSettings(db_url="sqlite:///kwarg.db")

        assert settings.db_url == "sqlite:///kwarg.db"

    def test_alias_choices_in_order(self):
        os.environ["DATABASE_URL"] = "sqlite:///second.db"
        assert ExampleSettings().db_url == "sqlite:///second.db"

        os.environ["EXAMPLE_DB_URL"] = "sqlite:///first.db"
        assert ExampleSettings().db_url == "sqlite:///first.db"

    def test_defaults(self):
        settings = ExampleSettings(db_url="sqlite://")

        assert settings.timezone_name is None
        assert settings.concurrency == 8
        assert settings.debug is False
        assert settings.origins == []

    def test_type_conversion(self):
        os.environ.update(
            {
                "EXAMPLE_DB_URL": "sqlite://",
                "EXAMPLE_TZ": "Europe/Paris",
                "EXAMPLE_CONCURRENCY": "2",
                "EXAMPLE_DEBUG": "yes",
                "EXAMPLE_ORIGINS": "http://a, http://b",
            }
        )

        settings = ExampleSettings()

        assert settings.timezone_name == "Europe/Paris"
        assert settings.concurrency == 2
        assert settings.debug is True
        assert settings.origins == ["http://a", "http://b"]

    def test_empty_optional_is_none(self):
        os.environ["EXAMPLE_TZ"] = ""

        assert ExampleSettings(db_url="sqlite://").timezone_name is None

    def test_json_list(self):
        os.environ["EXAMPLE_ORIGINS"] = '["http://a", "http://b"]'

        assert ExampleSettings(db_url="sqlite://").origins == ["http://a", "http://b"]

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('# comment\nEXAMPLE_DB_URL="sqlite:///from-file.db"\n')

        class FileSettings(ExampleSettings):
            model_config = SettingsConfigDict(env_file=str(env_file))

        assert FileSettings().db_url == "sqlite:///from-file.db"
