import pytest
from pydantic import ValidationError

from uicp_parser.config import ParserSettings


class TestParserSettings:
    def test_defaults(self):
        settings = ParserSettings.from_env({})
        assert settings.catalog_source is None
        assert settings.catalog_ttl_seconds == 300.0
        assert settings.components_package is None
        assert settings.fetch_timeout_seconds == 10.0
        assert settings.log_level == "INFO"

    def test_reads_environment(self):
        settings = ParserSettings.from_env(
            {
                "UICP_CATALOG_SOURCE": " lib/uicp/definitions.json ",
                "UICP_CATALOG_TTL_SECONDS": "0",
                "UICP_COMPONENTS_PACKAGE": "app.components",
                "UICP_FETCH_TIMEOUT_SECONDS": "2.5",
                "UICP_LOG_LEVEL": "warning",
            }
        )
        assert settings.catalog_source == "lib/uicp/definitions.json"
        assert settings.catalog_ttl_seconds == 0
        assert settings.components_package == "app.components"
        assert settings.fetch_timeout_seconds == 2.5
        assert settings.log_level == "WARNING"

    def test_uses_os_environ(self, monkeypatch):
        monkeypatch.setenv("UICP_CATALOG_SOURCE", "https://example.com/defs.json")
        assert ParserSettings.from_env().catalog_source == "https://example.com/defs.json"

    @pytest.mark.parametrize(
        "env",
        [
            {"UICP_CATALOG_TTL_SECONDS": "-1"},
            {"UICP_CATALOG_TTL_SECONDS": "soon"},
            {"UICP_FETCH_TIMEOUT_SECONDS": "0"},
            {"UICP_LOG_LEVEL": "loud"},
        ],
    )
    def test_invalid_values(self, env):
        with pytest.raises(ValidationError):
            ParserSettings.from_env(env)
