"""Tests for configuration loading."""

import pytest

from edi_engine.config import (
    DEFAULT_CONFIG,
    ENV_OVERRIDES,
    build_code_tables,
    build_options,
    load_config,
)
from edi_engine.exceptions import ConfigurationError

from tests.conftest import PROJECT_ROOT


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without EDI_* variables; undo anything .env loading sets."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self):
        """Should return defaults when no file is given."""
        assert load_config(None) == DEFAULT_CONFIG

    def test_shipped_config(self):
        """Should load the repository config.yaml."""
        config = load_config(PROJECT_ROOT / "config.yaml")
        assert config["segment_terminator"] == "~"
        assert config["strict_qualifiers"] is False
        assert config["max_threads"] == 5

    def test_file_values(self, tmp_path):
        """Should read values from YAML."""
        path = write_config(tmp_path, "element_separator: '+'\nstrict_qualifiers: true\nmax_threads: 2\n")
        config = load_config(path)
        assert config["element_separator"] == "+"
        assert config["strict_qualifiers"] is True
        assert config["max_threads"] == 2
        assert config["segment_terminator"] == "~"

    def test_missing_file(self, tmp_path):
        """Should raise ConfigurationError for a missing file."""
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_key(self, tmp_path):
        """Should reject keys it does not know."""
        path = write_config(tmp_path, "llm_model: gpt\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        """Should wrap YAML errors."""
        path = write_config(tmp_path, "max_threads: [1, 2\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    @pytest.mark.parametrize("text", [
        "max_threads: 0\n",
        "max_threads: many\n",
        "strict_qualifiers: maybe\n",
        "element_separator: '~'\n",
        "segment_terminator: 'AB'\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        """Should raise ConfigurationError for invalid values."""
        path = write_config(tmp_path, text)
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_environment_overrides(self, tmp_path, monkeypatch):
        """Should let EDI_* variables override the file."""
        path = write_config(tmp_path, "max_threads: 2\n")
        monkeypatch.setenv("EDI_MAX_THREADS", "8")
        monkeypatch.setenv("EDI_STRICT_QUALIFIERS", "yes")
        monkeypatch.setenv("EDI_SEGMENT_TERMINATOR", "'")
        config = load_config(path)
        assert config["max_threads"] == 8
        assert config["strict_qualifiers"] is True
        assert config["segment_terminator"] == "'"

    def test_dotenv_next_to_config(self, tmp_path):
        """Should read overrides from a .env file beside the config."""
        path = write_config(tmp_path, "max_threads: 2\n")
        (tmp_path / ".env").write_text("EDI_MAX_THREADS=3\n")
        assert load_config(path)["max_threads"] == 3

    def test_relative_code_tables_path(self, tmp_path):
        """Should resolve code_tables_path against the config directory."""
        (tmp_path / "codes.yaml").write_text("units_of_measure:\n  TR: Tray\n")
        path = write_config(tmp_path, "code_tables_path: codes.yaml\n")
        tables = build_code_tables(load_config(path))
        assert tables.describe("units_of_measure", "TR") == "Tray"


class TestBuildOptions:
    """Tests for build_options."""

    def test_options_from_config(self, tmp_path):
        """Should carry delimiters and policy into X12Options."""
        path = write_config(tmp_path, "segment_terminator: \"'\"\nelement_separator: '+'\nline_breaks: true\n")
        options = build_options(load_config(path))
        assert options.segment_terminator == "'"
        assert options.element_separator == "+"
        assert options.line_breaks is True
        assert options.strict_qualifiers is False
