"""
Tests for options, settings and logging setup.
"""

import logging
import re

import pytest
import structlog
from pydantic import ValidationError

from readerview.config import MonitoringConfig, ReadabilityOptions, ReaderableOptions, Settings, find_config_file
from readerview.observability import configure_logging
from readerview.observability.logging import add_document_url

pytestmark = pytest.mark.unit


class TestReadabilityOptions:
    def test_defaults(self):
        options = ReadabilityOptions()

        assert options.debug is False
        assert options.max_elems_to_parse == 0
        assert options.nb_top_candidates == 5
        assert options.char_threshold == 500
        assert options.classes_to_preserve == ["page"]
        assert options.keep_classes is False
        assert options.disable_json_ld is False
        assert options.allowed_video_regex is None
        assert options.link_density_modifier == 0.0

    def test_fluent_copy(self):
        options = ReadabilityOptions().model_copy(update={"char_threshold": 100, "keep_classes": True})

        assert options.char_threshold == 100
        assert options.keep_classes is True

    def test_video_regex_is_compiled(self):
        options = ReadabilityOptions(allowed_video_regex=r"example\.com/video")

        assert isinstance(options.allowed_video_regex, re.Pattern)
        assert options.allowed_video_regex.search("https://example.com/video/1")

    @pytest.mark.parametrize(
        "field, value",
        [("nb_top_candidates", 0), ("char_threshold", -1), ("max_elems_to_parse", -5)],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            ReadabilityOptions(**{field: value})

    def test_non_finite_modifier_is_rejected(self):
        with pytest.raises(ValidationError):
            ReadabilityOptions(link_density_modifier=float("nan"))

    def test_class_names_are_stripped(self):
        options = ReadabilityOptions(classes_to_preserve=[" page ", "", "caption"])
        assert options.classes_to_preserve == ["page", "caption"]

    def test_readerable_defaults(self):
        options = ReaderableOptions()

        assert options.min_content_length == 140
        assert options.min_score == 20.0


class TestSettings:
    def test_from_yaml(self, tmp_path):
        config_file = tmp_path / "readerview.yaml"
        config_file.write_text(
            "extraction:\n  char_threshold: 250\n  keep_classes: true\n"
            "readerable:\n  min_score: 10\n"
            "monitoring:\n  log_level: DEBUG\n"
        )
        settings = Settings.from_yaml(config_file)

        assert settings.extraction.char_threshold == 250
        assert settings.extraction.keep_classes is True
        assert settings.readerable.min_score == 10
        assert settings.monitoring.log_level == "DEBUG"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        config_file = tmp_path / "readerview.yaml"
        config_file.write_text("")

        assert Settings.from_yaml(config_file).extraction.char_threshold == 500

    def test_missing_yaml(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("READERVIEW_EXTRACTION__CHAR_THRESHOLD", "42")
        assert Settings().extraction.char_threshold == 42

    def test_find_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None

        (tmp_path / "readerview.yml").write_text("{}")
        assert find_config_file() == tmp_path / "readerview.yml"


class TestLogging:
    def test_log_file_parent_is_created(self, tmp_path):
        log_file = tmp_path / "logs" / "readerview.log"
        config = MonitoringConfig(log_file=str(log_file))

        assert (tmp_path / "logs").is_dir()
        assert config.log_file == str(log_file)

    def test_configure_logging_sets_level(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            configure_logging(MonitoringConfig(log_level="INFO"))
            assert root.level == logging.INFO
            assert len(root.handlers) == 1
        finally:
            root.handlers = handlers
            root.setLevel(level)

    def test_document_url_processor(self):
        structlog.contextvars.bind_contextvars(document_url="https://example.com/a")
        try:
            event = add_document_url(logging.getLogger("test"), "info", {"event": "x"})
        finally:
            structlog.contextvars.clear_contextvars()

        assert event["document_url"] == "https://example.com/a"
        assert "document_url" not in add_document_url(logging.getLogger("test"), "info", {"event": "y"})
