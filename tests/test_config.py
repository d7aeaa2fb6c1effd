from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
import pytest

from mdlatex.core.config import (
    DEFAULT_CHUNK_THRESHOLD,
    CacheConfig,
    ChunkingConfig,
    ConfigError,
    ConverterConfig,
    RenderOptions,
    load_config,
)


def test_defaults() -> None:
    config = ConverterConfig()

    assert config.chunking.threshold == DEFAULT_CHUNK_THRESHOLD == 30_000
    assert config.cache.enabled is True
    assert config.cache.prefix == "md-"
    assert config.document.title == "Converted Document"
    assert config.render.heading_command(5) == config.render.heading_command(6) == "subparagraph"


def test_heading_overrides_are_merged_with_defaults() -> None:
    options = RenderOptions(heading_commands={1: "\\chapter"})

    assert options.heading_command(1) == "chapter"
    assert options.heading_command(2) == "subsection"


def test_heading_levels_are_bounded() -> None:
    with pytest.raises(ValidationError):
        RenderOptions(heading_commands={7: "minisec"})


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValidationError):
        CacheConfig(location="/tmp")  # type: ignore[call-arg]


def test_threshold_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        ChunkingConfig(threshold=0)


def test_with_overrides_returns_a_new_config() -> None:
    base = ConverterConfig()
    updated = base.with_overrides(document={"title": "Other"}, cache={})

    assert updated.document.title == "Other"
    assert base.document.title == "Converted Document"
    assert updated.cache == base.cache


def test_load_config_without_path() -> None:
    assert load_config(None) == ConverterConfig()


def test_load_config_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text(
        "chunking:\n  threshold: 100\ncache:\n  prefix: doc-\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.chunking.threshold == 100
    assert config.cache.prefix == "doc-"


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ConverterConfig()


@pytest.mark.parametrize(
    "payload",
    ["- a list\n", "render: [unclosed\n", "chunking:\n  threshold: -1\n"],
)
def test_invalid_files_raise_config_error(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "config.yml"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yml")
