"""
Property-based tests for GalleryConfig serialization and environment overrides.
"""

import json
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gallery_provider.core.config import (
    DatabaseConfig,
    GalleryConfig,
    LoggingConfig,
    ProviderConfig,
    load_config,
)

safe_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S"),
        blacklist_characters="\x00\n\r\t",
    ),
    min_size=1,
    max_size=50,
).filter(lambda s: s.strip() != "")

authority = st.from_regex(r"[a-z][a-z0-9]*(\.[a-z][a-z0-9]*){0,4}", fullmatch=True)

log_level = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


@st.composite
def gallery_config_strategy(draw):
    """Generate valid GalleryConfig instances."""
    return GalleryConfig(
        database=DatabaseConfig(path=draw(safe_text), name=draw(safe_text)),
        provider=ProviderConfig(authority=draw(authority)),
        logging=LoggingConfig(level=draw(log_level), format=draw(safe_text)),
    )


@given(config=gallery_config_strategy())
@settings(max_examples=100)
def test_config_yaml_round_trip(config: GalleryConfig):
    """Saving to YAML and loading back yields an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / "config.yaml"
        config.save(path)
        assert GalleryConfig.from_file(path) == config


@given(config=gallery_config_strategy())
@settings(max_examples=100)
def test_config_loads_from_json(config: GalleryConfig):
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / "config.json"
        path.write_text(json.dumps(config.to_dict()), encoding="utf-8")
        assert GalleryConfig.from_file(path) == config


def test_defaults_come_from_defaults_file():
    config = GalleryConfig()

    assert config.database.name == "gallery_source.db"
    assert config.provider.authority == "com.google.android.apps.muzei.gallery"
    assert config.database.db_path == Path(".gallery") / "gallery_source.db"


def test_in_memory_database_path():
    assert DatabaseConfig(path="anywhere", name=":memory:").db_path == Path(":memory:")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GALLERY_DATABASE_PATH", "/tmp/gallery-data")
    monkeypatch.setenv("GALLERY_PROVIDER_AUTHORITY", "org.example.gallery")
    monkeypatch.setenv("GALLERY_LOGGING_LEVEL", "DEBUG")

    config = load_config()

    assert config.database.path == "/tmp/gallery-data"
    assert config.provider.authority == "org.example.gallery"
    assert config.logging.level == "DEBUG"

    assert load_config(apply_env=False).provider.authority == (
        "com.google.android.apps.muzei.gallery"
    )


def test_partial_file_keeps_other_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("provider:\n  authority: org.example.gallery\n", encoding="utf-8")

    config = load_config(path, apply_env=False)

    assert config.provider.authority == "org.example.gallery"
    assert config.database == DatabaseConfig()


@pytest.mark.parametrize("suffix", [".toml", ".ini"])
def test_unsupported_format(tmp_path: Path, suffix: str):
    path = tmp_path / f"config{suffix}"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError):
        GalleryConfig.from_file(path)
    with pytest.raises(ValueError):
        GalleryConfig().save(path)


def test_save_refuses_json(tmp_path: Path):
    with pytest.raises(ValueError):
        GalleryConfig().save(tmp_path / "config.json")


def test_empty_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")

    assert GalleryConfig.from_file(path) == GalleryConfig()


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        GalleryConfig.from_file("/nonexistent/gallery.yaml")
