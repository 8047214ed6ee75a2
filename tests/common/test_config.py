from __future__ import annotations

from pathlib import Path

import pytest

from armory.config import (
    DEFAULT_MERGE_ATTEMPTS,
    ConfigurationError,
    get_merge_config,
    get_storage_config,
)


def test_merge_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ARMORY_NOTE_MAX_LENGTH", "ARMORY_TAG_REGISTRY", "ARMORY_MERGE_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)

    config = get_merge_config()

    assert config.max_note_length == 240
    assert config.tag_registry_path is None
    assert config.max_attempts == DEFAULT_MERGE_ATTEMPTS


def test_merge_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARMORY_NOTE_MAX_LENGTH", "120")
    monkeypatch.setenv("ARMORY_TAG_REGISTRY", "/etc/armory/tags.txt")
    monkeypatch.setenv("ARMORY_MERGE_ATTEMPTS", "5")

    config = get_merge_config()

    assert config.max_note_length == 120
    assert config.tag_registry_path == Path("/etc/armory/tags.txt")
    assert config.max_attempts == 5


@pytest.mark.parametrize("value", ["abc", "0", "-3"])
def test_merge_config_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("ARMORY_NOTE_MAX_LENGTH", value)

    with pytest.raises(ConfigurationError, match="ARMORY_NOTE_MAX_LENGTH"):
        get_merge_config()


def test_storage_config_prefers_explicit_catalog_path(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("ARMORY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ARMORY_CATALOG_PATH", str(tmp_path / "elsewhere.json"))

    assert get_storage_config().catalog_path() == (tmp_path / "elsewhere.json").resolve()


def test_storage_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ARMORY_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("ARMORY_CATALOG_PATH", raising=False)

    assert get_storage_config().catalog_path() == tmp_path.resolve() / "catalog.json"


def test_storage_config_defaults_to_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("ARMORY_DATA_DIR", raising=False)
    monkeypatch.delenv("ARMORY_CATALOG_PATH", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = get_storage_config()

    if config.data_dir.parent != tmp_path.resolve():
        pytest.skip("platform uses a different data home")
    assert config.catalog_path() == tmp_path.resolve() / "armory" / "catalog.json"
