from pathlib import Path

import pytest

from citebot.config import Settings


def test_defaults_without_metadata(tmp_path):
    settings = Settings.load(tmp_path)
    assert settings.db_path == tmp_path / "paper_cache.db"
    assert settings.request_delay == 2.0
    assert settings.port == 8080
    assert settings.debug is False


def test_singleton(tmp_path):
    assert Settings.load(tmp_path) is Settings.load()


def test_example_file_is_copied_and_read(tmp_path):
    example = tmp_path / ".metadata.example"
    example.mkdir()
    (example / "settings.yaml").write_text(
        "db_path: data/cache.db\nrequest_delay: 0.5\nport: '9000'\nunknown_key: 1\n",
        encoding="utf-8",
    )
    settings = Settings.load(tmp_path)

    assert (tmp_path / ".metadata" / "settings.yaml").exists()
    assert settings.db_path == tmp_path / "data" / "cache.db"
    assert settings.request_delay == 0.5
    assert settings.port == 9000


def test_existing_settings_not_overwritten(tmp_path):
    (tmp_path / ".metadata.example").mkdir()
    (tmp_path / ".metadata.example" / "settings.yaml").write_text("port: 1\n", encoding="utf-8")
    (tmp_path / ".metadata").mkdir()
    (tmp_path / ".metadata" / "settings.yaml").write_text("port: 2\n", encoding="utf-8")

    assert Settings.load(tmp_path).port == 2


def test_invalid_values_fall_back_to_defaults(tmp_path):
    (tmp_path / ".metadata").mkdir()
    (tmp_path / ".metadata" / "settings.yaml").write_text(
        "request_timeout: soon\npage_size: 10\n", encoding="utf-8"
    )
    settings = Settings.load(tmp_path)
    assert settings.request_timeout == 10.0
    assert settings.page_size == 10


def test_unparsable_yaml_uses_defaults(tmp_path):
    (tmp_path / ".metadata").mkdir()
    (tmp_path / ".metadata" / "settings.yaml").write_text("port: [unclosed\n", encoding="utf-8")
    assert Settings.load(tmp_path).port == 8080


def test_update_and_reload(tmp_path):
    settings = Settings.load(tmp_path)
    settings.update(db_path=Path("other.db"), debug=True)
    assert Settings.load().debug is True

    with pytest.raises(AttributeError):
        settings.update(no_such_field=1)

    assert Settings.reload(tmp_path).debug is False


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ('"false"', False), ("'no'", False), ("true", True), ('"True"', True), ("1", True)],
)
def test_debug_flag_parsing(tmp_path, raw, expected):
    (tmp_path / ".metadata").mkdir()
    (tmp_path / ".metadata" / "settings.yaml").write_text(f"debug: {raw}\n", encoding="utf-8")
    assert Settings.load(tmp_path).debug is expected


def test_unrecognised_debug_value_keeps_default(tmp_path):
    (tmp_path / ".metadata").mkdir()
    (tmp_path / ".metadata" / "settings.yaml").write_text('debug: "sometimes"\n', encoding="utf-8")
    assert Settings.load(tmp_path).debug is False
