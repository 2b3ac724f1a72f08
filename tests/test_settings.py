from pathlib import Path

import yaml

from pointforge.settings import Settings


def test_defaults_from_bundled_yaml():
    settings = Settings.load(environ={})
    assert settings.gameplay.tick_interval == 1.0
    assert settings.gameplay.min_prestige_points == 1_000_000
    assert settings.offline.max_offline_hours == 24.0
    assert settings.offline.offline_efficiency == 0.5
    assert settings.persistence.auto_save_interval == 5.0
    assert settings.persistence.save_key == "pointforge_save"
    assert settings.persistence.save_dir is None


def test_user_file_overrides_defaults(tmp_path: Path):
    user = tmp_path / "user.yaml"
    user.write_text(
        yaml.safe_dump({"offline": {"offline_efficiency": 0.75}, "persistence": {"auto_save_interval": 30}}),
        encoding="utf-8",
    )
    settings = Settings.load(user_path=user, environ={})
    assert settings.offline.offline_efficiency == 0.75
    assert settings.offline.max_offline_hours == 24.0
    assert settings.persistence.auto_save_interval == 30


def test_env_overrides_win(tmp_path: Path):
    user = tmp_path / "user.yaml"
    user.write_text(yaml.safe_dump({"offline": {"max_offline_hours": 8}}), encoding="utf-8")
    environ = {
        "POINTFORGE_MAX_OFFLINE_HOURS": "2",
        "POINTFORGE_AUTOSAVE_INTERVAL": "10",
        "POINTFORGE_SAVE_DIR": str(tmp_path),
        "POINTFORGE_OFFLINE_EFFICIENCY": " ",
    }
    settings = Settings.load(user_path=user, environ=environ)
    assert settings.offline.max_offline_hours == 2.0
    assert settings.offline.offline_efficiency == 0.5
    assert settings.persistence.auto_save_interval == 10.0
    assert settings.persistence.save_dir == str(tmp_path)


def test_invalid_env_value_is_ignored(caplog):
    settings = Settings.load(environ={"POINTFORGE_OFFLINE_EFFICIENCY": "lots"})
    assert settings.offline.offline_efficiency == 0.5
    assert any("Ignoring invalid value" in r.message for r in caplog.records)


def test_unknown_keys_are_ignored(tmp_path: Path, caplog):
    user = tmp_path / "user.yaml"
    user.write_text(yaml.safe_dump({"gameplay": {"turbo": True}}), encoding="utf-8")
    settings = Settings.load(user_path=user, environ={})
    assert not hasattr(settings.gameplay, "turbo")
    assert any("Unknown gameplay settings ignored" in r.message for r in caplog.records)


def test_missing_user_file_warns(tmp_path: Path, caplog):
    settings = Settings.load(user_path=tmp_path / "nope.yaml", environ={})
    assert settings.gameplay.max_catch_up_ticks == 5
    assert any("User settings file not found" in r.message for r in caplog.records)


def test_save_and_reload(tmp_path: Path):
    settings = Settings()
    settings.offline.offline_efficiency = 0.9
    path = tmp_path / "nested" / "settings.yaml"
    settings.save(path)

    reloaded = Settings.load(user_path=path, environ={})
    assert reloaded == settings
