import json
from pathlib import Path

import pytest

from pointforge import cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    monkeypatch.delenv("POINTFORGE_SAVE_DIR", raising=False)


def run(tmp_path: Path, *args) -> int:
    return cli.main(["--save-dir", str(tmp_path), *args])


def test_parse_args_defaults_to_status():
    args = cli.parse_args([])
    assert args.command == "status"
    assert args.debug is False


def test_click_then_status(tmp_path: Path, capsys):
    assert run(tmp_path, "click", "--count", "3") == 0
    assert (tmp_path / "pointforge_save.json").exists()

    assert run(tmp_path, "status") == 0
    out = capsys.readouterr().out
    assert "Clicks:           3" in out
    assert "stronger_finger" in out


def test_buy_upgrade(tmp_path: Path, capsys):
    run(tmp_path, "click", "--count", "20")
    assert run(tmp_path, "buy", "stronger_finger") == 0
    assert "Bought stronger_finger (Lv.1)" in capsys.readouterr().out


def test_buy_unaffordable(tmp_path: Path, capsys):
    assert run(tmp_path, "buy", "quantum_reactor") == 1
    assert "Could not buy quantum_reactor" in capsys.readouterr().out


def test_buy_unknown_upgrade(tmp_path: Path):
    assert run(tmp_path, "buy", "nope") == 2


def test_prestige_not_available(tmp_path: Path, capsys):
    assert run(tmp_path, "prestige") == 1
    assert "not available" in capsys.readouterr().out


def test_simulate_and_reset(tmp_path: Path, capsys):
    assert run(tmp_path, "simulate", "--seconds", "3") == 0
    assert run(tmp_path, "reset") == 0
    assert "Progress reset" in capsys.readouterr().out
    data = json.loads((tmp_path / "pointforge_save.json").read_text(encoding="utf-8"))
    assert data["state"]["total_clicks"] == 0


def test_custom_catalog(tmp_path: Path, capsys):
    catalog = tmp_path / "catalog.json"
    catalog.write_text(json.dumps({"upgrades": [{"id": "only_one", "base_cost": 1}]}), encoding="utf-8")
    assert run(tmp_path, "--catalog", str(catalog), "status") == 0
    out = capsys.readouterr().out
    assert "only_one" in out
    assert "stronger_finger" not in out


def test_invalid_catalog(tmp_path: Path):
    catalog = tmp_path / "catalog.json"
    catalog.write_text("{oops", encoding="utf-8")
    assert run(tmp_path, "--catalog", str(catalog), "status") == 2


def test_failed_command_still_saves(tmp_path: Path, monkeypatch):
    def click_then_fail(session, args):
        session.click()
        raise RuntimeError("display broke")

    monkeypatch.setattr(cli, "run_command", click_then_fail)

    with pytest.raises(RuntimeError):
        run(tmp_path, "status")

    data = json.loads((tmp_path / "pointforge_save.json").read_text(encoding="utf-8"))
    assert data["state"]["total_clicks"] == 1
