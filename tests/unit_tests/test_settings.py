import json

import pytest

from klondike import common as C


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    monkeypatch.delenv("KLONDIKE_TRACK_FACE_DOWN", raising=False)
    monkeypatch.delenv("KLONDIKE_SEED", raising=False)
    C.reset_settings()
    yield
    C.reset_settings()


def test_defaults():
    settings = C.get_current_settings()
    assert settings == {"track_face_down": True, "card_size": "Medium"}


def test_save_then_load_round_trip(tmp_path):
    C.save_settings({"track_face_down": False, "card_size": "large"})
    path = tmp_path / "KlondikeEngine" / "settings.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"track_face_down": False, "card_size": "Large"}
    C.reset_settings()
    assert C.load_settings()["track_face_down"] is False
    assert C.get_current_settings()["card_size"] == "Large"


def test_missing_file_keeps_defaults():
    assert C.load_settings() == {"track_face_down": True, "card_size": "Medium"}


def test_malformed_file_is_ignored_with_warning(tmp_path, caplog):
    path = tmp_path / "KlondikeEngine" / "settings.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level("WARNING", logger="klondike.common"):
        settings = C.load_settings()
    assert settings["track_face_down"] is True
    assert "Could not read settings" in caplog.text


def test_bad_values_are_refused():
    with pytest.raises(ValueError):
        C.save_settings({"card_size": "Huge"})
    with pytest.raises(ValueError):
        C.save_settings({"track_face_down": "maybe"})


def test_environment_override(monkeypatch):
    monkeypatch.setenv("KLONDIKE_TRACK_FACE_DOWN", "off")
    assert C.load_settings()["track_face_down"] is False


@pytest.mark.parametrize("raw, expected", [("17", 17), ("", None), ("abc", None)])
def test_env_seed(monkeypatch, raw, expected):
    monkeypatch.setenv("KLONDIKE_SEED", raw)
    assert C.env_seed() == expected
