import json

import pytest

from bracketengine.controllers.tournament_manager import TournamentManager
from bracketengine.exceptions import SnapshotLoadException
from bracketengine.models.enums import TournamentType
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.utils.persistence import load_snapshot, save_snapshot, snapshot_path


def test_snapshot_path_adds_extension(tmp_path):
    assert snapshot_path(tmp_path / "cup").suffix == ".json"
    assert snapshot_path(tmp_path / "cup.save").suffix == ".save"


def test_save_and_load_manager(tmp_path):
    tournament = Tournament.create(
        "Ünïcode Cup", ["Ana", "Ben", "Çem"], TournamentType.ROUND_ROBIN
    )
    manager = TournamentManager(tournament)
    manager.register_device("board-1")

    path = save_snapshot(tmp_path / "nested" / "cup", manager.to_dict())
    restored = TournamentManager.from_dict(load_snapshot(path))

    assert path.name == "cup.json"
    assert restored.tournament.name == "Ünïcode Cup"
    assert restored.to_dict() == manager.to_dict()


def test_missing_file(tmp_path):
    with pytest.raises(SnapshotLoadException):
        load_snapshot(tmp_path / "missing.json")


def test_corrupt_file(tmp_path):
    path = tmp_path / "cup.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotLoadException):
        load_snapshot(path)


def test_snapshot_must_be_an_object(tmp_path):
    path = tmp_path / "cup.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(SnapshotLoadException):
        load_snapshot(path)
