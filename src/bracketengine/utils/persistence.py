"""JSON snapshots of tournaments and managers."""

# Bracket Engine
# Copyright (C) 2025  Bracket Engine developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import json
from pathlib import Path
from typing import Union

from bracketengine.constants import SAVE_FILE_EXTENSION
from bracketengine.exceptions import SnapshotLoadException
from bracketengine.type_hints import Snapshot
from bracketengine.utils import setup_logger

logger = setup_logger(__name__)

PathLike = Union[str, Path]


def snapshot_path(path: PathLike) -> Path:
    """Add the save file extension when the path has none."""
    path = Path(path)
    if not path.suffix:
        path = path.with_suffix(SAVE_FILE_EXTENSION)
    return path


def save_snapshot(path: PathLike, data: Snapshot) -> Path:
    """Write a snapshot as indented UTF-8 JSON and return the final path."""
    target = snapshot_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4, ensure_ascii=False)
    logger.info(f"Snapshot saved to {target}")
    return target


def load_snapshot(path: PathLike) -> Snapshot:
    """Read a snapshot written by :func:`save_snapshot`.

    Raises:
        SnapshotLoadException: If the file is missing, unreadable or not a
            JSON object
    """
    source = snapshot_path(path)
    try:
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SnapshotLoadException(f"Cannot read {source}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotLoadException(f"{source} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotLoadException(f"{source} does not contain a snapshot object")
    logger.debug(f"Snapshot loaded from {source}")
    return data
