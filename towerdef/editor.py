"""Map editor: tile selection, saving, loading and path verification."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from towerdef.states import StateMachine
from towerdef.tilemap import (
    EnemyPath,
    EnemyTile,
    GameTilemap,
    Location,
    MapState,
    TileType,
    update_gametilemap,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_SAVE_PATH = Path("maps") / "map_save.txt"


def _parse_location(value: object) -> Location:
    if (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        return (value[0], value[1])
    raise ValueError(f"malformed location: {value!r}")


@dataclass
class SavedTileMap:
    """A tilemap grouped by tile type, as stored in map files."""

    tiles: dict[TileType, list[Location]] = field(default_factory=dict)

    @classmethod
    def from_tilemap(cls, gtm: GameTilemap) -> "SavedTileMap":
        """Group the locations of ``gtm`` by their tile type."""
        grouped: dict[TileType, list[Location]] = {}
        for loc, tile in gtm.tiles.items():
            grouped.setdefault(tile, []).append(loc)
        return cls(grouped)

    def to_tilemap(self) -> GameTilemap:
        """Spread the grouped locations back into a tilemap."""
        gtm = GameTilemap()
        for tile, locs in self.tiles.items():
            for loc in locs:
                gtm[loc] = tile
        return gtm

    def to_json(self) -> str:
        """Serialise as a list of ``[tile, [[x, y], ...]]`` pairs."""
        return json.dumps(
            [
                [tile.to_json(), [list(loc) for loc in locs]]
                for tile, locs in self.tiles.items()
            ]
        )

    @classmethod
    def from_json(cls, text: str) -> "SavedTileMap":
        """Parse text written by ``to_json``; raise ValueError if malformed."""
        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError("saved map must be a list of entries")
        tiles: dict[TileType, list[Location]] = {}
        for entry in data:
            if not isinstance(entry, list) or len(entry) != 2:
                raise ValueError(f"malformed entry: {entry!r}")
            raw_tile, raw_locs = entry
            if not isinstance(raw_locs, list):
                raise ValueError(f"malformed location list: {raw_locs!r}")
            tiles[TileType.from_json(raw_tile)] = [
                _parse_location(loc) for loc in raw_locs
            ]
        return cls(tiles)


def load_saved_map(path: PathLike) -> SavedTileMap:
    """Read and parse a saved map file."""
    return SavedTileMap.from_json(Path(path).read_text(encoding="utf-8"))


def save_map(gtm: GameTilemap, path: PathLike) -> bool:
    """Write ``gtm`` to ``path``; log and return False if the file can't be written."""
    text = SavedTileMap.from_tilemap(gtm).to_json()
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError:
        logger.info("Unable to save file %r", str(path))
        return False
    return True


def _adjacent(a: Location, b: Location) -> bool:
    dx, dy = abs(a[0] - b[0]), abs(a[1] - b[1])
    return (dx <= 1 and dy == 0) or (dx == 0 and dy <= 1)


def check_valid_neighbor(
    loc: Location, tiles: list[tuple[Location, EnemyTile]]
) -> bool:
    """Follow the path from ``loc`` through ``tiles`` until the finish is reached.

    At each step the first adjacent tile in ``tiles`` is taken, without
    backtracking. Visited tiles are removed from ``tiles``.
    """
    current = loc
    while True:
        for tile_loc, piece in list(tiles):
            if _adjacent(current, tile_loc):
                if piece is EnemyTile.FINISH:
                    return True
                tiles.remove((tile_loc, piece))
                current = tile_loc
                break
        else:
            logger.info("No valid neighbor found")
            return False


def verify_map(gtm: GameTilemap) -> MapState | None:
    """Check that the start connects to the finish.

    Returns RELOADED for a valid map, VERIFY_FAILED for a broken one and
    None when the map has no start tile.
    """
    enemy_tiles = gtm.enemy_tiles()
    start = next(
        (entry for entry in enemy_tiles if entry[1] is EnemyTile.START), None
    )
    if start is None:
        return None
    enemy_tiles.remove(start)
    if check_valid_neighbor(start[0], enemy_tiles):
        logger.info("Map Valid")
        return MapState.RELOADED
    logger.info("Map Not Valid")
    return MapState.VERIFY_FAILED


class MiniTileState(Enum):
    SPAWNED = "Spawned"
    NOT_SPAWNED = "NotSpawned"
    DESPAWN = "Despawn"

    @classmethod
    def default(cls) -> "MiniTileState":
        return cls.NOT_SPAWNED


class Editor:
    """Edits the game tilemap: pick a tile type, then paint it onto tiles."""

    def __init__(
        self,
        gtm: GameTilemap,
        enemy_path: EnemyPath | None = None,
        map_state: StateMachine[MapState] | None = None,
    ) -> None:
        self.gtm = gtm
        self.enemy_path = enemy_path if enemy_path is not None else EnemyPath()
        self.map_state = (
            map_state if map_state is not None else StateMachine(MapState.default())
        )
        self.selected: TileType | None = None
        self.minitile_state = MiniTileState.default()
        self.colors_dirty = False

    def select_tile(self, tile_type: TileType) -> None:
        """Pick the tile type to paint, replacing any earlier pick."""
        logger.info("Spawning MiniTile")
        self.selected = tile_type
        self.minitile_state = MiniTileState.SPAWNED

    def apply_to(self, loc: Location) -> bool:
        """Paint the selected type onto ``loc``; return whether anything changed."""
        if self.minitile_state is not MiniTileState.SPAWNED or self.selected is None:
            return False
        if loc not in self.gtm:
            raise KeyError(loc)
        self.gtm[loc] = self.selected
        return True

    def load(self, path: PathLike) -> MapState:
        """Load a saved map, replace the current one and verify it.

        Returns the map state the map moved to.
        """
        saved = load_saved_map(path)
        state = update_gametilemap(self.gtm, self.enemy_path, saved.to_tilemap())
        self.colors_dirty = True
        verdict = verify_map(self.gtm)
        if verdict is not None:
            state = verdict
        self.map_state.set(state)
        return state

    def save(self, path: PathLike = DEFAULT_SAVE_PATH) -> bool:
        """Save the current map to ``path``."""
        return save_map(self.gtm, path)

    def clear(self) -> None:
        """Turn every tile into free ground and ask for the colours to be redrawn."""
        self.gtm.reset_map()
        self.colors_dirty = True

    def reset(self) -> None:
        """Reset the map when the editor is entered."""
        self.gtm.reset_map()