"""Tile types, the game tilemap and the enemy path."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

Location = tuple[int, int]

TILE_SCALE = 10.0
MAP_SIZE = 12


def _to_linear(value: float) -> float:
    if value <= 0.0:
        return value
    if value <= 0.04045:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def _from_linear(value: float) -> float:
    if value <= 0.0:
        return value
    if value <= 0.0031308:
        return value * 12.92
    return 1.055 * value ** (1.0 / 2.4) - 0.055


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


@dataclass(frozen=True)
class Color:
    """An sRGB colour with alpha."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def _oklab(self) -> tuple[float, float, float]:
        r, g, b = (_to_linear(c) for c in (self.red, self.green, self.blue))
        l_ = _cbrt(0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b)
        m_ = _cbrt(0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b)
        s_ = _cbrt(0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b)
        return (
            0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
            1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
            0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
        )

    @classmethod
    def _from_oklab(cls, lightness: float, a: float, b: float, alpha: float) -> "Color":
        l_ = lightness + 0.3963377774 * a + 0.2158037573 * b
        m_ = lightness - 0.1055613458 * a - 0.0638541728 * b
        s_ = lightness - 0.0894841775 * a - 1.2914855480 * b
        l, m, s = l_**3, m_**3, s_**3
        r = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s
        g = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s
        bl = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s
        return cls(_from_linear(r), _from_linear(g), _from_linear(bl), alpha)

    @property
    def lightness(self) -> float:
        """Perceptual lightness in the Oklab space."""
        return self._oklab()[0]

    def darker(self, amount: float) -> "Color":
        """Return the colour with its perceptual lightness lowered by ``amount``."""
        lightness, a, b = self._oklab()
        return Color._from_oklab(max(lightness - amount, 0.0), a, b, self.alpha)


BLOCKED_TILE_COLOR = Color(0.88, 0.88, 0.88)
GROUND_TILE_COLOR = Color(0.15, 0.75, 0.25)
ENEMY_TILE_COLOR = Color(0.75, 0.35, 0.25)
HOVER_COLOR = Color(0.1, 0.65, 0.2)


class EnemyTile(Enum):
    """Pieces of the path that enemies walk along."""

    START = "Start"
    TOP_LEFT = "TopLeft"
    TOP_RIGHT = "TopRight"
    BOTTOM_LEFT = "BottomLeft"
    BOTTOM_RIGHT = "BottomRight"
    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"
    FINISH = "Finish"

    @classmethod
    def default(cls) -> "EnemyTile":
        return cls.VERTICAL


class TowerType(Enum):
    T1 = "T1"
    T2 = "T2"
    T3 = "T3"


class TileKind(Enum):
    ENEMY_MAP = "EnemyMap"
    BLOCKED = "Blocked"
    FREE = "Free"
    TOWER = "Tower"


JsonTile = Union[str, dict]


@dataclass(frozen=True)
class TileType:
    """What occupies a tile; enemy and tower tiles carry a variant."""

    kind: TileKind = TileKind.FREE
    variant: EnemyTile | TowerType | None = None

    def __post_init__(self) -> None:
        expected = {
            TileKind.ENEMY_MAP: EnemyTile,
            TileKind.TOWER: TowerType,
        }.get(self.kind)
        if expected is None:
            if self.variant is not None:
                raise ValueError(f"{self.kind.value} tiles carry no variant")
        elif not isinstance(self.variant, expected):
            raise ValueError(f"{self.kind.value} tiles need a {expected.__name__}")

    @classmethod
    def enemy(cls, tile: EnemyTile) -> "TileType":
        return cls(TileKind.ENEMY_MAP, tile)

    @classmethod
    def blocked(cls) -> "TileType":
        return cls(TileKind.BLOCKED)

    @classmethod
    def free(cls) -> "TileType":
        return cls(TileKind.FREE)

    @classmethod
    def tower(cls, tower: TowerType) -> "TileType":
        return cls(TileKind.TOWER, tower)

    @property
    def is_enemy(self) -> bool:
        return self.kind is TileKind.ENEMY_MAP

    def to_json(self) -> JsonTile:
        """Externally tagged JSON value: a bare name or a one-key object."""
        if self.variant is None:
            return self.kind.value
        return {self.kind.value: self.variant.value}

    @classmethod
    def from_json(cls, value: JsonTile) -> "TileType":
        """Parse the value produced by ``to_json``; raise ValueError if malformed."""
        if isinstance(value, str):
            if value == TileKind.BLOCKED.value:
                return cls.blocked()
            if value == TileKind.FREE.value:
                return cls.free()
            raise ValueError(f"unknown tile type: {value!r}")
        if isinstance(value, dict) and len(value) == 1:
            (tag, inner), = value.items()
            try:
                if tag == TileKind.ENEMY_MAP.value:
                    return cls.enemy(EnemyTile(inner))
                if tag == TileKind.TOWER.value:
                    return cls.tower(TowerType(inner))
            except ValueError as exc:
                raise ValueError(f"unknown variant in {value!r}") from exc
        raise ValueError(f"unknown tile type: {value!r}")


class MapState(Enum):
    NOT_SPAWNED = "NotSpawned"
    SPAWNED = "Spawned"
    RELOADED = "Reloaded"
    NEEDS_VERIFY = "NeedsVerify"
    VERIFY_FAILED = "VerifyFailed"

    @classmethod
    def default(cls) -> "MapState":
        return cls.NOT_SPAWNED


class GameTilemap:
    """The global tilemap: tile type per grid location."""

    def __init__(self, size: int = 0) -> None:
        self.tiles: dict[Location, TileType] = {
            (i, j): TileType.free() for i in range(size) for j in range(size)
        }

    def reset_map(self) -> None:
        """Turn every tile back into free ground."""
        for loc in self.tiles:
            self.tiles[loc] = TileType.free()

    def enemy_tiles(self) -> list[tuple[Location, EnemyTile]]:
        """Locations and pieces of every enemy-path tile."""
        return [
            (loc, tile.variant)
            for loc, tile in self.tiles.items()
            if tile.is_enemy
        ]

    def copy(self) -> "GameTilemap":
        clone = GameTilemap()
        clone.tiles = dict(self.tiles)
        return clone

    def __getitem__(self, loc: Location) -> TileType:
        return self.tiles[loc]

    def __setitem__(self, loc: Location, tile: TileType) -> None:
        self.tiles[loc] = tile

    def __contains__(self, loc: object) -> bool:
        return loc in self.tiles

    def __iter__(self) -> Iterator[Location]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameTilemap):
            return NotImplemented
        return self.tiles == other.tiles

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GameTilemap({len(self.tiles)} tiles)"


@dataclass
class EnemyPath:
    """Ordered locations that enemies walk, or None when unset."""

    path: list[Location] | None = field(default=None)


DEFAULT_PATH: tuple[Location, ...] = (
    (1, 1), (1, 2), (1, 3), (1, 4), (1, 5),
    (2, 5), (2, 6), (3, 6), (4, 6), (5, 6),
    (5, 7), (5, 8), (6, 8), (7, 8), (8, 8),
)


def setup_tilemap(gtm: GameTilemap, enemy_path: EnemyPath) -> None:
    """Lay the enemy path onto the map, using the default path if none is set.

    The first tile becomes the start and the last one the finish.
    """
    if enemy_path.path is None:
        enemy_path.path = list(DEFAULT_PATH)
    last = len(enemy_path.path) - 1
    for idx, loc in enumerate(enemy_path.path):
        if idx == 0:
            piece = EnemyTile.START
        elif idx == last:
            piece = EnemyTile.FINISH
        else:
            piece = EnemyTile.VERTICAL
        gtm[loc] = TileType.enemy(piece)


def update_gametilemap(
    gtm: GameTilemap, enemy_path: EnemyPath, loaded_map: GameTilemap
) -> MapState:
    """Replace the map with ``loaded_map`` and rebuild the enemy path.

    Returns the map state to move to, which asks for verification.
    """
    gtm.tiles = dict(loaded_map.tiles)
    enemy_path.path = [loc for loc, _ in gtm.enemy_tiles()]
    return MapState.NEEDS_VERIFY


def tile_color(tile_type: TileType) -> Color:
    """The resting colour of a tile of the given type."""
    if tile_type.kind is TileKind.ENEMY_MAP:
        return ENEMY_TILE_COLOR
    if tile_type.kind is TileKind.BLOCKED:
        return BLOCKED_TILE_COLOR
    return GROUND_TILE_COLOR


def hover_color(tile_type: TileType, scale: float) -> Color:
    """The colour of a tile darkened by ``scale``; blocked tiles keep theirs."""
    if tile_type.kind is TileKind.ENEMY_MAP:
        return ENEMY_TILE_COLOR.darker(scale)
    if tile_type.kind is TileKind.BLOCKED:
        return BLOCKED_TILE_COLOR
    return GROUND_TILE_COLOR.darker(scale)