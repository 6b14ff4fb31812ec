import json

import pytest

from towerdef.editor import (
    Editor,
    MiniTileState,
    SavedTileMap,
    check_valid_neighbor,
    load_saved_map,
    save_map,
    verify_map,
)
from towerdef.states import StateMachine
from towerdef.tilemap import (
    EnemyPath,
    EnemyTile,
    GameTilemap,
    MapState,
    TileType,
    setup_tilemap,
)


def _path_map(path, size=12):
    gtm = GameTilemap(size)
    for idx, loc in enumerate(path):
        if idx == 0:
            piece = EnemyTile.START
        elif idx == len(path) - 1:
            piece = EnemyTile.FINISH
        else:
            piece = EnemyTile.HORIZONTAL
        gtm[loc] = TileType.enemy(piece)
    return gtm


SIMPLE = [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3)]
SPIRAL = [
    (0, 0), (1, 0), (2, 0), (3, 0), (3, 1), (3, 2), (3, 3),
    (2, 3), (1, 3), (0, 3), (0, 2), (1, 2), (2, 2), (2, 1), (1, 1),
]


def _start_and_rest(saved):
    tiles = [
        (loc, tile.variant)
        for tile, locs in saved.tiles.items()
        if tile.is_enemy
        for loc in locs
    ]
    start = next((t for t in tiles if t[1] is EnemyTile.START), None)
    return start, tiles


@pytest.mark.parametrize("path", [SIMPLE, SPIRAL])
def test_map_validation_positive(tmp_path, path):
    file = tmp_path / "map.txt"
    assert save_map(_path_map(path), file)
    saved = load_saved_map(file)
    start, tiles = _start_and_rest(saved)
    assert start is not None
    tiles.remove(start)
    assert check_valid_neighbor(start[0], tiles) is True


def test_map_validation_ground_has_no_start(tmp_path):
    file = tmp_path / "ground.txt"
    save_map(GameTilemap(12), file)
    start, _ = _start_and_rest(load_saved_map(file))
    assert start is None
    assert verify_map(load_saved_map(file).to_tilemap()) is None


def test_check_valid_neighbor_takes_first_neighbor_without_backtracking():
    tiles = [((1, 0), EnemyTile.VERTICAL), ((0, 1), EnemyTile.FINISH)]
    assert check_valid_neighbor((0, 0), tiles) is False
    assert tiles == [((0, 1), EnemyTile.FINISH)]


def test_check_valid_neighbor_ignores_diagonals():
    assert check_valid_neighbor((0, 0), [((1, 1), EnemyTile.FINISH)]) is False


def test_verify_default_path_is_valid():
    gtm = GameTilemap(12)
    setup_tilemap(gtm, EnemyPath())
    assert verify_map(gtm) is MapState.RELOADED


def test_verify_broken_path_fails():
    gtm = _path_map([(0, 0), (0, 1), (5, 5)])
    assert verify_map(gtm) is MapState.VERIFY_FAILED


def test_saved_tilemap_json_format():
    saved = SavedTileMap({TileType.blocked(): [(1, 2)]})
    assert json.loads(saved.to_json()) == [["Blocked", [[1, 2]]]]


def test_saved_tilemap_from_json():
    saved = SavedTileMap.from_json('[[{"EnemyMap": "Start"}, [[0, 0], [3, 4]]]]')
    assert saved.tiles == {TileType.enemy(EnemyTile.START): [(0, 0), (3, 4)]}


def test_saved_tilemap_round_trip():
    gtm = _path_map(SIMPLE)
    gtm[(5, 5)] = TileType.blocked()
    saved = SavedTileMap.from_tilemap(gtm)
    assert SavedTileMap.from_json(saved.to_json()).to_tilemap() == gtm


@pytest.mark.parametrize(
    "text",
    ['{"Blocked": []}', '[["Blocked"]]', '[["Rock", [[0, 0]]]]', '[["Free", [[0]]]]', "not json"],
)
def test_saved_tilemap_rejects_malformed(text):
    with pytest.raises(ValueError):
        SavedTileMap.from_json(text)


def test_save_map_reports_failure(tmp_path):
    assert save_map(GameTilemap(2), tmp_path / "missing" / "map.txt") is False


def test_editor_paints_only_after_selection():
    gtm = GameTilemap(4)
    editor = Editor(gtm)
    assert editor.apply_to((1, 1)) is False
    assert gtm[(1, 1)] == TileType.free()
    editor.select_tile(TileType.blocked())
    assert editor.minitile_state is MiniTileState.SPAWNED
    assert editor.apply_to((1, 1)) is True
    assert gtm[(1, 1)] == TileType.blocked()


def test_editor_save_and_load_round_trip(tmp_path):
    file = tmp_path / "map.txt"
    source = Editor(_path_map(SIMPLE))
    assert source.save(file) is True
    map_state = StateMachine(MapState.SPAWNED)
    enemy_path = EnemyPath()
    target = Editor(GameTilemap(12), enemy_path, map_state)
    assert target.load(file) is MapState.RELOADED
    map_state.apply()
    assert map_state.current is MapState.RELOADED
    assert target.gtm == source.gtm
    assert sorted(enemy_path.path) == sorted(SIMPLE)
    assert target.colors_dirty is True


def test_editor_load_broken_map(tmp_path):
    file = tmp_path / "map.txt"
    save_map(_path_map([(0, 0), (4, 4)]), file)
    editor = Editor(GameTilemap(12))
    assert editor.load(file) is MapState.VERIFY_FAILED


def test_editor_load_map_without_start_needs_verify(tmp_path):
    file = tmp_path / "map.txt"
    save_map(GameTilemap(3), file)
    editor = Editor(GameTilemap(12))
    assert editor.load(file) is MapState.NEEDS_VERIFY
    assert len(editor.gtm) == 9


def test_editor_clear_and_reset():
    gtm = _path_map(SIMPLE)
    editor = Editor(gtm)
    editor.clear()
    assert all(gtm[loc] == TileType.free() for loc in gtm)
    assert editor.colors_dirty is True

    other = Editor(_path_map(SIMPLE))
    other.reset()
    assert other.gtm.enemy_tiles() == []
    assert other.colors_dirty is False