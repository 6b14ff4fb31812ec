# towerdef

A small tower-defence map game built around a square tile map, with a level
editor, saving and loading of maps, and a check that the enemy path of a map
leads from its start to its finish.

The map is a 12 × 12 grid. Each tile is ground (`Free`), `Blocked`, a tower
slot (`Tower`, with type `T1`, `T2` or `T3`), or a piece of the enemy path
(`EnemyMap`). The path pieces are Start, Finish, Vertical, Horizontal,
TopLeft, TopRight, BottomLeft and BottomRight. A new game lays a default
enemy path onto the map: its first tile is the Start, its last the Finish and
the ones between are Vertical pieces.

## Installing

```
pip install .
```

With the test tools:

```
pip install ".[test]"
```

## Running

```
towerdef
```

This opens a window (drawn with pygame) showing the start menu with four
buttons: **Start Game**, **Level Editor**, **Settings** and **Exit**. Buttons
change colour when hovered and pressed.

- **Start Game** hides the menu and shows the map.
- **Level Editor** runs the camera transition to the editor view; once it has
  finished, the editor is entered and every tile is reset to ground.
- **Settings** hides the menu and moves to the settings state.
- **Exit** closes the game.

Press `P` or `Escape` outside the start menu to bring the menu back as a
pause menu.

The map file used by the editor is set with `--map` (default
`maps/map_save.txt`):

```
towerdef --map my_map.txt
```

### Editing

In the editor, choose a tile type with the keyboard, then click tiles on the
map to paint them:

| Key | Tile        | Key | Tile         |
|-----|-------------|-----|--------------|
| `1` | Start       | `6` | Top Right    |
| `2` | Finish      | `7` | Bottom Left  |
| `3` | Vertical    | `8` | Bottom Right |
| `4` | Horizontal  | `9` | Blocked      |
| `5` | Top Left    | `0` | Ground       |

Other keys:

- `s` saves the map to the `--map` file. If the file cannot be written, this
  is logged and the map is not saved (the directory is not created).
- `l` loads the `--map` file, replaces the map with it and checks it. A file
  that cannot be read or parsed is logged and ignored.
- `c` clears the map back to ground.

### Map check

When a map is loaded, the check starts at the Start tile and walks to a
neighbouring path tile, horizontally or vertically, one step at a time,
always taking the first neighbour it finds and never going back. The map is
valid when the walk reaches a Finish tile. A valid map moves the map state to
`RELOADED`, a broken one to `VERIFY_FAILED`; a map without a Start tile is
left in `NEEDS_VERIFY`.

### Map files

Maps are stored as JSON: a list of `[tile, locations]` pairs, one per tile
type, where `tile` is `"Free"`, `"Blocked"`, `{"EnemyMap": "<piece>"}` or
`{"Tower": "<T1|T2|T3>"}`, and `locations` is a list of `[x, y]` pairs.

```json
[["Free", [[0, 0], [0, 1]]], [{"EnemyMap": "Start"}, [[1, 1]]]]
```

## Using it as a library

The game logic runs without a window:

```python
from towerdef.tilemap import GameTilemap, EnemyPath, MAP_SIZE, setup_tilemap
from towerdef.editor import save_map, load_saved_map, verify_map

gtm = GameTilemap(MAP_SIZE)
setup_tilemap(gtm, EnemyPath())
save_map(gtm, "my_map.txt")          # True on success

saved = load_saved_map("my_map.txt")
print(verify_map(saved.to_tilemap()))  # MapState.RELOADED
```

Modules:

- `towerdef.tilemap`: `TileType`, `EnemyTile`, `TowerType`, `MapState`,
  `GameTilemap`, `EnemyPath`, `Color`, `setup_tilemap`,
  `update_gametilemap`, `tile_color`, `hover_color`.
- `towerdef.editor`: `SavedTileMap`, `load_saved_map`, `save_map`,
  `check_valid_neighbor`, `verify_map`, `MiniTileState` and `Editor`
  (`select_tile`, `apply_to`, `load`, `save`, `clear`, `reset`).
- `towerdef.states`: `AppState`, `StateMachine` (state changes queued with
  `set` and applied once per frame with `apply`) and `StateLogger`, which
  logs each state machine that has just changed.
- `towerdef.camera`: `CamState`, `CamMoveDir`, `CameraAnimation` (eased
  translation and rotation, reversible), `CameraController`, and the helpers
  `quadratic_in_out`, `looking_at` and `slerp`.
- `towerdef.ui`: `MenuType`, `Interaction`, `ButtonType`, `Button`, `button`
  and `MainMenu` (`handle_interaction`, `pause`).
- `towerdef.app`: `Game`, which advances everything one frame at a time with
  `update(dt)`, and `main`, the `towerdef` command.

## What it does not do

- There are no enemies, waves or towers to play with: the game shows the map
  and lets you edit, save, load and check it.
- The window draws a flat top-down grid. The camera transition between the
  game and editor views is computed (position and rotation) and drives the
  state changes, but nothing is rendered in 3D.
- The editor has no on-screen tile panel and no file dialog; tiles are chosen
  with keys and maps are saved to and loaded from the `--map` file.
- The Settings button leads to an empty settings state.

## Tests

```
pytest
```