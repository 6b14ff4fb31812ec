"""The game loop: wires the tilemap, editor, camera and menu together."""

from __future__ import annotations

import argparse
import logging

from towerdef.camera import CameraController
from towerdef.editor import Editor
from towerdef.states import AppState, StateLogger, StateMachine
from towerdef.tilemap import (
    MAP_SIZE,
    EnemyPath,
    EnemyTile,
    GameTilemap,
    MapState,
    TileType,
    setup_tilemap,
    tile_color,
)
from towerdef.ui import Interaction

_PALETTE = {
    "1": TileType.enemy(EnemyTile.START),
    "2": TileType.enemy(EnemyTile.FINISH),
    "3": TileType.enemy(EnemyTile.VERTICAL),
    "4": TileType.enemy(EnemyTile.HORIZONTAL),
    "5": TileType.enemy(EnemyTile.TOP_LEFT),
    "6": TileType.enemy(EnemyTile.TOP_RIGHT),
    "7": TileType.enemy(EnemyTile.BOTTOM_LEFT),
    "8": TileType.enemy(EnemyTile.BOTTOM_RIGHT),
    "9": TileType.blocked(),
    "0": TileType.free(),
}


class Game:
    """All game state, advanced one frame at a time."""

    def __init__(self) -> None:
        self.app_state: StateMachine[AppState] = StateMachine(AppState.default())
        self.map_state: StateMachine[MapState] = StateMachine(MapState.default())
        self.gtm = GameTilemap(MAP_SIZE)
        self.enemy_path = EnemyPath()
        setup_tilemap(self.gtm, self.enemy_path)
        self.camera = CameraController()
        from towerdef.ui import MainMenu

        self.menu = MainMenu(self.app_state)
        self.editor = Editor(self.gtm, self.enemy_path, self.map_state)
        self.state_logger = StateLogger(
            {
                "AppState": self.app_state,
                "CamState": self.camera.state,
                "MapState": self.map_state,
            }
        )

    def start_game(self) -> bool:
        """Spawn the map unless it is already spawned; return whether it was."""
        if self.map_state.current is MapState.SPAWNED:
            return False
        self.map_state.set(MapState.SPAWNED)
        return True

    def update(self, dt: float) -> bool:
        """Advance one frame; return False once the game should exit."""
        self.app_state.apply()
        self.map_state.apply()
        if self.app_state.is_changed():
            current = self.app_state.current
            if current is AppState.TO_EDITOR:
                self.camera.enter_editor(self.app_state)
            elif current is AppState.TO_GAME:
                self.camera.enter_game()
            elif current is AppState.IN_EDITOR:
                self.editor.reset()
        self.camera.update(dt, self.app_state)
        if self.menu.start_requested:
            self.menu.start_requested = False
            self.start_game()
        if self.editor.colors_dirty:
            self.editor.colors_dirty = False
            self.map_state.set(MapState.SPAWNED)
        self.state_logger.log_changes()
        return not self.menu.exit_requested


def main(argv: list[str] | None = None) -> int:
    """Run the game in a window."""
    parser = argparse.ArgumentParser(description="Tower defence map game")
    parser.add_argument("--map", default="maps/map_save.txt", help="map file to save/load")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    import pygame

    pygame.init()
    tile_px = 50
    width, height = MAP_SIZE * tile_px + 200, MAP_SIZE * tile_px
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption("Tower Defence")
    font = pygame.font.Font(None, 28)
    clock = pygame.time.Clock()
    game = Game()

    def to_rgb(color):
        return tuple(int(max(0.0, min(1.0, c)) * 255) for c in (color.red, color.green, color.blue))

    def button_rects():
        return [
            (b, pygame.Rect(width // 2 - 100, 150 + i * 60, 200, 44))
            for i, b in enumerate(game.menu.buttons)
        ]

    running = True
    while running:
        dt = clock.tick(60) / 1000.0
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                key = event.unicode
                if event.key in (pygame.K_p, pygame.K_ESCAPE):
                    game.menu.pause()
                elif game.app_state.current is AppState.IN_EDITOR:
                    if key in _PALETTE:
                        game.editor.select_tile(_PALETTE[key])
                    elif key == "s":
                        game.editor.save(args.map)
                    elif key == "l":
                        try:
                            game.editor.load(args.map)
                        except (OSError, ValueError) as exc:
                            logging.getLogger(__name__).info("Unable to load map: %s", exc)
                    elif key == "c":
                        game.editor.clear()
            elif event.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
                pos = event.pos
                if game.menu.displayed:
                    for b, rect in button_rects():
                        if not b.visible:
                            continue
                        if not rect.collidepoint(pos):
                            state = Interaction.NONE
                        elif event.type == pygame.MOUSEBUTTONDOWN:
                            state = Interaction.PRESSED
                        else:
                            state = Interaction.HOVERED
                        game.menu.handle_interaction(b, state)
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    loc = (pos[0] // tile_px, pos[1] // tile_px)
                    if loc in game.gtm:
                        game.editor.apply_to(loc)
        if not game.update(dt):
            running = False
        for b in game.menu.buttons:
            b.end_frame()

        screen.fill((51, 51, 51))
        if game.map_state.current is not MapState.NOT_SPAWNED or game.app_state.current is AppState.IN_EDITOR:
            for (x, y), tile in game.gtm.tiles.items():
                rect = pygame.Rect(x * tile_px, y * tile_px, tile_px - 1, tile_px - 1)
                pygame.draw.rect(screen, to_rgb(tile_color(tile)), rect)
        if game.menu.displayed:
            for b, rect in button_rects():
                if b.visible:
                    pygame.draw.rect(screen, to_rgb(b.color), rect, border_radius=20)
                    label = font.render(b.text, True, (255, 255, 255))
                    screen.blit(label, label.get_rect(center=rect.center))
        pygame.display.flip()
    pygame.quit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())