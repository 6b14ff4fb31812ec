"""Menu buttons and the start / pause menu."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from towerdef.states import AppState, StateMachine
from towerdef.tilemap import Color, TileType

logger = logging.getLogger(__name__)

NORMAL_BUTTON = Color(0.15, 0.15, 0.15)
HOVERED_BUTTON = Color(0.25, 0.25, 0.25)
PRESSED_BUTTON = Color(0.35, 0.75, 0.35)


class MenuType(Enum):
    START_GAME = "StartGame"
    SETTINGS = "Settings"
    LEVEL_EDIT = "LevelEdit"
    SAVE = "Save"
    LOAD = "Load"
    EXIT = "Exit"
    CLEAR = "Clear"


class Interaction(Enum):
    PRESSED = "Pressed"
    HOVERED = "Hovered"
    NONE = "None"


@dataclass(frozen=True)
class ButtonType:
    """A button either drives a menu action or picks an editor tile."""

    menu_type: MenuType | None = None
    tile_type: TileType | None = None

    def __post_init__(self) -> None:
        if (self.menu_type is None) == (self.tile_type is None):
            raise ValueError("a button is either a menu or an editor button")

    @classmethod
    def menu(cls, menu_type: MenuType) -> "ButtonType":
        return cls(menu_type=menu_type)

    @classmethod
    def editor(cls, tile_type: TileType) -> "ButtonType":
        return cls(tile_type=tile_type)


@dataclass
class Button:
    text: str
    typ: ButtonType
    color: Color = NORMAL_BUTTON
    interaction: Interaction = Interaction.NONE
    previous: Interaction = Interaction.NONE
    visible: bool = True

    def update_interaction(self, interaction: Interaction) -> bool:
        """Record a new interaction; return whether it changed."""
        changed = interaction is not self.interaction
        self.interaction = interaction
        return changed

    def end_frame(self) -> None:
        """Remember this frame's interaction for the next one."""
        self.previous = self.interaction

    def toggle_visible(self) -> None:
        self.visible = not self.visible


def button(text: str, typ: ButtonType) -> Button:
    """A button in its resting colour."""
    return Button(str(text), typ)


@dataclass
class MainMenu:
    """The start menu, also shown as the pause menu."""

    app_state: StateMachine[AppState]
    buttons: list[Button] = field(default_factory=list)
    displayed: bool = True
    start_requested: bool = False
    exit_requested: bool = False

    def __init__(self, app_state: StateMachine[AppState]) -> None:
        self.app_state = app_state
        self.buttons = [
            button("Start Game", ButtonType.menu(MenuType.START_GAME)),
            button("Level Editor", ButtonType.menu(MenuType.LEVEL_EDIT)),
            button("Settings", ButtonType.menu(MenuType.SETTINGS)),
            button("Exit", ButtonType.menu(MenuType.EXIT)),
        ]
        self.displayed = True
        self.start_requested = False
        self.exit_requested = False

    def _hide(self, pressed: Button) -> None:
        pressed.toggle_visible()
        self.displayed = False

    def handle_interaction(self, button: Button, interaction: Interaction) -> None:
        """React to an interaction change on ``button``."""
        if not button.update_interaction(interaction):
            return
        if interaction is Interaction.HOVERED:
            button.color = HOVERED_BUTTON
            return
        if interaction is Interaction.NONE:
            button.color = NORMAL_BUTTON
            return
        button.color = PRESSED_BUTTON
        action = button.typ.menu_type
        if action is MenuType.START_GAME:
            self.app_state.set(AppState.TO_GAME)
            self.start_requested = True
            self._hide(button)
        elif action is MenuType.SETTINGS:
            self.app_state.set(AppState.SETTINGS)
            self._hide(button)
        elif action is MenuType.LEVEL_EDIT:
            self.app_state.set(AppState.TO_EDITOR)
            self._hide(button)
        elif action is MenuType.EXIT:
            logger.info("Goodbye!")
            self.app_state.set(AppState.EXIT)
            self.exit_requested = True

    def pause(self) -> bool:
        """Show the menu as a pause menu; ignored in the start or pause menu."""
        if self.app_state.current in (AppState.PAUSE_MENU, AppState.START_MENU):
            return False
        self.app_state.set(AppState.PAUSE_MENU)
        self.displayed = True
        for item in self.buttons:
            item.toggle_visible()
        return True