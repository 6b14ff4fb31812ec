"""Camera states and the eased pan between the game and editor views."""

from __future__ import annotations

import math
from enum import Enum

from towerdef.states import AppState, StateMachine
from towerdef.tilemap import MAP_SIZE, TILE_SCALE

Vec3 = tuple[float, float, float]
Quat = tuple[float, float, float, float]

_EXTENT = TILE_SCALE * MAP_SIZE

CAMERA_START: Vec3 = (_EXTENT * 1.2, _EXTENT * 0.75, _EXTENT * 1.2)
CAMERA_EDITOR: Vec3 = (_EXTENT / 2.0, _EXTENT, _EXTENT / 2.0)
CAMERA_TARGET: Vec3 = (CAMERA_EDITOR[0], 0.0, CAMERA_EDITOR[2])
VIEWPORT_HEIGHT = _EXTENT

ANIMATION_START = 0.25
ANIMATION_END = 1.0


class CamMoveDir(Enum):
    MOVE_TO_EDITOR = "MoveToEditor"
    MOVE_TO_GAME = "MoveToGame"


class CamState(Enum):
    GAME_VIEW = "GameView"
    EDITOR_VIEW = "EditorView"
    MOVING_TO_EDITOR = "MovingToEditor"
    MOVING_TO_GAME = "MovingToGame"

    @classmethod
    def default(cls) -> "CamState":
        return cls.GAME_VIEW

    @classmethod
    def moving(cls, direction: CamMoveDir) -> "CamState":
        if direction is CamMoveDir.MOVE_TO_EDITOR:
            return cls.MOVING_TO_EDITOR
        return cls.MOVING_TO_GAME

    @property
    def direction(self) -> CamMoveDir | None:
        """The direction of travel, or None when the camera is at rest."""
        if self is CamState.MOVING_TO_EDITOR:
            return CamMoveDir.MOVE_TO_EDITOR
        if self is CamState.MOVING_TO_GAME:
            return CamMoveDir.MOVE_TO_GAME
        return None


def quadratic_in_out(t: float) -> float:
    """Quadratic ease-in-out over [0, 1]."""
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 2 / 2.0


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Vec3) -> Vec3:
    length = math.sqrt(sum(c * c for c in v))
    if length == 0.0:
        raise ValueError("cannot normalise a zero vector")
    return (v[0] / length, v[1] / length, v[2] / length)


def _quat_from_axes(right: Vec3, up: Vec3, back: Vec3) -> Quat:
    m00, m10, m20 = right
    m01, m11, m21 = up
    m02, m12, m22 = back
    trace = m00 + m11 + m22
    if trace > 0.0:
        s = math.sqrt(trace + 1.0) * 2.0
        return ((m21 - m12) / s, (m02 - m20) / s, (m10 - m01) / s, 0.25 * s)
    if m00 > m11 and m00 > m22:
        s = math.sqrt(1.0 + m00 - m11 - m22) * 2.0
        return (0.25 * s, (m01 + m10) / s, (m02 + m20) / s, (m21 - m12) / s)
    if m11 > m22:
        s = math.sqrt(1.0 + m11 - m00 - m22) * 2.0
        return ((m01 + m10) / s, 0.25 * s, (m12 + m21) / s, (m02 - m20) / s)
    s = math.sqrt(1.0 + m22 - m00 - m11) * 2.0
    return ((m02 + m20) / s, (m12 + m21) / s, 0.25 * s, (m10 - m01) / s)


def looking_at(eye: Vec3, target: Vec3, up: Vec3) -> Quat:
    """Rotation (x, y, z, w) that points the -Z axis from ``eye`` to ``target``."""
    back = _normalize(_sub(eye, target))
    right = _normalize(_cross(up, back))
    true_up = _cross(back, right)
    return _quat_from_axes(right, true_up, back)


def slerp(a: Quat, b: Quat, t: float) -> Quat:
    """Spherical interpolation along the shorter arc."""
    dot = sum(x * y for x, y in zip(a, b))
    if dot < 0.0:
        b = tuple(-c for c in b)  # type: ignore[assignment]
        dot = -dot
    if dot > 0.9995:
        mixed = tuple(x + (y - x) * t for x, y in zip(a, b))
        norm = math.sqrt(sum(c * c for c in mixed))
        return tuple(c / norm for c in mixed)  # type: ignore[return-value]
    theta = math.acos(dot)
    sin_theta = math.sin(theta)
    wa = math.sin((1.0 - t) * theta) / sin_theta
    wb = math.sin(t * theta) / sin_theta
    return tuple(wa * x + wb * y for x, y in zip(a, b))  # type: ignore[return-value]


class CameraAnimation:
    """Eased translation and rotation over the time domain [start, end]."""

    def __init__(
        self,
        start_translation: Vec3,
        end_translation: Vec3,
        start_rotation: Quat,
        end_rotation: Quat,
        domain_start: float = ANIMATION_START,
        domain_end: float = ANIMATION_END,
    ) -> None:
        if not domain_start < domain_end:
            raise ValueError("animation domain must be a non-empty interval")
        self.start_translation = start_translation
        self.end_translation = end_translation
        self.start_rotation = start_rotation
        self.end_rotation = end_rotation
        self.domain_start = domain_start
        self.domain_end = domain_end

    def sample(self, t: float) -> tuple[Vec3, Quat]:
        """Translation and rotation at time ``t``, clamped to the domain."""
        t = min(max(t, self.domain_start), self.domain_end)
        u = (t - self.domain_start) / (self.domain_end - self.domain_start)
        eased = quadratic_in_out(u)
        translation = tuple(
            a + (b - a) * eased
            for a, b in zip(self.start_translation, self.end_translation)
        )
        return translation, slerp(self.start_rotation, self.end_rotation, eased)  # type: ignore[return-value]

    def reverse(self) -> "CameraAnimation":
        """The same motion played backwards over the same domain."""
        return CameraAnimation(
            self.end_translation,
            self.start_translation,
            self.end_rotation,
            self.start_rotation,
            self.domain_start,
            self.domain_end,
        )


class CameraController:
    """Moves the camera between the game and the editor views."""

    def __init__(self) -> None:
        game_rotation = looking_at(CAMERA_START, CAMERA_TARGET, (0.0, 1.0, 0.0))
        editor_rotation = looking_at(CAMERA_EDITOR, CAMERA_TARGET, (0.0, 0.0, -1.0))
        editor_translation = (
            CAMERA_EDITOR[0],
            CAMERA_EDITOR[1],
            CAMERA_EDITOR[2] - TILE_SCALE / 2.0,
        )
        self.to_editor = CameraAnimation(
            CAMERA_START, editor_translation, game_rotation, editor_rotation
        )
        self.to_game = self.to_editor.reverse()
        self.state: StateMachine[CamState] = StateMachine(CamState.default())
        self.translation: Vec3 = CAMERA_START
        self.rotation: Quat = game_rotation
        self.playing: CameraAnimation | None = None
        self.elapsed = 0.0

    def _moving(self) -> bool:
        return self.state.current.direction is not None

    def _play(self, animation: CameraAnimation) -> None:
        self.playing = animation
        self.elapsed = 0.0

    def finished(self) -> bool:
        return self.playing is None or self.elapsed >= self.playing.domain_end

    def enter_editor(self, app_state: StateMachine[AppState]) -> None:
        """Start the pan to the editor, or enter the editor if already there."""
        current = self.state.current
        if current is not CamState.EDITOR_VIEW and not self._moving():
            self.state.set(CamState.MOVING_TO_EDITOR)
            self._play(self.to_editor)
        elif current is CamState.EDITOR_VIEW:
            app_state.set(AppState.IN_EDITOR)

    def enter_game(self) -> None:
        """Start the pan back to the game view unless already there or moving."""
        if self.state.current is not CamState.GAME_VIEW and not self._moving():
            self.state.set(CamState.MOVING_TO_GAME)
            self._play(self.to_game)

    def update(self, dt: float, app_state: StateMachine[AppState]) -> None:
        """Advance one frame: apply state, animate, and settle when done."""
        self.state.apply()
        if self.playing is not None:
            self.elapsed += dt
            self.translation, self.rotation = self.playing.sample(self.elapsed)
        if not self.finished():
            return
        direction = self.state.current.direction
        if direction is CamMoveDir.MOVE_TO_EDITOR:
            self.state.set(CamState.EDITOR_VIEW)
            app_state.set(AppState.IN_EDITOR)
        elif direction is CamMoveDir.MOVE_TO_GAME:
            self.state.set(CamState.GAME_VIEW)
            app_state.set(AppState.IN_GAME)