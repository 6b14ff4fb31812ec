import math

import pytest

from towerdef.camera import (
    CAMERA_EDITOR,
    CAMERA_START,
    CAMERA_TARGET,
    CamMoveDir,
    CamState,
    CameraAnimation,
    CameraController,
    looking_at,
    quadratic_in_out,
    slerp,
)
from towerdef.states import AppState, StateMachine


def _approx(values):
    return pytest.approx(list(values), abs=1e-6)


def test_easing_endpoints_and_symmetry():
    assert quadratic_in_out(0.0) == 0.0
    assert quadratic_in_out(1.0) == 1.0
    for t in (0.1, 0.3, 0.45):
        assert quadratic_in_out(t) + quadratic_in_out(1 - t) == pytest.approx(1.0)


def test_looking_down_with_minus_z_up():
    q = looking_at(CAMERA_EDITOR, CAMERA_TARGET, (0.0, 0.0, -1.0))
    h = math.sqrt(0.5)
    assert list(q) == _approx((-h, 0.0, 0.0, h))


def test_looking_at_is_unit():
    q = looking_at(CAMERA_START, CAMERA_TARGET, (0.0, 1.0, 0.0))
    assert sum(c * c for c in q) == pytest.approx(1.0)


def test_looking_at_zero_direction_raises():
    with pytest.raises(ValueError):
        looking_at((1.0, 1.0, 1.0), (1.0, 1.0, 1.0), (0.0, 1.0, 0.0))


def test_slerp_endpoints():
    a = (0.0, 0.0, 0.0, 1.0)
    b = looking_at(CAMERA_START, CAMERA_TARGET, (0.0, 1.0, 0.0))
    assert list(slerp(a, b, 0.0)) == _approx(a)
    assert list(slerp(a, b, 1.0)) == _approx(b)


def test_animation_sample_and_reverse():
    anim = CameraAnimation((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (0, 0, 0, 1.0), (0, 0, 0, 1.0))
    assert list(anim.sample(0.0)[0]) == _approx((0.0, 0.0, 0.0))
    assert list(anim.sample(5.0)[0]) == _approx((10.0, 0.0, 0.0))
    rev = anim.reverse()
    assert list(rev.sample(0.0)[0]) == _approx((10.0, 0.0, 0.0))
    for t in (0.3, 0.6, 0.9):
        assert anim.sample(t)[0][0] + rev.sample(t)[0][0] == pytest.approx(10.0)


def test_animation_bad_domain():
    with pytest.raises(ValueError):
        CameraAnimation((0, 0, 0), (1, 1, 1), (0, 0, 0, 1), (0, 0, 0, 1), 1.0, 0.5)


def test_cam_state_direction():
    assert CamState.moving(CamMoveDir.MOVE_TO_GAME).direction is CamMoveDir.MOVE_TO_GAME
    assert CamState.GAME_VIEW.direction is None


def test_pan_to_editor_and_back():
    app = StateMachine(AppState.TO_EDITOR)
    cam = CameraController()
    cam.enter_editor(app)
    assert cam.state.pending is CamState.MOVING_TO_EDITOR
    cam.update(0.5, app)
    assert cam.state.current is CamState.MOVING_TO_EDITOR
    assert app.pending is None
    cam.update(0.6, app)
    assert cam.state.pending is CamState.EDITOR_VIEW
    assert app.pending is AppState.IN_EDITOR
    assert list(cam.translation) == _approx(cam.to_editor.end_translation)
    cam.update(0.0, app)
    assert cam.state.current is CamState.EDITOR_VIEW

    cam.enter_game()
    cam.update(2.0, app)
    assert app.pending is AppState.IN_GAME
    assert list(cam.translation) == _approx(CAMERA_START)


def test_enter_editor_when_already_there():
    app = StateMachine(AppState.TO_EDITOR)
    cam = CameraController()
    cam.state.current = CamState.EDITOR_VIEW
    cam.enter_editor(app)
    assert app.pending is AppState.IN_EDITOR
    assert cam.state.pending is None


def test_enter_game_ignored_in_game_view():
    cam = CameraController()
    cam.enter_game()
    assert cam.state.pending is None
    assert cam.playing is None