import logging

import pytest

from towerdef.states import AppState, StateLogger, StateMachine


def test_default_app_state_is_start_menu():
    assert AppState.default() is AppState.START_MENU


def test_new_machine_is_changed_with_initial_state():
    machine = StateMachine(AppState.START_MENU)
    assert machine.current is AppState.START_MENU
    assert machine.is_changed() is True


def test_apply_without_pending_clears_change_flag():
    machine = StateMachine(AppState.START_MENU)
    assert machine.apply() is False
    assert machine.is_changed() is False
    assert machine.current is AppState.START_MENU


def test_set_is_deferred_until_apply():
    machine = StateMachine(AppState.START_MENU)
    machine.apply()
    machine.set(AppState.TO_GAME)
    assert machine.current is AppState.START_MENU
    assert machine.apply() is True
    assert machine.current is AppState.TO_GAME
    assert machine.is_changed() is True
    assert machine.pending is None


def test_last_set_before_apply_wins():
    machine = StateMachine(AppState.START_MENU)
    machine.set(AppState.TO_GAME)
    machine.set(AppState.TO_EDITOR)
    machine.apply()
    assert machine.current is AppState.TO_EDITOR


def test_machine_compares_with_state():
    machine = StateMachine(AppState.IN_EDITOR)
    assert machine == AppState.IN_EDITOR
    assert not machine == AppState.IN_GAME


def test_logger_reports_only_changed_machines(caplog):
    app = StateMachine(AppState.START_MENU)
    other = StateMachine(AppState.IN_GAME)
    app.apply()
    other.apply()
    app.set(AppState.IN_GAME)
    app.apply()
    state_logger = StateLogger({"AppState": app, "Other": other})
    with caplog.at_level(logging.INFO):
        lines = state_logger.log_changes()
    assert lines == ["AppState: IN_GAME"]
    assert "AppState: IN_GAME" in caplog.text


def test_logger_reports_all_on_first_frame():
    state_logger = StateLogger(
        {"AppState": StateMachine(AppState.START_MENU), "Second": StateMachine(AppState.EXIT)}
    )
    assert state_logger.log_changes() == ["AppState: START_MENU", "Second: EXIT"]


@pytest.mark.parametrize("state", list(AppState))
def test_every_state_round_trips_through_machine(state):
    machine = StateMachine(AppState.START_MENU)
    machine.set(state)
    machine.apply()
    assert machine.current is state