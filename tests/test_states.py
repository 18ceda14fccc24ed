"""Tests for controller steps."""

import pytest


def test_app_step_enum_has_required_steps():
    from mandalart.controller.states import AppStep

    for step in ["INPUT", "INTERVIEW", "GENERATING", "RESULT"]:
        assert hasattr(AppStep, step), f"Missing step: {step}"


def test_can_transition_allows_valid_transitions():
    from mandalart.controller.states import AppStep, can_transition

    assert can_transition(AppStep.INPUT, AppStep.INTERVIEW)
    assert can_transition(AppStep.INTERVIEW, AppStep.GENERATING)
    assert can_transition(AppStep.GENERATING, AppStep.RESULT)
    assert can_transition(AppStep.GENERATING, AppStep.INTERVIEW)
    # Opening a history item from anywhere
    assert can_transition(AppStep.INPUT, AppStep.RESULT)
    assert can_transition(AppStep.RESULT, AppStep.RESULT)


def test_can_transition_blocks_invalid_transitions():
    from mandalart.controller.states import AppStep, can_transition

    assert not can_transition(AppStep.INPUT, AppStep.GENERATING)
    assert not can_transition(AppStep.RESULT, AppStep.GENERATING)
    assert not can_transition(AppStep.RESULT, AppStep.INTERVIEW)


def test_every_step_can_reset_to_input():
    from mandalart.controller.states import AppStep, can_transition

    for step in AppStep:
        if step != AppStep.INPUT:
            assert can_transition(step, AppStep.INPUT)
