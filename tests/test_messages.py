"""Tests for localized messages and errors."""

import pytest


@pytest.mark.parametrize("requested,expected", [
    ("en", "en"),
    ("pt-BR", "pt-BR"),
    ("pt_br", "pt-BR"),
    ("pt", "pt-BR"),
    ("en-US", "en"),
    ("fr", "en"),
    ("", "en"),
])
def test_resolve_locale(requested, expected):
    from mandalart.messages import resolve_locale

    assert resolve_locale(requested) == expected


def test_every_locale_has_every_key():
    from mandalart.messages import MESSAGES

    assert set(MESSAGES["pt-BR"]) == set(MESSAGES["en"])


def test_default_checklist_steps_are_copies():
    from mandalart.messages import MESSAGES, default_checklist_steps

    steps = default_checklist_steps("pt-BR")
    steps.append("Extra")

    assert MESSAGES["pt-BR"]["checklist"] == ["Planejar", "Executar", "Revisar"]


def test_errors_share_base_class():
    from mandalart import errors

    for name in ["ConfigError", "GenerationError", "ParseError", "ValidationError",
                 "AuthError", "ExportError", "PersistenceError", "BusyError",
                 "InvalidTransitionError"]:
        assert issubclass(getattr(errors, name), errors.MandalartError)


def test_error_context_attributes():
    from mandalart.errors import ConfigError, InvalidTransitionError, ParseError

    assert ConfigError("bad", problems=["a"]).problems == ["a"]
    assert ParseError("no json", raw_text="hi").raw_text == "hi"
    err = InvalidTransitionError("nope", from_step="input", to_step="result")
    assert (err.from_step, err.to_step) == ("input", "result")
