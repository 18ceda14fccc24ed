"""Tests for response parsing and normalization."""

import json

import pytest

from conftest import QUESTIONS_JSON, make_mandalart, mandalart_json


def _shape(data):
    return [len(sg.tasks) for sg in data.sub_goals]


def test_extract_json_from_prose():
    from mandalart.generation.normalizer import extract_json

    text = 'Sure! Here it is:\n{"questions": [{"id": "1", "text": "Why?"}]}\nGood luck.'
    assert json.loads(extract_json(text))["questions"][0]["text"] == "Why?"


def test_extract_json_without_braces_raises():
    from mandalart.errors import ParseError
    from mandalart.generation.normalizer import extract_json

    with pytest.raises(ParseError):
        extract_json("I cannot help with that.")
    with pytest.raises(ParseError):
        extract_json("")


def test_parse_json_invalid_keeps_raw_text():
    from mandalart.errors import ParseError
    from mandalart.generation.normalizer import parse_json

    with pytest.raises(ParseError) as exc:
        parse_json("{not json}")
    assert exc.value.raw_text == "{not json}"


def test_parse_questions():
    from mandalart.generation.normalizer import parse_questions

    questions = parse_questions(QUESTIONS_JSON)

    assert [q.id for q in questions] == ["1", "2", "3"]
    assert questions[0].text == "Why does this goal matter to you?"


def test_parse_questions_empty_list_is_validation_error():
    from mandalart.errors import ValidationError
    from mandalart.generation.normalizer import parse_questions

    with pytest.raises(ValidationError):
        parse_questions('{"questions": []}')


def test_parse_questions_missing_text_is_validation_error():
    from mandalart.errors import ValidationError
    from mandalart.generation.normalizer import parse_questions

    with pytest.raises(ValidationError) as exc:
        parse_questions('{"questions": [{"id": "1"}]}')
    assert exc.value.errors


@pytest.mark.parametrize("sub_goals", [0, 3, 5, 8, 12])
def test_parse_mandalart_always_8x8(sub_goals):
    from mandalart.generation.normalizer import parse_mandalart

    data = parse_mandalart(mandalart_json(sub_goals=sub_goals))

    assert len(data.sub_goals) == 8
    assert _shape(data) == [8] * 8


def test_parse_mandalart_pads_with_placeholders():
    from mandalart.generation.normalizer import parse_mandalart
    from mandalart.models import PLACEHOLDER_TITLE

    data = parse_mandalart(mandalart_json(sub_goals=5, tasks=6))

    assert data.sub_goals[4].title == "Area 5"
    assert data.sub_goals[5].title == PLACEHOLDER_TITLE
    assert data.sub_goals[0].tasks[5].title == "Task 1.6"
    assert data.sub_goals[0].tasks[6].title == PLACEHOLDER_TITLE
    assert len(data.sub_goals[7].tasks[0].checklist) == 3


def test_parse_mandalart_truncates_extra_tasks():
    from mandalart.generation.normalizer import parse_mandalart

    data = parse_mandalart(mandalart_json(sub_goals=8, tasks=10))

    assert data.sub_goals[0].tasks[-1].title == "Task 1.8"


def test_parse_mandalart_string_tasks_get_default_checklist():
    from mandalart.generation.normalizer import parse_mandalart

    text = json.dumps({
        "mainGoal": "Learn Spanish",
        "subGoals": [{"title": "Vocabulary", "tasks": ["Flashcards", "Read news"]}],
    })
    data = parse_mandalart(text)

    task = data.sub_goals[0].tasks[0]
    assert task.title == "Flashcards"
    assert [item.text for item in task.checklist] == ["Plan", "Execute", "Review"]


def test_parse_mandalart_object_task_checklist_is_unchecked():
    from mandalart.generation.normalizer import parse_mandalart

    data = parse_mandalart(mandalart_json())
    task = data.sub_goals[0].tasks[0]

    assert [item.text for item in task.checklist] == ["Warm up", "Run", "Stretch"]
    assert not any(item.checked for item in task.checklist)
    assert not task.is_completed


def test_parse_mandalart_empty_checklist_gets_default():
    from mandalart.generation.normalizer import parse_mandalart

    text = json.dumps({
        "mainGoal": "g",
        "subGoals": [{"title": "s", "tasks": [{"title": "t", "checklist": [None, " "]}]}],
    })
    data = parse_mandalart(text, locale="pt-BR")

    assert [item.text for item in data.sub_goals[0].tasks[0].checklist] == ["Planejar", "Executar", "Revisar"]


def test_parse_mandalart_missing_main_goal_is_validation_error():
    from mandalart.errors import ValidationError
    from mandalart.generation.normalizer import parse_mandalart

    with pytest.raises(ValidationError):
        parse_mandalart('{"subGoals": []}')


def test_parse_mandalart_logs_count_mismatch(caplog):
    import logging

    from mandalart.generation.normalizer import parse_mandalart

    with caplog.at_level(logging.WARNING, logger="mandalart"):
        parse_mandalart(mandalart_json(sub_goals=5))

    assert "5 sub-goals" in caplog.text


def test_normalize_is_idempotent_and_does_not_mutate():
    from mandalart.generation.normalizer import normalize_mandalart

    short = make_mandalart(sub_goals=3, tasks=2)
    once = normalize_mandalart(short)

    assert _shape(short) == [2, 2, 2]
    assert normalize_mandalart(once) == once


def test_normalize_keeps_well_formed_grid():
    from mandalart.generation.normalizer import normalize_mandalart

    data = make_mandalart()
    assert normalize_mandalart(data) == data
