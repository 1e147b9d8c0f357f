import json

import pytest

from errors import CountMismatch, MalformedResponse
from models import OutputType
from replies import load_json, parse_description, parse_prompt_result, parse_questions

from conftest import prompt_json, questions_json


def test_parse_questions_builds_empty_answers():
    questions = parse_questions(questions_json())
    assert len(questions) == 11
    first = questions[0]
    assert first.id == "q1"
    assert first.question_text == "Pytanie 1?"
    assert len(first.options) == 10
    assert first.selected_options == []
    assert first.answer == ""
    assert json.loads(first.full_question_prompt)["id"] == "q1"


def test_parse_questions_count_mismatch():
    with pytest.raises(CountMismatch) as exc:
        parse_questions(questions_json(9))
    assert exc.value.message == "Niespodziewana liczba pytań od AI. Otrzymano 9, oczekiwano 11."


def test_parse_questions_defaults_missing_options_and_ids():
    items = [{"questionText": f"P{i}", "options": None} for i in range(11)]
    items[3]["id"] = "dup"
    items[4]["id"] = "dup"
    questions = parse_questions(json.dumps(items))
    assert all(q.options == [] for q in questions)
    assert questions[0].id == "q1"
    assert questions[3].id == "dup"
    assert questions[4].id == "q5"
    assert len({q.id for q in questions}) == 11


def test_parse_questions_rejects_blank_text():
    items = json.loads(questions_json())
    items[2]["questionText"] = "   "
    with pytest.raises(MalformedResponse):
        parse_questions(json.dumps(items))


def test_parse_questions_rejects_object():
    with pytest.raises(MalformedResponse):
        parse_questions('{"questions": []}')


def test_load_json_strips_code_fence():
    assert load_json('```json\n{"a": 1}\n```') == {"a": 1}


def test_load_json_rejects_garbage():
    with pytest.raises(MalformedResponse):
        load_json("Sure! Here is your prompt.")


def test_parse_prompt_result_defaults_suggestions():
    result = parse_prompt_result('{"enhancedPrompt": "A", "negativePrompt": "B"}')
    assert result.suggestions == []
    assert result.output_type_used is OutputType.RASTER_PROMPT


def test_parse_prompt_result_requires_both_prompts():
    with pytest.raises(MalformedResponse):
        parse_prompt_result('{"enhancedPrompt": "A"}')


def test_parse_prompt_result_to_dict():
    result = parse_prompt_result(prompt_json())
    assert result.to_dict() == {
        "enhancedPrompt": "A red fox in snow",
        "negativePrompt": "blurry",
        "suggestions": ["Add fog", "Golden hour"],
        "outputTypeUsed": "RASTER_PROMPT",
    }


def test_parse_description():
    assert parse_description("  A cat on a sofa.\n") == "A cat on a sofa."
    with pytest.raises(MalformedResponse):
        parse_description("   ")


def test_parse_questions_accepts_numeric_ids():
    items = json.loads(questions_json())
    for n, item in enumerate(items, 1):
        item["id"] = n
    questions = parse_questions(json.dumps(items))
    assert [q.id for q in questions] == [str(n) for n in range(1, 12)]
