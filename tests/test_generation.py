import base64

import pytest

from errors import CountMismatch, GenerationFailed
from generation import (
    PromptGenerator,
    build_config,
    dimensions_text,
    enhance_instruction,
    refine_instruction,
)
from models import QuestionAnswer, ReferenceImage

from conftest import FakeClient, MODEL, prompt_json, questions_json


def image(data, mime_type="image/png"):
    return ReferenceImage(base64=base64.b64encode(data).decode("utf-8"), mime_type=mime_type)


def answered():
    qa = QuestionAnswer(id="q1", question_text="Styl?", options=["Akwarela", "Szkic"])
    qa.toggle("Akwarela", True)
    qa.answer = "pastelowe"
    empty = QuestionAnswer(id="q2", question_text="Nastrój?", options=["Wesoły"])
    return [qa, empty]


def test_dimensions_text():
    assert dimensions_text("auto") == ""
    assert dimensions_text(None) == ""
    assert dimensions_text("16:9") == "Aspect ratio: 16:9"
    assert dimensions_text("custom", "1024", "768") == "Dimensions: 1024x768px"
    assert dimensions_text("custom", "1024", "", require_both=True) == "Aspect ratio: custom"


def test_enhance_instruction_lists_answers():
    text = enhance_instruction("kot", answered())
    assert "Basic idea: kot" in text
    assert "Styl?\nSelected: Akwarela\nNotes: pastelowe" in text
    assert "Nastrój?\nSelected: None selected" in text
    assert '"enhancedPrompt": "detailed prompt here"' in text


def test_refine_instruction_uses_edited_prompt():
    text = refine_instruction("my edited prompt", "kot", answered())
    assert "Edited Prompt: my edited prompt" in text
    assert "Styl?: Akwarela Notes: pastelowe" in text
    assert "Nastrój?: None" in text


def test_build_config_json_and_thinking():
    plain = build_config(MODEL, json_reply=False)
    assert plain.response_mime_type is None
    assert plain.thinking_config is None
    thinking = build_config("gemini-3-flash-preview", json_reply=True)
    assert thinking.response_mime_type == "application/json"
    assert thinking.thinking_config is not None


def test_style_image_is_sent_before_subject_image():
    client = FakeClient(prompt_json())
    generator = PromptGenerator(client, MODEL)
    result = generator.generate_style_influence_prompt(
        "kot", image(b"style", "image/webp"), image(b"subject", "image/jpeg"), "custom", "800", "600"
    )
    assert result.enhanced_prompt == "A red fox in snow"

    contents = client.models.calls[0]["contents"]
    assert len(contents) == 3
    assert "Subject/Theme: kot" in contents[0]
    assert "Dimensions: 800x600px" in contents[0]
    assert contents[1].inline_data.data == b"style"
    assert contents[1].inline_data.mime_type == "image/webp"
    assert contents[2].inline_data.data == b"subject"


def test_magic_prompt_without_image_sends_text_only():
    client = FakeClient(prompt_json())
    PromptGenerator(client, MODEL).generate_magic_prompt("kot", "auto", "", "")
    call = client.models.calls[0]
    assert call["model"] == MODEL
    assert len(call["contents"]) == 1
    assert "Dimensions" not in call["contents"][0]
    assert "Aspect ratio" not in call["contents"][0]


def test_description_is_plain_text():
    client = FakeClient("A tabby cat on a windowsill.")
    result = PromptGenerator(client, MODEL).generate_image_description(image(b"cat"))
    assert result == "A tabby cat on a windowsill."
    assert client.models.calls[0]["config"].response_mime_type is None


def test_questions_round_trip():
    client = FakeClient(questions_json())
    questions = PromptGenerator(client, MODEL).generate_questions("kot")
    assert len(questions) == 11
    assert '"kot"' in client.models.calls[0]["contents"][0]


def test_count_mismatch_passes_through():
    client = FakeClient(questions_json(10))
    with pytest.raises(CountMismatch):
        PromptGenerator(client, MODEL).generate_questions("kot")


def test_provider_error_becomes_generic_failure():
    client = FakeClient(RuntimeError("401 API key invalid for project 1234"))
    with pytest.raises(GenerationFailed) as exc:
        PromptGenerator(client, MODEL).generate_copy_image_prompt(image(b"x"))
    assert "401" not in exc.value.message
    assert exc.value.message == (
        "Nie udało się wygenerować promptu do kopiowania obrazu. Spróbuj ponownie."
    )


def test_malformed_reply_becomes_generic_failure():
    client = FakeClient("not json at all")
    with pytest.raises(GenerationFailed) as exc:
        PromptGenerator(client, MODEL).generate_enhanced_prompt("kot", answered())
    assert exc.value.message.startswith("Nie udało się wygenerować ulepszonego promptu.")
