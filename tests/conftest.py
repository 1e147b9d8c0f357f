import io
import json

import pytest
from PIL import Image

from generation import PromptGenerator
from models import NUMBER_OF_QUESTIONS
from session import PromptSession

MODEL = "gemini-2.5-flash"


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    """Stands in for ``client.models``; replies are consumed in order.

    A reply may be a string, an exception to raise, or a callable that gets
    the request contents and returns a string.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(contents)
        return FakeResponse(reply)


class FakeClient:
    def __init__(self, *replies):
        self.models = FakeModels(replies)


def questions_json(count=NUMBER_OF_QUESTIONS):
    return json.dumps([
        {
            "id": f"q{i}",
            "questionText": f"Pytanie {i}?",
            "options": [f"Opcja {i}.{j}" for j in range(1, 11)],
        }
        for i in range(1, count + 1)
    ], ensure_ascii=False)


def prompt_json(prompt="A red fox in snow", negative="blurry", suggestions=None):
    return json.dumps({
        "enhancedPrompt": prompt,
        "negativePrompt": negative,
        "suggestions": ["Add fog", "Golden hour"] if suggestions is None else suggestions,
    })


def png_bytes(size=(32, 24), color=(200, 40, 40)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_session():
    sessions = []

    def factory(*replies):
        session = PromptSession(PromptGenerator(FakeClient(*replies), MODEL))
        sessions.append(session)
        return session

    yield factory
    for session in sessions:
        session.start_over()
