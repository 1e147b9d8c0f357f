import io

import pytest

import app as app_module
from generation import PromptGenerator
from session import PromptSession
from uploads import MAX_IMAGE_SIZE

from conftest import FakeClient, MODEL, png_bytes, prompt_json, questions_json


@pytest.fixture
def use_replies(monkeypatch):
    created = []

    def install(*replies):
        session = PromptSession(PromptGenerator(FakeClient(*replies), MODEL))
        monkeypatch.setattr(app_module, "session", session)
        created.append(session)
        return session

    yield install
    for session in created:
        session.start_over()


@pytest.fixture
def client():
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


def upload(client, slot, data, filename="cat.png", mime_type="image/png"):
    return client.post(
        f"/api/images/{slot}",
        data={"file": (io.BytesIO(data), filename, mime_type)},
        content_type="multipart/form-data",
    )


def test_index_renders_page(client, use_replies):
    use_replies()
    response = client.get("/")
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert "AI Prompt Enhancer Pro" in html
    assert "Tapeta iPhone 14/Pro (1170x2532)" in html
    assert "__NUMBER_OF_QUESTIONS__" not in html


def test_state(client, use_replies):
    use_replies()
    data = client.get("/api/state").get_json()
    assert data["state"] == "INITIAL"


def test_questions_flow(client, use_replies):
    use_replies(questions_json(), prompt_json())
    response = client.post("/api/questions", json={"basicPrompt": "sunset over mountains"})
    assert response.status_code == 200
    data = response.get_json()
    assert data["state"] == "ASKING_QUESTIONS"

    first = data["questionAnswers"][0]
    response = client.post(
        "/api/answers", json={"id": first["id"], "option": first["options"][0], "checked": True}
    )
    assert response.get_json()["questionAnswers"][0]["selectedOptions"] == [first["options"][0]]

    data = client.post("/api/enhance").get_json()
    assert data["state"] == "SHOWING_RESULTS"
    assert data["result"]["suggestions"] == ["Add fog", "Golden hour"]


def test_empty_idea_is_400(client, use_replies):
    use_replies()
    response = client.post("/api/questions", json={"basicPrompt": ""})
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"].startswith("Proszę wpisać podstawowy pomysł")
    assert body["state"]["state"] == "INITIAL"


def test_wrong_state_is_409(client, use_replies):
    use_replies()
    response = client.post("/api/enhance")
    assert response.status_code == 409
    assert response.get_json()["state"]["state"] == "INITIAL"


def test_malformed_reply_shows_generic_error(client, use_replies):
    use_replies("I cannot help with that")
    data = client.post("/api/magic", json={"basicPrompt": "kot", "aspectRatio": "1:1"}).get_json()
    assert data["state"] == "ERROR"
    assert data["error"] == "Nie udało się wygenerować magicznego promptu. Spróbuj ponownie."

    data = client.post("/api/start-over").get_json()
    assert data["state"] == "INITIAL"


def test_upload_preview_and_clear(client, use_replies):
    use_replies()
    response = upload(client, "subject", png_bytes())
    assert response.status_code == 200
    image = response.get_json()["images"]["subject"]
    assert image["filename"] == "cat.png"
    assert image["preview"].startswith("data:image/png;base64,")

    data = client.delete("/api/images/subject").get_json()
    assert data["images"]["subject"] is None


def test_oversized_upload_is_rejected(client, use_replies):
    use_replies()
    response = upload(client, "style", b"\0" * (MAX_IMAGE_SIZE + 1), "huge.png")
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Plik huge.png jest zbyt duży. Maksymalny rozmiar to 5MB."
    assert body["state"]["images"]["style"] is None
    assert body["state"]["message"] == body["error"]


def test_wrong_format_upload_is_rejected(client, use_replies):
    use_replies()
    response = upload(client, "subject", b"GIF89a", "anim.gif", "image/gif")
    assert response.status_code == 400


def test_unknown_slot_is_rejected(client, use_replies):
    use_replies()
    assert upload(client, "background", png_bytes()).status_code == 400


def test_style_influence_and_refine(client, use_replies):
    use_replies(prompt_json("styled"), prompt_json("refined"))
    upload(client, "style", png_bytes(), "style.png")
    data = client.post(
        "/api/style-influence",
        json={"basicPrompt": "kot", "aspectRatio": "custom", "customWidth": "800", "customHeight": "600"},
    ).get_json()
    assert data["state"] == "SHOWING_RESULTS"
    assert data["result"]["enhancedPrompt"] == "styled"

    data = client.post("/api/edit").get_json()
    assert data["draft"] == "styled"
    data = client.post("/api/refine", json={"draft": "styled, at dusk"}).get_json()
    assert data["result"]["enhancedPrompt"] == "refined"
    assert data["editing"] is False


def test_edit_cancel(client, use_replies):
    use_replies(prompt_json("first"))
    client.post("/api/magic", json={"basicPrompt": "kot"})
    client.post("/api/edit")
    data = client.post("/api/edit/cancel").get_json()
    assert data["editing"] is False
    assert data["result"]["enhancedPrompt"] == "first"


def test_describe_and_copy(client, use_replies):
    use_replies("A tabby cat.", prompt_json("copy"))
    upload(client, "subject", png_bytes())
    data = client.post("/api/describe").get_json()
    assert data["basicPrompt"] == "A tabby cat."
    data = client.post("/api/copy-image").get_json()
    assert data["result"]["enhancedPrompt"] == "copy"


def test_output_settings_route(client, use_replies):
    use_replies()
    data = client.post(
        "/api/output-settings", json={"aspectRatio": "custom", "customWidth": "0", "customHeight": "5"}
    ).get_json()
    assert data["customDimensionsInvalid"] is True


def test_idea_route(client, use_replies):
    use_replies()
    assert client.post("/api/idea", json={"basicPrompt": "las"}).get_json()["basicPrompt"] == "las"
