from unittest.mock import AsyncMock, Mock

from docbrief.api.dependencies import get_summarization_pipeline, get_translation_service
from docbrief.core.exceptions import ErrorKind, RemoteError
from docbrief.main import app
from docbrief.services.translation import TranslationService, TRANSLATION_UNAVAILABLE

from conftest import FakeCompletionClient, build_pipeline, make_pdf


def override_pipeline(summarizer, translator, settings):
    pipeline = build_pipeline(summarizer, translator, settings)
    app.dependency_overrides[get_summarization_pipeline] = lambda: pipeline


def test_health_check(test_client):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] in ("healthy", "degraded")
    assert set(response.json()["services"]) == {"gemini", "translation"}


def test_root_lists_endpoints(test_client):
    response = test_client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["summarize"] == "/api/summarize"


def test_summarize_plain_text(test_client, test_settings):
    summarizer = FakeCompletionClient(responses=["Short summary."])
    override_pipeline(summarizer, FakeCompletionClient(), test_settings)

    response = test_client.post(
        "/api/summarize", files={"file": ("note.txt", b"Hello world.", "text/plain")}
    )

    assert response.status_code == 200
    assert response.json() == {"summary": "Short summary."}
    assert summarizer.call_count == 1


def test_summarize_with_translation_failure_still_succeeds(test_client, test_settings):
    translator = FakeCompletionClient(fail_on_call=1, error=RemoteError("Chat completion error: 502", status=502))
    override_pipeline(FakeCompletionClient(responses=["Short summary."]), translator, test_settings)

    response = test_client.post(
        "/api/summarize",
        files={"file": ("note.txt", b"Hello world.", "text/plain")},
        data={"target_language": "hi"},
    )

    assert response.status_code == 200
    assert response.json() == {"summary": "Short summary.", "translation": TRANSLATION_UNAVAILABLE}


def test_summarize_unsupported_type(test_client, test_settings):
    summarizer = FakeCompletionClient()
    override_pipeline(summarizer, FakeCompletionClient(), test_settings)

    response = test_client.post(
        "/api/summarize", files={"file": ("image.png", b"\x89PNG\r\n", "image/png")}
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Unsupported file type: image/png")
    assert summarizer.call_count == 0


def test_summarize_image_only_pdf(test_client, test_settings):
    summarizer = FakeCompletionClient()
    override_pipeline(summarizer, FakeCompletionClient(), test_settings)

    response = test_client.post(
        "/api/summarize", files={"file": ("scan.pdf", make_pdf([""]), "application/pdf")}
    )

    assert response.status_code == 400
    assert "image-based or encrypted" in response.json()["error"]
    assert summarizer.call_count == 0


def test_summarize_oversize_file(test_client, test_settings):
    summarizer = FakeCompletionClient()
    override_pipeline(summarizer, FakeCompletionClient(), test_settings)

    payload = b"a" * (test_settings.MAX_FILE_SIZE + 1)
    response = test_client.post("/api/summarize", files={"file": ("big.txt", payload, "text/plain")})

    assert response.status_code == 400
    assert "File size exceeds limit" in response.json()["error"]
    assert summarizer.call_count == 0


def test_summarize_missing_file(test_client, test_settings):
    override_pipeline(FakeCompletionClient(), FakeCompletionClient(), test_settings)

    response = test_client.post("/api/summarize")

    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


def test_summarize_rate_limited(test_client, test_settings):
    error = RemoteError("Gemini API error: 429", status=429, kind=ErrorKind.RATE_LIMITED)
    override_pipeline(FakeCompletionClient(fail_on_call=1, error=error), FakeCompletionClient(), test_settings)

    response = test_client.post(
        "/api/summarize", files={"file": ("note.txt", b"Hello world.", "text/plain")}
    )

    assert response.status_code == 429
    assert response.json() == {"error": "Rate limit exceeded. Please try again in a few moments."}


def test_summarize_rejects_overlong_language(test_client, test_settings):
    summarizer = FakeCompletionClient()
    override_pipeline(summarizer, FakeCompletionClient(), test_settings)

    response = test_client.post(
        "/api/summarize",
        files={"file": ("note.txt", b"Hello world.", "text/plain")},
        data={"target_language": "x" * 40},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Target language is too long. Maximum length is 32 characters."}
    assert summarizer.call_count == 0


def test_translate(test_client):
    service = Mock(spec=TranslationService)
    service.translate = AsyncMock(return_value="வணக்கம்")
    app.dependency_overrides[get_translation_service] = lambda: service

    response = test_client.post("/api/translate", json={"text": "Hello", "targetLanguage": "ta"})

    assert response.status_code == 200
    assert response.json() == {"translation": "வணக்கம்"}
    service.translate.assert_awaited_once_with("Hello", "ta")


def test_translate_requires_text_and_language(test_client):
    service = Mock(spec=TranslationService)
    service.translate = AsyncMock()
    app.dependency_overrides[get_translation_service] = lambda: service

    response = test_client.post("/api/translate", json={"text": "Hello"})

    assert response.status_code == 400
    assert response.json() == {"error": "Target language is required"}
    service.translate.assert_not_awaited()


def test_translate_upstream_failure_is_classified(test_client):
    service = Mock(spec=TranslationService)
    service.translate = AsyncMock(side_effect=RemoteError("Chat completion error: 500 secret-body", status=500))
    app.dependency_overrides[get_translation_service] = lambda: service

    response = test_client.post("/api/translate", json={"text": "Hello", "targetLanguage": "hi"})

    assert response.status_code == 500
    assert "secret-body" not in response.json()["error"]


def test_translate_malformed_json_is_bad_request(test_client):
    service = Mock(spec=TranslationService)
    service.translate = AsyncMock()
    app.dependency_overrides[get_translation_service] = lambda: service

    response = test_client.post(
        "/api/translate", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Text and target language are required"}
    service.translate.assert_not_awaited()


def test_translate_non_string_fields_are_bad_request(test_client):
    service = Mock(spec=TranslationService)
    service.translate = AsyncMock()
    app.dependency_overrides[get_translation_service] = lambda: service

    response = test_client.post("/api/translate", json={"text": ["Hello"], "targetLanguage": "hi"})

    assert response.status_code == 400
    assert "error" in response.json()
    assert "detail" not in response.json()
    service.translate.assert_not_awaited()
