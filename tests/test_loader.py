"""Model loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import requests

from shapegen import utils
from shapegen.utils import ModelLoadError, load_model


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, error: Exception | None = None):
        self.payload = payload
        self.status_code = status_code
        self.error = error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if self.error is not None:
            raise self.error
        return self.payload


def test_load_model_from_file(tmp_path: Path, weather_document: dict) -> None:
    path = tmp_path / "model.json"
    path.write_text(json.dumps(weather_document), encoding="utf-8")
    model = load_model(path)
    assert model.expect_shape("example.weather#Weather").name == "Weather"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "content, message",
    [
        ("{broken", "Invalid JSON"),
        ("[]", "must be a JSON object"),
        ('{"shapes": {"a.b#C": {"type": "widget"}}}', "Invalid model"),
    ],
)
def test_invalid_documents(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "model.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ModelLoadError, match=message):
        load_model(path)


def test_load_model_from_url(monkeypatch: pytest.MonkeyPatch, weather_document: dict) -> None:
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(weather_document)

    monkeypatch.setattr(utils.requests, "get", fake_get)
    model = load_model("https://example.com/model.json", timeout=5)
    assert calls == [("https://example.com/model.json", 5)]
    assert "example.weather#Skies" in model


def test_url_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(utils.requests, "get", lambda url, timeout: FakeResponse(status_code=404))
    with pytest.raises(ModelLoadError, match="HTTP error 404"):
        load_model("https://example.com/model.json")


def test_url_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get(url, timeout):
        raise requests.exceptions.Timeout()

    monkeypatch.setattr(utils.requests, "get", fake_get)
    with pytest.raises(ModelLoadError, match="timeout"):
        load_model("https://example.com/model.json")


def test_url_invalid_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        utils.requests,
        "get",
        lambda url, timeout: FakeResponse(error=ValueError("no json")),
    )
    with pytest.raises(ModelLoadError, match="Invalid JSON response"):
        load_model("https://example.com/model.json")


def test_invalid_url() -> None:
    with pytest.raises(ModelLoadError, match="Invalid URL"):
        utils.load_document_from_url("https:///model.json")
