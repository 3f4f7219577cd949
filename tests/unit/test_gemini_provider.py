"""Tests for the Gemini image model and design analyzer adapters."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.ai.providers import gemini
from app.mockups.errors import JobTransientError
from app.mockups.models import DEFAULT_DESIGN_ANALYSIS, ReferenceImage


class _FakeModels:
  def __init__(self, response: SimpleNamespace) -> None:
    self.response = response
    self.requests: list[dict] = []

  async def generate_content(self, **kwargs):
    self.requests.append(kwargs)
    return self.response


def _install_client(monkeypatch: pytest.MonkeyPatch, response: SimpleNamespace) -> _FakeModels:
  models = _FakeModels(response)
  monkeypatch.setattr(gemini.genai, "Client", lambda api_key: SimpleNamespace(aio=SimpleNamespace(models=models)))
  return models


def _image_response(data: bytes | None) -> SimpleNamespace:
  inline = SimpleNamespace(data=data, mime_type="image/jpeg") if data is not None else None
  part = SimpleNamespace(inline_data=inline, text=None if data else "I cannot draw that.")
  return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def test_missing_api_key_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.delenv("GEMINI_API_KEY", raising=False)
  with pytest.raises(ValueError, match="GEMINI_API_KEY"):
    gemini.GeminiImageModel("gemini-3-pro-image-preview")


@pytest.mark.anyio
async def test_image_model_sends_references_before_prompt(monkeypatch: pytest.MonkeyPatch) -> None:
  models = _install_client(monkeypatch, _image_response(b"jpeg-bytes"))
  model = gemini.GeminiImageModel("gemini-3-pro-image-preview", api_key="test-key")

  references = (ReferenceImage(b"design", "image/png", "design"), ReferenceImage(b"face", "image/png", "persona"))
  image = await model.generate_image("Render the mockup.", negative_prompt="blurry, watermark", reference_images=references)

  assert image.data == b"jpeg-bytes"
  assert image.mime_type == "image/jpeg"
  request = models.requests[0]
  assert request["model"] == "gemini-3-pro-image-preview"
  parts = request["contents"][0].parts
  assert len(parts) == 3
  assert parts[0].inline_data.data == b"design"
  assert parts[1].inline_data.data == b"face"
  assert parts[2].text == "Render the mockup.\n\nMUST AVOID: blurry, watermark"


@pytest.mark.anyio
async def test_image_model_keeps_prompt_that_already_lists_negatives(monkeypatch: pytest.MonkeyPatch) -> None:
  models = _install_client(monkeypatch, _image_response(b"png"))
  model = gemini.GeminiImageModel("image-model", api_key="test-key")

  await model.generate_image("Shot.\nMUST AVOID: blurry", negative_prompt="blurry")

  assert models.requests[0]["contents"][0].parts[-1].text == "Shot.\nMUST AVOID: blurry"


@pytest.mark.anyio
async def test_text_only_response_is_transient(monkeypatch: pytest.MonkeyPatch) -> None:
  _install_client(monkeypatch, _image_response(None))
  model = gemini.GeminiImageModel("image-model", api_key="test-key")

  with pytest.raises(JobTransientError, match="No image data"):
    await model.generate_image("Shot.")


@pytest.mark.anyio
async def test_design_analyzer_parses_fenced_json(monkeypatch: pytest.MonkeyPatch) -> None:
  text = '```json\n{"dominant_colors": ["#112233"], "style": "vintage", "design_type": "text", "has_transparency": true}\n```'
  _install_client(monkeypatch, SimpleNamespace(text=text))
  analyzer = gemini.GeminiDesignAnalyzer("gemini-2.5-flash", api_key="test-key")

  analysis = await analyzer.analyze(b"png", "image/png")

  assert analysis.dominant_colors == ("#112233",)
  assert analysis.style == "vintage"
  assert analysis.has_transparency is True
  assert analysis.complexity == DEFAULT_DESIGN_ANALYSIS.complexity


@pytest.mark.anyio
async def test_design_analyzer_rejects_invalid_json(monkeypatch: pytest.MonkeyPatch) -> None:
  _install_client(monkeypatch, SimpleNamespace(text="not json"))
  analyzer = gemini.GeminiDesignAnalyzer("gemini-2.5-flash", api_key="test-key")

  with pytest.raises(RuntimeError, match="invalid JSON"):
    await analyzer.analyze(b"png", "image/png")


def test_strip_json_fences_leaves_plain_json() -> None:
  assert gemini.strip_json_fences(' {"a": 1} ') == '{"a": 1}'
  assert gemini.strip_json_fences('```\n{"a": 1}\n```') == '{"a": 1}'


def test_payload_defaults_and_color_cap() -> None:
  analysis = gemini.design_analysis_from_payload({"dominant_colors": [f"#00000{i}" for i in range(8)], "aop_accent_color": "#ABCDEF"})
  assert len(analysis.dominant_colors) == 5
  assert analysis.aop_accent_color == "#ABCDEF"
  assert gemini.design_analysis_from_payload({"dominant_colors": []}).dominant_colors == DEFAULT_DESIGN_ANALYSIS.dominant_colors
