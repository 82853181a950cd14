"""Integration tests for the studio facade.

Runs script analysis, per-scene media generation and manifest regeneration
end-to-end against a mocked google-genai client.
"""

import base64
import json
import random
from unittest.mock import AsyncMock, patch

import pytest

from models.product import GenerationSettings, ProductInput
from models.storyboard import SceneDraft
from services.credentials import CredentialProvider
from services.manifest import scene_prompt_input
from studio import CreativeStudio, describe_error
from utils.errors import (
    CredentialError,
    MissingPayloadError,
    ParseError,
    QuotaExhaustedError,
    ValidationError,
)


def _scene(i: int) -> dict:
    return {
        "id": f"s{i}",
        "visual": f"镜头{i}",
        "visual_en": f"Shot {i} of the mug on a desk",
        "action": "倒入咖啡",
        "action_en": "Coffee is poured into the mug",
        "camera": "俯拍",
        "camera_en": "Top-down",
        "dialogue": f"Line {i}",
        "dialogue_cn": f"台词{i}",
    }


@pytest.fixture
def studio(sample_config, fake_genai, sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    credentials = CredentialProvider(
        custom_api_key="user-key",
        client_factory=lambda api_key: fake_genai,
    )
    return CreativeStudio(
        config=sample_config,
        credentials=credentials,
        rng=random.Random(1),
        sleep=fake_sleep,
    )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_full_storyboard_flow(studio, fake_genai, response_factory, sample_product):
    """Analyze, then render image and voice-over for every scene."""
    analysis = {
        "productType": "Drinkware",
        "hook": "Hot coffee at 3pm",
        "scenes": [_scene(1), _scene(2)],
    }
    fake_genai.aio.models.generate_content.side_effect = [
        response_factory(text=json.dumps(analysis)),
        response_factory(inline=b"image-1"),
        response_factory(inline=b"\x00\x00" * 10),
        response_factory(inline=b"image-2"),
        response_factory(inline=b"\x00\x00" * 10),
    ]
    settings = GenerationSettings(scene_count=2)

    result = await studio.analyze_product(sample_product, settings)

    for scene in result.scenes:
        image = await studio.generate_image(
            scene_prompt_input(scene), settings.aspect_ratio, settings.image_resolution
        )
        audio = await studio.generate_speech(scene.dialogue, result.assigned_voice)
        result.replace_scene(scene.update(image_data=image, audio_data=audio))

    data = result.to_dict()
    assert [s["id"] for s in data["scenes"]] == ["s1", "s2"]
    assert base64.b64decode(data["scenes"][0]["imageData"]) == b"image-1"
    assert base64.b64decode(data["scenes"][1]["imageData"]) == b"image-2"
    assert len(base64.b64decode(data["scenes"][0]["audioData"])) == 64

    image_request = fake_genai.aio.models.generate_content.call_args_list[1].kwargs
    assert image_request["contents"].parts[-1].text.startswith(
        "Top-down shot of Coffee is poured into the mug."
    )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_regenerate_after_edit(studio, fake_genai, response_factory, sample_scene_dict):
    fake_genai.aio.models.generate_content.return_value = response_factory(
        text='```json\n{"veo_production_manifest": {"version": "4.0"}}\n```'
    )
    scene = SceneDraft.from_dict(sample_scene_dict).update(action="她把杯子放进包里")

    text = await studio.regenerate_veo_prompt(scene)

    assert json.loads(text) == {"veo_production_manifest": {"version": "4.0"}}
    request = fake_genai.aio.models.generate_content.call_args.kwargs
    assert "她把杯子放进包里" in str(request["config"].system_instruction)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_regenerated_manifest_drives_image(studio, fake_genai, response_factory, sample_scene_dict):
    """A free-form regenerated manifest stored on the scene still renders an image."""
    regenerated = '{"veo_production_manifest": {"timeline_script": [{"elements": {"visuals": "A woman sips coffee"}}]}}'
    fake_genai.aio.models.generate_content.side_effect = [
        response_factory(text=regenerated),
        response_factory(inline=b"image"),
    ]
    scene = SceneDraft.from_dict(sample_scene_dict)

    scene.prompt.image_prompt = await studio.regenerate_veo_prompt(scene)
    image = await studio.generate_image(scene.prompt.image_prompt, "9:16", "2K")

    assert base64.b64decode(image) == b"image"
    sent = fake_genai.aio.models.generate_content.call_args.kwargs["contents"].parts[-1].text
    assert json.loads(sent) == json.loads(regenerated)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_validation_before_credentials(sample_config, fake_genai):
    credentials = CredentialProvider(client_factory=lambda api_key: fake_genai)
    credentials.resolve_client = AsyncMock()
    studio = CreativeStudio(config=sample_config, credentials=credentials)

    with pytest.raises(ValidationError) as exc_info:
        await studio.analyze_product(ProductInput(), GenerationSettings())

    credentials.resolve_client.assert_not_awaited()
    assert describe_error(exc_info.value) == "错误: 请至少上传一张产品图片或参考视频以启动分析"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_missing_credentials(sample_config, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    config = dict(sample_config, gemini_api_key=None)
    studio = CreativeStudio(config=config)

    with pytest.raises(CredentialError):
        await studio.generate_speech("Hello")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_custom_key_used_for_client(sample_config, fake_genai, response_factory):
    keys = []

    def factory(api_key):
        keys.append(api_key)
        return fake_genai

    fake_genai.aio.models.generate_content.return_value = response_factory(inline=b"\x00\x00")
    studio = CreativeStudio(
        config=dict(sample_config, gemini_api_key="env-key"),
        credentials=CredentialProvider(environment_key="env-key", client_factory=factory),
    )

    await studio.generate_speech("Hello")
    studio.set_custom_api_key("user-key")
    await studio.generate_speech("Hello")

    assert keys == ["env-key", "user-key"]


@pytest.mark.integration
def test_logging_configured_from_settings(sample_config):
    config = dict(sample_config, log_level="DEBUG", log_json=True)

    with patch("studio.setup_logging") as mock_setup:
        CreativeStudio(config=config, configure_logging=True)
        CreativeStudio(config=config)

    mock_setup.assert_called_once_with("DEBUG", json_output=True)


@pytest.mark.integration
def test_invalid_config_rejected(sample_config):
    with pytest.raises(ValueError, match="MAX_REFERENCE_IMAGES"):
        CreativeStudio(config=dict(sample_config, max_reference_images=0))


class TestDescribeError:
    """Tests for user-facing error messages."""

    @pytest.mark.integration
    def test_quota_message(self, api_error):
        expected = "API 配额耗尽 (429): 请稍后重试。"

        assert describe_error(QuotaExhaustedError("quota")) == expected
        assert describe_error(api_error(429, "Too Many Requests")) == expected
        assert describe_error(Exception("RESOURCE_EXHAUSTED")) == expected

    @pytest.mark.integration
    def test_studio_errors(self):
        assert describe_error(ParseError("bad json")) == "无法解析 AI 返回的分析结果，请重试。"
        assert describe_error(MissingPayloadError("TTS 服务未返回音频数据。")) == (
            "TTS 服务未返回音频数据。"
        )

    @pytest.mark.integration
    def test_unknown_errors(self):
        assert describe_error(RuntimeError("boom")) == "系统错误: boom"
        assert describe_error(RuntimeError()) == "系统错误: 未知错误"

    @pytest.mark.integration
    def test_quota_words_in_local_errors_keep_their_message(self):
        """Only remote failures are reported as quota exhaustion."""
        assert describe_error(ParseError("token budget exhausted mid-JSON")) == (
            "无法解析 AI 返回的分析结果，请重试。"
        )
        assert describe_error(ValidationError("quota field missing")) == "错误: quota field missing"
        assert describe_error(QuotaExhaustedError("limit")) == "API 配额耗尽 (429): 请稍后重试。"
