"""Product analysis and storyboard script generation via Gemini."""

import json
import logging

from google.genai import types

from models.catalog import (
    DOMESTIC_MARKET,
    VOICE_OPTIONS,
    MarketProfile,
    PlatformProfile,
    find_platform,
    resolve_market,
    style_directive,
)
from models.product import GenerationSettings, ProductInput
from models.storyboard import SCENE_TEXT_FIELDS, AnalysisResult, SceneDraft, ScenePrompt
from services.context import StudioContext
from services.genai_client import inline_part, text_part
from services.manifest import format_manifest, serialize_manifest
from services.prompts import (
    CREATIVE_DIRECTOR_V1,
    DOMESTIC_ETHNICITY_RULE,
    PROMPT_VERSIONS,
    SCRIPT_REQUEST_DETAILS,
    SCRIPT_REQUEST_V1,
    SCRIPT_REQUEST_VIDEO_CLAUSE,
    strip_markdown_code_blocks,
)
from utils.errors import ParseError
from utils.retry import with_model_fallback

logger = logging.getLogger(__name__)

STRATEGY_FIELDS = (
    "productType",
    "sellingPoints",
    "targetAudience",
    "hook",
    "painPoints",
    "strategy",
    "assignedVoice",
)

IMAGE_MIME_TYPE = "image/jpeg"


def build_response_schema() -> types.Schema:
    """Strict output schema: strategy strings plus an ordered scene array."""
    string = types.Schema(type=types.Type.STRING)
    scene = types.Schema(
        type=types.Type.OBJECT,
        properties={name: string for name in SCENE_TEXT_FIELDS},
        required=list(SCENE_TEXT_FIELDS),
    )
    properties = {name: string for name in STRATEGY_FIELDS}
    properties["scenes"] = types.Schema(type=types.Type.ARRAY, items=scene)
    return types.Schema(type=types.Type.OBJECT, properties=properties)


def build_system_instruction(platform: PlatformProfile, market: MarketProfile) -> str:
    """Creative director instruction for a resolved platform and market."""
    return CREATIVE_DIRECTOR_V1.format(
        platform_label=platform.label,
        platform_scope=platform.scope.value,
        market_label=market.label,
        language=market.language,
        culture=market.culture,
        style_directive=style_directive(platform),
        ethnicity_rule=DOMESTIC_ETHNICITY_RULE if market.value == DOMESTIC_MARKET else "",
    )


def build_request_text(
    product: ProductInput,
    scene_count: int,
    platform: PlatformProfile,
    market: MarketProfile,
) -> str:
    text = SCRIPT_REQUEST_V1.format(
        scene_count=scene_count,
        title=product.title or "the product",
        platform_label=platform.label,
        market_label=market.label,
    )
    if product.has_reference_video:
        text += SCRIPT_REQUEST_VIDEO_CLAUSE
    text += SCRIPT_REQUEST_DETAILS.format(
        description=product.description or "Not specified",
        creative_ideas=product.creative_ideas or "Open",
    )
    return text


def build_request_parts(
    product: ProductInput,
    scene_count: int,
    platform: PlatformProfile,
    market: MarketProfile,
) -> list[types.Part]:
    """Media first (product, model, background images, then video), text last."""
    parts = [inline_part(image, IMAGE_MIME_TYPE) for image in product.all_images()]
    if product.has_reference_video:
        video = product.reference_video
        parts.append(inline_part(video.data, video.mime_type))
    parts.append(text_part(build_request_text(product, scene_count, platform, market)))
    return parts


def parse_analysis_json(text: str | None) -> dict:
    """Strip code fences and parse the analysis response.

    Raises:
        ParseError: Unparsable JSON, or no scenes array
    """
    cleaned = strip_markdown_code_blocks(text or "{}")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error in analysis response: {e}")
        logger.debug(f"Raw response: {cleaned[:500]}")
        raise ParseError(f"Failed to parse analysis JSON: {e}") from e

    if not isinstance(data, dict):
        logger.error(f"Analysis response is not an object: {type(data).__name__}")
        raise ParseError("Analysis response is not a JSON object")

    scenes = data.get("scenes")
    if not isinstance(scenes, list) or not scenes:
        logger.error("Analysis response has no scenes")
        raise ParseError("Analysis response has no scenes")
    return data


def repair_scenes(raw_scenes: list) -> list[SceneDraft]:
    """Build SceneDrafts, making ids present and unique.

    Non-dict entries are skipped; missing text fields become empty strings.
    """
    scenes: list[SceneDraft] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(raw_scenes):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping non-object scene at index {index}")
            continue

        scene = SceneDraft.from_dict(raw)
        scene_id = scene.id.strip() or f"scene-{index + 1}"
        if scene_id in seen_ids:
            suffix = 2
            while f"{scene_id}-{suffix}" in seen_ids:
                suffix += 1
            scene_id = f"{scene_id}-{suffix}"
        seen_ids.add(scene_id)
        scene.id = scene_id

        missing = [name for name in SCENE_TEXT_FIELDS if not getattr(scene, name)]
        if missing:
            logger.warning(f"Scene {scene_id} is missing fields: {missing}")

        scene.prompt = ScenePrompt(image_prompt=serialize_manifest(format_manifest(scene)))
        scenes.append(scene)

    if not scenes:
        raise ParseError("No valid scenes in analysis response")
    return scenes


class ScriptService:
    """Generates the marketing analysis and storyboard for a product."""

    def __init__(self, context: StudioContext):
        """Initialize the script service.

        Args:
            context: Resolved client, model names and retry policy
        """
        self.context = context

    async def analyze_product(
        self,
        product: ProductInput,
        settings: GenerationSettings,
    ) -> AnalysisResult:
        """Analyze product media and generate a storyboard script.

        Args:
            product: Uploaded product media and text
            settings: Generation settings; scene_count is the requested count
                and is updated to the number of scenes actually returned

        Returns:
            AnalysisResult with one manifest-bearing SceneDraft per scene

        Raises:
            ValidationError: No product image and no reference video
            ParseError: The model response could not be parsed
            ServiceError: Remote failure after retries and fallback
        """
        product.validate()

        platform = find_platform(product.platform)
        market = resolve_market(platform, product.target_market)

        logger.info(
            f"Analyzing product '{product.title[:60]}': platform={platform.value}, "
            f"market={market.value}, scenes={settings.scene_count}, "
            f"images={len(product.all_images())}, video={product.has_reference_video}, "
            f"prompt={PROMPT_VERSIONS['analyze_product']}"
        )

        parts = build_request_parts(product, settings.scene_count, platform, market)
        contents = types.Content(role="user", parts=parts)
        config = types.GenerateContentConfig(
            system_instruction=build_system_instruction(platform, market),
            response_mime_type="application/json",
            response_schema=build_response_schema(),
        )

        client = self.context.client
        models = self.context.models

        def request(model: str):
            return lambda: client.generate_content(model=model, contents=contents, config=config)

        response = await with_model_fallback(
            lambda: self.context.call(request(models.analysis)),
            lambda: self.context.call(request(models.analysis_fallback)),
            label="analyze_product",
        )

        data = parse_analysis_json(getattr(response, "text", None))
        scenes = repair_scenes(data["scenes"])

        result = AnalysisResult(
            product_type=str(data.get("productType") or ""),
            selling_points=str(data.get("sellingPoints") or ""),
            target_audience=str(data.get("targetAudience") or ""),
            hook=str(data.get("hook") or ""),
            pain_points=str(data.get("painPoints") or ""),
            strategy=str(data.get("strategy") or ""),
            assigned_voice=self.context.rng.choice(VOICE_OPTIONS),
            scenes=scenes,
        )

        if len(scenes) != settings.scene_count:
            logger.info(
                f"Model returned {len(scenes)} scenes (requested {settings.scene_count})"
            )
        settings.scene_count = len(scenes)

        logger.info(
            f"Analysis complete: {len(scenes)} scenes, voice={result.assigned_voice}"
        )
        return result
