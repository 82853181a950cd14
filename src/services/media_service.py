"""Per-scene media generation: images, speech and manifest regeneration."""

import base64
import logging
from typing import Sequence, Union

from google.genai import types

from models.catalog import validate_voice
from models.product import AspectRatio, ImageResolution
from models.storyboard import PromptInput, SceneDraft
from services.audio_transcoder import pcm_to_wav, wav_duration_seconds
from services.context import StudioContext
from services.genai_client import first_inline_data, inline_part, text_part
from services.manifest import prompt_input_from_text, resolve_image_prompt
from services.prompts import (
    PROMPT_VERSIONS,
    VEO_MANIFEST_CONVERTER_V1,
    VEO_MANIFEST_REQUEST,
    strip_markdown_code_blocks,
)
from utils.errors import MissingPayloadError, ValidationError
from utils.retry import with_model_fallback

logger = logging.getLogger(__name__)

REFERENCE_IMAGE_MIME_TYPE = "image/jpeg"


class MediaService:
    """Scene-level Gemini calls: image, speech and manifest text."""

    def __init__(self, context: StudioContext):
        """Initialize the media service.

        Args:
            context: Resolved client, model names and retry policy
        """
        self.context = context

    async def generate_image(
        self,
        prompt: Union[PromptInput, str],
        aspect_ratio: AspectRatio | str,
        resolution: ImageResolution | str,
        reference_images: Sequence[str] = (),
    ) -> str:
        """Generate or edit a scene image.

        Reference images go first, in the given order, so the first one acts
        as the base for edits. On quota exhaustion the fallback image model is
        used without an image size option, since it does not accept one.

        Args:
            prompt: Manifest (flattened to a cinematic prompt) or raw text
                (used verbatim as an edit instruction). Plain strings are
                sniffed: stored manifest JSON is treated as a manifest
            aspect_ratio: Output aspect ratio
            resolution: Output size for the primary model
            reference_images: Base64 images; only the first few are sent

        Returns:
            Base64 image data, or "" when the response carried no image

        Raises:
            ValidationError: Unknown aspect ratio or resolution
        """
        if isinstance(prompt, str):
            prompt = prompt_input_from_text(prompt)
        try:
            aspect_ratio = AspectRatio(aspect_ratio).value
            resolution = ImageResolution(resolution).value
        except ValueError as e:
            raise ValidationError(f"不支持的图片参数: {e}") from e

        text_prompt = resolve_image_prompt(prompt)
        references = list(reference_images)[: self.context.max_reference_images]
        parts = [inline_part(ref, REFERENCE_IMAGE_MIME_TYPE) for ref in references]
        parts.append(text_part(text_prompt))
        contents = types.Content(role="user", parts=parts)

        primary_config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio, image_size=resolution),
        )
        fallback_config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        )

        client = self.context.client
        models = self.context.models

        logger.info(
            f"Generating image (aspect={aspect_ratio}, size={resolution}, "
            f"references={len(references)})"
        )

        response = await with_model_fallback(
            lambda: self.context.call(
                lambda: client.generate_content(
                    model=models.image, contents=contents, config=primary_config
                )
            ),
            lambda: self.context.call(
                lambda: client.generate_content(
                    model=models.image_fallback, contents=contents, config=fallback_config
                )
            ),
            label="generate_image",
        )

        data = first_inline_data(response)
        if not data:
            logger.warning("Image response contained no image data")
            return ""
        return data

    async def generate_speech(self, text: str, voice_name: str = "Kore") -> str:
        """Synthesize voice-over audio.

        Args:
            text: Dialogue to speak
            voice_name: Prebuilt voice; unknown names fall back to the default

        Returns:
            Base64 WAV audio

        Raises:
            ValidationError: Empty text
            MissingPayloadError: The response carried no audio
        """
        if not text or not text.strip():
            raise ValidationError("配音文本不能为空")

        voice = validate_voice(voice_name)
        if voice != voice_name:
            logger.debug(f"Unknown voice {voice_name!r}, using {voice}")

        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                )
            ),
        )
        contents = [types.Content(role="user", parts=[text_part(text)])]
        client = self.context.client

        logger.info(f"Generating speech for {len(text)} characters (voice={voice})")

        response = await self.context.call(
            lambda: client.generate_content(
                model=self.context.models.tts, contents=contents, config=config
            )
        )

        pcm = first_inline_data(response)
        if not pcm:
            raise MissingPayloadError("TTS 服务未返回音频数据。")

        wav = pcm_to_wav(pcm, sample_rate=self.context.tts_sample_rate)
        duration = wav_duration_seconds(base64.b64decode(wav))
        logger.info(f"Speech generation complete: {duration:.2f}s of audio")
        return wav

    async def regenerate_veo_prompt(self, scene: SceneDraft) -> str:
        """Rebuild a scene's manifest text from its current (edited) fields.

        Goes straight to the fast analysis model; this path is user-triggered
        and latency-sensitive.

        Returns:
            Manifest JSON text with code fences stripped
        """
        system_instruction = VEO_MANIFEST_CONVERTER_V1.format(
            visual=scene.visual,
            action=scene.action,
            camera=scene.camera,
            dialogue=scene.dialogue,
        )
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
        )
        contents = types.Content(role="user", parts=[text_part(VEO_MANIFEST_REQUEST)])
        client = self.context.client

        logger.info(
            f"Regenerating manifest for scene {scene.id} "
            f"(prompt={PROMPT_VERSIONS['regenerate_veo_prompt']})"
        )

        response = await self.context.call(
            lambda: client.generate_content(
                model=self.context.models.analysis_fallback,
                contents=contents,
                config=config,
            )
        )
        return strip_markdown_code_blocks(getattr(response, "text", None) or "{}")
