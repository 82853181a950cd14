"""Client-side production manifest synthesis.

The manifest is the structured shot document consumed by the downstream
video model. It is built instantly from a scene's fields (no model call) and
later re-read to derive a flat image prompt. The scaffolding constants are
fixed so the document shape stays stable across scenes.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, Union

from models.storyboard import (
    ManifestPrompt,
    PromptInput,
    RawTextPrompt,
    SceneDraft,
)

logger = logging.getLogger(__name__)

MANIFEST_ROOT = "veo_production_manifest"
MANIFEST_VERSION = "4.0"

POSITIVE_MANDATES = [
    "The video MUST start with the provided start frame.",
    "Maintenance of texture, lighting, and resolution from the start frame is critical at 0s, 2s, 4s, and 6s.",
]
NEGATIVE_MANDATES = [
    "NO smooth or stable camera motion if action is chaotic.",
    "NO morphing of character features.",
    "NO lowering of resolution or quality.",
]

IMAGE_PROMPT_SUFFIX = "photorealistic, 8k, cinematic lighting."

SceneLike = Union[SceneDraft, dict]


def _field(scene: SceneLike, name: str) -> str:
    if isinstance(scene, dict):
        return str(scene.get(name) or "")
    return getattr(scene, name, "") or ""


def _prefer_english(scene: SceneLike, name: str) -> str:
    return _field(scene, f"{name}_en") or _field(scene, name)


def format_manifest(scene: SceneLike) -> dict:
    """Build the production manifest document for a scene.

    English fields are used when present, otherwise the native ones.

    Args:
        scene: SceneDraft or a raw scene dict from the model response

    Returns:
        Manifest document (JSON-serializable dict)
    """
    shot_summary = _prefer_english(scene, "visual")
    return {
        MANIFEST_ROOT: {
            "version": MANIFEST_VERSION,
            "shot_summary": shot_summary,
            "description": "Industrial-grade production manifest.",
            "global_settings": {
                "input_assets": {"reference_image": "Start Frame"},
                "output_specifications": {
                    "resolution": "1080p",
                    "aspect_ratio_lock": {"enabled": True},
                    "color_space": "Rec. 2020",
                    "dynamic_range": "HDR",
                },
                "rendering_pipeline": {
                    "engine": "Physically-Based Rendering (PBR)",
                    "light_transport": "Path Tracing",
                },
            },
            "director_mandates": {
                "positive_mandates": list(POSITIVE_MANDATES),
                "negative_mandates": list(NEGATIVE_MANDATES),
            },
            "timeline_script": [
                {
                    "time_start": "0.0s",
                    "time_end": "8.0s",
                    "description": shot_summary,
                    "elements": {
                        "visuals": {
                            "subject_action": _prefer_english(scene, "action"),
                            "background_action": "Consistent environment",
                            "consistency_check": "At 0s, 2s, 4s, 6s: Ensure absolute consistency.",
                        },
                        "camera": {
                            "primary_movement": _prefer_english(scene, "camera"),
                            "movement_description": "Cinematic execution",
                            "speed": "Normal",
                        },
                        "audio_scape": {
                            "dialogue": {"transcript": _field(scene, "dialogue")},
                            "sfx": ["Ambient noise"],
                            "ambient": "Natural room tone",
                        },
                    },
                }
            ],
        }
    }


def serialize_manifest(document: dict) -> str:
    """Canonical text form of a manifest (2-space indented JSON)."""
    return json.dumps(document, indent=2, ensure_ascii=False)


def parse_manifest(text: str) -> Optional[dict]:
    """Parse stored manifest text.

    Returns:
        The document when text is a JSON object with the manifest root key,
        otherwise None
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(document, dict) and isinstance(document.get(MANIFEST_ROOT), dict):
        return document
    return None


def prompt_input_from_text(text: str) -> PromptInput:
    """Tag stored prompt text as a manifest or raw text prompt."""
    document = parse_manifest(text)
    if document is not None:
        return ManifestPrompt(document)
    return RawTextPrompt(text)


def scene_prompt_input(scene: SceneDraft) -> PromptInput:
    """Prompt input for a scene's stored image prompt, built fresh if empty."""
    if scene.prompt.image_prompt:
        return prompt_input_from_text(scene.prompt.image_prompt)
    return ManifestPrompt(format_manifest(scene))


@dataclass(frozen=True)
class VisualDescription:
    """Visual fields pulled back out of a manifest."""

    visual: str
    camera: str
    description: str


def extract_visual_description(document: dict) -> Optional[VisualDescription]:
    """Read subject action, camera movement and description from a manifest.

    Regenerated manifests are free-form model output, so every level is
    type-checked; any other shape counts as having no subject action.

    Returns:
        VisualDescription, or None when the manifest has no subject action
    """
    manifest = document.get(MANIFEST_ROOT) if isinstance(document, dict) else None
    if not isinstance(manifest, dict):
        return None

    timeline = manifest.get("timeline_script")
    if not isinstance(timeline, list) or not timeline or not isinstance(timeline[0], dict):
        return None
    elements = timeline[0].get("elements")
    if not isinstance(elements, dict):
        return None

    visuals = elements.get("visuals")
    visual = visuals.get("subject_action") if isinstance(visuals, dict) else None
    if not visual or not isinstance(visual, str):
        return None

    camera_block = elements.get("camera")
    camera = camera_block.get("primary_movement") if isinstance(camera_block, dict) else None
    if not isinstance(camera, str):
        camera = ""

    description = manifest.get("description") or manifest.get("shot_summary") or ""
    if not isinstance(description, str):
        description = ""
    return VisualDescription(visual=visual, camera=camera, description=description)


def build_image_prompt(desc: VisualDescription) -> str:
    """Flatten a visual description into a cinematic text prompt."""
    lead = f"{desc.camera} shot of {desc.visual}" if desc.camera else desc.visual
    if desc.description:
        return f"{lead}. {desc.description} {IMAGE_PROMPT_SUFFIX}"
    return f"{lead}. {IMAGE_PROMPT_SUFFIX}"


def resolve_image_prompt(prompt: PromptInput) -> str:
    """Text prompt for image generation from a tagged prompt input."""
    if isinstance(prompt, RawTextPrompt):
        return prompt.text

    desc = extract_visual_description(prompt.document)
    if desc is None:
        logger.warning("Manifest has no subject action, sending it as-is")
        return serialize_manifest(prompt.document)
    return build_image_prompt(desc)
