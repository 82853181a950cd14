"""Models for AI script analysis and storyboard scenes."""

from dataclasses import dataclass, field, fields
from typing import Union

SCENE_TEXT_FIELDS = (
    "id",
    "visual",
    "visual_en",
    "action",
    "action_en",
    "camera",
    "camera_en",
    "dialogue",
    "dialogue_cn",
)


@dataclass
class ScenePrompt:
    """Derived prompts for a scene. image_prompt holds the serialized manifest."""

    image_prompt: str = ""


@dataclass
class SceneDraft:
    """A single storyboard scene.

    visual/action/camera are Chinese (UI-facing); the *_en variants are
    English for the generation models. dialogue is in the market language,
    dialogue_cn its Chinese translation.
    """

    id: str
    visual: str = ""
    visual_en: str = ""
    action: str = ""
    action_en: str = ""
    camera: str = ""
    camera_en: str = ""
    dialogue: str = ""
    dialogue_cn: str = ""
    prompt: ScenePrompt = field(default_factory=ScenePrompt)
    image_data: str | None = None
    audio_data: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "SceneDraft":
        """Build a scene from a response or UI dict (unknown keys ignored)."""
        kwargs = {name: str(data.get(name) or "") for name in SCENE_TEXT_FIELDS}
        prompt = data.get("prompt") or {}
        kwargs["prompt"] = ScenePrompt(
            image_prompt=str(prompt.get("imagePrompt") or prompt.get("image_prompt") or "")
        )
        kwargs["image_data"] = data.get("image_data") or data.get("imageData")
        kwargs["audio_data"] = data.get("audio_data") or data.get("audioData")
        return cls(**kwargs)

    def update(self, **changes) -> "SceneDraft":
        """Apply user edits in place."""
        allowed = {f.name for f in fields(self)}
        unknown = set(changes) - allowed
        if unknown:
            raise AttributeError(f"Unknown scene fields: {sorted(unknown)}")
        for name, value in changes.items():
            setattr(self, name, value)
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for the UI layer."""
        data = {name: getattr(self, name) for name in SCENE_TEXT_FIELDS}
        data["prompt"] = {"imagePrompt": self.prompt.image_prompt}
        data["imageData"] = self.image_data
        data["audioData"] = self.audio_data
        return data


@dataclass
class AnalysisResult:
    """Marketing analysis plus the ordered storyboard."""

    product_type: str = ""
    selling_points: str = ""
    target_audience: str = ""
    hook: str = ""
    pain_points: str = ""
    strategy: str = ""
    assigned_voice: str = ""
    scenes: list[SceneDraft] = field(default_factory=list)

    def find_scene(self, scene_id: str) -> SceneDraft | None:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    def replace_scene(self, scene: SceneDraft) -> None:
        """Replace the scene with the same id.

        Raises:
            KeyError: No scene with that id
        """
        for index, existing in enumerate(self.scenes):
            if existing.id == scene.id:
                self.scenes[index] = scene
                return
        raise KeyError(scene.id)

    def to_dict(self) -> dict:
        """Convert to dictionary for the UI layer."""
        return {
            "productType": self.product_type,
            "sellingPoints": self.selling_points,
            "targetAudience": self.target_audience,
            "hook": self.hook,
            "painPoints": self.pain_points,
            "strategy": self.strategy,
            "assignedVoice": self.assigned_voice,
            "scenes": [s.to_dict() for s in self.scenes],
        }


@dataclass(frozen=True)
class RawTextPrompt:
    """Free text used verbatim (e.g. an edit instruction)."""

    text: str


@dataclass(frozen=True)
class ManifestPrompt:
    """A production manifest document."""

    document: dict


PromptInput = Union[RawTextPrompt, ManifestPrompt]
