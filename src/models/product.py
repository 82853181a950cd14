"""Product input and generation settings models."""

from dataclasses import dataclass, field
from enum import Enum

from utils.errors import ValidationError

MIN_SCENE_COUNT = 1
MAX_SCENE_COUNT = 10


class AspectRatio(str, Enum):
    """Output aspect ratio for scene images."""

    RATIO_1_1 = "1:1"
    RATIO_16_9 = "16:9"
    RATIO_9_16 = "9:16"
    RATIO_4_3 = "4:3"
    RATIO_3_4 = "3:4"


class ImageResolution(str, Enum):
    """Image size accepted by the primary image model."""

    RES_1K = "1K"
    RES_2K = "2K"
    RES_4K = "4K"


class VideoMode(str, Enum):
    """Downstream video generation mode."""

    STANDARD = "standard"
    FAST = "fast"


@dataclass
class ReferenceVideo:
    """A single uploaded reference video (base64 + mime type)."""

    data: str
    mime_type: str = "video/mp4"


@dataclass
class ProductInput:
    """Everything the user uploaded or typed for one product."""

    images: list[str] = field(default_factory=list)
    title: str = ""
    description: str = ""
    creative_ideas: str = ""
    platform: str = "tiktok"
    target_market: str = "US"
    model_images: list[str] = field(default_factory=list)
    background_images: list[str] = field(default_factory=list)
    reference_video: ReferenceVideo | None = None

    @property
    def has_reference_video(self) -> bool:
        return self.reference_video is not None and bool(self.reference_video.data)

    def all_images(self) -> list[str]:
        """Product, model and background images in request order."""
        return [*self.images, *self.model_images, *self.background_images]

    def validate(self) -> None:
        """Reject input that cannot drive script generation.

        Raises:
            ValidationError: No product image and no reference video
        """
        if not self.images and not self.has_reference_video:
            raise ValidationError("请至少上传一张产品图片或参考视频以启动分析")


@dataclass
class GenerationSettings:
    """Per-project generation settings."""

    aspect_ratio: AspectRatio = AspectRatio.RATIO_9_16
    image_resolution: ImageResolution = ImageResolution.RES_2K
    video_mode: VideoMode = VideoMode.STANDARD
    scene_count: int = 1

    def __post_init__(self):
        self.aspect_ratio = AspectRatio(self.aspect_ratio)
        self.image_resolution = ImageResolution(self.image_resolution)
        self.video_mode = VideoMode(self.video_mode)
        if not MIN_SCENE_COUNT <= self.scene_count <= MAX_SCENE_COUNT:
            raise ValidationError(
                f"场景数量必须在 {MIN_SCENE_COUNT} 到 {MAX_SCENE_COUNT} 之间 (got {self.scene_count})"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary for the UI layer."""
        return {
            "aspectRatio": self.aspect_ratio.value,
            "imageResolution": self.image_resolution.value,
            "videoMode": self.video_mode.value,
            "sceneCount": self.scene_count,
        }
