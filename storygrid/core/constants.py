"""
Storygrid Constants

Closed vocabularies shared by the request builders, the parser and the API:
shot sizes, grid layouts, aspect ratios and output languages.
"""

from enum import Enum
from typing import Dict

# =============================================================================
# MODEL DEFAULTS
# =============================================================================

# Full storyboard generation needs multimodal reasoning over the references
DEFAULT_STORYBOARD_MODEL = "gemini-3-pro-preview"
# Single-shot rewrites are text only
DEFAULT_SHOT_MODEL = "gemini-3-flash-preview"

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
JSON_MIME_TYPE = "application/json"


# =============================================================================
# LANGUAGE
# =============================================================================

class Language(str, Enum):
    """Output language for bilingual fields."""
    EN = "en"
    CN = "cn"


# =============================================================================
# SHOT SIZES
# =============================================================================

class ShotSize(str, Enum):
    """Camera framing / angle vocabulary offered for each shot."""
    EXTREME_WIDE = "Extreme Wide Shot"
    WIDE = "Wide Shot"
    FULL = "Full Shot"
    MEDIUM = "Medium Shot"
    CLOSE_UP = "Close-up"
    EXTREME_CLOSE_UP = "Extreme Close-up"
    LOW_ANGLE = "Low Angle"
    HIGH_ANGLE = "High Angle"
    OVER_THE_SHOULDER = "Over the Shoulder"
    POINT_OF_VIEW = "POV"
    BIRDS_EYE = "Bird's Eye View"

    def label(self, language: "Language" = Language.EN) -> str:
        """Display label in the given language."""
        return SHOT_SIZE_LABELS[self][Language(language).value]


SHOT_SIZE_LABELS: Dict[ShotSize, Dict[str, str]] = {
    ShotSize.EXTREME_WIDE: {"en": "Extreme Wide Shot", "cn": "大远景"},
    ShotSize.WIDE: {"en": "Wide Shot", "cn": "全景"},
    ShotSize.FULL: {"en": "Full Shot", "cn": "全身镜头"},
    ShotSize.MEDIUM: {"en": "Medium Shot", "cn": "中景"},
    ShotSize.CLOSE_UP: {"en": "Close-up", "cn": "特写"},
    ShotSize.EXTREME_CLOSE_UP: {"en": "Extreme Close-up", "cn": "大特写"},
    ShotSize.LOW_ANGLE: {"en": "Low Angle", "cn": "仰拍"},
    ShotSize.HIGH_ANGLE: {"en": "High Angle", "cn": "俯拍"},
    ShotSize.OVER_THE_SHOULDER: {"en": "Over the Shoulder", "cn": "过肩镜头"},
    ShotSize.POINT_OF_VIEW: {"en": "POV", "cn": "主观视角"},
    ShotSize.BIRDS_EYE: {"en": "Bird's Eye View", "cn": "鸟瞰图"},
}


# =============================================================================
# GRID LAYOUT
# =============================================================================

class GridLayout(str, Enum):
    """Grid arrangement of the storyboard; fixes the shot count."""
    GRID_3X3 = "3x3"
    GRID_2X2 = "2x2"

    @property
    def shot_count(self) -> int:
        return 9 if self is GridLayout.GRID_3X3 else 4

    @property
    def transition_count(self) -> int:
        return self.shot_count - 1

    @classmethod
    def for_shot_count(cls, count: int) -> "GridLayout":
        for layout in cls:
            if layout.shot_count == count:
                return layout
        raise ValueError(f"No grid layout holds {count} shots")


# =============================================================================
# ASPECT RATIO
# =============================================================================

class AspectRatio(str, Enum):
    """Target aspect ratio, passed through as a rendering hint."""
    WIDE = "16:9"
    TALL = "9:16"
    STANDARD = "4:3"
    PORTRAIT = "3:4"
    SQUARE = "1:1"


DEFAULT_LAYOUT = GridLayout.GRID_3X3
DEFAULT_ASPECT_RATIO = AspectRatio.WIDE
DEFAULT_LANGUAGE = Language.CN
