"""
Storyboard Models

Immutable data contracts shared by the request builders, the response parser,
the merger and the prompt assembler. Wire names are camelCase; Python
attributes are snake_case.
"""

from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

from storygrid.core.constants import Language


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BilingualText(_Frozen):
    """A paired English / Chinese text value."""
    en: str
    cn: str

    def get(self, language: Language) -> str:
        return self.cn if Language(language) is Language.CN else self.en


# The scene prompt is a plain bilingual pair; kept as a name for readability
ScenePrompt = BilingualText


def _empty_text() -> BilingualText:
    return BilingualText(en="", cn="")


class Shot(_Frozen):
    """One still-frame description; ``id`` is the 1-based position."""
    id: int = Field(..., ge=1)
    description: BilingualText


class Transition(_Frozen):
    """Camera / subject motion bridging two consecutive shots."""
    from_shot: int = Field(..., alias="fromShot")
    to_shot: int = Field(..., alias="toShot")
    prompt: BilingualText


class StoryboardResult(_Frozen):
    """A full storyboard snapshot."""
    scene_prompt: BilingualText = Field(default_factory=_empty_text, alias="scenePrompt")
    shots: Tuple[Shot, ...] = ()
    transitions: Tuple[Transition, ...] = ()

    @property
    def shot_count(self) -> int:
        return len(self.shots)

    @property
    def is_empty(self) -> bool:
        return not self.shots and not self.scene_prompt.en and not self.scene_prompt.cn

    def to_wire(self) -> Dict[str, Any]:
        """Render the camelCase JSON shape the model is asked to produce."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "StoryboardResult":
        return cls.model_validate(data)
