"""
Prompt Assembler

Renders a storyboard into the flat text block handed to an image model:
an intro sentence describing the grid, then one line per shot.
"""

from typing import List

from storygrid.core.constants import AspectRatio, GridLayout, Language

from .models import StoryboardResult

_INTRO = {
    Language.EN: (
        "Based on [{scene}], generate a cohesive [{grid}] grid image featuring [{count}] different "
        "camera shots in the same environment, strictly maintaining consistency in character/object, "
        "clothing, and lighting, 8K resolution, {ratio} aspect ratio,\n"
    ),
    Language.CN: (
        "根据[{scene}]，生成一张具有凝聚力的[{grid}]网格图像，包含在同一环境中的[{count}]个不同摄像机镜头，"
        "严格保持人物/物体、服装和光线的一致性，8K分辨率，{ratio} 画幅，\n"
    ),
}

_SHOT_LABEL = {Language.EN: "Shot", Language.CN: "镜头"}


def grid_label(shot_count: int) -> str:
    """``3x3`` / ``2x2`` for the known layouts, ``<n>x1`` otherwise."""
    try:
        return GridLayout.for_shot_count(shot_count).value
    except ValueError:
        return f"{shot_count}x1"


def _shot_tag(language: Language, number: int) -> str:
    return f"{_SHOT_LABEL[language]} {number:02d}"


def assemble_prompt(
    result: StoryboardResult,
    language: Language,
    aspect_ratio: AspectRatio = AspectRatio.WIDE,
) -> str:
    """Render scene + shots in ``language``. Transitions are not included."""
    language = Language(language)
    count = len(result.shots)

    lines: List[str] = [
        _INTRO[language].format(
            scene=result.scene_prompt.get(language),
            grid=grid_label(count),
            count=count,
            ratio=AspectRatio(aspect_ratio).value,
        )
    ]
    for number, shot in enumerate(result.shots, start=1):
        lines.append(f"{_shot_tag(language, number)}: {shot.description.get(language)}\n")

    return "".join(lines)


def assemble_transitions(result: StoryboardResult, language: Language) -> str:
    """Render one ``Shot 01 -> Shot 02: ...`` line per transition."""
    language = Language(language)
    return "".join(
        f"{_shot_tag(language, t.from_shot)} -> {_shot_tag(language, t.to_shot)}: {t.prompt.get(language)}\n"
        for t in result.transitions
    )
