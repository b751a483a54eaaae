"""
Storyboard Request Builders

Compose the multimodal request for a full storyboard and the narrower,
text-only request for rewriting one shot. Both are pure functions of their
inputs; nothing here talks to the network.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from storygrid.core.constants import (
    DEFAULT_IMAGE_MIME_TYPE,
    DEFAULT_SHOT_MODEL,
    DEFAULT_STORYBOARD_MODEL,
    JSON_MIME_TYPE,
    AspectRatio,
    GridLayout,
    ShotSize,
)
from storygrid.core.logging_config import get_logger

from .models import BilingualText
from .schemas import shot_schema, storyboard_schema

logger = get_logger("storyboard.request_builder")

_DATA_URL_MIME = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64$")


# =============================================================================
# REQUEST TYPES
# =============================================================================

@dataclass(frozen=True)
class ImagePart:
    """Inline image: base64 body plus its declared media type."""
    data: str
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    def to_payload(self) -> Dict[str, Any]:
        return {"inline_data": {"mime_type": self.mime_type, "data": self.data}}


@dataclass(frozen=True)
class TextPart:
    text: str

    def to_payload(self) -> Dict[str, Any]:
        return {"text": self.text}


Part = Union[ImagePart, TextPart]


@dataclass(frozen=True)
class GenerationRequest:
    """A single generateContent call: ordered parts plus the output contract."""
    model: str
    parts: Tuple[Part, ...]
    response_schema: Dict[str, Any]
    response_mime_type: str = JSON_MIME_TYPE
    temperature: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def image_count(self) -> int:
        return sum(1 for part in self.parts if isinstance(part, ImagePart))

    @property
    def instruction(self) -> str:
        return "\n".join(part.text for part in self.parts if isinstance(part, TextPart))

    def to_payload(self) -> Dict[str, Any]:
        """Render the Gemini REST ``generateContent`` body."""
        generation_config: Dict[str, Any] = {
            "responseMimeType": self.response_mime_type,
            "responseSchema": self.response_schema,
        }
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        return {
            "contents": [{"role": "user", "parts": [part.to_payload() for part in self.parts]}],
            "generationConfig": generation_config,
        }


# =============================================================================
# HELPERS
# =============================================================================

def image_part_from_data_url(encoded: str) -> ImagePart:
    """
    Split a ``data:<type>;base64,<body>`` string into an ImagePart.

    The media type falls back to ``image/jpeg`` when the prefix is missing or
    malformed; a string without a comma is taken as a bare base64 body.
    """
    if "," not in encoded:
        return ImagePart(data=encoded.strip())

    header, body = encoded.split(",", 1)
    match = _DATA_URL_MIME.match(header.strip())
    mime_type = match.group(1) if match else DEFAULT_IMAGE_MIME_TYPE
    if not match:
        logger.debug(f"No media type in image prefix {header[:40]!r}; using {mime_type}")
    return ImagePart(data=body.strip(), mime_type=mime_type)


def _shot_size_value(size: Union[ShotSize, str]) -> str:
    return ShotSize(size).value


def _format_shot_list(shot_sizes: Sequence[Union[ShotSize, str]], num_shots: int) -> str:
    sizes = [_shot_size_value(s) for s in list(shot_sizes)[:num_shots]]
    if len(sizes) < num_shots:
        logger.warning(f"{len(sizes)} shot sizes given for {num_shots} shots")
    return ", ".join(f"Shot {i}: {size}" for i, size in enumerate(sizes, start=1))


# =============================================================================
# FULL STORYBOARD
# =============================================================================

def build_storyboard_instruction(
    shot_sizes: Sequence[Union[ShotSize, str]],
    layout: GridLayout,
    aspect_ratio: AspectRatio,
) -> str:
    """The text part of a full storyboard request."""
    layout = GridLayout(layout)
    num_shots = layout.shot_count
    num_transitions = layout.transition_count
    ratio = AspectRatio(aspect_ratio).value

    return f"""Analyze the provided reference images to extract key visual elements (Subject, Clothing, Environment, Lighting, Mood).
Then, generate a professional storyboard with {num_shots} shots arranged as a {layout.value} grid.
The requested camera shot sizes are: {_format_shot_list(shot_sizes, num_shots)}.
The target aspect ratio of every shot is {ratio}.

Next, write {num_transitions} transition prompts, one for each consecutive pair of shots
(Shot 1 -> Shot 2, ..., Shot {num_shots - 1} -> Shot {num_shots}). Each transition describes the camera
movement, the subject's motion and what must stay continuous between the two shots, so it can drive
a video generation step.

Return the result as JSON with both English (en) and Chinese (cn) text for every field:
- "scenePrompt": the detailed base description of the scene and subject.
- "shots": exactly {num_shots} items, each with "id" (1 to {num_shots}, in order) and "description".
- "transitions": exactly {num_transitions} items, each with "fromShot", "toShot" (= fromShot + 1) and "prompt".

Important rules:
1. Ensure strict visual consistency across all {num_shots} shots (same character features, clothes, lighting).
2. Follow the requested shot size for each shot.
3. Descriptions should be cinematic and detailed.
4. Never leave the English or the Chinese text empty."""


def build_storyboard_request(
    images: Sequence[str],
    shot_sizes: Sequence[Union[ShotSize, str]],
    layout: GridLayout,
    aspect_ratio: AspectRatio,
    model: str = DEFAULT_STORYBOARD_MODEL,
    temperature: Optional[float] = None,
) -> GenerationRequest:
    """
    Build the multimodal request for a full storyboard.

    Args:
        images: Reference images as data URLs (or bare base64 bodies)
        shot_sizes: Requested shot size per shot; only the first N are used
        layout: Grid layout, fixes the shot count
        aspect_ratio: Rendering hint passed through to the instruction
        model: Gemini model name
        temperature: Optional sampling temperature

    Returns:
        GenerationRequest with one image part per reference, then the instruction
    """
    layout = GridLayout(layout)
    parts: List[Part] = [image_part_from_data_url(image) for image in images]
    parts.append(TextPart(build_storyboard_instruction(shot_sizes, layout, aspect_ratio)))

    return GenerationRequest(
        model=model,
        parts=tuple(parts),
        response_schema=storyboard_schema(layout.shot_count),
        temperature=temperature,
        metadata={"kind": "storyboard", "layout": layout.value, "num_shots": layout.shot_count},
    )


# =============================================================================
# SINGLE SHOT
# =============================================================================

def build_shot_request(
    scene_prompt: BilingualText,
    shot_id: int,
    shot_size: Union[ShotSize, str],
    model: str = DEFAULT_SHOT_MODEL,
    temperature: Optional[float] = None,
) -> GenerationRequest:
    """
    Build the text-only request that rewrites one shot's description.

    Only the scene description is sent as context; the other shots and the
    transitions are never consulted.
    """
    if shot_id < 1:
        raise ValueError(f"shot_id is 1-based, got {shot_id}")

    size = _shot_size_value(shot_size)
    instruction = f"""Context: A storyboard scene description:
"{scene_prompt.en}"

Task: Rewrite the detailed visual description for Shot {shot_id} ONLY.
The new Camera Shot Size is: {size}.

Requirements:
1. Keep it consistent with the provided scene context.
2. Focus on the composition dictated by the '{size}'.
3. Return ONLY a JSON object with "en" (English) and "cn" (Chinese) descriptions."""

    return GenerationRequest(
        model=model,
        parts=(TextPart(instruction),),
        response_schema=shot_schema(),
        temperature=temperature,
        metadata={"kind": "shot", "shot_id": shot_id},
    )
