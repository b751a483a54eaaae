"""
Response schemas attached to Gemini requests.

Gemini's ``responseSchema`` accepts an OpenAPI subset with upper-case type
names. Both language fields are always required together.
"""

from typing import Any, Dict

Schema = Dict[str, Any]


def bilingual_schema() -> Schema:
    """``{en, cn}``, both required."""
    return {
        "type": "OBJECT",
        "properties": {
            "en": {"type": "STRING"},
            "cn": {"type": "STRING"},
        },
        "required": ["en", "cn"],
    }


def _exact_array(items: Schema, count: int) -> Schema:
    return {
        "type": "ARRAY",
        "items": items,
        "minItems": count,
        "maxItems": count,
    }


def storyboard_schema(num_shots: int) -> Schema:
    """Full storyboard: scene prompt, ``num_shots`` shots, ``num_shots - 1`` transitions."""
    shot_item = {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "INTEGER", "minimum": 1},
            "description": bilingual_schema(),
        },
        "required": ["id", "description"],
    }
    transition_item = {
        "type": "OBJECT",
        "properties": {
            "fromShot": {"type": "INTEGER"},
            "toShot": {"type": "INTEGER"},
            "prompt": bilingual_schema(),
        },
        "required": ["fromShot", "toShot", "prompt"],
    }
    return {
        "type": "OBJECT",
        "properties": {
            "scenePrompt": bilingual_schema(),
            "shots": _exact_array(shot_item, num_shots),
            "transitions": _exact_array(transition_item, num_shots - 1),
        },
        "required": ["scenePrompt", "shots", "transitions"],
    }


def shot_schema() -> Schema:
    """Single-shot rewrite: exactly the bilingual pair, no id or wrapper."""
    return bilingual_schema()
