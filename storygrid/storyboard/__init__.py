"""
Storygrid Storyboard Module

Request building, response parsing, copy-on-write merging and prompt
assembly for bilingual grid storyboards.
"""

from .merger import merge_shot_description
from .models import BilingualText, ScenePrompt, Shot, StoryboardResult, Transition
from .prompt_assembler import assemble_prompt, assemble_transitions
from .request_builder import (
    GenerationRequest,
    ImagePart,
    TextPart,
    build_shot_request,
    build_storyboard_request,
    image_part_from_data_url,
)
from .response_parser import parse_shot, parse_storyboard
from .session import StoryboardSession

__all__ = [
    # Models
    'BilingualText',
    'ScenePrompt',
    'Shot',
    'Transition',
    'StoryboardResult',
    # Requests
    'GenerationRequest',
    'ImagePart',
    'TextPart',
    'build_storyboard_request',
    'build_shot_request',
    'image_part_from_data_url',
    # Parsing / merging / rendering
    'parse_storyboard',
    'parse_shot',
    'merge_shot_description',
    'assemble_prompt',
    'assemble_transitions',
    # Orchestration
    'StoryboardSession',
]
