"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict
from unittest.mock import AsyncMock, Mock

import pytest

from storygrid.storyboard.models import StoryboardResult

# 1x1 transparent PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def make_storyboard_wire(num_shots: int) -> Dict[str, Any]:
    """A well-formed model reply with ``num_shots`` shots and ``num_shots - 1`` transitions."""
    return {
        "scenePrompt": {
            "en": "A lone astronaut in a white suit on a red desert at dusk",
            "cn": "黄昏时分红色沙漠上身穿白色宇航服的孤独宇航员",
        },
        "shots": [
            {
                "id": i,
                "description": {"en": f"Shot {i} description", "cn": f"镜头{i}描述"},
            }
            for i in range(1, num_shots + 1)
        ],
        "transitions": [
            {
                "fromShot": i,
                "toShot": i + 1,
                "prompt": {"en": f"Dolly from {i} to {i + 1}", "cn": f"从{i}推到{i + 1}"},
            }
            for i in range(1, num_shots)
        ],
    }


def reply(text: str) -> Mock:
    """A client reply object carrying ``text``."""
    response = Mock()
    response.text = text
    return response


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def png_data_url() -> str:
    return f"data:image/png;base64,{PNG_BASE64}"


@pytest.fixture
def storyboard_wire_3x3() -> Dict[str, Any]:
    return make_storyboard_wire(9)


@pytest.fixture
def storyboard_wire_2x2() -> Dict[str, Any]:
    return make_storyboard_wire(4)


@pytest.fixture
def result_3x3(storyboard_wire_3x3) -> StoryboardResult:
    return StoryboardResult.from_wire(storyboard_wire_3x3)


@pytest.fixture
def result_2x2(storyboard_wire_2x2) -> StoryboardResult:
    return StoryboardResult.from_wire(storyboard_wire_2x2)


@pytest.fixture
def mock_client(storyboard_wire_3x3):
    """A content client whose first reply is a 3x3 storyboard."""
    client = Mock()
    client.generate_content = AsyncMock(
        return_value=reply(json.dumps(storyboard_wire_3x3, ensure_ascii=False))
    )
    return client


@pytest.fixture
def make_reply():
    """Factory fixture for client replies."""
    return reply


@pytest.fixture
def make_wire():
    """Factory fixture for well-formed storyboard replies."""
    return make_storyboard_wire
