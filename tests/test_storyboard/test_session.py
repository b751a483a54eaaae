"""
Tests for Storyboard Session

Tests for storygrid/storyboard/session.py
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from storygrid.core.config import StorygridConfig
from storygrid.core.constants import AspectRatio, GridLayout, Language, ShotSize
from storygrid.core.exceptions import NoResultError, ParseError, ServiceError
from storygrid.storyboard.models import BilingualText
from storygrid.storyboard.session import StoryboardSession


@pytest.fixture
def session(mock_client):
    return StoryboardSession(mock_client)


@pytest_asyncio.fixture
async def generated(session, png_data_url):
    await session.generate([png_data_url], [ShotSize.MEDIUM] * 9, GridLayout.GRID_3X3, AspectRatio.WIDE)
    return session


class TestGenerate:
    """Tests for full generation."""

    @pytest.mark.asyncio
    async def test_3x3_scenario(self, session, png_data_url):
        result = await session.generate(
            [png_data_url], [ShotSize.MEDIUM] * 9, GridLayout.GRID_3X3, AspectRatio.WIDE
        )

        assert len(result.shots) == 9
        assert len(result.transitions) == 8
        assert result.shots[0].id == 1
        assert (result.transitions[0].from_shot, result.transitions[0].to_shot) == (1, 2)
        assert session.result is result
        assert session.layout is GridLayout.GRID_3X3

    @pytest.mark.asyncio
    async def test_2x2_request_and_result(self, mock_client, make_reply, make_wire, png_data_url):
        mock_client.generate_content.return_value = make_reply(json.dumps(make_wire(4)))
        session = StoryboardSession(mock_client)

        result = await session.generate([png_data_url], [ShotSize.WIDE] * 4, "2x2", "4:3")
        request = mock_client.generate_content.await_args.args[0]

        assert len(result.shots) == 4
        assert len(result.transitions) == 3
        assert request.response_schema["properties"]["shots"]["maxItems"] == 4
        assert request.model == session.config.storyboard_model

    @pytest.mark.asyncio
    async def test_service_failure_keeps_prior_result(self, generated, png_data_url):
        prior = generated.result
        generated.client.generate_content.side_effect = ServiceError("google", "HTTP 500")

        with pytest.raises(ServiceError):
            await generated.generate([png_data_url], [ShotSize.MEDIUM] * 9)

        assert generated.result is prior
        assert generated.client.generate_content.await_count == 2

    @pytest.mark.asyncio
    async def test_parse_failure_keeps_prior_result(self, generated, make_reply, png_data_url):
        prior = generated.result
        generated.client.generate_content.return_value = make_reply("oops, not json")

        with pytest.raises(ParseError):
            await generated.generate([png_data_url], [ShotSize.MEDIUM] * 9)

        assert generated.result is prior

    @pytest.mark.asyncio
    async def test_blank_reply_strict_config_raises(self, mock_client, make_reply, png_data_url):
        mock_client.generate_content.return_value = make_reply("")
        session = StoryboardSession(mock_client, StorygridConfig(strict_parsing=True))

        with pytest.raises(ParseError):
            await session.generate([png_data_url], [ShotSize.MEDIUM] * 9)

        assert session.result is None


class TestRegenerateShot:
    """Tests for single-shot regeneration."""

    @pytest.mark.asyncio
    async def test_scenario_index_two(self, generated, make_reply):
        before = generated.result
        generated.client.generate_content.return_value = make_reply('{"en": "X", "cn": "Y"}')

        after = await generated.regenerate_shot(2)

        assert after.shots[2].description == BilingualText(en="X", cn="Y")
        assert after.shots[:2] == before.shots[:2]
        assert after.shots[3:] == before.shots[3:]
        assert after.scene_prompt == before.scene_prompt
        assert after.transitions == before.transitions
        assert generated.result is after
        assert before.shots[2].description.en == "Shot 3 description"

    @pytest.mark.asyncio
    async def test_request_is_scoped_to_one_shot(self, generated, make_reply):
        generated.client.generate_content.return_value = make_reply('{"en": "X", "cn": "Y"}')

        await generated.regenerate_shot(4, ShotSize.HIGH_ANGLE)
        request = generated.client.generate_content.await_args.args[0]

        assert request.image_count == 0
        assert request.metadata["shot_id"] == 5
        assert "High Angle" in request.instruction
        assert generated.result.scene_prompt.en in request.instruction
        assert request.model == generated.config.shot_model
        assert generated.shot_sizes[4] is ShotSize.HIGH_ANGLE

    @pytest.mark.asyncio
    async def test_defaults_to_generation_shot_size(self, generated, make_reply):
        generated.client.generate_content.return_value = make_reply('{"en": "X", "cn": "Y"}')

        await generated.regenerate_shot(0)
        request = generated.client.generate_content.await_args.args[0]

        assert "Medium Shot" in request.instruction

    @pytest.mark.asyncio
    async def test_requires_result(self, session):
        with pytest.raises(NoResultError):
            await session.regenerate_shot(0)

    @pytest.mark.asyncio
    async def test_out_of_range_index(self, generated):
        calls = generated.client.generate_content.await_count

        with pytest.raises(IndexError):
            await generated.regenerate_shot(9)

        assert generated.client.generate_content.await_count == calls

    @pytest.mark.asyncio
    async def test_failure_leaves_result_untouched(self, generated):
        prior = generated.result
        generated.client.generate_content.side_effect = ServiceError("google", "quota")

        with pytest.raises(ServiceError):
            await generated.regenerate_shot(1)

        assert generated.result is prior
        assert generated.shot_version(1) == 0

    @pytest.mark.asyncio
    async def test_concurrent_rewrites_of_different_shots_compose(self, generated, make_reply):
        release_first = asyncio.Event()

        async def reply_for(request):
            shot_id = request.metadata["shot_id"]
            if shot_id == 1:
                # First request resolves last
                await release_first.wait()
            else:
                release_first.set()
            return make_reply(json.dumps({"en": f"new {shot_id}", "cn": f"新{shot_id}"}))

        generated.client.generate_content = AsyncMock(side_effect=reply_for)

        await asyncio.gather(generated.regenerate_shot(0), generated.regenerate_shot(1))

        assert generated.result.shots[0].description.en == "new 1"
        assert generated.result.shots[1].description.en == "new 2"
        assert generated.shot_version(0) == 1
        assert generated.shot_version(1) == 1

    @pytest.mark.asyncio
    async def test_same_shot_last_write_wins(self, generated, make_reply):
        generated.client.generate_content.return_value = make_reply('{"en": "first", "cn": "一"}')
        await generated.regenerate_shot(3)
        generated.client.generate_content.return_value = make_reply('{"en": "second", "cn": "二"}')
        await generated.regenerate_shot(3)

        assert generated.result.shots[3].description.en == "second"
        assert generated.shot_version(3) == 2

    @pytest.mark.asyncio
    async def test_rewrite_discarded_after_new_generation(self, generated, make_reply, png_data_url):
        gate = asyncio.Event()

        async def slow_shot_reply(request):
            if request.metadata["kind"] == "shot":
                await gate.wait()
                return make_reply('{"en": "late", "cn": "迟"}')
            gate.set()
            return make_reply(json.dumps(generated_wire))

        generated_wire = generated.result.to_wire()
        generated.client.generate_content = AsyncMock(side_effect=slow_shot_reply)

        _, fresh = await asyncio.gather(
            generated.regenerate_shot(0),
            generated.generate([png_data_url], [ShotSize.MEDIUM] * 9),
        )

        assert generated.result is fresh
        assert generated.result.shots[0].description.en == "Shot 1 description"


class TestRendering:
    """Tests for prompt helpers and stale transitions."""

    @pytest.mark.asyncio
    async def test_stale_transitions_after_rewrite(self, generated, make_reply):
        assert generated.stale_transitions() == []
        generated.client.generate_content.return_value = make_reply('{"en": "X", "cn": "Y"}')

        await generated.regenerate_shot(2)
        stale = generated.stale_transitions()

        assert [(t.from_shot, t.to_shot) for t in stale] == [(2, 3), (3, 4)]

    @pytest.mark.asyncio
    async def test_prompt_uses_generation_aspect_ratio(self, mock_client, png_data_url):
        session = StoryboardSession(mock_client)
        await session.generate([png_data_url], [ShotSize.MEDIUM] * 9, "3x3", "9:16")

        assert "9:16 aspect ratio" in session.prompt(Language.EN)
        assert session.prompt(Language.EN) == session.prompt(Language.EN)

    def test_prompt_requires_result(self, session):
        with pytest.raises(NoResultError):
            session.prompt()

    @pytest.mark.asyncio
    async def test_default_language_is_chinese(self, generated):
        assert generated.prompt().splitlines()[1].startswith("镜头 01:")
        assert generated.transitions_text(Language.EN).startswith("Shot 01 -> Shot 02:")
