"""Storyboard router for the Storygrid API.

Thin HTTP layer over the process-wide StoryboardSession.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from storygrid.core.config import StorygridConfig
from storygrid.core.constants import SHOT_SIZE_LABELS, AspectRatio, GridLayout, Language, ShotSize
from storygrid.core.logging_config import get_logger
from storygrid.llm import GeminiClient
from storygrid.storyboard.request_builder import GenerationRequest
from storygrid.storyboard.session import StoryboardSession

logger = get_logger("api.storyboard")

router = APIRouter()

# Generation calls are expensive; keep them rate limited per client
limiter = Limiter(key_func=get_remote_address)


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    images: List[str] = Field(..., min_length=1, description="Reference images as data URLs")
    shot_sizes: List[ShotSize] = Field(default_factory=list, alias="shotSizes")
    layout: Optional[GridLayout] = None
    aspect_ratio: Optional[AspectRatio] = Field(default=None, alias="aspectRatio")


class RegenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shot_size: Optional[ShotSize] = Field(default=None, alias="shotSize")


class PromptResponse(BaseModel):
    language: Language
    text: str


class TransitionsResponse(PromptResponse):
    stale: List[Dict[str, Any]] = []


class LazyGeminiClient:
    """Builds the GeminiClient on the first generation call, so read-only routes need no API key."""

    def __init__(self, config: StorygridConfig):
        self.config = config
        self._client: Optional[GeminiClient] = None

    async def generate_content(self, request: GenerationRequest):
        if self._client is None:
            self._client = GeminiClient(base_url=self.config.api_base_url, timeout=self.config.timeout)
        return await self._client.generate_content(request)


def get_session(request: Request) -> StoryboardSession:
    """Return the app's session, creating it on first use."""
    session = request.app.state.session
    if session is None:
        config = request.app.state.config
        session = StoryboardSession(LazyGeminiClient(config), config)
        request.app.state.session = session
    return session


@router.get("/options")
async def get_options():
    """Vocabularies offered to the UI."""
    return {
        "shotSizes": [
            {"value": size.value, "label": SHOT_SIZE_LABELS[size]} for size in ShotSize
        ],
        "layouts": [
            {"value": layout.value, "shots": layout.shot_count} for layout in GridLayout
        ],
        "aspectRatios": [ratio.value for ratio in AspectRatio],
        "languages": [language.value for language in Language],
    }


@router.get("")
async def get_storyboard(session: StoryboardSession = Depends(get_session)):
    """Current storyboard snapshot."""
    return session.require_result("get_storyboard").to_wire()


@router.post("/generate")
@limiter.limit("30/minute")
async def generate_storyboard(
    request: Request,
    body: GenerateRequest,
    session: StoryboardSession = Depends(get_session),
):
    """Generate a full storyboard from reference images."""
    layout = body.layout or session.config.default_layout
    shot_sizes = body.shot_sizes or [ShotSize.MEDIUM] * GridLayout(layout).shot_count
    result = await session.generate(body.images, shot_sizes, layout, body.aspect_ratio)
    return result.to_wire()


@router.post("/shots/{index}/regenerate")
@limiter.limit("60/minute")
async def regenerate_shot(
    request: Request,
    index: int,
    body: Optional[RegenerateRequest] = None,
    session: StoryboardSession = Depends(get_session),
):
    """Rewrite one shot's description; everything else is left as is."""
    try:
        result = await session.regenerate_shot(index, body.shot_size if body else None)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return result.to_wire()


@router.get("/prompt", response_model=PromptResponse)
async def get_prompt(
    language: Optional[Language] = None,
    session: StoryboardSession = Depends(get_session),
):
    """Assembled grid prompt in the requested language."""
    language = language or session.config.default_language
    return PromptResponse(language=language, text=session.prompt(language))


@router.get("/transitions", response_model=TransitionsResponse)
async def get_transitions(
    language: Optional[Language] = None,
    session: StoryboardSession = Depends(get_session),
):
    """Transition prompts, plus the ones made stale by shot rewrites."""
    language = language or session.config.default_language
    return TransitionsResponse(
        language=language,
        text=session.transitions_text(language),
        stale=[t.model_dump(mode="json", by_alias=True) for t in session.stale_transitions()],
    )
