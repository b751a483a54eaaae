"""
Storyboard Session

The single owner of the current storyboard snapshot. Every successful
generation or shot rewrite replaces the snapshot wholesale; nothing edits it
by reference, so readers always see a consistent value.
"""

from typing import List, Optional, Protocol, Sequence, Set, Tuple, Union

from storygrid.core.config import StorygridConfig, get_default_config
from storygrid.core.constants import AspectRatio, GridLayout, Language, ShotSize
from storygrid.core.exceptions import NoResultError
from storygrid.core.logging_config import get_logger

from .merger import merge_shot_description
from .models import StoryboardResult, Transition
from .prompt_assembler import assemble_prompt, assemble_transitions
from .request_builder import GenerationRequest, build_shot_request, build_storyboard_request
from .response_parser import parse_shot, parse_storyboard

logger = get_logger("storyboard.session")


class _Reply(Protocol):
    text: str


class ContentClient(Protocol):
    """Anything that can send a GenerationRequest, e.g. GeminiClient."""

    async def generate_content(self, request: GenerationRequest) -> _Reply:
        ...


class StoryboardSession:
    """
    Orchestrates full generation and single-shot regeneration.

    Features:
    - Wholesale snapshot replacement (copy-on-write merges)
    - Merges apply to the latest snapshot, not the one seen at request time
    - Per-shot version counters
    - Stale transition tracking after shot rewrites
    """

    def __init__(self, client: ContentClient, config: Optional[StorygridConfig] = None):
        self.client = client
        self.config = config or get_default_config()

        self._result: Optional[StoryboardResult] = None
        self._generation: int = 0
        self._layout: Optional[GridLayout] = None
        self._aspect_ratio: AspectRatio = self.config.default_aspect_ratio
        self._shot_sizes: Tuple[ShotSize, ...] = ()
        self._shot_versions: List[int] = []
        self._rewritten_shots: Set[int] = set()

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------

    @property
    def result(self) -> Optional[StoryboardResult]:
        return self._result

    @property
    def layout(self) -> Optional[GridLayout]:
        return self._layout

    @property
    def aspect_ratio(self) -> AspectRatio:
        return self._aspect_ratio

    @property
    def shot_sizes(self) -> Tuple[ShotSize, ...]:
        return self._shot_sizes

    def require_result(self, operation: str) -> StoryboardResult:
        if self._result is None:
            raise NoResultError(operation)
        return self._result

    def shot_version(self, index: int) -> int:
        """Number of successful rewrites of shot ``index`` since generation."""
        return self._shot_versions[index]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate(
        self,
        images: Sequence[str],
        shot_sizes: Sequence[Union[ShotSize, str]],
        layout: Optional[GridLayout] = None,
        aspect_ratio: Optional[AspectRatio] = None,
    ) -> StoryboardResult:
        """
        Generate a full storyboard and make it the current snapshot.

        A failure (service or parse) propagates and leaves any prior
        snapshot untouched.
        """
        layout = GridLayout(layout or self.config.default_layout)
        aspect_ratio = AspectRatio(aspect_ratio or self.config.default_aspect_ratio)
        sizes = tuple(ShotSize(s) for s in shot_sizes)

        request = build_storyboard_request(
            images,
            sizes,
            layout,
            aspect_ratio,
            model=self.config.storyboard_model,
            temperature=self.config.temperature,
        )
        logger.info(f"Generating {layout.value} storyboard from {len(images)} reference image(s)")

        reply = await self.client.generate_content(request)
        result = parse_storyboard(reply.text, strict=self.config.strict_parsing)

        if len(result.shots) != layout.shot_count:
            logger.warning(
                f"Model returned {len(result.shots)} shots for a {layout.value} layout "
                f"(expected {layout.shot_count})"
            )

        self._generation += 1
        self._result = result
        self._layout = layout
        self._aspect_ratio = aspect_ratio
        self._shot_sizes = sizes
        self._shot_versions = [0] * len(result.shots)
        self._rewritten_shots = set()

        logger.info(f"Storyboard ready: {len(result.shots)} shots, {len(result.transitions)} transitions")
        return result

    # ------------------------------------------------------------------
    # Single-shot regeneration
    # ------------------------------------------------------------------

    def _default_shot_size(self, index: int) -> ShotSize:
        if index < len(self._shot_sizes):
            return self._shot_sizes[index]
        return ShotSize.MEDIUM

    async def regenerate_shot(
        self,
        index: int,
        shot_size: Optional[Union[ShotSize, str]] = None,
    ) -> StoryboardResult:
        """
        Rewrite the description of ``shots[index]`` and merge it in.

        Args:
            index: Zero-based shot index
            shot_size: New shot size; defaults to the one used at generation

        Returns:
            The new current snapshot
        """
        current = self.require_result("regenerate_shot")
        if not 0 <= index < len(current.shots):
            raise IndexError(f"Shot index {index} out of range for {len(current.shots)} shots")

        size = ShotSize(shot_size) if shot_size is not None else self._default_shot_size(index)
        generation = self._generation

        request = build_shot_request(
            current.scene_prompt,
            index + 1,
            size,
            model=self.config.shot_model,
            temperature=self.config.temperature,
        )
        logger.info(f"Regenerating shot {index + 1} as '{size.value}'")

        reply = await self.client.generate_content(request)
        description = parse_shot(reply.text, strict=self.config.strict_parsing)

        if generation != self._generation:
            logger.warning(f"Storyboard was regenerated while shot {index + 1} was in flight; discarding rewrite")
            return self._result

        # Merge into whatever is current now; other rewrites may have landed meanwhile
        self._result = merge_shot_description(self._result, index, description)
        self._shot_versions[index] += 1
        self._rewritten_shots.add(index + 1)
        if index < len(self._shot_sizes):
            sizes = list(self._shot_sizes)
            sizes[index] = size
            self._shot_sizes = tuple(sizes)

        return self._result

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def stale_transitions(self) -> List[Transition]:
        """Transitions touching a shot rewritten since the last generation."""
        if self._result is None:
            return []
        return [
            t for t in self._result.transitions
            if t.from_shot in self._rewritten_shots or t.to_shot in self._rewritten_shots
        ]

    def prompt(self, language: Optional[Language] = None) -> str:
        result = self.require_result("prompt")
        return assemble_prompt(result, language or self.config.default_language, self._aspect_ratio)

    def transitions_text(self, language: Optional[Language] = None) -> str:
        result = self.require_result("transitions_text")
        return assemble_transitions(result, language or self.config.default_language)
