"""Copy-on-write merge of a single-shot rewrite into a storyboard snapshot."""

from storygrid.core.logging_config import get_logger

from .models import BilingualText, StoryboardResult

logger = get_logger("storyboard.merger")


def merge_shot_description(
    result: StoryboardResult,
    index: int,
    description: BilingualText,
) -> StoryboardResult:
    """
    Return a new snapshot with ``shots[index].description`` replaced.

    Every other shot, the scene prompt and the transitions are carried over
    as the same objects. An out-of-range index returns ``result`` itself.
    """
    if not 0 <= index < len(result.shots):
        logger.debug(f"Merge index {index} outside 0..{len(result.shots) - 1}; no-op")
        return result

    shots = list(result.shots)
    shots[index] = shots[index].model_copy(update={"description": description})
    return result.model_copy(update={"shots": tuple(shots)})
