"""
Storygrid Main Entry Point

    python -m storygrid generate ref1.jpg ref2.png --layout 3x3 --out result.json
    python -m storygrid prompt result.json --language en
    python -m storygrid serve --port 8000
"""

import argparse
import asyncio
import base64
import json
import mimetypes
import sys
from pathlib import Path
from typing import List

from storygrid.core.config import load_config
from storygrid.core.constants import AspectRatio, GridLayout, Language, ShotSize
from storygrid.core.exceptions import StorygridError
from storygrid.core.logging_config import LogLevel, create_session_log, get_logger, setup_logging


def _file_to_data_url(path: Path) -> str:
    """Encode an image file as a ``data:`` URL."""
    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    body = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{body}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storygrid",
        description="Storygrid - bilingual grid storyboards from reference images",
    )
    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-dir", type=str, help="Also write a session log file here")

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a storyboard from reference images")
    gen.add_argument("images", nargs="+", type=Path, help="Reference image files")
    gen.add_argument("--layout", choices=[l.value for l in GridLayout], help="Grid layout")
    gen.add_argument("--aspect-ratio", choices=[r.value for r in AspectRatio], help="Aspect ratio")
    gen.add_argument(
        "--shot-size",
        action="append",
        choices=[s.value for s in ShotSize],
        help="Shot size, once per shot (default: Medium Shot for every shot)",
    )
    gen.add_argument(
        "--regenerate",
        action="append",
        type=int,
        default=[],
        metavar="INDEX",
        help="Rewrite this zero-based shot after generation (repeatable)",
    )
    gen.add_argument("--language", choices=[l.value for l in Language], help="Prompt language")
    gen.add_argument("--out", type=Path, help="Write the storyboard JSON here")

    prompt = sub.add_parser("prompt", help="Assemble the prompt from a saved storyboard JSON")
    prompt.add_argument("result", type=Path, help="Storyboard JSON written by 'generate'")
    prompt.add_argument("--language", choices=[l.value for l in Language], help="Prompt language")
    prompt.add_argument("--aspect-ratio", choices=[r.value for r in AspectRatio], help="Aspect ratio")
    prompt.add_argument("--transitions", action="store_true", help="Print transition prompts too")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    return parser


async def _generate(args, config) -> int:
    from storygrid.llm import GeminiClient
    from storygrid.storyboard import StoryboardSession

    logger = get_logger("cli")
    layout = GridLayout(args.layout or config.default_layout)
    shot_sizes: List[str] = args.shot_size or [ShotSize.MEDIUM.value] * layout.shot_count

    images = [_file_to_data_url(path) for path in args.images]
    client = GeminiClient(base_url=config.api_base_url, timeout=config.timeout)
    session = StoryboardSession(client, config)

    await session.generate(images, shot_sizes, layout, args.aspect_ratio)
    for index in args.regenerate:
        try:
            await session.regenerate_shot(index)
        except IndexError as e:
            logger.warning(str(e))

    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(
            json.dumps(session.result.to_wire(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info(f"Wrote {args.out}")

    print(session.prompt(args.language))
    return 0


def _prompt(args, config) -> int:
    from storygrid.storyboard import assemble_prompt, assemble_transitions, parse_storyboard

    result = parse_storyboard(args.result.read_text(encoding="utf-8"), strict=True)
    language = Language(args.language or config.default_language)

    print(assemble_prompt(result, language, AspectRatio(args.aspect_ratio or config.default_aspect_ratio)))
    if args.transitions:
        print(assemble_transitions(result, language))
    return 0


def main(argv: List[str] = None) -> int:
    """Main entry point for the Storygrid CLI."""
    args = _build_parser().parse_args(argv)
    try:
        config = load_config(Path(args.config) if args.config else None)
    except StorygridError as e:
        print(f"storygrid: {e}", file=sys.stderr)
        return 1

    level = LogLevel.DEBUG if args.debug else LogLevel[config.log_level]
    if args.log_dir:
        create_session_log(Path(args.log_dir), prefix="storygrid", level=level, verbose=args.debug)
    else:
        setup_logging(level=level, verbose=args.debug)

    logger = get_logger("cli")

    try:
        if args.command == "generate":
            return asyncio.run(_generate(args, config))
        if args.command == "prompt":
            return _prompt(args, config)
        if args.command == "serve":
            from storygrid.api.main import start_server
            start_server(host=args.host, port=args.port, reload=args.reload)
            return 0
    except StorygridError as e:
        logger.error(str(e))
        return 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
