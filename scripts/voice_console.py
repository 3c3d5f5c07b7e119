#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Callable

from jarvis.container import build_container
from jarvis.voice.orchestrator import TurnErrorKind, TurnOutcome
from jarvis.voice.session import VoiceSession

_EXIT_WORDS = {"exit", "quit", "bye"}


def render_outcome(outcome: TurnOutcome) -> list[str]:
    if not outcome.accepted:
        return ["[busy] a turn is already in progress"]
    lines: list[str] = []
    if outcome.notice:
        lines.append(f"[notice] {outcome.notice}")
    if outcome.error is not None:
        lines.append(f"[{outcome.error.kind}] {outcome.error.message}")
        return lines
    if outcome.turn is not None and not outcome.spoken:
        lines.append(f"Jarvis (text): {outcome.turn.reply}")
    return lines


async def run_console(
    session: VoiceSession,
    *,
    max_turns: int,
    echo: Callable[[str], None] = print,
) -> int:
    completed = 0
    async with session:
        echo(f"[media] {session.media_label}")
        orchestrator = session.orchestrator
        while max_turns <= 0 or completed < max_turns:
            outcome = await orchestrator.run_turn()
            for line in render_outcome(outcome):
                echo(line)
            if outcome.error is not None and outcome.error.kind == TurnErrorKind.CAPABILITY_MISSING:
                break
            if outcome.turn is not None and outcome.turn.utterance.lower() in _EXIT_WORDS:
                break
            if outcome.error is not None and outcome.error.detail == "input stream closed":
                break
            completed += 1
    return completed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Talk to Jarvis from a terminal")
    parser.add_argument("--local", action="store_true", help="answer in-process, skip HTTP")
    parser.add_argument("--url", default="", help="override JARVIS_DISPATCH_URL")
    parser.add_argument("--timeout-sec", type=float, default=0.0)
    parser.add_argument("--max-turns", type=int, default=0, help="0 means until exit")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    container = build_container()
    if args.url:
        container.voice_settings.dispatch_url = args.url
    if args.timeout_sec > 0:
        container.voice_settings.dispatch_timeout_sec = args.timeout_sec
    session = container.build_voice_session(local=True if args.local else None)
    turns = asyncio.run(run_console(session, max_turns=args.max_turns))
    print(f"[console] turns={turns}")


if __name__ == "__main__":
    main()
