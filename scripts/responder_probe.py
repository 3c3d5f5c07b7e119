#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from statistics import mean
from typing import Any

import httpx

DEFAULT_PHRASES = (
    "Hello",
    "What time is it?",
    "What's the date today?",
    "Do you like Iron Man?",
    "Can you tell me about diabetes?",
    "I have a headache and feel sad",
    "I feel so lonely",
    "Thank you!",
    "Tell me a riddle",
)


@dataclass
class ProbeResult:
    case_id: int
    phrase: str
    http_status: int | None
    category: str | None
    reply: str | None
    latency_ms: float
    error: str | None


def _percentile(values: list[float], p: float) -> float | None:
    if not values:
        return None
    if len(values) == 1:
        return round(values[0], 2)
    sorted_values = sorted(values)
    rank = (len(sorted_values) - 1) * p
    low = int(rank)
    high = min(low + 1, len(sorted_values) - 1)
    weight = rank - low
    result = sorted_values[low] * (1 - weight) + sorted_values[high] * weight
    return round(result, 2)


async def _probe_once(
    *,
    case_id: int,
    phrase: str,
    client: httpx.AsyncClient,
    endpoint: str,
) -> ProbeResult:
    start = asyncio.get_running_loop().time()
    try:
        response = await client.post(endpoint, json={"message": phrase})
    except httpx.HTTPError as exc:
        elapsed = (asyncio.get_running_loop().time() - start) * 1000
        return ProbeResult(case_id, phrase, None, None, None, round(elapsed, 2), str(exc))
    elapsed = (asyncio.get_running_loop().time() - start) * 1000
    body: dict[str, Any] = {}
    try:
        parsed = response.json()
        if isinstance(parsed, dict):
            body = parsed
    except ValueError:
        body = {}
    error = None if response.status_code == 200 else f"http_{response.status_code}"
    return ProbeResult(
        case_id=case_id,
        phrase=phrase,
        http_status=response.status_code,
        category=body.get("category"),
        reply=body.get("reply"),
        latency_ms=round(elapsed, 2),
        error=error,
    )


def summarize(results: list[ProbeResult]) -> dict[str, Any]:
    category_counter = Counter(item.category or "none" for item in results)
    status_counter = Counter(str(item.http_status) for item in results)
    distinct_replies: dict[str, int] = {}
    for phrase in {item.phrase for item in results}:
        distinct_replies[phrase] = len(
            {item.reply for item in results if item.phrase == phrase and item.reply}
        )
    latencies = [item.latency_ms for item in results]
    success_total = sum(1 for item in results if item.error is None)
    return {
        "success_total": success_total,
        "success_rate": round(success_total / len(results), 4) if results else 0.0,
        "categories": dict(sorted(category_counter.items())),
        "http_status": dict(sorted(status_counter.items())),
        "distinct_replies": dict(sorted(distinct_replies.items())),
        "latency_ms": {
            "avg": round(mean(latencies), 2) if latencies else None,
            "p50": _percentile(latencies, 0.5),
            "p95": _percentile(latencies, 0.95),
        },
    }


async def _run_probe(args: argparse.Namespace, phrases: list[str]) -> dict[str, Any]:
    semaphore = asyncio.Semaphore(args.concurrency)
    endpoint = f"{args.base_url.rstrip('/')}/functions/v1/jarvis-ai"
    results: list[ProbeResult] = []

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout=args.timeout_sec)) as client:
        async def wrapped(case_id: int, phrase: str) -> None:
            async with semaphore:
                results.append(
                    await _probe_once(
                        case_id=case_id,
                        phrase=phrase,
                        client=client,
                        endpoint=endpoint,
                    )
                )

        cases = [phrase for phrase in phrases for _ in range(args.repeat)]
        tasks = [asyncio.create_task(wrapped(index + 1, phrase)) for index, phrase in enumerate(cases)]
        await asyncio.gather(*tasks)

    return {
        "meta": {
            "generated_at": datetime.now(UTC).isoformat(),
            "endpoint": endpoint,
            "repeat": args.repeat,
            "concurrency": args.concurrency,
        },
        "summary": summarize(results),
        "results": [item.__dict__ for item in sorted(results, key=lambda x: x.case_id)],
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Probe the jarvis-ai function")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument("--repeat", type=int, default=5)
    parser.add_argument("--concurrency", type=int, default=4)
    parser.add_argument("--timeout-sec", type=float, default=15.0)
    parser.add_argument("--phrase", action="append", default=[], help="may be repeated")
    parser.add_argument("--output-file", default="")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    if args.repeat < 1:
        raise SystemExit("--repeat must be >= 1")
    if args.concurrency < 1:
        raise SystemExit("--concurrency must be >= 1")

    phrases = args.phrase or list(DEFAULT_PHRASES)
    report = asyncio.run(_run_probe(args, phrases))
    if args.output_file:
        output_file = Path(args.output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"[probe] output={output_file}")

    summary = report["summary"]
    print(f"[probe] success_rate={summary['success_rate']}")
    print(f"[probe] categories={summary['categories']}")
    print(f"[probe] latency_p95={summary['latency_ms']['p95']}ms")


if __name__ == "__main__":
    main()
