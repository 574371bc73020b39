#!/usr/bin/env python3
"""
textshift command line driver.

Runs the pipeline over a JSON file of fragments and writes the results to
another JSON file.

Input is a list whose entries are either plain strings or objects:
    {"content": "...", "node_name": "...", "parent_node_name": "...",
     "font_style": "Bold", "font_size": 16}

Usage:
    textshift fragments.json -o out.json --target zh
    textshift fragments.json --provider Baidu --no-polish
    textshift --clear-cache
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .core.config import get_settings
from .core.constants import Language, Platform, ProviderName, SwitchMode
from .services.container import build_services
from .services.pipeline.events import EventKind, PipelineEvent
from .services.pipeline.types import PipelineOptions, SourceFragment
from .services.settings_store import InMemorySettingsStore, StorageKey, bootstrap_secrets
from .utils.logging import setup_logging

logger = logging.getLogger("textshift.cli")


class JsonFileSource:
    """Reads fragments from a JSON file and collects write-backs in memory."""

    def __init__(self, path: Path):
        self.path = path
        self.records: list[dict[str, Any]] = []

    async def fetch_fragments(self) -> list[SourceFragment]:
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError(f"{self.path}: expected a JSON list of fragments")
        fragments = []
        for entry in raw:
            if isinstance(entry, str):
                entry = {"content": entry}
            fragments.append(
                SourceFragment(
                    content=entry.get("content", ""),
                    node_name=entry.get("node_name", ""),
                    parent_node_name=entry.get("parent_node_name", ""),
                    font_style=entry.get("font_style"),
                    font_size=entry.get("font_size"),
                )
            )
        self.records = [
            {"content": f.content, "style_key": None, "original": f.content}
            for f in fragments
        ]
        return fragments

    async def write_back(
        self, index: int, content: str | None, style_key: str | None
    ) -> None:
        record = self.records[index]
        if style_key:
            record["style_key"] = style_key
        if content:
            record["content"] = content

    def dump(self, path: Path | None) -> None:
        text = json.dumps(self.records, ensure_ascii=False, indent=2)
        if path is None:
            print(text)
        else:
            path.write_text(text + "\n", encoding="utf-8")


def _print_event(event: PipelineEvent) -> None:
    if event.kind is EventKind.NOTIFY:
        print(f"[{event.level.value}] {event.message}", file=sys.stderr)
    elif event.kind is EventKind.STAGE_STEP:
        logger.debug(f"{event.stage.value}: {event.value} done")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textshift",
        description="Translate, polish and format design-text fragments",
    )
    parser.add_argument("input", nargs="?", type=Path, help="JSON file of fragments")
    parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    parser.add_argument(
        "--target", choices=[lang.value for lang in Language], default=Language.EN.value
    )
    parser.add_argument(
        "--platform", choices=[p.value for p in Platform], default=Platform.DESKTOP.value
    )
    parser.add_argument(
        "--provider",
        choices=[name.value for name in ProviderName],
        default=ProviderName.GOOGLE_BASIC.value,
    )
    parser.add_argument("--no-translate", action="store_true")
    parser.add_argument("--no-polish", action="store_true")
    parser.add_argument("--no-format", action="store_true")
    parser.add_argument(
        "--no-glossary", action="store_true", help="Do not enforce the provider glossary"
    )
    parser.add_argument(
        "--clear-cache", action="store_true", help="Clear local caches before running"
    )
    parser.add_argument("--log-level", default=None)
    return parser


def _switch(on: bool) -> str:
    return (SwitchMode.ON if on else SwitchMode.OFF).value


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    store = InMemorySettingsStore(
        {
            StorageKey.TARGET_LANGUAGE: args.target,
            StorageKey.PLATFORM: args.platform,
            StorageKey.TRANSLATION_PROVIDER: args.provider,
            StorageKey.TERMBASE: _switch(not args.no_glossary),
            StorageKey.AUTO_POLISH: _switch(not args.no_polish),
            StorageKey.AUTO_FORMAT: _switch(not args.no_format),
        }
    )
    await bootstrap_secrets(store, settings)

    services = build_services(settings, store=store)
    services.channel.subscribe(_print_event)
    try:
        if args.clear_cache:
            await services.controller.clear_caches()
        if args.input is None:
            return 0

        source = JsonFileSource(args.input)
        options = await PipelineOptions.from_store(store, translate=not args.no_translate)
        report = await services.controller.run(source, options)
        if report.skipped_reason is None:
            source.dump(args.output)
        logger.info(f"Report: {json.dumps(report.to_dict(), ensure_ascii=False)}")
        return 1 if report.failed_items else 0
    finally:
        await services.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.input is None and not args.clear_cache:
        parser.error("an input file is required unless --clear-cache is given")
    setup_logging(log_level=args.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
