#!/usr/bin/env python3
"""
Mockup Studio - Generate and remix UI mockups from the command line.

Usage:
    python studio_cli.py describe "music dashboard" --style Cyberpunk
    python studio_cli.py remix base.html style.html --out remixed.html
    python studio_cli.py clone --url https://example.com --screenshot shot.png
    python studio_cli.py history           # List past runs (most recent first)
    python studio_cli.py restore <id>      # Show a past run's inputs and outputs
    python studio_cli.py clear-history
    python studio_cli.py templates [--generate <id>]
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from shared.config import history_path, load_config
from shared.logging import correlation_context, get_logger
from studio import (
    CloneOutput,
    DescriptionOutput,
    ImageAttachment,
    Mode,
    Session,
    StudioError,
    TemplateGallery,
    ValidationError,
    VISUAL_STYLES,
    summarize,
)
from studio.coordinator import ChannelFailed, ChannelResolved, RunEvent
from studio.store import HistoryStore

load_dotenv(Path(__file__).parent / ".env")

console = Console()
log = get_logger("cli", "main", console=False)


def build_session(config: dict) -> Session:
    from backends import GeminiAdapters

    store = HistoryStore(
        history_path(config),
        debounce_seconds=config["studio"].get("persist_debounce_seconds", 0.5),
    )
    session = Session(GeminiAdapters.from_config(config), store)
    session.init()
    return session


def print_event(event: RunEvent):
    if isinstance(event, ChannelResolved):
        console.print(f"  [green]✓[/green] {event.channel.value}")
    elif isinstance(event, ChannelFailed):
        console.print(f"  [red]✗ {event.channel.value}: {event.message}[/red]")


def print_output(session: Session, out: Optional[Path] = None):
    output = session.output

    if isinstance(output, DescriptionOutput) and output.enhanced_prompt:
        console.print(Panel(output.enhanced_prompt, title="Enhanced prompt"))
    if isinstance(output, DescriptionOutput) and output.preview_image:
        console.print(f"Preview image: {len(output.preview_image)} chars ({output.preview_image[:30]}...)")
    if isinstance(output, CloneOutput) and output.grounding_sources:
        console.print("[bold]Sources:[/bold]")
        for source in output.grounding_sources:
            console.print(f"  • {source.title} ({source.uri})")

    if output.html is not None:
        if out:
            out.write_text(output.html, encoding="utf-8")
            console.print(f"HTML written to [bold]{out}[/bold]")
        else:
            console.print(Panel(output.html, title="HTML"))

    for channel, message in session.errors.items():
        console.print(f"[red]{channel.value}: {message}[/red]")


async def _run(session: Session, out: Optional[Path]) -> int:
    session.subscribe(print_event)
    try:
        console.print(f"\n[bold]Generating ({session.mode.value})...[/bold]")
        try:
            await session.start_run()
        except ValidationError as e:
            console.print(f"[yellow]{e.message}[/yellow]")
            return 2
        print_output(session, out)
        return 1 if session.errors else 0
    finally:
        await session.teardown()
        await session.coordinator.adapters.close()


def cmd_describe(args, config: dict) -> int:
    session = build_session(config)
    session.set_mode(Mode.DESCRIPTION)
    session.set_input("text", args.text)
    session.set_input("style", args.style)
    return asyncio.run(_run(session, args.out))


def cmd_remix(args, config: dict) -> int:
    try:
        base_html = Path(args.base).read_text(encoding="utf-8")
        style_html = Path(args.style).read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot read HTML file: {e}[/red]")
        return 2

    session = build_session(config)
    session.set_mode(Mode.MODIFY)
    session.set_input("base_html", base_html)
    session.set_input("style_html", style_html)
    return asyncio.run(_run(session, args.out))


def cmd_clone(args, config: dict) -> int:
    try:
        screenshots = [ImageAttachment.from_file(p) for p in args.screenshot or []]
    except OSError as e:
        console.print(f"[red]Cannot read screenshot: {e}[/red]")
        return 2

    session = build_session(config)
    session.set_mode(Mode.CLONE)
    session.set_input("url", args.url or "")
    session.set_input("screenshots", screenshots)
    return asyncio.run(_run(session, args.out))


def cmd_history(args, config: dict) -> int:
    store = HistoryStore(history_path(config))
    history = store.load()
    if not len(history):
        console.print("[yellow]No history yet.[/yellow]")
        return 0

    table = Table(title=f"History ({len(history)})")
    table.add_column("ID")
    table.add_column("Mode")
    table.add_column("Title")
    table.add_column("Details")
    for entry in history:
        summary = summarize(entry)
        table.add_row(entry.id, summary.badge, summary.title[:40], summary.subtitle)
    console.print(table)
    return 0


def cmd_restore(args, config: dict) -> int:
    session = build_session(config)
    try:
        restored = session.restore(args.id)
    except KeyError:
        console.print(f"[red]No history entry {args.id}[/red]")
        return 1

    console.print(Panel(
        "\n".join(f"{k}: {v}" for k, v in restored.run_input.to_dict().items() if k != "screenshots"),
        title=f"Restored {restored.mode.value} run",
    ))
    print_output(session, args.out)
    return 0


def cmd_clear_history(args, config: dict) -> int:
    store = HistoryStore(history_path(config))
    store.load()
    store.clear()
    console.print("[green]✓ History cleared[/green]")
    return 0


def cmd_templates(args, config: dict) -> int:
    from backends import GeminiAdapters

    adapters = GeminiAdapters.from_config(config)
    gallery = TemplateGallery(adapters)

    if not args.generate:
        for template in gallery.templates.values():
            console.print(f"  • [bold]{template.id}[/bold]: {template.name}")
        return 0

    async def generate() -> int:
        try:
            html = await gallery.generate(args.generate)
        except KeyError:
            console.print(f"[red]Unknown template: {args.generate}[/red]")
            return 1
        except StudioError as e:
            console.print(f"[red]Sorry, there was an error generating the template: {e}[/red]")
            return 1
        finally:
            await adapters.close()
        if args.out:
            args.out.write_text(html, encoding="utf-8")
            console.print(f"HTML written to [bold]{args.out}[/bold]")
        else:
            console.print(Panel(html, title=gallery.get(args.generate).name))
        return 0

    return asyncio.run(generate())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mockup Studio")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    describe = sub.add_parser("describe", help="Generate a mockup from a description")
    describe.add_argument("text")
    describe.add_argument("--style", default=VISUAL_STYLES[0].value,
                          choices=[s.value for s in VISUAL_STYLES])
    describe.set_defaults(func=cmd_describe)

    remix = sub.add_parser("remix", help="Restyle HTML with the look of other HTML")
    remix.add_argument("base", help="File with the HTML to restyle")
    remix.add_argument("style", help="File with the HTML to copy the style from")
    remix.set_defaults(func=cmd_remix)

    clone = sub.add_parser("clone", help="Clone a page from its URL and/or screenshots")
    clone.add_argument("--url")
    clone.add_argument("--screenshot", action="append", type=Path)
    clone.set_defaults(func=cmd_clone)

    restore = sub.add_parser("restore", help="Show a past run")
    restore.add_argument("id")
    restore.set_defaults(func=cmd_restore)

    templates = sub.add_parser("templates", help="List or generate inspiration templates")
    templates.add_argument("--generate", metavar="ID")
    templates.set_defaults(func=cmd_templates)

    for name in ("describe", "remix", "clone", "restore", "templates"):
        sub.choices[name].add_argument("--out", type=Path, help="Write HTML output to this file")

    sub.add_parser("history", help="List past runs").set_defaults(func=cmd_history)
    sub.add_parser("clear-history", help="Delete all past runs").set_defaults(func=cmd_clear_history)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    with correlation_context():
        log.info("cli.command", command=args.command)
        try:
            return args.func(args, config)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted[/yellow]")
            return 130


if __name__ == "__main__":
    sys.exit(main())
