#!/usr/bin/env python3
"""
YouTube TLDR CLI Tool
Builds a TLDR with chapters for a video, or dry-runs the transcript strategies.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .core.config import APP_VERSION, config, print_config_summary, validate_config
from .models import BuildRequest, BuildResponse, ErrorPayload, TranscriptTestReport
from .service_factory import ServiceFactory
from .utils.logging import get_logger

logger = get_logger("cli")

console = Console()


async def run_build(request: BuildRequest, factory: ServiceFactory):
    try:
        await factory.start()
        return await factory.get_tldr_service().build(request)
    finally:
        await factory.cleanup()


async def run_transcript_test(url: str, languages: List[str], factory: ServiceFactory) -> TranscriptTestReport:
    try:
        await factory.start()
        return await factory.get_tldr_service().test_transcript(url, languages)
    finally:
        await factory.cleanup()


def display_build_result(result) -> None:
    """Render a build result or error payload."""
    if isinstance(result, ErrorPayload):
        console.print(Panel(
            f"{result.error_message}\n\n[dim]{result.error_kind} after {result.response_time_ms}ms[/dim]",
            title="❌ TLDR failed",
            border_style="red"
        ))
        return

    header = result.title or result.identifier
    console.print(Panel(result.tldr, title=f"📝 {header}", border_style="green"))

    if result.chapters:
        table = Table(title="Chapters")
        table.add_column("Time", style="cyan", no_wrap=True)
        table.add_column("Title")
        for chapter in result.chapters:
            table.add_row(chapter.time, chapter.title)
        console.print(table)
    else:
        console.print("[yellow]No chapters returned[/yellow]")

    console.print(
        f"[dim]model={result.model} transcript={result.transcript_length} chars "
        f"cached={result.cached} time={result.response_time_ms}ms[/dim]"
    )


def display_transcript_report(report: TranscriptTestReport) -> None:
    if report.identifier is None:
        console.print(f"[red]❌ {report.error}[/red]")
        return

    table = Table(title=f"Transcript strategies for {report.title or report.identifier}")
    table.add_column("#", justify="right")
    table.add_column("Strategy", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for index, attempt in enumerate(report.attempts, start=1):
        status = "[green]success[/green]" if attempt.status == "success" else "[red]failure[/red]"
        table.add_row(str(index), attempt.strategy, status, attempt.message)
    console.print(table)

    if report.final_source:
        console.print(f"✅ Transcript from [bold]{report.final_source}[/bold] ({report.transcript_length} chars)")
    else:
        console.print(f"[red]❌ {report.error}[/red]")


def setup_argument_parser() -> argparse.ArgumentParser:
    """Setup command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="youtube-tldr",
        description="YouTube TLDR CLI Tool"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"YouTube TLDR CLI v{APP_VERSION}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build a TLDR with chapters for a video")
    build.add_argument("url", help="YouTube video URL")
    build.add_argument(
        "--lang",
        default=config.transcript.default_language,
        help=f"Transcript and summary language (default: {config.transcript.default_language})"
    )
    build.add_argument(
        "--model",
        default=config.llm.default_model,
        help=f"Model for the primary provider (default: {config.llm.default_model})"
    )
    build.add_argument("--no-cache", action="store_true", help="Skip the cache lookup")
    build.add_argument("--json", action="store_true", help="Print the raw JSON payload")

    test = subparsers.add_parser("test-transcript", help="Try every transcript strategy and report each one")
    test.add_argument("url", help="YouTube video URL")
    test.add_argument(
        "--lang",
        action="append",
        help="Preferred language, repeat for more (default: configured language plus fallback)"
    )

    subparsers.add_parser("config", help="Show the effective configuration")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    if args.command == "config":
        print_config_summary()
        return 0

    is_valid, missing = validate_config()
    if args.command == "build" and not is_valid:
        for item in missing:
            console.print(f"[yellow]⚠️  Missing configuration: {item}[/yellow]")

    factory = ServiceFactory()
    try:
        if args.command == "build":
            request = BuildRequest(url=args.url, language=args.lang, model=args.model, bypass_cache=args.no_cache)
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True
            ) as progress:
                progress.add_task("Building TLDR...", total=None)
                result = asyncio.run(run_build(request, factory))

            if args.json:
                console.print_json(result.model_dump_json())
            else:
                display_build_result(result)
            return 0 if isinstance(result, BuildResponse) else 1

        report = asyncio.run(run_transcript_test(args.url, args.lang or [], factory))
        display_transcript_report(report)
        return 0 if report.final_source else 1

    except KeyboardInterrupt:
        console.print("\n👋 Goodbye!")
        return 130
    except Exception as e:
        console.print(f"[red]❌ Fatal error: {str(e)}[/red]")
        logger.error(f"Fatal error in main: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
