"""cdxscan CLI — entry point.

Commands:
    cdxscan run                 Stream remote cdx-NNNNN.gz shards of a crawl
    cdxscan scan <file>...      Run the same pipeline over local shard files
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from .aggregators.counter import MimeTypeCounter
from .config import Settings
from .errors import CdxScanError
from .pipeline import ShardPipeline, ShardSummary
from .search.evaluator import MatchEvaluator
from .search.matchers import ExtensionMatcher, MimeTypeMatcher
from .shards import ShardDescriptor, iter_shards
from .sink import AppendFileSink

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_settings(**overrides: Any) -> Settings:
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise click.BadParameter(str(exc)) from exc


def _build_pipeline(settings: Settings, counter: MimeTypeCounter) -> ShardPipeline:
    evaluator = MatchEvaluator(
        url_matcher=ExtensionMatcher(settings.extensions),
        mime_matcher=MimeTypeMatcher(settings.mime_types),
        counter=counter,
        sink=AppendFileSink(settings.output_path),
    )
    return ShardPipeline(
        evaluator,
        timeout=settings.http_timeout,
        buffer_size=settings.read_buffer_size,
        log_every_lines=settings.log_every_lines,
        log_every_seconds=settings.log_every_seconds,
    )


def _report(summaries: list[ShardSummary], counter: MimeTypeCounter, output: Path) -> None:
    from .visualization.tables import print_counter_table, print_shard_table

    print_shard_table(summaries, title="Processed shards", console=console)
    print_counter_table(
        counter.top(10), title="Top 10 MIME types", value_col="MIME type", console=console
    )
    matched = sum(s.matched_by_mime + s.matched_by_url for s in summaries)
    console.print(f"[dim]{matched} line{'s' if matched != 1 else ''} appended to {output}[/dim]")


def _fail(exc: CdxScanError) -> None:
    logger.debug("Run aborted", exc_info=exc)
    err_console.print(f"[red]Aborted:[/red] {type(exc).__name__}: {exc}")
    sys.exit(1)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="cdxscan")
def main() -> None:
    """cdxscan — stream Common Crawl CDX indexes and keep matching records."""


# ── run ──────────────────────────────────────────────────────────────────────


@main.command()
@click.option("--crawl", "crawl_id", default=None, help="Crawl id, e.g. CC-MAIN-2017-34.")
@click.option("--start", "start_index", default=None, type=int, help="First shard index (inclusive).")
@click.option("--end", "end_index", default=None, type=int, help="Last shard index (inclusive).")
@click.option("--output", "-o", "output_file", default=None, type=click.Path(path_type=Path),
              help="Append matches to this file.")
@click.option("--timeout", "http_timeout", default=None, type=float, help="HTTP connect/read timeout (s).")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def run(
    crawl_id: str | None,
    start_index: int | None,
    end_index: int | None,
    output_file: Path | None,
    http_timeout: float | None,
    log_level: str | None,
) -> None:
    """Stream every shard in [start, end] and append matching records.

    Values not given on the command line come from CDXSCAN_* env vars.

    \b
    Examples:
      cdxscan run
      cdxscan run --crawl CC-MAIN-2017-34 --start 0 --end 9
      cdxscan run --output office-docs.txt --timeout 300
    """
    settings = _load_settings(
        crawl_id=crawl_id,
        start_index=start_index,
        end_index=end_index,
        output_file=output_file,
        http_timeout=http_timeout,
        log_level=log_level,
    )
    _configure_logging(settings.log_level)

    try:
        shards = list(iter_shards(settings))
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    logger.info(
        "Processing %d index files of %s starting from index %d",
        len(shards), settings.crawl_id, settings.start_index,
    )
    counter = MimeTypeCounter()
    pipeline = _build_pipeline(settings, counter)
    try:
        with pipeline.session:
            summaries = pipeline.run(shards)
    except CdxScanError as exc:
        _fail(exc)
        return

    _report(summaries, counter, settings.output_path)


# ── scan ─────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", "output_file", default=None, type=click.Path(path_type=Path),
              help="Append matches to this file.")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def scan(files: tuple[Path, ...], output_file: Path | None, log_level: str | None) -> None:
    """Run the pipeline over local cdx-*.gz files, in the order given.

    \b
    Examples:
      cdxscan scan cdx-00000.gz cdx-00001.gz
      cdxscan scan cdx-00042.gz --output matches.txt
    """
    settings = _load_settings(output_file=output_file, log_level=log_level)
    _configure_logging(settings.log_level)

    counter = MimeTypeCounter()
    pipeline = _build_pipeline(settings, counter)
    summaries: list[ShardSummary] = []
    try:
        for index, path in enumerate(files):
            shard = ShardDescriptor(index=index, url=path.resolve().as_uri())
            logger.info("Loading file %d from %s", index, path)
            with path.open("rb") as fh:
                summaries.append(pipeline.process_stream(fh, shard, path.stat().st_size))
    except CdxScanError as exc:
        _fail(exc)
        return

    _report(summaries, counter, settings.output_path)


if __name__ == "__main__":
    main()
