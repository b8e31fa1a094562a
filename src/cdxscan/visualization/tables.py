"""Rich-powered tables for the end-of-run report."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from ..pipeline import ShardSummary

_console = Console()


def print_shard_table(
    summaries: list[ShardSummary],
    title: str = "Shards",
    console: Console | None = None,
) -> None:
    """Render per-shard line counts, matches and bytes read."""
    out = console or _console
    if not summaries:
        out.print("[yellow]No shards processed.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("Shard", justify="right", style="dim")
    table.add_column("Lines", justify="right")
    table.add_column("By MIME", justify="right", style="green")
    table.add_column("By URL", justify="right", style="green")
    table.add_column("Compressed", justify="right", style="cyan")
    table.add_column("Decompressed", justify="right", style="cyan")

    for s in summaries:
        table.add_row(
            f"{s.index:05d}",
            f"{s.lines:,}",
            str(s.matched_by_mime),
            str(s.matched_by_url),
            f"{s.progress.compressed_bytes_read:,}",
            f"{s.progress.decompressed_bytes_read:,}",
        )

    out.print(table)


def print_counter_table(
    counts: list[tuple[str, int]],
    title: str = "Top values",
    value_col: str = "Value",
    count_col: str = "Count",
    console: Console | None = None,
) -> None:
    """Render a MimeTypeCounter.top() result as a Rich table."""
    out = console or _console
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column(value_col)
    table.add_column(count_col, justify="right", style="cyan")

    for rank, (value, count) in enumerate(counts, start=1):
        table.add_row(str(rank), value, str(count))

    out.print(table)
