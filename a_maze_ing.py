from collections import deque
from pathlib import Path
from typing import Callable, Deque, Iterable, Optional, Sequence, Set, Tuple

import click
from click.core import ParameterSource

from mazegen import ALGORITHMS, Coord, InvalidDimensionError, Maze
from parsing import Config, ConfigError, read_config


Walls = Sequence[Sequence[bool]]

PROGRESS_CLEAR_WIDTH = 100


def neighbors_open(
    hwalls: Walls, vwalls: Walls, x: int, y: int
) -> Iterable[Coord]:
    """Yield neighboring coordinates reachable from (row,col).

    Uses open walls only.
    """
    height = len(vwalls)
    width = len(hwalls[0])

    if x - 1 >= 0 and not hwalls[x - 1][y]:
        yield (x - 1, y)
    if x + 1 < height and not hwalls[x][y]:
        yield (x + 1, y)
    if y - 1 >= 0 and not vwalls[x][y - 1]:
        yield (x, y - 1)
    if y + 1 < width and not vwalls[x][y]:
        yield (x, y + 1)


def validate_maze(maze: Maze) -> None:
    """Check that the carved walls form a spanning tree.

    Checks:
    - Wall grids have the expected shapes.
    - Exactly width*height - 1 interior walls are open.
    - Every cell is reachable from the entrance cell.
    """

    h = maze.height
    w = maze.width
    hwalls = maze.hwalls
    vwalls = maze.vwalls

    if len(hwalls) != h - 1 or any(len(row) != w for row in hwalls):
        raise RuntimeError("Invalid maze: bad horizontal wall grid")
    if len(vwalls) != h or any(len(row) != w - 1 for row in vwalls):
        raise RuntimeError("Invalid maze: bad vertical wall grid")

    # A spanning tree over n cells has exactly n - 1 edges.
    if maze.removed_walls != w * h - 1:
        raise RuntimeError(
            f"Invalid maze: {maze.removed_walls} open walls, "
            f"expected {w * h - 1}"
        )

    start = maze.entrance
    reachable: Set[Coord] = {start}
    q: Deque[Coord] = deque([start])
    while q:
        cur = q.popleft()
        for nxt in neighbors_open(hwalls, vwalls, cur[0], cur[1]):
            if nxt in reachable:
                continue
            reachable.add(nxt)
            q.append(nxt)

    if len(reachable) != w * h:
        raise RuntimeError("Invalid maze: disconnected cells exist")
    if maze.exit not in reachable:
        raise RuntimeError("Invalid maze: no path from entrance to exit")


def progress_printer(width: int, height: int) -> Callable[[int], None]:
    """Build an `on_progress` callback writing a one-line status to stderr."""

    def on_progress(remaining: int) -> None:
        click.echo(
            f"Resolving disjoint sets for {width}x{height} maze..."
            f"{remaining} remaining\r",
            nl=False,
            err=True,
        )

    return on_progress


def build_maze(config: Config) -> Maze:
    """Generate and validate a maze from a parsed configuration."""

    on_progress = None
    progress_every: Optional[int] = None
    if config.show_progress:
        on_progress = progress_printer(config.columns, config.rows)
        progress_every = config.progress_every

    maze = Maze(
        config.columns,
        config.rows,
        config.path_compression,
        seed=config.seed,
        algorithm=config.algorithm,
        on_progress=on_progress,
        progress_every=progress_every,
    )
    if config.show_progress:
        # clear progress line
        click.echo(" " * PROGRESS_CLEAR_WIDTH + "\r", nl=False, err=True)

    validate_maze(maze)
    return maze


# CLI parameter -> Config field
OVERRIDES: Tuple[Tuple[str, str], ...] = (
    ("columns", "columns"),
    ("rows", "rows"),
    ("path_compression", "path_compression"),
    ("show_progress_bar", "show_progress"),
    ("progress_every", "progress_every"),
    ("seed", "seed"),
    ("algorithm", "algorithm"),
)


def resolve_config(ctx: click.Context, config_file: Optional[Path]) -> Config:
    """Merge the config file (if any) with explicitly given CLI flags."""

    base = read_config(config_file) if config_file is not None else Config()
    explicit = {}
    for param, field in OVERRIDES:
        source = ctx.get_parameter_source(param)
        if config_file is None or source in (
            ParameterSource.COMMANDLINE,
            ParameterSource.ENVIRONMENT,
        ):
            explicit[field] = ctx.params[param]
    return base.merged(**explicit)


@click.command()
@click.option("--columns", "-c", type=int, default=10, show_default=True,
              help="Width in cells")
@click.option("--rows", "-r", type=int, default=10, show_default=True,
              help="Height in cells")
@click.option("--path-compression", "-p", is_flag=True, default=False,
              help="Enable path compression (only useful for large mazes)")
@click.option("--show-progress-bar", "-s", is_flag=True, default=False,
              help="Show remaining disjoint sets while building")
@click.option("--progress-every", type=click.IntRange(min=1),
              default=1000, show_default=True,
              help="Report progress every N carving attempts")
@click.option("--seed", type=int, default=None,
              help="Seed for reproducible mazes (default: clock)")
@click.option("--algorithm", type=click.Choice(ALGORITHMS),
              default="sample", show_default=True,
              help="sample: random wall draws with retry; "
                   "shuffle: one pass over shuffled walls")
@click.option("--config", "config_file",
              type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="KEY=VALUE config file")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], **_: object) -> None:
    """Generate a perfect maze and print it as text."""

    try:
        config = resolve_config(ctx, config_file)
        maze = build_maze(config)
    except KeyboardInterrupt:
        click.echo("Interrupted.", err=True)
        ctx.exit(130)
    except (ConfigError, InvalidDimensionError, RuntimeError) as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)

    click.echo(maze.render())


if __name__ == "__main__":
    cli()
