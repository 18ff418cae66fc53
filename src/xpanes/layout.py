from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from xpanes.config import Options
from xpanes.constants import EVEN_HORIZONTAL, TILED
from xpanes.templating import render_command
from xpanes.tmux import TmuxClient

# tmux refuses an even-horizontal split once columns get too narrow, so
# growth switches to tiled after this many splits.
EVEN_HORIZONTAL_GROWTH_STEPS = 2


@dataclass(frozen=True)
class PaneAssignment:
    index: int
    target: str
    command: str
    log_path: Path | None = None


def pane_target(window: str, index: int) -> str:
    return f"{window}.{index}"


def growth_layout(step: int) -> str:
    return EVEN_HORIZONTAL if step < EVEN_HORIZONTAL_GROWTH_STEPS else TILED


def final_layout(count: int, requested: str | None = None) -> str:
    if requested:
        return requested
    return EVEN_HORIZONTAL if count == 1 else TILED


def build_panes(client: TmuxClient, window: str, count: int, base_index: int) -> list[str]:
    """Turn the single pane of ``window`` into exactly ``count`` panes.

    Splits ``count`` times, then kills the original pane. tmux renumbers the
    survivors from ``base_index``, so the returned targets are contiguous
    and follow creation order.
    """
    first = pane_target(window, base_index)
    client.select_pane(target=first)
    for step in range(count):
        client.split_window(target=window)
        client.select_layout(target=window, layout=growth_layout(step))

    client.kill_pane(target=first)
    client.select_pane(target=first)
    logger.debug("Built {} panes in {}", count, window, operation="build_panes")
    return [pane_target(window, base_index + i) for i in range(count)]


def assign_panes(
    options: Options,
    base_index: int,
    log_names: Sequence[str] | None = None,
) -> list[PaneAssignment]:
    assignments = []
    for i, target in enumerate(options.targets):
        log_path = None
        if options.log_dir is not None and log_names is not None:
            log_path = options.log_dir / log_names[i]
        assignments.append(
            PaneAssignment(
                index=base_index + i,
                target=target,
                command=render_command(options.command, target, options.repstr),
                log_path=log_path,
            )
        )
    return assignments


def populate_panes(
    client: TmuxClient,
    window: str,
    assignments: Sequence[PaneAssignment],
    options: Options,
) -> None:
    if options.titles:
        client.set_window_option(target=window, name="pane-border-status", value="top")
        client.set_window_option(target=window, name="pane-border-format", value="#{pane_title}")

    for pane in assignments:
        target = pane_target(window, pane.index)
        if pane.log_path is not None:
            client.pipe_pane_to_file(target=target, log_path=pane.log_path)
        if options.titles:
            client.set_pane_title(target=target, title=pane.target)
        for begin in options.begin_commands:
            client.send_keys(target=target, command=begin)
        client.send_keys(target=target, command=pane.command)


def orchestrate(
    client: TmuxClient,
    window: str,
    options: Options,
    base_index: int,
    log_names: Sequence[str] | None = None,
) -> list[PaneAssignment]:
    assignments = assign_panes(options, base_index, log_names)
    build_panes(client, window, len(assignments), base_index)
    populate_panes(client, window, assignments, options)
    client.select_layout(target=window, layout=final_layout(len(assignments), options.layout))
    if not options.desync:
        client.set_window_option(target=window, name="synchronize-panes", value="on")
    logger.info(
        "Started {} panes",
        len(assignments),
        operation="orchestrate",
        window=window,
    )
    return assignments
