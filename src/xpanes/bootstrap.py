"""Two-phase startup.

Outside tmux, a detached session is created and this program is re-invoked
inside it by typing the command into a throwaway window. tmux can only send
keys to panes of a live session, so that is the only way to run the rest of
the setup there. Inside tmux, the panes are built directly in a new window
and the throwaway window, if any, is removed.
"""

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from loguru import logger

from xpanes import logfiles
from xpanes.config import Options
from xpanes.constants import BOOTSTRAP_WINDOW_PREFIX, EXIT_OK, SESSION_NAME_PREFIX
from xpanes.layout import PaneAssignment, orchestrate
from xpanes.shell import escape_args
from xpanes.tmux import TmuxClient

REINVOKE_MODULE = "xpanes.cli"
BOOTSTRAP_WINDOW_FLAG = "--bootstrap-window"


def is_inside_tmux(env: Mapping[str, str] | None = None) -> bool:
    env = os.environ if env is None else env
    return bool(env.get("TMUX"))


def session_names(pid: int | None = None) -> tuple[str, str]:
    pid = os.getpid() if pid is None else pid
    return f"{SESSION_NAME_PREFIX}-{pid}", f"{BOOTSTRAP_WINDOW_PREFIX}-{pid}"


def reinvocation_command(argv: Sequence[str], bootstrap_window: str) -> str:
    return escape_args(
        [sys.executable, "-m", REINVOKE_MODULE, BOOTSTRAP_WINDOW_FLAG, bootstrap_window, *argv]
    )


def launch_session(
    client: TmuxClient,
    options: Options,
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    pid: int | None = None,
) -> str:
    session_name, window_name = session_names(pid)
    bootstrap_window = f"{session_name}:{window_name}"

    client.new_session(session_name=session_name, window_name=window_name, cwd=cwd or Path.cwd())
    client.send_keys(target=bootstrap_window, command=reinvocation_command(argv, bootstrap_window))
    logger.debug("Created session {}", session_name, operation="launch_session")

    if options.test_mode:
        for cmd in client.history:
            print(" ".join(cmd))
    else:
        client.attach(session_name)
    return session_name


def run_inside(client: TmuxClient, options: Options) -> list[PaneAssignment]:
    log_names = None
    if options.log_dir is not None:
        log_names = logfiles.generate(options.targets, options.log_format)

    base_index = client.pane_base_index()
    window = client.new_window()
    assignments = orchestrate(client, window, options, base_index, log_names)
    client.select_window(target=window)

    if options.bootstrap_window:
        client.kill_window(target=options.bootstrap_window)
    return assignments


def run(
    options: Options,
    argv: Sequence[str],
    client: TmuxClient,
    env: Mapping[str, str] | None = None,
) -> int:
    if is_inside_tmux(env):
        run_inside(client, options)
    else:
        launch_session(client, options, argv)
    return EXIT_OK
