import argparse
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import platformdirs

from xpanes.constants import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_REPSTR,
    ENV_LOG_DIRECTORY,
    ENV_LOG_FORMAT,
    ENV_TEST,
    ENV_TMUX,
    LAYOUT_ALIASES,
    PROG_NAME,
)
from xpanes.errors import LogDirectoryError, UsageError
from xpanes.templating import default_template


@dataclass(frozen=True)
class Options:
    targets: tuple[str, ...]
    command: str
    repstr: str = DEFAULT_REPSTR
    socket_path: Path | None = None
    layout: str | None = None
    log_dir: Path | None = None
    log_format: str = DEFAULT_LOG_FORMAT
    titles: bool = False
    desync: bool = False
    begin_commands: tuple[str, ...] = ()
    debug: bool = False
    test_mode: bool = False
    bootstrap_window: str | None = None
    tmux_executable: str = "tmux"

    @property
    def logging_enabled(self) -> bool:
        return self.log_dir is not None


def default_log_dir(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    override = env.get(ENV_LOG_DIRECTORY)
    if override:
        return Path(override).expanduser()
    # Linux: ~/.cache/xpanes/logs (honours XDG_CACHE_HOME)
    return Path(platformdirs.user_cache_dir(appname=PROG_NAME)) / "logs"


def read_stdin_targets(stdin: TextIO | None) -> list[str]:
    if stdin is None or stdin.isatty():
        return []
    return [line.rstrip("\r\n") for line in stdin if line.strip()]


def resolve_options(
    args: argparse.Namespace,
    *,
    env: Mapping[str, str] | None = None,
    stdin_targets: list[str] | None = None,
) -> Options:
    env = os.environ if env is None else env

    if args.repstr == "":
        raise UsageError("Replacement token (-I) must not be empty")
    if args.each_as_command and args.command is not None:
        raise UsageError("-e cannot be combined with -c")
    if args.ssh and args.command is not None:
        raise UsageError("--ssh cannot be combined with -c")
    if args.each_as_command and args.ssh:
        raise UsageError("-e cannot be combined with --ssh")

    targets = tuple(args.targets or ()) + tuple(stdin_targets or ())
    if not targets:
        raise UsageError("No targets given")

    # Layout names were already restricted by the parser's choices.
    layout = LAYOUT_ALIASES[args.layout] if args.layout is not None else None

    log_dir = None
    if args.log is not None:
        log_dir = default_log_dir(env) if args.log == "" else Path(args.log).expanduser()
        log_dir = log_dir.absolute()

    log_format = args.log_format or env.get(ENV_LOG_FORMAT) or DEFAULT_LOG_FORMAT

    command = default_template(
        command=args.command,
        repstr=args.repstr,
        each_as_command=args.each_as_command,
        ssh=args.ssh,
    )

    return Options(
        targets=targets,
        command=command,
        repstr=args.repstr,
        socket_path=Path(args.socket).expanduser() if args.socket else None,
        layout=layout,
        log_dir=log_dir,
        log_format=log_format,
        titles=args.titles,
        desync=args.desync,
        begin_commands=tuple(args.begin or ()),
        debug=args.debug,
        test_mode=bool(env.get(ENV_TEST)),
        bootstrap_window=args.bootstrap_window,
        tmux_executable=env.get(ENV_TMUX) or "tmux",
    )


def prepare_log_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LogDirectoryError(f"Failed to create log directory {path}: {e.strerror or e}") from e
    if not path.is_dir():
        raise LogDirectoryError(f"Log directory is not a directory: {path}")
    if not os.access(path, os.W_OK | os.X_OK):
        raise LogDirectoryError(f"Log directory is not writable: {path}")
    return path
