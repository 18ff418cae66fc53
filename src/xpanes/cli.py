import argparse
import signal
import sys

from loguru import logger

from xpanes import bootstrap
from xpanes.config import Options, prepare_log_dir, read_stdin_targets, resolve_options
from xpanes.constants import (
    DEFAULT_REPSTR,
    EXIT_INVALID_ARGS,
    LAYOUT_ALIASES,
    PROG_NAME,
    VERSION,
)
from xpanes.errors import XpanesError
from xpanes.logging_config import setup_logger
from xpanes.tmux import TmuxClient


_LOG_DIR_OPTION = "--log-dir"


def _split_log_option(args: list[str]) -> list[str]:
    """Rewrite ``--log=DIR`` so that a bare ``--log`` never consumes a target."""
    out: list[str] = []
    for i, arg in enumerate(args):
        if arg == "--":
            return [*out, *args[i:]]
        if arg.startswith("--log="):
            directory = arg.partition("=")[2]
            out.extend([_LOG_DIR_OPTION, directory] if directory else ["--log"])
        else:
            out.append(arg)
    return out


class _ArgumentParser(argparse.ArgumentParser):
    def parse_known_args(self, args=None, namespace=None):
        args = sys.argv[1:] if args is None else list(args)
        return super().parse_known_args(_split_log_option(args), namespace)

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_INVALID_ARGS, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG_NAME,
        description="Run a command in one tmux pane per target.",
    )
    parser.add_argument("targets", nargs="*", metavar="TARGET", help="One pane is created per target")
    parser.add_argument(
        "-c",
        dest="command",
        metavar="UTILITY",
        default=None,
        help="Command template run in every pane (default: 'echo {}')",
    )
    parser.add_argument(
        "-I",
        dest="repstr",
        metavar="REPSTR",
        default=DEFAULT_REPSTR,
        help="Token replaced with the target in UTILITY (default: '{}')",
    )
    parser.add_argument("-S", dest="socket", metavar="SOCKET", default=None, help="tmux socket path")
    parser.add_argument(
        "-l",
        dest="layout",
        metavar="LAYOUT",
        choices=sorted(LAYOUT_ALIASES),
        default=None,
        help="Final layout: t, eh, ev, mh, mv or the full tmux layout name",
    )
    parser.add_argument(
        "-e",
        dest="each_as_command",
        action="store_true",
        help="Run each target itself as a command",
    )
    parser.add_argument("--ssh", action="store_true", help="Connect to each target with ssh")
    parser.add_argument(
        "-d",
        "--desync",
        action="store_true",
        help="Do not synchronize input across panes",
    )
    parser.add_argument("-t", dest="titles", action="store_true", help="Show the target as the pane title")
    parser.add_argument(
        "-B",
        dest="begin",
        metavar="COMMAND",
        action="append",
        default=None,
        help="Command sent to every pane before UTILITY (repeatable)",
    )
    parser.add_argument(
        "--log",
        action="store_const",
        const="",
        default=None,
        help="Save each pane's output; --log=DIR picks the directory (default: ~/.cache/xpanes/logs)",
    )
    parser.add_argument(_LOG_DIR_OPTION, dest="log", help=argparse.SUPPRESS)
    parser.add_argument(
        "--log-format",
        default=None,
        metavar="FORMAT",
        help="Log file name format; [:ARG:], [:PID:] and strftime directives are expanded",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose diagnostics")
    parser.add_argument("-V", "--version", action="version", version=f"{PROG_NAME} {VERSION}")
    parser.add_argument(bootstrap.BOOTSTRAP_WINDOW_FLAG, dest="bootstrap_window", help=argparse.SUPPRESS)
    return parser


def _forwarded_argv(argv: list[str], stdin_targets: list[str]) -> list[str]:
    if not stdin_targets:
        return list(argv)
    if "--" in argv:
        return [*argv, *stdin_targets]
    return [*argv, "--", *stdin_targets]


def _exit_on_signal(signum, _frame) -> None:
    raise SystemExit(128 + signum)


def _install_signal_handlers() -> None:
    for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, _exit_on_signal)


def _client_for(options: Options) -> TmuxClient:
    return TmuxClient(socket_path=options.socket_path, executable=options.tmux_executable)


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(debug=args.debug)
    _install_signal_handlers()

    try:
        stdin_targets = [] if args.targets else read_stdin_targets(sys.stdin)
        options = resolve_options(args, stdin_targets=stdin_targets)
        if options.log_dir is not None:
            prepare_log_dir(options.log_dir)

        client = _client_for(options)
        client.ensure_available()
        return bootstrap.run(options, _forwarded_argv(argv, stdin_targets), client)
    except XpanesError as e:
        logger.debug("Aborted: {}", e, operation="main")
        print(f"{PROG_NAME}: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
