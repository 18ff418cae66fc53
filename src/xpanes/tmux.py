import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from xpanes.errors import DependencyError, XpanesError
from xpanes.shell import quote_arg

Runner = Callable[[list[str]], subprocess.CompletedProcess]


class TmuxError(XpanesError):
    pass


def _tmux_install_hint() -> str:
    return (
        "Install tmux and retry. On Debian/Ubuntu: "
        "sudo apt-get update && sudo apt-get install -y tmux"
    )


def _run_tmux(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(cmd, text=True, capture_output=True, check=False)
    except FileNotFoundError as e:
        raise DependencyError(f"{cmd[0]} not found on PATH. {_tmux_install_hint()}") from e


@dataclass
class TmuxClient:
    """Issues tmux commands one at a time against a single server.

    Every command either succeeds or raises ``TmuxError``; later commands
    address panes and windows created by earlier ones, so nothing is retried.
    """

    socket_path: Path | None = None
    executable: str = "tmux"
    runner: Runner = _run_tmux
    history: list[list[str]] = field(default_factory=list)

    def command_line(self, args: list[str]) -> list[str]:
        cmd = [self.executable]
        if self.socket_path is not None:
            cmd += ["-S", str(self.socket_path)]
        return cmd + list(args)

    def run(self, args: list[str], *, error: str) -> str:
        cmd = self.command_line(args)
        self.history.append(cmd)
        logger.debug("tmux {}", " ".join(args), operation="tmux")
        result = self.runner(cmd)
        if result.returncode != 0:
            raise TmuxError((result.stderr or "").strip() or error)
        return (result.stdout or "").strip()

    def ensure_available(self) -> None:
        cmd = self.command_line(["-V"])
        result = self.runner(cmd)
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            stdout = (result.stdout or "").strip()
            details = stderr or stdout or "tmux is not available"
            raise DependencyError(f"{details}. {_tmux_install_hint()}")

    def show_window_option(self, name: str) -> str:
        return self.run(
            ["show-window-options", "-g", "-v", name],
            error=f"Failed to read tmux option {name}",
        )

    def pane_base_index(self) -> int:
        value = self.show_window_option("pane-base-index")
        return int(value) if value.isdigit() else 0

    def new_session(self, *, session_name: str, window_name: str, cwd: Path) -> None:
        self.run(
            ["new-session", "-d", "-s", session_name, "-n", window_name, "-c", str(cwd)],
            error="Failed to create tmux session",
        )

    def new_window(self, *, name: str | None = None) -> str:
        args = ["new-window", "-d", "-P", "-F", "#{session_name}:#{window_index}"]
        if name:
            args += ["-n", name]
        window = self.run(args, error="Failed to create tmux window")
        if not window:
            raise TmuxError("Failed to create tmux window (empty output)")
        return window

    def split_window(self, *, target: str) -> None:
        self.run(["split-window", "-h", "-d", "-t", target], error="Failed to split tmux pane")

    def select_layout(self, *, target: str, layout: str) -> None:
        self.run(["select-layout", "-t", target, layout], error="Failed to set tmux layout")

    def select_pane(self, *, target: str) -> None:
        self.run(["select-pane", "-t", target], error="Failed to select tmux pane")

    def set_pane_title(self, *, target: str, title: str) -> None:
        self.run(["select-pane", "-t", target, "-T", title], error="Failed to set pane title")

    def kill_pane(self, *, target: str) -> None:
        self.run(["kill-pane", "-t", target], error="Failed to kill tmux pane")

    def kill_window(self, *, target: str) -> None:
        self.run(["kill-window", "-t", target], error="Failed to kill tmux window")

    def select_window(self, *, target: str) -> None:
        self.run(["select-window", "-t", target], error="Failed to select tmux window")

    def set_window_option(self, *, target: str, name: str, value: str) -> None:
        self.run(
            ["set-window-option", "-t", target, name, value],
            error=f"Failed to set tmux option {name}",
        )

    def send_keys(self, *, target: str, command: str) -> None:
        # Send the command as literal text, then press Enter.
        #
        # tmux occasionally misparses a combined invocation and errors with
        # "unknown command: Enter". Two calls avoid that.
        if command:
            self.run(["send-keys", "-t", target, "-l", command], error="Failed to send keys")
        self.run(["send-keys", "-t", target, "C-m"], error="Failed to send keys")

    def pipe_pane_to_file(self, *, target: str, log_path: Path) -> None:
        # tmux runs the pipe command via /bin/sh -c, so the path is shell-quoted.
        cmd = f"cat >> {quote_arg(str(log_path))}"
        self.run(["pipe-pane", "-o", "-t", target, cmd], error="Failed to pipe tmux pane output")

    def attach(self, session_name: str) -> None:
        # Attach inherits stdout; stdin may have been a pipe of targets.
        cmd = self.command_line(["attach-session", "-t", session_name])
        self.history.append(cmd)
        if sys.stdin.isatty():
            proc = subprocess.run(cmd, text=True)
        else:
            try:
                tty = open("/dev/tty")
            except OSError as e:
                raise TmuxError(f"Cannot attach to tmux session without a terminal: {e}") from e
            with tty:
                proc = subprocess.run(cmd, stdin=tty, text=True)
        if proc.returncode != 0:
            raise TmuxError("Failed to attach to tmux session")
