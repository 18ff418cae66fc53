"""Shared fixtures: an in-memory stand-in for a tmux server."""

import itertools
import subprocess

import pytest

from xpanes.tmux import TmuxClient


class FakeTmuxServer:
    """Answers the tmux command lines xpanes issues, without a tmux binary.

    Windows hold pane ids in index order. ``split-window`` appends the new
    pane at the end, where tmux inserts it after the target pane; the split
    panes are interchangeable, so only the count matters. ``kill-pane``
    shifts the later panes down one index.
    """

    def __init__(self, *, base_index: int = 0, fail_on: str | None = None, session: str = "main"):
        self.base_index = base_index
        self.fail_on = fail_on
        self.session = session
        self.windows: dict[str, list[str]] = {}
        self.layouts: dict[str, list[str]] = {}
        self.options: dict[tuple[str, str], str] = {}
        self.sent: dict[str, list[str]] = {}
        self.enters: dict[str, int] = {}
        self.pipes: dict[str, str] = {}
        self.titles: dict[str, str] = {}
        self.selected_window: str | None = None
        self.calls: list[list[str]] = []
        self._pane_ids = itertools.count()
        self._window_indexes = itertools.count(1)

    def add_window(self, name: str | None = None) -> str:
        window = name or f"{self.session}:{next(self._window_indexes)}"
        self.windows[window] = [self._new_pane()]
        self.layouts[window] = []
        return window

    def pane_id(self, target: str) -> str:
        window, _, index = target.rpartition(".")
        if not window:
            window, index = target, str(self.base_index)
        return self.windows[window][int(index) - self.base_index]

    def sent_to(self, target: str) -> list[str]:
        return self.sent.get(self.pane_id(target), [])

    def _new_pane(self) -> str:
        return f"%{next(self._pane_ids)}"

    def _ok(self, cmd, stdout: str = "") -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(cmd, 0, stdout, "")

    def __call__(self, cmd: list[str]) -> subprocess.CompletedProcess:
        args = cmd[1:]
        if args[:1] == ["-S"]:
            args = args[2:]
        self.calls.append(args)
        sub = args[0]
        if sub == self.fail_on:
            return subprocess.CompletedProcess(cmd, 1, "", "create pane failed: pane too small")

        def value(flag: str) -> str:
            return args[args.index(flag) + 1]

        target = value("-t") if "-t" in args else None

        if sub == "-V":
            return self._ok(cmd, "tmux 3.4")
        if sub == "show-window-options":
            return self._ok(cmd, str(self.base_index))
        if sub == "new-session":
            self.add_window(f"{value('-s')}:{value('-n')}")
            return self._ok(cmd)
        if sub == "new-window":
            return self._ok(cmd, self.add_window())
        if sub == "split-window":
            self.windows[target].append(self._new_pane())
            return self._ok(cmd)
        if sub == "select-layout":
            self.layouts[target].append(args[-1])
            return self._ok(cmd)
        if sub == "select-pane":
            self.pane_id(target)
            if "-T" in args:
                self.titles[self.pane_id(target)] = args[args.index("-T") + 1]
            return self._ok(cmd)
        if sub == "kill-pane":
            window = target.rpartition(".")[0]
            self.windows[window].remove(self.pane_id(target))
            return self._ok(cmd)
        if sub == "kill-window":
            del self.windows[target]
            return self._ok(cmd)
        if sub == "select-window":
            self.selected_window = target
            return self._ok(cmd)
        if sub == "set-window-option":
            self.options[(target, args[-2])] = args[-1]
            return self._ok(cmd)
        if sub == "send-keys":
            pane = self.pane_id(target)
            if "-l" in args:
                self.sent.setdefault(pane, []).append(args[-1])
            else:
                self.enters[pane] = self.enters.get(pane, 0) + 1
            return self._ok(cmd)
        if sub == "pipe-pane":
            self.pipes[self.pane_id(target)] = args[-1]
            return self._ok(cmd)
        return subprocess.CompletedProcess(cmd, 1, "", f"unknown command: {sub}")


@pytest.fixture
def server() -> FakeTmuxServer:
    return FakeTmuxServer()


@pytest.fixture
def client(server) -> TmuxClient:
    return TmuxClient(runner=server)


@pytest.fixture
def make_server():
    return FakeTmuxServer
