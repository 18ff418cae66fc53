VERSION = "0.1.0"

PROG_NAME = "xpanes"

DEFAULT_REPSTR = "{}"
DEFAULT_UTILITY = "echo"
SSH_UTILITY = "ssh -o StrictHostKeyChecking=no"

DEFAULT_LOG_FORMAT = "[:ARG:].log.%Y-%m-%d_%H-%M-%S"
LOG_ARG_PLACEHOLDER = "[:ARG:]"
LOG_PID_PLACEHOLDER = "[:PID:]"

SESSION_NAME_PREFIX = "xpanes"
BOOTSTRAP_WINDOW_PREFIX = "bootstrap"

EVEN_HORIZONTAL = "even-horizontal"
EVEN_VERTICAL = "even-vertical"
MAIN_HORIZONTAL = "main-horizontal"
MAIN_VERTICAL = "main-vertical"
TILED = "tiled"

LAYOUT_ALIASES = {
    "t": TILED,
    "tiled": TILED,
    "eh": EVEN_HORIZONTAL,
    "even-horizontal": EVEN_HORIZONTAL,
    "ev": EVEN_VERTICAL,
    "even-vertical": EVEN_VERTICAL,
    "mh": MAIN_HORIZONTAL,
    "main-horizontal": MAIN_HORIZONTAL,
    "mv": MAIN_VERTICAL,
    "main-vertical": MAIN_VERTICAL,
}

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_ARGS = 4

ENV_LOG_DIRECTORY = "XPANES_LOG_DIRECTORY"
ENV_LOG_FORMAT = "XPANES_LOG_FORMAT"
ENV_TMUX = "XPANES_TMUX"
ENV_TEST = "XPANES_TEST"
