from xpanes.constants import EXIT_FAILURE, EXIT_INVALID_ARGS


class XpanesError(RuntimeError):
    exit_code = EXIT_FAILURE


class UsageError(XpanesError):
    exit_code = EXIT_INVALID_ARGS


class DependencyError(XpanesError):
    pass


class LogDirectoryError(XpanesError):
    pass
