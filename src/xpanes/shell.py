from collections.abc import Iterable


def quote_arg(value: str) -> str:
    # POSIX single-quote escaping: ' -> '"'"'
    return "'" + (value or "").replace("'", "'\"'\"'") + "'"


def escape_args(tokens: Iterable[str]) -> str:
    """Serialize tokens so that a POSIX shell parses them back unchanged.

    Every token is single-quoted, including empty ones, so the re-invoked
    process sees exactly the same argument list.
    """
    return " ".join(quote_arg(token) for token in tokens)
