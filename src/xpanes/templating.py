from loguru import logger

from xpanes.constants import DEFAULT_REPSTR, DEFAULT_UTILITY, SSH_UTILITY


def render_command(template: str, target: str, repstr: str = DEFAULT_REPSTR) -> str:
    # Literal substitution; the token is never treated as a pattern.
    return template.replace(repstr, target)


def default_template(
    *,
    command: str | None = None,
    repstr: str = DEFAULT_REPSTR,
    each_as_command: bool = False,
    ssh: bool = False,
) -> str:
    if each_as_command:
        return repstr
    if ssh:
        return f"{SSH_UTILITY} {repstr}"
    if command is None:
        return f"{DEFAULT_UTILITY} {repstr}"
    if repstr not in command:
        logger.warning(
            "Replacement token {} not found in command; every pane receives it unchanged",
            repstr,
            operation="default_template",
        )
    return command
