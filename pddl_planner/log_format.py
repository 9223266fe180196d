import re


LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

_HEADER_PREFIX_RE = re.compile(r"^\[[^\]]+\]\[[A-Z]+\]\s?")
_CANONICAL_LINE_RE = re.compile(r"^\[([^/\]]+)/([^\]]+)\]\[([A-Z]+)\]\s(.*)$")


def _strip_headers(message: str) -> str:
    # Messages relayed from another formatter may already carry one or more headers.
    match = _HEADER_PREFIX_RE.match(message)
    while match:
        message = message[match.end():]
        match = _HEADER_PREFIX_RE.match(message)
    return message


def format_log_line(
    scope: str,
    subscope: str = "none",
    level: str = "INFO",
    message: str = "",
    *,
    scope_width: int | None = None,
) -> str:
    """Build a ``[scope/subscope][LEVEL] message`` line.

    Args:
        scope: Component id: job, workspace, planning, registry, cli.
        subscope: Planner name, short phase name, or "none".
        level: DEBUG, INFO, WARN or ERROR; anything else becomes INFO.
        message: Text to log. Leading headers are removed first.
        scope_width: Truncate "scope/subscope" to this many characters.

    Returns:
        The formatted line, or "" when nothing is left of the message.

    Examples:
        >>> format_log_line("job", "FD", "INFO", "hello")
        '[job/FD][INFO] hello'

        >>> format_log_line("planning", "LAMA", "WARN", "[job/LAMA][INFO] no result")
        '[planning/LAMA][WARN] no result'
    """
    normalized = level.strip().upper()
    if normalized not in LEVELS:
        normalized = "INFO"

    body = _strip_headers(message)
    if not body:
        return ""

    header = f"{scope}/{subscope}"
    if scope_width is not None and len(header) > scope_width:
        header = header[: max(scope_width - 3, 0)] + "..."
    return f"[{header}][{normalized}] {body}"


def format_log(scope: str, subscope: str, level: str, message: str) -> str:
    return format_log_line(scope, subscope, level, message)


def parse_canonical_log(line: str) -> tuple[str, str, str, str] | None:
    """Split a formatted line back into (scope, subscope, level, message).

    Returns None for lines that were not produced by ``format_log_line``.
    """
    match = _CANONICAL_LINE_RE.match(line)
    if match is None:
        return None
    scope, subscope, level, message = match.groups()
    return scope, subscope, level, message
