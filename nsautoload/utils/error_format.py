"""Display helpers for errors raised while loading mapped files.

Load failures reach the CLI as the exception the executed file raised.
A SyntaxError is shown with its file and line, other exceptions as
``Type: message``.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

# Exceptions whose str() is usually empty
EMPTY_MESSAGE_HINTS: dict[type[BaseException], str] = {
    KeyboardInterrupt: "interrupted while executing the file",
    RecursionError: "the file recursed too deeply while executing",
    PermissionError: "permission denied while reading the file",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Describe a load failure in one line.

    >>> format_error_message(ValueError("bad value"))
    'ValueError: bad value'
    """
    if isinstance(e, SyntaxError):
        detail = _describe_syntax_error(e)
    else:
        detail = str(e) or next(
            (hint for exc_type, hint in EMPTY_MESSAGE_HINTS.items() if isinstance(e, exc_type)),
            "no details",
        )

    if not include_type:
        return detail
    return f"{type(e).__name__}: {detail}"


def _describe_syntax_error(e: SyntaxError) -> str:
    message = e.msg or "invalid syntax"
    if not e.filename:
        return message
    location = e.filename if e.lineno is None else f"{e.filename}:{e.lineno}"
    return f"{message} ({location})"


def escape_markup(value: object) -> str:
    """Escape symbol names and paths for Rich markup.

    Backslash namespace separators and brackets would otherwise be read as
    markup.
    """
    return _escape_markup(str(value))
