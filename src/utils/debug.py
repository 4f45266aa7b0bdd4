from __future__ import annotations

_verbose = False
_WARNING_PREFIX = "WARNING: "


def set_verbose(enabled: bool) -> bool:
    """Switch verbose logging; returns the previous setting."""
    global _verbose
    previous = _verbose
    _verbose = bool(enabled)
    return previous


def is_verbose() -> bool:
    return _verbose


def log(message: str) -> None:
    if _verbose:
        print(message)


def warn(message: str) -> None:
    """Report a recoverable problem; printed whatever the verbosity."""
    print(f"{_WARNING_PREFIX}{message}")
