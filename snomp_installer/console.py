"""Operator-facing terminal output.

The log file records what happened; these helpers tell the person at the
terminal what to do about it.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

RULE = "=" * 41


def banner(title: str) -> None:
    print(RULE)
    print(title)
    print(RULE)
    print()


def section(title: str) -> None:
    print(title)
    print("-" * len(title))


def ok(message: str) -> None:
    print(f"✓ {message}")


def fail(message: str) -> None:
    print(f"❌ {message}")


def warn(message: str) -> None:
    print(f"⚠ {message}")


def commands(lines: Iterable[str], *, heading: str = "Install with:") -> None:
    lines = list(lines)
    if not lines:
        return
    print(f"   {heading}")
    for line in lines:
        print(f"   {line}")
    print()


def block(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)
    print()


def confirm(question: str, *, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    """Ask a yes/no question; only an answer starting with y/Y accepts.

    Empty input and end-of-input (non-interactive runs) decline.
    """

    read = input_fn or input
    try:
        reply = read(f"{question} (y/N) ")
    except EOFError:
        print()
        return False
    return reply.strip()[:1] in {"y", "Y"}
