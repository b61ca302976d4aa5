"""Reading and writing of the per-user ``sklaffrc`` settings file."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

from sklaff.config import NEW_FILE_MODE

_ENCODING = "latin-1"

# Headings recognised when reading.
_KNOWN_HEADINGS = frozenset(
    {
        "adress", "postnr", "ort", "tele1", "tele2", "tele3", "org", "note",
        "editor", "email1", "email2", "flags", "paid", "login", "timeout",
        "paydate", "sig", "url", "muggen",
    }
)

# Order in which sections are written.
_WRITE_ORDER = (
    "adress", "postnr", "ort", "tele1", "tele2", "tele3", "email1", "email2",
    "url", "org", "note", "sig", "editor", "flags", "timeout", "paid",
    "login", "paydate", "muggen",
)


@dataclass
class Sklaffrc:
    """A user's personal information and settings."""

    adress: str = ""
    postnr: str = ""
    ort: str = ""
    tele1: str = ""
    tele2: str = ""
    tele3: str = ""
    email1: str = ""
    email2: str = ""
    url: str = ""
    org: str = ""
    note: str = ""
    sig: str = ""
    editor: str = ""
    flags: str = ""
    timeout: str = ""
    paid: str = ""
    login: str = ""
    paydate: str = ""
    muggen: str = ""


assert {f.name for f in fields(Sklaffrc)} == _KNOWN_HEADINGS


def _heading_starts(text: str) -> list[int]:
    """Offsets of every ``![`` that begins a line."""
    starts = []
    pos = text.find("![")
    while pos != -1:
        if pos == 0 or text[pos - 1] == "\n":
            starts.append(pos)
        pos = text.find("![", pos + 1)
    return starts


def parse_sklaffrc(text: str, rc: Sklaffrc | None = None) -> Sklaffrc:
    """Apply the sections of ``text`` to ``rc`` (a new one if None) and return it.

    A section is a line starting ``![heading]`` followed by its value on the
    following lines, up to the next such line. The newline before the next
    heading, and the final character of the text, are not part of a value.
    Unknown headings are ignored.
    """
    if rc is None:
        rc = Sklaffrc()
    starts = _heading_starts(text)
    ends = starts[1:] + [len(text)]
    for start, end in zip(starts, ends):
        close = text.find("]", start + 2, end)
        if close == -1:
            continue
        heading = text[start + 2:close]
        if heading not in _KNOWN_HEADINGS:
            continue
        newline = text.find("\n", close, end)
        if newline == -1:
            continue
        body_start = newline + 1
        # Both at a following heading and at end of text one character is cut.
        value = text[body_start:end - 1] if end - 1 > body_start else ""
        setattr(rc, heading, value)
    return rc


def read_sklaffrc(global_path, user_path) -> Sklaffrc:
    """Read the global settings and then the user's own on top of them.

    A file that does not exist is skipped.
    """
    rc = Sklaffrc()
    for path in (global_path, user_path):
        if path is None:
            continue
        try:
            text = Path(path).read_text(encoding=_ENCODING)
        except FileNotFoundError:
            continue
        parse_sklaffrc(text, rc)
    return rc


def format_sklaffrc(rc: Sklaffrc) -> str:
    """Return the file contents for ``rc``; empty fields are left out."""
    parts = []
    for name in _WRITE_ORDER:
        value = getattr(rc, name)
        if value:
            parts.append(f"![{name}]\n{value}\n")
    return "".join(parts)


def _write_private(path, text: str) -> None:
    fd = os.open(os.fspath(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, NEW_FILE_MODE)
    with os.fdopen(fd, "w", encoding=_ENCODING, newline="") as handle:
        handle.write(text)


def write_sklaffrc(rc: Sklaffrc, path, plan_path=None) -> None:
    """Write ``rc`` to ``path`` and mirror its signature to ``plan_path``."""
    _write_private(path, format_sklaffrc(rc))
    if plan_path is not None:
        plan = f"{rc.sig}\n" if rc.sig else ""
        _write_private(plan_path, plan)