"""Line-oriented records of the user file and the active-sessions file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

SKLAFF_VERSION = "1.32(#)"

# Active-file lines carry three reserved trailing fields.
_ACTIVE_TRAILER = "dum:dum:dum"


@dataclass
class UserEntry:
    """One registered user: uid, time of last logout and full name."""

    num: int
    last_session: int = 0
    name: str = ""

    def to_line(self) -> str:
        """Return the entry as a line of the user file."""
        return f"{self.num}:{self.last_session}:{self.name}\n"


@dataclass
class ActiveEntry:
    """One logged-in session."""

    user: int
    pid: int
    login_time: int
    avail: int = 0
    origin: str = ""
    tty: str = ""
    action: int = 0
    conf: int = 0

    def to_line(self) -> str:
        """Return the entry as a line of the active file."""
        return (
            f"{self.user}:{self.pid}:{self.login_time}:{self.avail}:"
            f"{self.origin}:{self.tty}:{self.action}:{self.conf}:{_ACTIVE_TRAILER}\n"
        )


def _to_int(value: str, what: str, line: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"bad {what} {value!r} in line {line!r}") from None


def parse_user_line(line: str) -> UserEntry:
    """Parse one line of the user file; raise ValueError if it is malformed."""
    stripped = line.rstrip("\r\n")
    parts = stripped.split(":", 2)
    if len(parts) != 3:
        raise ValueError(f"malformed user line: {line!r}")
    num, last, name = parts
    return UserEntry(
        num=_to_int(num, "uid", line),
        last_session=_to_int(last, "last session", line),
        name=name,
    )


def parse_active_line(line: str) -> ActiveEntry:
    """Parse one line of the active file; raise ValueError if it is malformed."""
    fields = line.rstrip("\r\n").split(":")
    if len(fields) < 6:
        raise ValueError(f"malformed active line: {line!r}")
    action = _to_int(fields[6], "action", line) if len(fields) > 6 else 0
    conf = _to_int(fields[7], "conference", line) if len(fields) > 7 else 0
    return ActiveEntry(
        user=_to_int(fields[0], "uid", line),
        pid=_to_int(fields[1], "pid", line),
        login_time=_to_int(fields[2], "login time", line),
        avail=_to_int(fields[3], "availability", line),
        origin=fields[4],
        tty=fields[5],
        action=action,
        conf=conf,
    )


def iter_user_entries(text: str) -> Iterator[UserEntry]:
    """Yield the entries of a user file's contents, skipping blank lines."""
    for line in text.splitlines():
        if line.strip():
            yield parse_user_line(line)


def iter_active_entries(text: str) -> Iterator[ActiveEntry]:
    """Yield the entries of an active file's contents, skipping blank lines."""
    for line in text.splitlines():
        if line.strip():
            yield parse_active_line(line)