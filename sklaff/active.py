"""The active-sessions file: who is logged in, from where, and doing what."""

from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable

from sklaff.config import NEW_FILE_MODE
from sklaff.records import ActiveEntry, parse_active_line

# Minimum number of seconds between two touches of the activity file.
IDLE_RESOLUTION = 60


def _check_field(value: str, what: str) -> str:
    if ":" in value or "\n" in value or "\r" in value:
        raise ValueError(f"{what} may not contain ':' or line breaks: {value!r}")
    return value


def _minutes_between(start: float, end: float) -> int:
    diff = int(end - start)
    return diff // 60 if diff >= 0 else -((-diff) // 60)


def _lines(text: str) -> Iterable[tuple[str, ActiveEntry | None]]:
    """Yield each line of ``text`` with its entry, None for blank lines."""
    for line in text.splitlines(keepends=True):
        yield line, (parse_active_line(line) if line.strip() else None)


def replace_active(text: str, entry: ActiveEntry) -> str:
    """Return ``text`` with the first line of ``entry.user`` replaced by ``entry``.

    Raises KeyError if the user has no line in ``text``.
    """
    out = []
    done = False
    for line, current in _lines(text):
        if not done and current is not None and current.user == entry.user:
            out.append(entry.to_line())
            done = True
        else:
            out.append(line)
    if not done:
        raise KeyError(entry.user)
    return "".join(out)


class ActiveFile:
    """The file listing every running session, one line per session.

    With ``tmp_root``, pruning a dead session also removes its
    ``<pid>/<pid>.qwk`` scratch file and directory below that root.
    """

    def __init__(self, path, *, encoding: str = "latin-1", tmp_root=None):
        self.path = Path(path)
        self.encoding = encoding
        self.tmp_root = Path(tmp_root) if tmp_root is not None else None

    def _read(self) -> str:
        return self.path.read_text(encoding=self.encoding)

    def _write(self, text: str) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".active.")
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as handle:
                handle.write(text)
            os.chmod(tmp, NEW_FILE_MODE)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise

    def entries(self) -> list[ActiveEntry]:
        """Return every session in file order; a missing file has none."""
        try:
            text = self._read()
        except FileNotFoundError:
            return []
        return [entry for _, entry in _lines(text) if entry is not None]

    def find(self, uid: int) -> ActiveEntry | None:
        """Return the first session of ``uid``, or None."""
        return next((e for e in self.entries() if e.user == uid), None)

    def is_active(self, uid: int) -> bool:
        """Tell whether ``uid`` is logged in."""
        return self.find(uid) is not None

    def is_available(self, uid: int) -> bool:
        """Tell whether ``uid`` has a session that is marked available."""
        return any(e.user == uid and e.avail == 0 for e in self.entries())

    def _update(self, uid: int, change: Callable[[ActiveEntry], ActiveEntry]) -> ActiveEntry:
        text = self._read()
        current = next(
            (e for _, e in _lines(text) if e is not None and e.user == uid), None
        )
        if current is None:
            raise KeyError(uid)
        updated = change(current)
        self._write(replace_active(text, updated))
        return updated

    def set_avail(self, uid: int, value: int) -> ActiveEntry:
        """Set the availability flag of ``uid``'s session and return the new entry."""
        return self._update(uid, lambda e: replace(e, avail=value))

    def set_action(self, uid: int, action: int, conf: int) -> ActiveEntry:
        """Record what ``uid`` is doing and in which conference."""
        return self._update(uid, lambda e: replace(e, action=action, conf=conf))

    def set_from(self, uid: int, value: str) -> ActiveEntry:
        """Set where ``uid`` is logged in from."""
        _check_field(value, "origin")
        return self._update(uid, lambda e: replace(e, origin=value))

    def add(self, entry: ActiveEntry) -> None:
        """Append a session; the file must already exist."""
        _check_field(entry.origin, "origin")
        _check_field(entry.tty, "tty")
        text = self._read()
        if text and not text.endswith("\n"):
            text += "\n"
        self._write(text + entry.to_line())

    def remove(self, uid: int) -> bool:
        """Remove the first session of ``uid``; return whether one was found."""
        text = self._read()
        out = []
        found = False
        for line, entry in _lines(text):
            if not found and entry is not None and entry.user == uid:
                found = True
                continue
            out.append(line)
        if found:
            self._write("".join(out))
        return found

    def active_minutes(self, uid: int, now: float) -> int | None:
        """Return how many whole minutes ``uid`` has been logged in, or None."""
        entry = self.find(uid)
        if entry is None:
            return None
        return _minutes_between(entry.login_time, now)

    def prune(self, is_alive: Callable[[int], bool]) -> list[ActiveEntry]:
        """Drop sessions whose process is gone and return them."""
        text = self._read()
        kept = []
        removed = []
        for line, entry in _lines(text):
            if entry is not None and not is_alive(entry.pid):
                removed.append(entry)
            else:
                kept.append(line)
        if removed:
            self._write("".join(kept))
            if self.tmp_root is not None:
                for entry in removed:
                    scratch = self.tmp_root / str(entry.pid)
                    try:
                        (scratch / f"{entry.pid}.qwk").unlink()
                    except OSError:
                        pass
                    try:
                        scratch.rmdir()
                    except OSError:
                        pass
        return removed


def idle_minutes(path, now: float) -> int:
    """Whole minutes since the activity file at ``path`` was last touched, 0 if absent."""
    try:
        stat = os.stat(path)
    except OSError:
        return 0
    return _minutes_between(stat.st_atime, now)


class ActivityNote:
    """Marks a user as active by touching a file, at most once per ``resolution``."""

    def __init__(self, path, resolution: int = IDLE_RESOLUTION):
        self.path = Path(path)
        self.resolution = resolution
        self.last = 0.0

    def touch(self, now: float) -> bool:
        """Touch the file unless it was touched recently; return whether it was."""
        if now - self.last < self.resolution:
            return False
        self.last = now
        if not self.path.exists():
            fd = os.open(os.fspath(self.path), os.O_WRONLY | os.O_CREAT, NEW_FILE_MODE)
            os.close(fd)
        os.utime(self.path, (now, now))
        return True