"""The registry of users: who is known, by uid and by name, and when they last left."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterator

from sklaff.config import (
    CONFS_FILE,
    MAILBOX_FILE,
    NEW_DIR_MODE,
    NEW_FILE_MODE,
    SKLAFFRC_FILE,
)
from sklaff.records import UserEntry, iter_user_entries

ROOT_UID = 0
SYSOP_UID = -2
DEFAULT_SYSOP_NAME = "Sysop"


class UserDatabase:
    """The user file of an installation, one ``uid:last_session:name`` line per user."""

    def __init__(self, path, *, sysop_name: str = DEFAULT_SYSOP_NAME, encoding: str = "latin-1"):
        self.path = Path(path)
        self.sysop_name = sysop_name
        self.encoding = encoding

    def _read(self, *, create: bool) -> str:
        try:
            return self.path.read_text(encoding=self.encoding)
        except FileNotFoundError:
            if not create:
                raise
            fd = os.open(os.fspath(self.path), os.O_WRONLY | os.O_CREAT, NEW_FILE_MODE)
            os.close(fd)
            return ""

    def _entries(self, *, create: bool) -> Iterator[UserEntry]:
        yield from iter_user_entries(self._read(create=create))

    def entries(self) -> list[UserEntry]:
        """Return every user in file order; a missing file has none."""
        return list(self._entries(create=True))

    def get_user(self, uid: int) -> UserEntry | None:
        """Return the entry for ``uid``, or None if there is none.

        Raises FileNotFoundError if the user file does not exist.
        """
        return next((e for e in self._entries(create=False) if e.num == uid), None)

    def user_name(self, uid: int) -> str | None:
        """Return the full name of ``uid``, or None for root or an unknown uid."""
        if uid == ROOT_UID:
            return None
        if uid == SYSOP_UID:
            return self.sysop_name
        entry = next((e for e in self._entries(create=True) if e.num == uid), None)
        return entry.name if entry else None

    def last_session(self, uid: int) -> int:
        """Return the time ``uid`` last logged out, or 0 if the user is unknown."""
        entry = next((e for e in self._entries(create=True) if e.num == uid), None)
        return entry.last_session if entry else 0

    def user_uid(self, name: str | None) -> int | None:
        """Return the uid of the user whose name is exactly ``name``, or None.

        Raises FileNotFoundError if the user file does not exist.
        """
        if name is None:
            return None
        return next((e.num for e in self._entries(create=False) if e.name == name), None)

    def add_user(self, entry: UserEntry) -> None:
        """Append ``entry`` to the user file, creating the file if needed."""
        text = self._read(create=True)
        fd = os.open(os.fspath(self.path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, NEW_FILE_MODE)
        with os.fdopen(fd, "w", encoding=self.encoding, newline="") as handle:
            handle.write(text + entry.to_line())


def gecos_name(gecos: str) -> str:
    """Return the full-name part of a passwd GECOS field (up to the first comma)."""
    return gecos.split(",", 1)[0]


def _install_copy(source, target: Path) -> None:
    shutil.copyfile(source, target)
    os.chmod(target, NEW_FILE_MODE)


def setup_new_user(db, uid, gecos, home, mbox, std_confs, std_sklaffrc, std_mailbox) -> UserEntry:
    """Create a first-time user's directories and files and register the user.

    The standard conference list and settings are copied into ``home``, the
    standard mailbox into ``mbox``. Raises PermissionError for root and
    OSError if a standard file cannot be copied.
    """
    if uid == ROOT_UID:
        raise PermissionError("root cannot be set up as a user")
    home = Path(home)
    mbox = Path(mbox)
    for directory in (home, mbox):
        try:
            directory.mkdir(mode=NEW_DIR_MODE)
        except FileExistsError:
            pass
    _install_copy(std_confs, home / CONFS_FILE)
    _install_copy(std_sklaffrc, home / SKLAFFRC_FILE)
    _install_copy(std_mailbox, mbox / MAILBOX_FILE)
    entry = UserEntry(num=uid, last_session=0, name=gecos_name(gecos))
    db.add_user(entry)
    return entry