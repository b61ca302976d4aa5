"""Site configuration: fixed limits, enumerations and the file layout of a installation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from pathlib import Path, PurePath

DEFAULT_ROOT = "/usr/local/sklaff"
DEFAULT_LANGUAGE = "swe"

# Groups used to tell modem-pool and internet accounts apart.
MODEM_POOL = ""
MODEM_GROUP = 50
INET_GROUP = 60

POSTING_OK = True

SKLAFF_ACCT = "sklaff"
SKLAFF_ID = "SKOM II"
SKLAFF_LOC = "Stockholm, Sweden"

NO_TERM = "unknown"
SKLAFF_TERM = "vt100"

# Default number of days before texts expire.
EXP_DEF = 10
EXP_DEF_NEWS = 3

UTMP_REC = "/etc/utmp"
MAIL_LIB = "/var/spool/mail"
NEWS_SPOOL = "/var/spool/news"
NEWS_GROUPS = "/var/lib/news/active"

# Per-user files, relative to the user's home or mailbox directory.
CONFRC_FILE = "confrc"
INDEX_FILE = ".index"
NEWINDEX_FILE = ".newindex"
MSG_FILE = "msg"
CONFS_FILE = "confs"
SKLAFFRC_FILE = "sklaffrc"
MAILBOX_FILE = "mailbox"
EDIT_FILE = "text.sklaff"
DEAD_FILE = "dead.sklaff"
TMP_NOTE = "tmplapp"

LINE_LEN = 79
SUBJECT_LEN = 70
LONG_LINE_LEN = 2 * LINE_LEN
HUGE_LINE_LEN = 32768
MAX_COMMANDS = 256
HISTORY_SIZE = 20
NEW_FILE_MODE = 0o600
NEW_DIR_MODE = 0o700

_LANGUAGES = {
    "swe": "swe",
    "swedish": "swe",
    "eng": "eng",
    "english": "eng",
}


class ConfType(IntEnum):
    """Kind of conference."""

    OPEN = 0
    CLOSED = 1
    SECRET = 2
    NEWS = 3


class MessageType(IntEnum):
    """Kind of message sent between sessions."""

    SAY = 1
    YELL = 2
    LOGIN = 3
    LOGOUT = 4
    I = 5  # noqa: E741


class NameScope(IntFlag):
    """Where a name lookup searches."""

    USER = 0x01
    CONF = 0x02
    ACTIVE = 0x04
    SUBSCRIBED = 0x08
    UNSUBSCRIBED = 0x10


def _normalize_language(language: str) -> str:
    try:
        return _LANGUAGES[language.strip().lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"unsupported language: {language!r}") from None


def _single_component(name: str) -> str:
    pure = PurePath(name)
    if not name or pure.is_absolute() or len(pure.parts) != 1 or name in (".", ".."):
        raise ValueError(f"not a plain file name: {name!r}")
    return name


@dataclass(frozen=True)
class SklaffPaths:
    """File layout of an installation rooted at ``root``."""

    root: Path
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "language", _normalize_language(self.language))

    @property
    def db(self) -> Path:
        return self.root / "db"

    @property
    def user_db(self) -> Path:
        return self.root / "user"

    @property
    def file_db(self) -> Path:
        return self.root / "files"

    @property
    def mbox_db(self) -> Path:
        return self.root / "mbox"

    @property
    def etc(self) -> Path:
        return self.root / "etc"

    @property
    def users_file(self) -> Path:
        return self.etc / "user"

    @property
    def active_file(self) -> Path:
        return self.etc / "active"

    @property
    def conf_file(self) -> Path:
        return self.etc / "conf"

    @property
    def news_file(self) -> Path:
        return self.etc / "news"

    @property
    def info_file(self) -> Path:
        return self.etc / "info"

    @property
    def licens_file(self) -> Path:
        return self.etc / "COPYING"

    @property
    def down_file(self) -> Path:
        return self.etc / "down"

    @property
    def pay_file(self) -> Path:
        return self.etc / "pay"

    @property
    def inet_file(self) -> Path:
        return self.etc / "inet"

    @property
    def acct_file(self) -> Path:
        return self.etc / "newacct"

    @property
    def acct_log(self) -> Path:
        return self.etc / "acctlog"

    @property
    def std_confs(self) -> Path:
        return self.etc / "stdconfs"

    @property
    def global_sklaffrc(self) -> Path:
        return self.etc / "sklaffrc"

    @property
    def std_sklaffrc(self) -> Path:
        return self.etc / "stdsklaffrc"

    @property
    def post_info(self) -> Path:
        return self.etc / "postnews"

    @property
    def parse_file(self) -> Path:
        return self.etc / f"parse.{self.language}"

    @property
    def std_mailbox(self) -> Path:
        return self.etc / f"stdmailbox.{self.language}"

    @property
    def help_dir(self) -> Path:
        return self.etc / f"help.{self.language}"

    @property
    def help_file(self) -> Path:
        return self.help_dir / "general.help"

    def user_file(self, home, name: str) -> Path:
        """Path of a per-user file such as ``confs`` inside ``home``."""
        return Path(home) / _single_component(name)

    def mbox_file(self, mbox, name: str) -> Path:
        """Path of a file such as ``mailbox`` inside a user's mailbox directory."""
        return Path(mbox) / _single_component(name)


def default_paths(root=DEFAULT_ROOT, language: str = DEFAULT_LANGUAGE) -> SklaffPaths:
    """Return the file layout for an installation at ``root``."""
    return SklaffPaths(Path(root), language)