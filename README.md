# sklaff

A library for the data files of a small multi-user conference (BBS) system.
It handles the user register, the table of logged-in sessions and the
per-user profile files (`sklaffrc`).

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `sklaff.config` holds the system's limits and file names. `default_paths(root, language)`
  returns a `SklaffPaths`, whose properties give the locations of the user
  file, the active file, the global and standard `sklaffrc`, the standard
  mailbox, the help directory and the other files of an installation. The
  language is `"swe"` or `"eng"` (`"swedish"` and `"english"` are accepted
  too); any other value raises `ValueError`. `SklaffPaths.user_file(home, name)`
  and `SklaffPaths.mbox_file(mbox, name)` join a plain file name to a user's
  directory. `ConfType`, `MessageType` and `NameScope` are the enumerations
  for conference kinds, message kinds and name lookup scopes.
- `sklaff.records` defines the line formats. `UserEntry` is a line of the
  user file (`uid:last_session:name`). `ActiveEntry` is a line of the active
  file (`user:pid:login_time:avail:origin:tty:action:conf:dum:dum:dum`). Both
  turn into lines with `to_line()`. `parse_user_line` and `parse_active_line`
  parse a single line and raise `ValueError` on malformed input.
  `iter_user_entries` and `iter_active_entries` go through the contents of a
  whole file and skip blank lines.
- `sklaff.sklaffrc` reads and writes the `![heading]`-sectioned profile
  format as a `Sklaffrc` dataclass. `parse_sklaffrc(text, rc)` applies a
  file's sections and ignores headings it does not know.
  `read_sklaffrc(global_path, user_path)` reads the global defaults and then
  the user's own file on top of them, and skips files that do not exist.
  `format_sklaffrc(rc)` leaves out empty fields. `write_sklaffrc(rc, path, plan_path)`
  writes the file with mode 0600 and, if `plan_path` is given, copies the
  signature into it.
- `sklaff.userdb` provides `UserDatabase`, which looks users up in the user
  file:
  - `entries()`, `get_user(uid)`, `user_name(uid)`, `last_session(uid)` and
    `user_uid(name)` look users up.
  - `add_user(entry)` appends a user.
  - `user_name` returns `None` for uid 0 and returns the sysop name for
    uid -2.

  `gecos_name(gecos)` takes the full name from a passwd GECOS field.
  `setup_new_user(db, uid, gecos, home, mbox, std_confs, std_sklaffrc, std_mailbox)`
  creates a first-time user's directories, copies the standard files into
  them and registers the user. For root it raises `PermissionError`.
- `sklaff.active` provides `ActiveFile`, which reads and edits the session
  table:
  - `entries()`, `find(uid)`, `is_active(uid)` and `is_available(uid)` look
    sessions up.
  - `set_avail`, `set_action` and `set_from` change a session. They raise
    `KeyError` if the user has no session.
  - `add(entry)` and `remove(uid)` add and remove sessions.
  - `active_minutes(uid, now)` gives how long a user has been logged in.
  - `prune(is_alive)` drops sessions whose process is gone. If `tmp_root` is
    set, it also removes their scratch files.

  Rewrites go through a temporary file that then replaces the original.
  `replace_active(text, entry)` replaces one session line in file contents.
  `idle_minutes(path, now)` and `ActivityNote` track idle time through the
  access time of a file that is touched.

## Example

```python
from sklaff.config import default_paths
from sklaff.userdb import UserDatabase
from sklaff.active import ActiveFile

paths = default_paths("/var/lib/sklaff", "eng")
users = UserDatabase(paths.users_file)
print(users.user_name(1001))

active = ActiveFile(paths.active_file)
if active.is_active(1001):
    active.set_avail(1001, 1)
```

## What this package does not do

This is a library only. It has no command to run and no interactive session
or terminal interface. It also does not cover conferences, texts, messages or
the command parser. It does not produce the formatted user listings (by name
with payment notes, or by last session). Callers who need those build them
from `UserDatabase.entries()` and `read_sklaffrc`.