import os

import pytest

from sklaff.active import ActiveFile, ActivityNote, idle_minutes, replace_active
from sklaff.records import ActiveEntry


def _entry(user, pid, login=1000, avail=0, origin="*host", tty="/dev/tty1"):
    return ActiveEntry(user=user, pid=pid, login_time=login, avail=avail, origin=origin, tty=tty)


@pytest.fixture
def active(tmp_path):
    path = tmp_path / "active"
    path.write_text(
        _entry(5, 100).to_line() + _entry(7, 200, avail=1).to_line() + _entry(9, 300).to_line(),
        encoding="latin-1",
    )
    return ActiveFile(path)


def test_entries_in_file_order(active):
    assert [e.user for e in active.entries()] == [5, 7, 9]


def test_missing_file_has_no_entries(tmp_path):
    af = ActiveFile(tmp_path / "none")
    assert af.entries() == []
    assert af.is_active(5) is False
    assert af.active_minutes(5, 5000) is None


def test_find_and_is_active(active):
    assert active.find(7).pid == 200
    assert active.find(42) is None
    assert active.is_active(9) is True
    assert active.is_active(42) is False


def test_is_available(active):
    assert active.is_available(5) is True
    assert active.is_available(7) is False


def test_set_avail_changes_only_that_user(active):
    before = active.entries()
    updated = active.set_avail(5, 1)
    assert updated.avail == 1
    after = active.entries()
    assert after[0] == updated
    assert after[1:] == before[1:]
    assert active.is_available(5) is False


def test_set_action(active):
    active.set_action(9, 3, 12)
    entry = active.find(9)
    assert (entry.action, entry.conf) == (3, 12)


def test_set_from(active):
    active.set_from(7, "example.com")
    assert active.find(7).origin == "example.com"


def test_set_from_rejects_separator(active):
    with pytest.raises(ValueError):
        active.set_from(7, "a:b")


def test_set_unknown_user_raises(active):
    with pytest.raises(KeyError):
        active.set_avail(42, 1)


def test_add_appends_line(active):
    new = _entry(11, 400)
    active.add(new)
    assert active.entries()[-1] == new
    assert active.path.read_text(encoding="latin-1").endswith(new.to_line())


def test_add_requires_existing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ActiveFile(tmp_path / "none").add(_entry(1, 2))


def test_add_line_format(tmp_path):
    path = tmp_path / "active"
    path.write_text("", encoding="latin-1")
    ActiveFile(path).add(_entry(5, 100, login=1000, origin="*host", tty="/dev/tty1"))
    assert path.read_text(encoding="latin-1") == "5:100:1000:0:*host:/dev/tty1:0:0:dum:dum:dum\n"


def test_remove(active):
    assert active.remove(7) is True
    assert [e.user for e in active.entries()] == [5, 9]


def test_remove_unknown_leaves_file(active):
    before = active.path.read_text(encoding="latin-1")
    assert active.remove(42) is False
    assert active.path.read_text(encoding="latin-1") == before


def test_active_minutes(active):
    assert active.active_minutes(5, 1000 + 10 * 60 + 30) == 10
    assert active.active_minutes(42, 5000) is None


def test_prune_all_alive_keeps_file(active):
    before = active.path.read_text(encoding="latin-1")
    assert active.prune(lambda pid: True) == []
    assert active.path.read_text(encoding="latin-1") == before


def test_replace_active_preserves_other_lines():
    text = _entry(1, 10).to_line() + _entry(2, 20).to_line()
    new = _entry(2, 20, avail=1)
    result = replace_active(text, new)
    assert result.splitlines(keepends=True) == [_entry(1, 10).to_line(), new.to_line()]


def test_replace_active_unknown_user():
    with pytest.raises(KeyError):
        replace_active(_entry(1, 10).to_line(), _entry(3, 30))


def test_idle_minutes(tmp_path):
    path = tmp_path / "act"
    path.write_text("")
    os.utime(path, (1000, 1000))
    assert idle_minutes(path, 1000 + 5 * 60) == 5
    assert idle_minutes(tmp_path / "none", 5000) == 0


def test_activity_note_touch_and_resolution(tmp_path):
    path = tmp_path / "act"
    note = ActivityNote(path, resolution=60)
    assert note.touch(10_000) is True
    assert path.exists()
    assert os.stat(path).st_atime == 10_000
    assert note.touch(10_030) is False
    assert os.stat(path).st_atime == 10_000
    assert note.touch(10_060) is True
    assert idle_minutes(path, 10_060) == 0