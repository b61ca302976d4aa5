import os
import stat

from sklaff.sklaffrc import (
    Sklaffrc,
    format_sklaffrc,
    parse_sklaffrc,
    read_sklaffrc,
    write_sklaffrc,
)


def test_parse_basic_sections():
    text = "![note]\nHello there\n![editor]\nemacs\n"
    rc = parse_sklaffrc(text)
    assert rc.note == "Hello there"
    assert rc.editor == "emacs"
    assert rc.sig == ""


def test_parse_multiline_value():
    text = "![sig]\nline one\nline two\n![paid]\nyes\n"
    rc = parse_sklaffrc(text)
    assert rc.sig == "line one\nline two"
    assert rc.paid == "yes"


def test_unknown_heading_is_ignored():
    text = "![bogus]\nvalue\n![ort]\nStockholm\n"
    rc = parse_sklaffrc(text)
    assert rc.ort == "Stockholm"
    assert format_sklaffrc(rc) == "![ort]\nStockholm\n"


def test_heading_not_at_line_start_is_content():
    text = "![note]\nsee ![sig] here\n"
    rc = parse_sklaffrc(text)
    assert rc.note == "see ![sig] here"
    assert rc.sig == ""


def test_empty_section_clears_value():
    rc = Sklaffrc(note="old")
    parse_sklaffrc("![note]\n![editor]\nvi\n", rc)
    assert rc.note == ""
    assert rc.editor == "vi"


def test_heading_without_body_leaves_value():
    rc = Sklaffrc(note="kept")
    parse_sklaffrc("![note]", rc)
    assert rc.note == "kept"


def test_parse_updates_given_object():
    rc = Sklaffrc(editor="vi")
    result = parse_sklaffrc("![flags]\nbeep\n", rc)
    assert result is rc
    assert rc.editor == "vi"
    assert rc.flags == "beep"


def test_format_order_and_skips_empty():
    rc = Sklaffrc(note="n", adress="a", muggen="m")
    assert format_sklaffrc(rc) == "![adress]\na\n![note]\nn\n![muggen]\nm\n"


def test_format_parse_round_trip():
    rc = Sklaffrc(
        adress="Gatan 1",
        email1="user@example.com",
        note="first\nsecond",
        sig="-- sig",
        timeout="30",
        paydate="19990101",
    )
    assert parse_sklaffrc(format_sklaffrc(rc)) == rc


def test_read_global_then_user(tmp_path):
    global_rc = tmp_path / "global"
    user_rc = tmp_path / "user"
    global_rc.write_text("![editor]\nvi\n![timeout]\n20\n", encoding="latin-1")
    user_rc.write_text("![editor]\nemacs\n", encoding="latin-1")
    rc = read_sklaffrc(global_rc, user_rc)
    assert rc.editor == "emacs"
    assert rc.timeout == "20"


def test_read_missing_files(tmp_path):
    rc = read_sklaffrc(tmp_path / "nope", tmp_path / "nada")
    assert rc == Sklaffrc()


def test_write_and_read_back(tmp_path):
    rc = Sklaffrc(ort="Göteborg", sig="bye", flags="say shout")
    path = tmp_path / "sklaffrc"
    plan = tmp_path / ".plan"
    write_sklaffrc(rc, path, plan)
    assert read_sklaffrc(None, path) == rc
    assert plan.read_text(encoding="latin-1") == "bye\n"
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_write_plan_empty_without_sig(tmp_path):
    plan = tmp_path / ".plan"
    plan.write_text("old plan", encoding="latin-1")
    write_sklaffrc(Sklaffrc(note="x"), tmp_path / "rc", plan)
    assert plan.read_text(encoding="latin-1") == ""


def test_write_overwrites(tmp_path):
    path = tmp_path / "rc"
    write_sklaffrc(Sklaffrc(note="long old note"), path)
    write_sklaffrc(Sklaffrc(editor="ed"), path)
    assert path.read_text(encoding="latin-1") == "![editor]\ned\n"