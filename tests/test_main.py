import pytest

import main
from debug import debug

MESSAGES = (
    "* B Beta III IV I AXLE (HQ) (EX) (IP) (TR) (BY)\n"
    "FROM his shoulder Hiawatha\n"
)


@pytest.fixture
def upper_messages(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text(
        "* B Beta III IV I AXLE (HQ) (EX) (IP) (TR) (BY)\n"
        "FROM HIS SHOULDER HIAWATHA\n"
        "\n"
        "TOOK THE CAMERA OF ROSEWOOD\n",
        encoding="utf-8",
    )
    return path


def test_converts_file_to_file(m4_conf, upper_messages, tmp_path):
    out = tmp_path / "out.txt"
    assert main.main([str(m4_conf), str(upper_messages), str(out)]) == 0
    assert out.read_bytes() == (
        b"QVPQS OKOIL PUBKJ ZPISF XDW\r\n"
        b"\r\n"
        b"BHCNS CXNUO AATZX SRCFY DGU\r\n"
    )


def test_builtin_suite_to_stdout(upper_messages, capsys):
    assert main.main(["--suite", "m4", str(upper_messages)]) == 0
    assert capsys.readouterr().out.startswith("QVPQS OKOIL PUBKJ ZPISF XDW\r\n")


def test_block_size(upper_messages, capsys):
    assert main.main(["--suite", "m4", "--block", "4", str(upper_messages)]) == 0
    assert capsys.readouterr().out.startswith("QVPQ SOKO ILPU BKJZ PISF XDW\r\n")


def test_error_exits_with_status_one(m4_conf, tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text(MESSAGES, encoding="utf-8")
    # lower-case letters are not in the alphabet
    assert main.main([str(m4_conf), str(path)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_missing_config_file(tmp_path, capsys):
    assert main.main([str(tmp_path / "nope.conf"), str(tmp_path / "in.txt")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_config_or_suite_required():
    with pytest.raises(SystemExit):
        main.parse_args([])


def test_suite_shifts_positionals():
    args = main.parse_args(["--suite", "m3", "in.txt", "out.txt"])
    assert args.config is None
    assert str(args.input) == "in.txt"
    assert str(args.output) == "out.txt"


def test_debug_flags_enable_components(upper_messages, monkeypatch):
    # keep the root logger untouched for the rest of the session
    monkeypatch.setattr(main.Debug, "_root_configured", True)
    try:
        assert main.main(["--suite", "m4", "--debug", "stepping", str(upper_messages)]) == 0
        assert debug.status()["stepping"]
        assert not debug.status()["signal"]
    finally:
        debug.disable("stepping")


@pytest.mark.parametrize("text", ["", "\n\n"])
def test_input_without_setting_line(m4_conf, tmp_path, capsys, text):
    path = tmp_path / "input.txt"
    path.write_text(text, encoding="utf-8")
    out = tmp_path / "out.txt"
    assert main.main([str(m4_conf), str(path), str(out)]) == 1
    assert "setting line" in capsys.readouterr().err
    assert out.read_text(encoding="utf-8") == ""
