import sys
from unittest.mock import MagicMock

import pytest

from selfbuild.command import CommandBuilder
from selfbuild.errors import InvalidMark, NonZeroExit
from selfbuild.utils import is_java_file


def test_add_keeps_order_and_stringifies_paths(tmp_path):
    command = CommandBuilder("javac").add("-d").add(tmp_path / "out").add(3)
    assert command.arguments == ["javac", "-d", str(tmp_path / "out"), "3"]
    assert len(command) == 4


def test_add_rejects_none():
    with pytest.raises(ValueError):
        CommandBuilder("javac").add(None)


def test_add_all_walks_sorted_and_filters(tmp_path):
    for name in ["b.java", "a.java", "notes.txt", "sub/d.java"]:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")

    command = CommandBuilder("javac").add_all(tmp_path, is_java_file)

    assert command.arguments == [
        "javac",
        str(tmp_path / "a.java"),
        str(tmp_path / "b.java"),
        str(tmp_path / "sub" / "d.java"),
    ]


def test_add_all_skips_missing_roots(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "A.java").write_text("")

    command = CommandBuilder("java").add_all([tmp_path / "src", tmp_path / "demo"])

    assert command.arguments == ["java", str(tmp_path / "src" / "A.java")]


def test_dump_emits_one_token_per_line():
    lines = []
    CommandBuilder("jdeps").add("-summary").add("app.jar").dump(lines.append)
    assert lines == ["jdeps", "-summary", "app.jar"]


def test_reset_to_mark_replays_prefix(mock_run):
    command = CommandBuilder("javac").add("-g")
    mark = command.mark(0)

    command.add("A.java").execute()
    command.reset_to_mark(mark)
    command.add("B.java").execute()

    assert mock_run.call_count == 2
    assert mock_run.call_args_list[0].args[0] == ["javac", "-g", "A.java"]
    assert mock_run.call_args_list[1].args[0] == ["javac", "-g", "B.java"]


def test_mark_offset_counts_back_from_end():
    command = CommandBuilder("jar").add("--create").add("--file").add("x.jar")
    mark = command.mark(2)
    assert mark.position == 2

    command.add("-C").reset_to_mark(mark)
    assert command.arguments == ["jar", "--create"]


@pytest.mark.parametrize("offset", [-1, 3])
def test_mark_outside_argument_list_is_invalid(offset):
    command = CommandBuilder("javac").add("-g")
    with pytest.raises(InvalidMark):
        command.mark(offset)


def test_reset_to_mark_beyond_length_is_invalid():
    mark = CommandBuilder("javac").add("-g").add("-d").mark()
    with pytest.raises(InvalidMark):
        CommandBuilder("javac").reset_to_mark(mark)


def test_execute_inherits_output_by_default(mock_run):
    CommandBuilder("javac").add("A.java").execute()
    assert mock_run.call_args.kwargs["capture_output"] is False


def test_execute_raises_with_captured_stderr(mock_run):
    mock_run.return_value = MagicMock(returncode=2, stdout="", stderr="A.java:1: error")

    with pytest.raises(NonZeroExit) as exc_info:
        CommandBuilder("javac", capture_output=True).add("A.java").execute()

    assert exc_info.value.exit_code == 2
    assert exc_info.value.stderr == "A.java:1: error"
    assert exc_info.value.arguments == ["javac", "A.java"]
    assert "javac exited with code 2" in str(exc_info.value)


def test_execute_ignores_stderr_when_not_capturing(mock_run):
    mock_run.return_value = MagicMock(returncode=1, stdout=None, stderr=None)

    with pytest.raises(NonZeroExit) as exc_info:
        CommandBuilder("javac").execute()

    assert exc_info.value.stderr == ""


def test_execute_runs_real_process():
    command = CommandBuilder(sys.executable, capture_output=True)
    command.add("-c").add("import sys; sys.stderr.write('bad'); sys.exit(3)")

    with pytest.raises(NonZeroExit) as exc_info:
        command.execute()

    assert exc_info.value.exit_code == 3
    assert exc_info.value.stderr == "bad"


def test_execute_returns_captured_stdout():
    command = CommandBuilder(sys.executable, capture_output=True).add("-c").add("print('ok')")
    assert command.execute().stdout.strip() == "ok"
