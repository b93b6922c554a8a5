import asyncio
import stat
import sys

import pytest

from tex_sync.core.exceptions import SyncTexCommandError, SyncTexCommandNotFoundError
from tex_sync.services import SyncTexLocator
from tex_sync.synctex import command

VIEW_OUTPUT = """This is SyncTeX command line utility, version 1.5
SyncTeX result begin
Output:/work/main.pdf
Page:1
x:133.768356
y:134.755112
h:133.768356
v:137.545578
W:343.711060
H:9.962640
before:
offset:0
middle:
after:
SyncTeX result end
"""

EDIT_OUTPUT = """This is SyncTeX command line utility, version 1.5
SyncTeX result begin
Output:/work/main.pdf
Input:/work/chapter.tex
Line:12
Column:-1
Offset:0
Context:
SyncTeX result end
"""

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a shell script as synctex")


def _fake_synctex(tmp_path, output, exit_code=0):
    """An executable that records its arguments and prints ``output``."""
    script = tmp_path / "synctex"
    (tmp_path / "out.txt").write_text(output)
    script.write_text(
        "#!/bin/sh\n"
        f'printf "%s\\n" "$@" > "{tmp_path}/args.txt"\n'
        f'cat "{tmp_path}/out.txt"\n'
        'echo "synctex: something went wrong" >&2\n'
        f"exit {exit_code}\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


def _recorded_args(tmp_path):
    return (tmp_path / "args.txt").read_text().splitlines()


class TestParseForwardOutput:
    def test_view_output(self):
        result = command.parse_forward_output(VIEW_OUTPUT)
        assert result.page == 1
        assert result.x == pytest.approx(133.768356)
        assert result.y == pytest.approx(134.755112)

    def test_last_record_wins(self):
        second = "Output:/work/main.pdf\nPage:2\nx:1\ny:2\nSyncTeX result end\n"
        output = VIEW_OUTPUT.replace("SyncTeX result end\n", second)
        assert command.parse_forward_output(output).page == 2

    def test_lines_outside_result_block_are_ignored(self):
        output = "Page:9\n" + VIEW_OUTPUT + "Page:7\n"
        assert command.parse_forward_output(output).page == 1

    def test_missing_result_block(self):
        with pytest.raises(SyncTexCommandError):
            command.parse_forward_output("This is SyncTeX command line utility, version 1.5\n")

    def test_bad_number(self):
        with pytest.raises(SyncTexCommandError):
            command.parse_forward_output(VIEW_OUTPUT.replace("Page:1", "Page:one"))


class TestParseBackwardOutput:
    def test_edit_output(self):
        result = command.parse_backward_output(EDIT_OUTPUT)
        assert result.file == "/work/chapter.tex"
        assert result.line == 12
        assert result.column == -1

    def test_carriage_returns_are_stripped(self):
        result = command.parse_backward_output(EDIT_OUTPUT.replace("\n", "\r\n"))
        assert result.file == "/work/chapter.tex"
        assert result.line == 12

    def test_windows_path_keeps_drive_colon(self):
        result = command.parse_backward_output(EDIT_OUTPUT.replace("/work/chapter.tex", "C:\\work\\chapter.tex"))
        assert result.file == "C:\\work\\chapter.tex"

    def test_missing_column(self):
        with pytest.raises(SyncTexCommandError):
            command.parse_backward_output(EDIT_OUTPUT.replace("Column:-1\n", ""))


class TestRun:
    def test_missing_binary(self, tmp_path):
        missing = str(tmp_path / "no-synctex")
        with pytest.raises(SyncTexCommandNotFoundError) as exc_info:
            asyncio.run(command.forward(3, "main.tex", tmp_path / "main.pdf", missing))
        assert exc_info.value.command == missing

    @posix_only
    def test_forward_arguments(self, tmp_path):
        synctex = _fake_synctex(tmp_path, VIEW_OUTPUT)
        pdf = tmp_path / "main.pdf"
        result = asyncio.run(command.forward(42, "/work/main.tex", pdf, synctex))
        assert result.page == 1
        assert _recorded_args(tmp_path) == ["view", "-i", "42:1:/work/main.tex", "-o", str(pdf)]

    @posix_only
    def test_backward_arguments(self, tmp_path):
        synctex = _fake_synctex(tmp_path, EDIT_OUTPUT)
        pdf = tmp_path / "main.pdf"
        result = asyncio.run(command.backward(2, 72.5, 300.0, pdf, synctex))
        assert result.line == 12
        assert _recorded_args(tmp_path) == ["edit", "-o", f"2:72.5:300.0:{pdf}"]

    @posix_only
    def test_non_zero_exit(self, tmp_path):
        synctex = _fake_synctex(tmp_path, VIEW_OUTPUT, exit_code=3)
        with pytest.raises(SyncTexCommandError) as exc_info:
            asyncio.run(command.forward(1, "main.tex", tmp_path / "main.pdf", synctex))
        assert exc_info.value.returncode == 3
        assert "something went wrong" in exc_info.value.stderr


@posix_only
class TestLocatorWithCommand:
    def test_forward(self, tmp_path):
        locator = SyncTexLocator(use_builtin_engine=False, synctex_path=_fake_synctex(tmp_path, VIEW_OUTPUT))
        result = asyncio.run(locator.forward(3, "/work/main.tex", tmp_path / "main.pdf"))
        assert result.page == 1
        assert result.y == pytest.approx(134.755112)

    def test_backward_resolves_input_path(self, tmp_path):
        chapter = tmp_path / "chapter.tex"
        chapter.write_text("")
        output = EDIT_OUTPUT.replace("/work/chapter.tex", str(chapter))
        locator = SyncTexLocator(use_builtin_engine=False, synctex_path=_fake_synctex(tmp_path, output))
        result = asyncio.run(locator.backward(1, 72, 45, tmp_path / "main.pdf"))
        assert result.file == str(chapter)
        assert result.line == 12
