"""Tests for termx.terminal and termx.output"""
import io
import os
import termios
import threading

import pytest

from termx.config import Settings
from termx.errors import NotATerminalError, OutputBusyError
from termx.output import OutputToken
from termx.terminal import CLEAR_LINE, CLEAR_SCREEN, HIDE_CURSOR, RESET, SHOW_CURSOR, TerminalSession


def make_session(stdin_fd=None, **settings):
    out = io.StringIO()
    session = TerminalSession(stdin_fd=stdin_fd, stdout=out, settings=Settings(**settings))
    return session, out


def run_in_thread(fn):
    errors = []

    def target():
        try:
            fn()
        except Exception as exc:
            errors.append(exc)

    t = threading.Thread(target=target)
    t.start()
    t.join()
    return errors


class TestEscapeSequences:
    def test_move_cursor_is_one_based(self):
        session, out = make_session()
        session.move_cursor(0, 0)
        session.move_cursor(4, 2)
        assert out.getvalue() == "\x1b[1;1H\x1b[3;5H"

    def test_print_at(self):
        session, out = make_session()
        session.print_at(2, 1, "hi")
        assert out.getvalue() == "\x1b[2;3Hhi"

    def test_clear_line_and_screen(self):
        session, out = make_session()
        session.clear_line()
        session.clear_screen()
        assert out.getvalue() == "\r" + CLEAR_LINE + CLEAR_SCREEN

    def test_cursor_visibility(self):
        session, out = make_session()
        session.hide_cursor()
        session.show_cursor()
        assert out.getvalue() == HIDE_CURSOR + SHOW_CURSOR

    def test_write_styled(self):
        session, out = make_session()
        session.write_styled("ok", "\x1b[32m")
        session.write_styled("plain", "")
        assert out.getvalue() == "\x1b[32mok" + RESET + "plain"

    def test_new_line_returns_carriage(self):
        session, out = make_session()
        session.new_line()
        assert out.getvalue() == "\r\n"

    def test_move_cursor_up(self):
        session, out = make_session()
        session.move_cursor_up(3)
        session.move_cursor_up(0)
        assert out.getvalue() == "\x1b[3A"


class TestSize:
    def test_falls_back_to_environment(self, monkeypatch):
        def no_size(*args):
            raise OSError("not a terminal")

        monkeypatch.setattr(os, "get_terminal_size", no_size)
        monkeypatch.setenv("COLUMNS", "132")
        monkeypatch.setenv("LINES", "50")
        session, _ = make_session()
        assert session.width == 132
        assert session.height == 50

    def test_queried_on_every_access(self, monkeypatch):
        sizes = iter([(100, 30), (120, 40)])
        monkeypatch.setattr(os, "get_terminal_size", lambda *a: os.terminal_size(next(sizes)))
        session, _ = make_session()
        assert session.width == 100
        assert session.width == 120


class TestWriteLog:
    def test_writes_are_appended(self, tmp_path):
        log = tmp_path / "writes.log"
        session, out = make_session(write_log=str(log))
        session.write("one")
        session.write("two")
        assert out.getvalue() == "onetwo"
        assert log.read_text(encoding="utf-8") == "onetwo"

    def test_unwritable_log_does_not_break_output(self, tmp_path):
        session, out = make_session(write_log=str(tmp_path / "missing" / "writes.log"))
        session.write("still drawn")
        assert out.getvalue() == "still drawn"


class TestRawMode:
    def test_pipe_is_not_a_terminal(self):
        r, w = os.pipe()
        try:
            session, out = make_session(stdin_fd=r)
            with pytest.raises(NotATerminalError) as exc_info:
                session.init()
            assert exc_info.value.fd == r
            assert not session.is_raw
            assert out.getvalue() == ""
        finally:
            os.close(r)
            os.close(w)

    def test_context_manager_raises_before_entering(self):
        r, w = os.pipe()
        try:
            session, _ = make_session(stdin_fd=r)
            with pytest.raises(NotATerminalError):
                with session:
                    pytest.fail("body must not run")
        finally:
            os.close(r)
            os.close(w)

    def test_restore_without_init_is_noop(self):
        session, out = make_session(stdin_fd=0)
        session.restore()
        assert out.getvalue() == ""

    @pytest.mark.pty
    def test_raw_mode_round_trip(self):
        import pty

        master, slave = pty.openpty()
        try:
            before = termios.tcgetattr(slave)
            session, out = make_session(stdin_fd=slave)
            with session:
                assert session.is_raw
                raw = termios.tcgetattr(slave)
                assert not raw[3] & termios.ICANON
                assert not raw[3] & termios.ECHO
            assert termios.tcgetattr(slave) == before
            assert out.getvalue().startswith(HIDE_CURSOR + CLEAR_SCREEN)
            assert out.getvalue().endswith(SHOW_CURSOR)

            session.restore()
            assert out.getvalue().count(SHOW_CURSOR) == 1
        finally:
            os.close(master)
            os.close(slave)

    @pytest.mark.pty
    def test_restored_when_body_raises(self):
        import pty

        master, slave = pty.openpty()
        try:
            before = termios.tcgetattr(slave)
            session, _ = make_session(stdin_fd=slave)
            with pytest.raises(KeyError):
                with session:
                    raise KeyError("boom")
            assert termios.tcgetattr(slave) == before
        finally:
            os.close(master)
            os.close(slave)

    @pytest.mark.pty
    def test_restored_when_init_write_fails(self):
        import pty

        class BrokenStdout(io.StringIO):
            def write(self, data):
                raise BrokenPipeError("stdout closed")

        master, slave = pty.openpty()
        try:
            before = termios.tcgetattr(slave)
            session = TerminalSession(stdin_fd=slave, stdout=BrokenStdout(), settings=Settings())
            with pytest.raises(BrokenPipeError):
                with session:
                    pytest.fail("body must not run")
            assert not session.is_raw
            assert termios.tcgetattr(slave) == before
        finally:
            os.close(master)
            os.close(slave)

    @pytest.mark.pty
    def test_restored_when_output_is_owned(self):
        import pty

        master, slave = pty.openpty()
        try:
            before = termios.tcgetattr(slave)
            session, out = make_session(stdin_fd=slave)
            errors = run_in_thread(session.output.claim)
            assert errors == []
            with pytest.raises(OutputBusyError):
                session.init()
            assert not session.is_raw
            assert termios.tcgetattr(slave) == before
            assert out.getvalue() == ""
        finally:
            os.close(master)
            os.close(slave)

    @pytest.mark.pty
    def test_reads_key_from_pty(self):
        import pty

        master, slave = pty.openpty()
        try:
            session, _ = make_session(stdin_fd=slave)
            with session:
                os.write(master, b"\x1b[A")
                assert session.read_key().key.value == "up"
        finally:
            os.close(master)
            os.close(slave)


class TestOutputToken:
    def test_free_by_default(self):
        token = OutputToken()
        assert token.owner is None
        assert not token.held_by_current_thread()

    def test_claim_is_reentrant(self):
        token = OutputToken()
        token.claim()
        token.claim()
        token.release()
        assert token.held_by_current_thread()
        token.release()
        assert token.owner is None

    def test_other_thread_cannot_claim_or_write(self):
        token = OutputToken()
        with token.held():
            assert token.owner == threading.current_thread().name

            def write():
                with token.writing():
                    pass

            errors = run_in_thread(token.claim) + run_in_thread(write)
            assert [type(e) for e in errors] == [OutputBusyError, OutputBusyError]
            assert errors[0].owner == threading.current_thread().name

    def test_owner_can_write(self):
        token = OutputToken()
        with token.held():
            with token.writing():
                pass

    def test_release_by_non_owner(self):
        token = OutputToken()
        with token.held():
            errors = run_in_thread(token.release)
        assert isinstance(errors[0], RuntimeError)

    def test_session_write_rejected_from_other_thread(self):
        session, out = make_session()
        with session.output.held():
            errors = run_in_thread(lambda: session.write("x"))
        assert isinstance(errors[0], OutputBusyError)
        assert out.getvalue() == ""
