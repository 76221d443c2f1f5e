"""Tests for the interactive SQL prompt."""

from queryly.session.query import QuerySession


class TestQuerySession:
    """Test the read-execute-render loop."""

    def test_select_then_exit(self, sqlite_connection, console_output, scripted_prompt):
        prompt = scripted_prompt(["SELECT name FROM users WHERE id = 1", "exit"])
        session = QuerySession(sqlite_connection, console=console_output, prompt=prompt)

        executed = session.run()

        assert executed == 1
        assert session.failures == 0
        output = console_output.file.getvalue()
        assert "Ada" in output
        assert "Showing 1 of 1 row(s)" in output
        assert "Exited query mode." in output

    def test_bad_statement_reports_error_and_continues(self, sqlite_connection, console_output,
                                                       scripted_prompt):
        prompt = scripted_prompt(["SELEC 1", "SELECT COUNT(*) AS total FROM items", "EXIT"])
        session = QuerySession(sqlite_connection, console=console_output, prompt=prompt)

        executed = session.run()

        assert executed == 2
        assert session.failures == 1
        output = console_output.file.getvalue()
        assert "Error:" in output
        assert "syntax error" in output
        assert "120" in output

    def test_blank_lines_are_skipped(self, sqlite_connection, console_output, scripted_prompt):
        prompt = scripted_prompt(["", "   ", " exit "])
        session = QuerySession(sqlite_connection, console=console_output, prompt=prompt)

        assert session.run() == 0

    def test_statement_without_rows(self, sqlite_connection, console_output, scripted_prompt):
        prompt = scripted_prompt(["UPDATE users SET email = 'x' WHERE id = 99", "exit"])
        session = QuerySession(sqlite_connection, console=console_output, prompt=prompt)

        session.run()

        assert "Statement executed" in console_output.file.getvalue()

    def test_empty_result(self, sqlite_connection, console_output, scripted_prompt):
        prompt = scripted_prompt(["SELECT * FROM users WHERE id = 99", "exit"])
        session = QuerySession(sqlite_connection, console=console_output, prompt=prompt)

        session.run()

        assert "No data found." in console_output.file.getvalue()

    def test_custom_exit_token(self, sqlite_connection, console_output, scripted_prompt):
        prompt = scripted_prompt(["quit"])
        session = QuerySession(sqlite_connection, console=console_output, prompt=prompt, exit_token="QUIT")

        assert session.run() == 0
