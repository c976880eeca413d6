"""Unit tests for the batch command line front-end."""

import pytest
from typer.testing import CliRunner

from engine.src.cli import app, format_results
from engine.src.converter import ConversionResult


@pytest.fixture
def runner():
    return CliRunner()


class TestConvertCommand:
    """pname convert."""

    def test_stdin_default_style(self, runner):
        result = runner.invoke(app, ["convert"], input="user_name\nUserId\n")

        assert result.exit_code == 0
        assert result.stdout == "USER_NAME\nUSER_ID\n"

    def test_style_option(self, runner):
        result = runner.invoke(app, ["convert", "-t", "LOWER_CAMEL"], input="first_name\nlast_name\n")

        assert result.exit_code == 0
        assert result.stdout == "firstName\nlastName\n"

    def test_style_is_case_insensitive(self, runner):
        result = runner.invoke(app, ["convert", "--type", "upper_kebab"], input="user-id2")

        assert result.exit_code == 0
        assert result.stdout == "USER-ID2\n"

    def test_unknown_style_rejected(self, runner):
        result = runner.invoke(app, ["convert", "-t", "bogus"], input="user_name")

        assert result.exit_code != 0

    def test_files_are_concatenated(self, runner, tmp_path):
        first = tmp_path / "a.txt"
        second = tmp_path / "b.txt"
        first.write_text("user_name\n", encoding="utf-8")
        second.write_text("order_id\n", encoding="utf-8")

        result = runner.invoke(app, ["convert", str(first), str(second), "-t", "UPPER_CAMEL"])

        assert result.exit_code == 0
        assert result.stdout == "UserName\nOrderId\n"

    def test_tsv_with_desc(self, runner):
        result = runner.invoke(app, ["convert", "--tsv", "--desc"], input="user_name")

        assert result.exit_code == 0
        assert result.stdout == "user_name\tUSER_NAME\tuser=* name=*\n"

    def test_dictionary(self, runner, dictionary_csv):
        result = runner.invoke(
            app,
            ["convert", "-d", str(dictionary_csv), "-t", "LOWER_SNAKE"],
            input="cust_id\n",
        )

        assert result.exit_code == 0
        assert result.stdout == "customer_identifier\n"

    def test_dictionary_format_option(self, runner, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("qty: quantity\n", encoding="utf-8")

        result = runner.invoke(app, ["convert", "-d", str(path), "-f", "yaml"], input="max_qty")

        assert result.exit_code == 0
        assert result.stdout == "MAX_QUANTITY\n"

    def test_bad_dictionary_exits_with_error(self, runner, tmp_path):
        path = tmp_path / "words.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        result = runner.invoke(app, ["convert", "-d", str(path)], input="cust_id")

        assert result.exit_code == 1

    def test_output_file_is_appended(self, runner, tmp_path):
        output = tmp_path / "out.txt"

        runner.invoke(app, ["convert", "-o", str(output)], input="user_name")
        result = runner.invoke(app, ["convert", "-o", str(output)], input="order_id")

        assert result.exit_code == 0
        assert result.stdout == ""
        assert output.read_text(encoding="utf-8") == "USER_NAME\nORDER_ID\n"


class TestFormatResults:
    """Output rendering."""

    results = [
        ConversionResult("user_name", "USER_NAME", ["user=*", "name=*"]),
        ConversionResult("", "", []),
    ]

    def test_plain(self):
        assert format_results(self.results, tsv=False, desc=False) == "USER_NAME\n"

    def test_plain_with_desc(self):
        assert format_results(self.results, tsv=False, desc=True) == "USER_NAME\tuser=* name=*\n"

    def test_tsv(self):
        """One row per result; empty lines still produce a row."""
        assert format_results(self.results, tsv=True, desc=False) == "user_name\tUSER_NAME\n\t"
