"""Tests for the output channel."""

from snakemake_tasks.core.output import OutputChannel


class TestOutputChannel:
    """Tests for OutputChannel."""

    def test_append_does_not_render(self, channel, quiet_console):
        """Test lines are only rendered when shown."""
        channel.append_line("rule not found")

        assert channel.lines == ["rule not found"]
        assert channel.visible is False
        assert quiet_console.file.getvalue() == ""

    def test_show_renders_pending_lines(self, channel, quiet_console):
        """Test show prints the channel name and its lines."""
        channel.append_line("rule not found")
        channel.show(True)

        output = quiet_console.file.getvalue()
        assert "Snakemake Auto Detection" in output
        assert "rule not found" in output
        assert channel.visible is True

    def test_show_renders_each_line_once(self, channel, quiet_console):
        """Test repeated show calls do not duplicate output."""
        channel.append_line("first")
        channel.show()
        channel.show()
        channel.append_line("second")
        channel.show()

        output = quiet_console.file.getvalue()
        assert output.count("first") == 1
        assert output.count("second") == 1

    def test_markup_is_not_interpreted(self, channel, quiet_console):
        """Test tool output with brackets is printed literally."""
        channel.append_line("[bold]input[/bold] missing")
        channel.show()

        assert "[bold]input[/bold] missing" in quiet_console.file.getvalue()

    def test_default_console(self):
        """Test a channel can be created without a console."""
        channel = OutputChannel("Snakemake Auto Detection")
        assert channel.console is not None
