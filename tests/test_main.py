"""Tests for the therapykit command line entry point."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def fresh_config(reset_config_cache):
    """Each main() call selects its own config file."""


@pytest.fixture
def no_logging_setup(mocker):
    """Keep main() from attaching handlers to the therapykit logger."""
    return mocker.patch("therapykit.__main__.setup_logging")


class TestInfo:
    """Tests for the default info command."""

    def test_info_is_default(self, config_file, no_logging_setup, capsys):
        """Test that info runs when no command is given."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file)]) == 0

        out = capsys.readouterr().out
        assert "therapykit" in out
        assert "Presentation mode: legacy_settings" in out
        no_logging_setup.assert_called_once_with("DEBUG", None)

    def test_missing_config(self, tmp_path, no_logging_setup, capsys):
        """Test that a missing config file exits with an error."""
        from therapykit.__main__ import main

        assert main(["-c", str(tmp_path / "absent.toml"), "info"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_log_level(self, tmp_path, capsys):
        """Test that an unknown log level exits with an error."""
        from therapykit.__main__ import main

        config_path = tmp_path / "config.toml"
        config_path.write_text('[logging]\nlevel = "LOUD"\nfile = ""\n')

        assert main(["-c", str(config_path)]) == 1
        assert "Invalid log level" in capsys.readouterr().err


class TestShow:
    """Tests for the show command."""

    def test_show_uses_config_mode(self, config_file, no_logging_setup, capsys):
        """Test that show uses the presentation mode from config."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "show"]) == 0

        out = capsys.readouterr().out
        assert out.splitlines()[0].startswith("< Back")
        assert "SUPPORT" in out

    def test_show_acceptance_flow_with_action(self, config_file, no_logging_setup, capsys):
        """Test that the acceptance flow shows the prescription and action button."""
        from therapykit.__main__ import main

        code = main([
            "-c", str(config_file), "show", "-m", "acceptance-flow", "-a", "Accept",
        ])

        out = capsys.readouterr().out
        assert code == 0
        assert "PRESCRIPTION" in out
        assert "Submitted by Dr. Sample Provider, 7/7/20" in out
        assert out.rstrip().endswith("[[ Accept ]]")

    def test_show_editing(self, config_file, no_logging_setup, capsys):
        """Test that the editing flag shows editor labels."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "show", "-m", "settings", "-e"]) == 0

        out = capsys.readouterr().out
        assert "[Edit Correction Range]" in out

    def test_editing_not_available_in_acceptance_flow(self, config_file, no_logging_setup, capsys):
        """Test that editing is refused in the acceptance flow."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "show", "-m", "acceptance_flow", "-e"]) == 0

        captured = capsys.readouterr()
        assert "no edit state" in captured.err
        assert "[Edit" not in captured.out

    def test_show_settings_file(self, config_file, settings_file, no_logging_setup, capsys):
        """Test that show renders a therapy settings file."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "show", "-s", str(settings_file)]) == 0

        out = capsys.readouterr().out
        assert "  - 00:00  5.5-6 mmol/L" in out
        assert "Walsh" in out

    def test_show_bad_settings_file(self, config_file, tmp_path, no_logging_setup, capsys):
        """Test that a settings table missing a key exits with an error."""
        from therapykit.__main__ import main

        bad = tmp_path / "bad.toml"
        bad.write_text("[suspend_threshold]\nunit = \"mg/dL\"\n")

        assert main(["-c", str(config_file), "show", "-s", str(bad)]) == 1
        assert "Malformed therapy settings" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "content",
        [
            '[delivery_limits]\nmaximum_bolus = "abc"\n',
            "suspend_threshold = 5\n",
        ],
    )
    def test_show_settings_file_with_bad_values(
        self, config_file, tmp_path, no_logging_setup, capsys, content
    ):
        """Test that wrongly typed settings exit with an error instead of crashing."""
        from therapykit.__main__ import main

        bad = tmp_path / "bad.toml"
        bad.write_text(content)

        assert main(["-c", str(config_file), "show", "-s", str(bad)]) == 1
        assert "Malformed therapy settings" in capsys.readouterr().err

    def test_invalid_mode(self, config_file, no_logging_setup, capsys):
        """Test that an unknown presentation mode exits with an error."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "show", "-m", "onboarding"]) == 1
        assert "Invalid presentation mode" in capsys.readouterr().err


class TestRoutesAndInsulin:
    """Tests for the routes and insulin commands."""

    def test_routes(self, config_file, no_logging_setup, capsys):
        """Test that routes lists every setting with its editor."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "routes"]) == 0

        out = capsys.readouterr().out
        assert "carb_ratio_editor" in out
        assert "(no editor)" in out
        assert "Therapy Setting" in out

    def test_insulin(self, config_file, no_logging_setup, capsys):
        """Test that insulin prints the effect curves."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "insulin"]) == 0

        out = capsys.readouterr().out
        assert "No Associated Model" in out
        assert "Fiasp" in out
        assert "1.00" in out
        assert "0.00" in out


class TestPercentage:
    """Tests for the percentage command."""

    def test_uses_configured_fraction_digits(self, config_file, no_logging_setup, capsys):
        """Test that the configured digit count reaches the percentage field."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "percentage", "0.12346"]) == 0
        assert capsys.readouterr().out.strip() == "12.35 %"

    def test_default_fraction_digits(self, isolated_config_home, no_logging_setup, capsys):
        """Test that one fraction digit is used without a config file."""
        from therapykit.__main__ import main

        assert main(["percentage", "0.12346"]) == 0
        assert capsys.readouterr().out.strip() == "12.3 %"

    def test_non_finite_fraction(self, config_file, no_logging_setup, capsys):
        """Test that an infinite fraction exits with an error."""
        from therapykit.__main__ import main

        assert main(["-c", str(config_file), "percentage", "inf"]) == 1
        assert "must be finite" in capsys.readouterr().err


class TestGui:
    """Tests for the gui command (window is mocked)."""

    def test_gui_opens_window(self, config_file, no_logging_setup, mocker):
        """Test that gui opens the window with the requested mode."""
        pytest.importorskip("tkinter")
        from therapykit.__main__ import main
        from therapykit.settings.view_model import PresentationMode

        opener = mocker.patch("therapykit.settings.window.open_therapy_settings")

        assert main(["-c", str(config_file), "gui", "-m", "settings"]) == 0

        opener.assert_called_once()
        view_model = opener.call_args.args[0]
        assert view_model.mode is PresentationMode.SETTINGS
        assert opener.call_args.kwargs["action_button"] is None
