"""Entry point for therapykit."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from pathlib import Path

import numpy as np

from therapykit import __version__
from therapykit.config import ConfigError, get_config, set_config_path
from therapykit.insulin import (
    ExponentialInsulinModelPreset,
    InsulinModelInformation,
    InsulinType,
)
from therapykit.log import setup_logging
from therapykit.percentage import PercentageTextField
from therapykit.settings.presenter import TherapySettingsPresenter
from therapykit.settings.preview import load_therapy_settings, preview_view_model
from therapykit.settings.registry import SECTION_ORDER, TherapySetting, descriptor_for
from therapykit.settings.render import ActionButton
from therapykit.settings.text_view import render_lines
from therapykit.settings.view_model import PresentationMode, TherapySettingsViewModel

logger = logging.getLogger(__name__)

# Minutes after a dose at which the insulin command samples each curve
CURVE_SAMPLE_MINUTES = (0, 30, 60, 120, 180, 240, 300, 370)


def print_banner() -> None:
    """Print the startup banner."""
    print("therapykit")
    print(f"  Version: {__version__}")
    print(f"  Python:  {platform.python_version()}")
    print(f"  Platform: {platform.system()} {platform.release()}")
    print()


def print_config_info(config: dict) -> None:
    """Print configuration information."""
    print("Configuration")
    print("-" * 40)
    print(f"  Presentation mode: {config['presentation']['mode']}")
    print(f"  Percentage digits: {config['percentage']['maximum_fraction_digits']}")
    print(f"  Log level:         {config['logging']['level']}")
    print()


def _build_view_model(mode: PresentationMode, settings_file: str | None) -> TherapySettingsViewModel:
    therapy_settings = None
    if settings_file:
        therapy_settings = load_therapy_settings(Path(settings_file))
    return preview_view_model(mode, therapy_settings)


def _accept_action() -> None:
    print("Therapy settings accepted.")


def show(mode: PresentationMode, editing: bool, settings_file: str | None,
         action_label: str | None) -> int:
    """Print the therapy settings screen as text.

    Returns:
        Exit code: 0 for success, 1 for error.
    """
    try:
        view_model = _build_view_model(mode, settings_file)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    action_button = ActionButton(action_label, _accept_action) if action_label else None
    presenter = TherapySettingsPresenter(view_model, action_button=action_button)

    if editing and not presenter.tap_edit():
        print(f"Note: {mode.value} mode has no edit state", file=sys.stderr)

    print("\n".join(render_lines(presenter.render())))
    return 0


def show_routes() -> int:
    """Print every setting with its editor route."""
    print("Therapy Settings")
    print("-" * 60)
    for setting in [*SECTION_ORDER, TherapySetting.NONE]:
        descriptor = descriptor_for(setting)
        route = descriptor.route.value if descriptor.route is not None else "(no editor)"
        print(f"  {descriptor.title:<30} {route}")
    return 0


def show_insulin() -> int:
    """Print insulin types, their models, and sampled effect curves."""
    information = InsulinModelInformation(
        default_model=ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_ADULT.model,
    )
    header = "".join(f"{minutes:>6}" for minutes in CURVE_SAMPLE_MINUTES)
    print("Insulin Types")
    print("-" * 60)
    print(f"  {'Type':<22}{header}")
    samples = np.array(CURVE_SAMPLE_MINUTES, dtype=np.float64)
    for insulin_type in InsulinType:
        model = information.insulin_model_for(insulin_type)
        curve = "".join(f"{value:>6.2f}" for value in model.effect_remaining_curve(samples))
        print(f"  {insulin_type.title:<22}{curve}")
    return 0


def show_percentage(fraction: float) -> int:
    """Print a fraction as the configured percentage field would show it.

    Returns:
        Exit code: 0 for success, 1 for error.
    """
    config = get_config()
    field = PercentageTextField(
        maximum_fraction_digits=config["percentage"]["maximum_fraction_digits"],
    )
    try:
        field.percentage = fraction
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"{field.value} {field.unit}")
    return 0


def run_gui(mode: PresentationMode, settings_file: str | None, action_label: str | None) -> int:
    """Open the Tkinter therapy settings window.

    Returns:
        Exit code: 0 for success, 1 for error.
    """
    try:
        view_model = _build_view_model(mode, settings_file)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    from therapykit.settings.window import open_therapy_settings

    action_button = ActionButton(action_label, _accept_action) if action_label else None
    open_therapy_settings(view_model, action_button=action_button)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for therapykit."""
    parser = argparse.ArgumentParser(
        prog="therapykit",
        description="therapykit - review and edit therapy settings",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Config file (overrides $THERAPYKIT_CONFIG)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # info subcommand (also the default when no args)
    subparsers.add_parser(
        "info",
        help="Show version and configuration (default)",
    )

    for name, help_text in (
        ("show", "Print the therapy settings screen as text"),
        ("gui", "Open the therapy settings window"),
    ):
        screen_parser = subparsers.add_parser(name, help=help_text)
        screen_parser.add_argument(
            "-m", "--mode",
            metavar="MODE",
            help="acceptance_flow, settings or legacy_settings (overrides config)",
        )
        screen_parser.add_argument(
            "-s", "--settings",
            metavar="FILE",
            help="TOML file with the therapy settings to show",
        )
        screen_parser.add_argument(
            "-a", "--action",
            metavar="LABEL",
            help="Primary action button label (acceptance flow)",
        )
        if name == "show":
            screen_parser.add_argument(
                "-e", "--editing",
                action="store_true",
                help="Show the screen in editing state",
            )

    subparsers.add_parser(
        "routes",
        help="List therapy settings and their editor screens",
    )
    subparsers.add_parser(
        "insulin",
        help="List insulin types and their models",
    )
    percentage_parser = subparsers.add_parser(
        "percentage",
        help="Format a fraction the way the percentage field shows it",
    )
    percentage_parser.add_argument(
        "fraction",
        type=float,
        help="Fraction to format (0.125 is 12.5 %%)",
    )

    args = parser.parse_args(argv)

    try:
        set_config_path(Path(args.config) if args.config else None)
        config = get_config()
        setup_logging(config["logging"]["level"], config["logging"].get("file") or None)
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("main: command=%s", args.command)

    if args.command in ("show", "gui"):
        try:
            mode = PresentationMode.from_name(args.mode or config["presentation"]["mode"])
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if args.command == "show":
            return show(mode, args.editing, args.settings, args.action)
        return run_gui(mode, args.settings, args.action)
    elif args.command == "routes":
        return show_routes()
    elif args.command == "insulin":
        return show_insulin()
    elif args.command == "percentage":
        return show_percentage(args.fraction)

    print_banner()
    print_config_info(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
