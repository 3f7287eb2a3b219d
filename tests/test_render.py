"""Tests for the therapy settings render tree."""

from __future__ import annotations

from datetime import date

import pytest

from therapykit.settings.model import (
    DailyValueSchedule,
    GlucoseUnit,
    PumpSupportedIncrements,
    TherapySettings,
)
from therapykit.settings.registry import SECTION_ORDER, TherapySetting
from therapykit.settings.render import (
    CORRECTION_RANGE_PLACEHOLDER,
    ActionButton,
    ButtonRole,
    LinkRow,
    OverridePreset,
    OverrideRangeRow,
    PlaceholderRow,
    QuantityRow,
    ScheduleRangeRow,
    ScheduleValueRow,
    TextRow,
    build_screen,
    build_setting_section,
    format_prescription_text,
)
from therapykit.settings.view_model import PresentationMode
from tests.helpers import SpyViewModel


def _setting_sections(screen):
    return [section for section in screen.sections if section.setting is not None]


class TestSectionOrder:
    """Setting sections always appear in the same order."""

    @pytest.mark.parametrize("mode", list(PresentationMode))
    @pytest.mark.parametrize("is_editing", [False, True])
    def test_order_with_full_settings(self, make_view_model, mode, is_editing):
        """Test the section order with every setting configured."""
        screen = build_screen(make_view_model(mode), is_editing)

        assert [s.setting for s in _setting_sections(screen)] == SECTION_ORDER

    @pytest.mark.parametrize("mode", list(PresentationMode))
    def test_order_with_empty_settings(self, mode):
        """Test that unset settings still get their sections."""
        screen = build_screen(SpyViewModel(mode))

        assert [s.setting for s in _setting_sections(screen)] == SECTION_ORDER

    def test_sections_carry_registry_titles(self, make_view_model):
        """Test that sections use the registry titles."""
        screen = build_screen(make_view_model(PresentationMode.SETTINGS))

        for section in _setting_sections(screen):
            assert section.title == section.setting.title
            assert section.descriptive_text == section.setting.descriptive_text


class TestPrescriptionSection:
    """Prescription section in the acceptance flow."""

    def test_shown_with_prescription(self, make_view_model, prescription):
        """Test that a prescription adds a leading section."""
        vm = make_view_model(PresentationMode.ACCEPTANCE_FLOW, prescription=prescription)

        screen = build_screen(vm)

        first = screen.sections[0]
        assert first.title == "Prescription"
        assert first.descriptive_text == "Submitted by Dr. Jane Smith, 7/7/20"
        assert first.setting is None

    def test_absent_without_prescription(self, make_view_model):
        """Test that there is no prescription section without one."""
        screen = build_screen(make_view_model(PresentationMode.ACCEPTANCE_FLOW))

        assert all(section.title != "Prescription" for section in screen.sections)
        assert screen.sections[0].setting is TherapySetting.SUSPEND_THRESHOLD

    def test_absent_outside_acceptance_flow(self, make_view_model, prescription):
        """Test that the prescription is only shown in the acceptance flow."""
        vm = make_view_model(PresentationMode.SETTINGS, prescription=prescription)

        screen = build_screen(vm)

        assert all(section.title != "Prescription" for section in screen.sections)

    def test_suspend_threshold_spacing(self, make_view_model, prescription):
        """Test the extra space above the first setting section."""
        without = build_screen(make_view_model(PresentationMode.ACCEPTANCE_FLOW))
        with_rx = build_screen(
            make_view_model(PresentationMode.ACCEPTANCE_FLOW, prescription=prescription)
        )

        assert without.section_for(TherapySetting.SUSPEND_THRESHOLD).extra_space_above is True
        assert with_rx.section_for(TherapySetting.SUSPEND_THRESHOLD).extra_space_above is False

    def test_format_prescription_text(self, prescription):
        """Test the prescription submission text."""
        from therapykit.settings.model import Prescription

        assert format_prescription_text(prescription) == "Submitted by Dr. Jane Smith, 7/7/20"
        late = Prescription("Dr. Who", date(2021, 12, 25))
        assert format_prescription_text(late) == "Submitted by Dr. Who, 12/25/21"


class TestActionButton:
    """Primary action node."""

    def test_present_only_when_supplied(self, make_view_model):
        """Test that the action button appears only when given."""
        vm = make_view_model(PresentationMode.ACCEPTANCE_FLOW)

        with_action = build_screen(vm, action_button=ActionButton("Continue", lambda: None))
        without = build_screen(vm)

        assert with_action.action_button.role is ButtonRole.PRIMARY_ACTION
        assert with_action.action_button.label == "Continue"
        assert without.action_button is None

    @pytest.mark.parametrize("mode_name", ["SETTINGS", "LEGACY_SETTINGS"])
    def test_absent_outside_acceptance_flow(self, make_view_model, mode_name):
        """Test that the action button is only shown in the acceptance flow."""
        vm = make_view_model(PresentationMode[mode_name])

        screen = build_screen(vm, action_button=ActionButton("Continue", lambda: None))

        assert screen.action_button is None


class TestSupportSection:
    """Support section is the last section outside the acceptance flow."""

    @pytest.mark.parametrize("mode_name", ["SETTINGS", "LEGACY_SETTINGS"])
    def test_present_in_settings_modes(self, make_view_model, mode_name):
        """Test the support section in the settings modes."""
        screen = build_screen(make_view_model(PresentationMode[mode_name]))

        support = screen.sections[-1]
        assert support.title == "Support"
        assert support.setting is None
        assert isinstance(support.rows[0], LinkRow)
        assert support.rows[0].label == "Get help with Therapy Settings"
        assert support.footer == "Text description here."

    def test_absent_in_acceptance_flow(self, make_view_model):
        """Test that the acceptance flow has no support section."""
        screen = build_screen(make_view_model(PresentationMode.ACCEPTANCE_FLOW))

        assert all(section.title != "Support" for section in screen.sections)


class TestChrome:
    """Navigation bar buttons per mode and edit state."""

    def test_acceptance_flow_has_no_buttons(self, make_view_model):
        """Test that the acceptance flow has no navigation buttons."""
        screen = build_screen(make_view_model(PresentationMode.ACCEPTANCE_FLOW), is_editing=True)

        assert screen.leading_button is None
        assert screen.trailing_button is None
        assert screen.back_button_hidden is False

    def test_settings_not_editing(self, make_view_model):
        """Test the settings buttons outside editing."""
        screen = build_screen(make_view_model(PresentationMode.SETTINGS))

        assert screen.leading_button is None
        assert screen.trailing_button.role is ButtonRole.EDIT
        assert screen.back_button_hidden is False
        assert screen.wrapped_in_navigation is False

    def test_settings_editing(self, make_view_model):
        """Test the settings buttons while editing."""
        screen = build_screen(make_view_model(PresentationMode.SETTINGS), is_editing=True)

        assert screen.leading_button.role is ButtonRole.CANCEL
        assert screen.trailing_button.role is ButtonRole.DONE
        assert screen.back_button_hidden is True

    def test_legacy_not_editing(self, make_view_model):
        """Test the legacy buttons outside editing."""
        screen = build_screen(make_view_model(PresentationMode.LEGACY_SETTINGS))

        assert screen.leading_button.role is ButtonRole.BACK
        assert screen.trailing_button.role is ButtonRole.EDIT
        assert screen.wrapped_in_navigation is True

    def test_legacy_editing_hides_back(self, make_view_model):
        """Test that editing hides back in legacy settings."""
        screen = build_screen(make_view_model(PresentationMode.LEGACY_SETTINGS), is_editing=True)

        assert screen.leading_button.role is ButtonRole.CANCEL
        assert screen.trailing_button.role is ButtonRole.DONE
        assert screen.back_button_hidden is True

    def test_title(self, make_view_model):
        """Test the screen title."""
        screen = build_screen(make_view_model(PresentationMode.SETTINGS))

        assert screen.title == "Therapy Settings"


class TestEditLinks:
    """Edit links appear on every setting section while editing."""

    def test_links_only_while_editing(self, make_view_model):
        """Test that edit links only appear while editing."""
        vm = make_view_model(PresentationMode.SETTINGS)

        idle = build_screen(vm, is_editing=False)
        editing = build_screen(vm, is_editing=True)

        assert all(s.edit_link is None for s in _setting_sections(idle))
        for section in _setting_sections(editing):
            assert section.edit_link.label == f"Edit {section.title}"
            assert section.edit_link.setting is section.setting

    def test_acceptance_flow_never_has_links(self, make_view_model):
        """Test that the acceptance flow never shows edit links."""
        screen = build_screen(make_view_model(PresentationMode.ACCEPTANCE_FLOW), is_editing=True)

        assert all(s.edit_link is None for s in _setting_sections(screen))

    def test_missing_basal_schedule_still_has_link(self, make_view_model, full_settings):
        """Test that an unset setting can still be edited."""
        vm = make_view_model(
            PresentationMode.SETTINGS,
            therapy_settings=full_settings.with_changes(basal_rate_schedule=None),
        )

        section = build_screen(vm, is_editing=True).section_for(TherapySetting.BASAL_RATE)

        assert section.rows == ()
        assert section.edit_link is not None


class TestRows:
    """Row contents for each setting."""

    def test_correction_range_rows(self, make_view_model):
        """Test one row per correction range entry."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS),
            TherapySetting.GLUCOSE_TARGET_RANGE,
            is_editing=False,
        )

        assert section.rows == (
            ScheduleRangeRow("00:00", 0, 100, 110, "mg/dL"),
            ScheduleRangeRow("07:00", 7 * 3600, 90, 100, "mg/dL"),
        )

    def test_correction_range_placeholder(self):
        """Test the placeholder for an unset correction range."""
        vm = SpyViewModel(PresentationMode.SETTINGS)

        section = build_setting_section(vm, TherapySetting.GLUCOSE_TARGET_RANGE, is_editing=False)

        assert section.rows == (PlaceholderRow(CORRECTION_RANGE_PLACEHOLDER),)

    def test_suspend_threshold_needs_glucose_unit(self, full_settings):
        """Test that the suspend threshold needs a glucose unit."""
        no_unit = full_settings.with_changes(glucose_target_range_schedule=None)
        vm = SpyViewModel(PresentationMode.SETTINGS, therapy_settings=no_unit)

        section = build_setting_section(vm, TherapySetting.SUSPEND_THRESHOLD, is_editing=False)

        assert section.rows == ()

    def test_suspend_threshold_row(self, make_view_model):
        """Test the suspend threshold row."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS),
            TherapySetting.SUSPEND_THRESHOLD,
            is_editing=False,
        )

        assert section.rows == (QuantityRow("Glucose Safety Limit", 70, "mg/dL"),)

    def test_suspend_threshold_keeps_its_own_unit(self, full_settings):
        """Test that a threshold in mmol/L under a mg/dL schedule is shown in mmol/L."""
        from therapykit.settings.model import GlucoseThreshold

        settings = full_settings.with_changes(
            suspend_threshold=GlucoseThreshold(GlucoseUnit.MMOL_L, 3.9)
        )
        vm = SpyViewModel(PresentationMode.SETTINGS, therapy_settings=settings)

        section = build_setting_section(vm, TherapySetting.SUSPEND_THRESHOLD, is_editing=False)

        assert settings.glucose_unit is GlucoseUnit.MG_DL
        assert section.rows == (QuantityRow("Glucose Safety Limit", 3.9, "mmol/L"),)

    def test_missing_suspend_threshold_uses_schedule_unit(self, full_settings):
        """Test that an absent threshold renders an empty row in the schedule unit."""
        vm = SpyViewModel(
            PresentationMode.SETTINGS,
            therapy_settings=full_settings.with_changes(suspend_threshold=None),
        )

        section = build_setting_section(vm, TherapySetting.SUSPEND_THRESHOLD, is_editing=False)

        assert section.rows == (QuantityRow("Glucose Safety Limit", None, "mg/dL"),)

    def test_override_rows(self, make_view_model, full_settings):
        """Test one row per correction range override."""
        vm = make_view_model(
            PresentationMode.SETTINGS,
            therapy_settings=full_settings.with_changes(workout_target_range=None),
        )

        section = build_setting_section(vm, TherapySetting.CORRECTION_RANGE_OVERRIDES, False)

        assert [row.preset for row in section.rows] == [
            OverridePreset.PRE_MEAL,
            OverridePreset.WORKOUT,
        ]
        assert section.rows[0] == OverrideRangeRow(
            OverridePreset.PRE_MEAL, full_settings.pre_meal_target_range, "mg/dL"
        )
        assert section.rows[1].range is None

    def test_basal_rows_need_pump(self, full_settings):
        """Test that basal rows need pump increments."""
        vm = SpyViewModel(PresentationMode.SETTINGS, therapy_settings=full_settings)

        section = build_setting_section(vm, TherapySetting.BASAL_RATE, is_editing=False)

        assert section.rows == ()

    def test_basal_rows(self, make_view_model):
        """Test one row per basal rate entry."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS), TherapySetting.BASAL_RATE, False
        )

        assert section.rows == (
            ScheduleValueRow("00:00", 0, 0.8, "U/hr"),
            ScheduleValueRow("04:00", 4 * 3600, 1.1, "U/hr"),
        )

    def test_delivery_limits_with_pump(self, make_view_model):
        """Test the delivery limit rows with pump increments."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS), TherapySetting.DELIVERY_LIMITS, False
        )

        assert section.rows == (
            QuantityRow("Maximum Basal Rate", 3.0, "U/hr"),
            QuantityRow("Maximum Bolus", 10.0, "U"),
        )

    def test_delivery_limits_without_pump(self, full_settings):
        """Test that delivery limits show no values without a pump."""
        vm = SpyViewModel(PresentationMode.SETTINGS, therapy_settings=full_settings)

        section = build_setting_section(vm, TherapySetting.DELIVERY_LIMITS, False)

        assert len(section.rows) == 2
        assert all(row.value is None for row in section.rows)

    def test_insulin_model_row(self, make_view_model):
        """Test the insulin model row."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS), TherapySetting.INSULIN_MODEL, False
        )

        assert len(section.rows) == 1
        assert isinstance(section.rows[0], TextRow)
        assert section.rows[0].text == "Fiasp"

    def test_carb_ratio_rows(self, make_view_model):
        """Test one row per carb ratio entry."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS), TherapySetting.CARB_RATIO, False
        )

        assert [row.value for row in section.rows] == [10, 8, 12]
        assert {row.unit for row in section.rows} == {"g/U"}

    def test_insulin_sensitivity_rows(self, make_view_model):
        """Test one row per insulin sensitivity entry."""
        section = build_setting_section(
            make_view_model(PresentationMode.SETTINGS), TherapySetting.INSULIN_SENSITIVITY, False
        )

        assert [(row.time_label, row.value) for row in section.rows] == [
            ("00:00", 45),
            ("12:00", 50),
        ]
        assert {row.unit for row in section.rows} == {"mg/dL/U"}

    def test_insulin_sensitivity_without_unit(self, full_settings):
        """Test that sensitivities need a glucose unit."""
        no_unit = full_settings.with_changes(glucose_target_range_schedule=None)
        vm = SpyViewModel(PresentationMode.SETTINGS, therapy_settings=no_unit)

        section = build_setting_section(vm, TherapySetting.INSULIN_SENSITIVITY, False)

        assert section.rows == ()

    def test_empty_schedule_renders_no_rows(self, make_view_model, full_settings):
        """Test that an empty schedule has no rows."""
        empty = DailyValueSchedule(items=(), unit="g/U")
        vm = make_view_model(
            PresentationMode.SETTINGS,
            therapy_settings=full_settings.with_changes(carb_ratio_schedule=empty),
        )

        section = build_setting_section(vm, TherapySetting.CARB_RATIO, False)

        assert section.rows == ()


class TestPurity:
    """build_screen is deterministic."""

    def test_equal_inputs_equal_trees(self, make_view_model):
        """Test that equal inputs build equal screens."""
        vm = make_view_model(PresentationMode.LEGACY_SETTINGS)

        assert build_screen(vm, True) == build_screen(vm, True)

    def test_mmol_units_flow_through(self, settings_file):
        """Test that mmol/L units reach the rows."""
        import tomllib

        with settings_file.open("rb") as f:
            settings = TherapySettings.from_config_dict(tomllib.load(f))
        vm = SpyViewModel(
            PresentationMode.SETTINGS,
            therapy_settings=settings,
            pump_supported_increments=PumpSupportedIncrements((0.1,), (0.1,)),
        )

        screen = build_screen(vm)

        assert settings.glucose_unit is GlucoseUnit.MMOL_L
        threshold = screen.section_for(TherapySetting.SUSPEND_THRESHOLD).rows[0]
        assert threshold.unit == "mmol/L"
