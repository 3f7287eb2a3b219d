"""GUI tests for therapykit.

These tests mock Tkinter widgets so they run without a display.
They are skipped when tkinter is not installed.
Run only these with: pytest tests/gui/ -v
"""
