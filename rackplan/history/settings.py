"""Commands for layout-wide display settings."""

from __future__ import annotations

from rackplan.layout.models import Layout

from .command import Command


def create_update_settings_command(layout: Layout, before: dict, after: dict) -> Command:
    before = dict(before)
    after = dict(after)

    def apply(values: dict):
        for key, value in values.items():
            if hasattr(layout.settings, key) and key != "extra":
                setattr(layout.settings, key, value)
            else:
                layout.settings.extra[key] = value

    return Command(
        "UPDATE_SETTINGS", "Update display settings",
        lambda: apply(after), lambda: apply(before),
    )
