"""Litestar CLI extensions for pulse-py."""

from pulse_py.cli.commands import PulseCLIPlugin, pulse_group

__all__ = ["PulseCLIPlugin", "pulse_group"]
