"""Configuration loading for CLI commands."""

from arena.commands.watch import load_arena_config

__all__ = [
    "load_arena_config",
]
