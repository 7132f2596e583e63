"""Generate compile_commands.json from MSBuild logs."""

__version__ = "0.1.0"
