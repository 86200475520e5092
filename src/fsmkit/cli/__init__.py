"""
fsmkit CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (graph/, ...).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Input and style loading
"""
from ._output import OutputFormatter
from ._args import add_json_flag, add_input_arg
from ._utils import load_factory, load_styles

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_input_arg",
    "load_factory",
    "load_styles",
]
