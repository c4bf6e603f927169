"""Smalltalk scripting.

This module handles:
- The fixed scripts written into the workspace
- Composing ad-hoc expressions such as the ssh credential setup
- Running script batches with the Pharo VM
"""

from gtoolkit_installer.smalltalk.expression import (
    SmalltalkExpressionBuilder,
    smalltalk_string,
    ssh_credentials_expression,
)
from gtoolkit_installer.smalltalk.runner import (
    InterpreterTarget,
    ScriptBatch,
    ScriptBatchResult,
    ScriptToExecute,
    compose_evaluate_command,
    run_scripts,
)
from gtoolkit_installer.smalltalk.scripts import loader_script

__all__ = [
    "InterpreterTarget",
    "ScriptBatch",
    "ScriptBatchResult",
    "ScriptToExecute",
    "SmalltalkExpressionBuilder",
    "compose_evaluate_command",
    "loader_script",
    "run_scripts",
    "smalltalk_string",
    "ssh_credentials_expression",
]
