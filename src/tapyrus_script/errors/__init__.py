"""Exception types raised for programming errors (bad arguments)."""

from tapyrus_script.errors.script_errors import ScriptDecodeError, ScriptError

__all__ = ["ScriptDecodeError", "ScriptError"]
