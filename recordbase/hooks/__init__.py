"""Record hooks — registry of mutation listeners and their dispatcher."""

from recordbase.hooks.dispatcher import HookDispatcher, HookFailure, log_hook_failure
from recordbase.hooks.registry import HookRegistry, RecordHook

__all__ = [
    "HookDispatcher",
    "HookFailure",
    "HookRegistry",
    "RecordHook",
    "log_hook_failure",
]
