"""Export and notification hooks fired after record transitions.

Hooks are best-effort: a failing callback is logged and the remaining
callbacks still run. The core never retries or confirms delivery.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ruamel.yaml import YAML

from aperflow.models import EvaluationRecord, Stage

logger = logging.getLogger(__name__)


class HookEvent(StrEnum):
    ADVANCED = "advanced"
    REJECTED = "rejected"
    REOPENED = "reopened"


HookCallback = Callable[[HookEvent, EvaluationRecord], None]


@dataclass
class RegisteredHook:
    """Callback wrapper kept by the registry."""

    name: str
    event: HookEvent
    callback: HookCallback


class HookRegistry:
    """
    Registry of callbacks per transition event.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._hooks: list[RegisteredHook] = []

    def subscribe(self, event: HookEvent, callback: HookCallback, name: str | None = None) -> RegisteredHook:
        """
        Register a callback for an event.

        Args:
            event: Event to listen for
            callback: Function taking (event, record)
            name: Optional unique name; defaults to the callback's qualified name

        Raises:
            ValueError: If a hook with the same name is already registered for the event
        """
        event = HookEvent(event)
        hook_name = name or getattr(callback, "__qualname__", repr(callback))
        if any(h.name == hook_name and h.event == event for h in self._hooks):
            raise ValueError(f"Hook '{hook_name}' is already registered for '{event}'")
        hook = RegisteredHook(name=hook_name, event=event, callback=callback)
        self._hooks.append(hook)
        return hook

    def unsubscribe(self, name: str, event: HookEvent | None = None) -> int:
        before = len(self._hooks)
        self._hooks = [h for h in self._hooks if not (h.name == name and (event is None or h.event == event))]
        return before - len(self._hooks)

    def hooks_for(self, event: HookEvent) -> list[RegisteredHook]:
        return [h for h in self._hooks if h.event == event]

    def fire(self, event: HookEvent, record: EvaluationRecord) -> int:
        """Run every callback for ``event``. Returns the number that succeeded."""
        delivered = 0
        for hook in self.hooks_for(event):
            try:
                hook.callback(event, record)
            except Exception:
                logger.exception(f"Hook '{hook.name}' failed for event '{event}' on record '{record.id}'")
                continue
            delivered += 1
        return delivered


class YamlExportHook:
    """Archive countersigned records as YAML documents under a directory."""

    def __init__(self, export_dir: Path | str):
        self.export_dir = Path(export_dir).expanduser()
        self._yaml = YAML(typ="safe", pure=True)
        self._yaml.default_flow_style = False

    def __call__(self, event: HookEvent, record: EvaluationRecord) -> None:
        if record.stage != Stage.COUNTERSIGNED:
            return
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.export_dir / f"{record.id}.yaml"
        with path.open("w", encoding="utf-8") as f:
            self._yaml.dump(record.to_dict(), f)
        logger.info(f"Exported record '{record.id}' to {path}")

    def register(self, registry: HookRegistry) -> RegisteredHook:
        return registry.subscribe(HookEvent.ADVANCED, self, name="yaml_export")
