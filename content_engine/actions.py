"""
Component action strings.

Rendered components report interactions back to the host as
``(component_id, action)``. The action is a short string:

- ``complete:<item id>``, ``uncomplete:<item id>``, ``join:<event id>``,
  ``addToCalendar:<event id>``, ``selected:<option id>[,<option id>...]``
- ``submit:<json object>`` for form submissions
- a bare status verb such as ``copied`` or ``calendar_error``
- anything else is the ``action`` string of a producer-defined button
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

TARGETED_VERBS = ("complete", "uncomplete", "selected", "join", "addToCalendar")

SUBMIT_VERB = "submit"

BARE_VERBS = (
    "copied",
    "opened",
    "preview",
    "download",
    "call",
    "email",
    "directions",
    "sent",
    "saved",
    "cancelled",
    "failed",
    "added_to_calendar",
    "calendar_error",
    "calendar_access_denied",
    "decline",
    "propose",
)

CUSTOM_VERB = "custom"


class ActionFormatError(ValueError):
    """Raised when an action string cannot be decoded"""


@dataclass(frozen=True)
class ComponentAction:
    component_id: str
    verb: str
    target: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None

    @property
    def is_custom(self) -> bool:
        return self.verb == CUSTOM_VERB

    @property
    def targets(self) -> List[str]:
        """Target split on commas (multi-select ``selected`` actions)"""
        if not self.target:
            return []
        return [piece for piece in self.target.split(",") if piece]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component_id": self.component_id,
            "verb": self.verb,
            "target": self.target,
            "targets": self.targets,
            "payload": self.payload,
        }


def parse_action(component_id: str, action: str) -> ComponentAction:
    """
    Decode an action string reported for ``component_id``.

    Args:
        component_id: Id of the component that emitted the action
        action: Raw action string

    Returns:
        Decoded ComponentAction

    Raises:
        ActionFormatError: empty action, ``submit:`` without a JSON object,
            or a targeted verb without its target
    """
    if not isinstance(action, str) or not action.strip():
        raise ActionFormatError("action must be a non-empty string")

    verb, separator, rest = action.partition(":")

    if verb == SUBMIT_VERB and separator:
        try:
            payload = json.loads(rest)
        except json.JSONDecodeError as e:
            raise ActionFormatError(f"submit payload is not valid JSON: {e.msg}") from e
        if not isinstance(payload, dict):
            raise ActionFormatError("submit payload must be a JSON object")
        return ComponentAction(component_id, SUBMIT_VERB, payload=payload)

    if verb in TARGETED_VERBS:
        if not separator or not rest:
            raise ActionFormatError(f"'{verb}' action needs a target")
        return ComponentAction(component_id, verb, target=rest)

    if action in BARE_VERBS:
        return ComponentAction(component_id, action)

    logger.debug(f"ACTIONS: Treating {action!r} as custom button action")
    return ComponentAction(component_id, CUSTOM_VERB, target=action)


def encode_action(verb: str, target: Optional[str] = None,
                  payload: Optional[Dict[str, Any]] = None) -> str:
    """Build the action string for ``verb``; inverse of parse_action"""
    if verb == SUBMIT_VERB:
        return f"{SUBMIT_VERB}:{json.dumps(payload or {}, separators=(',', ':'))}"

    if verb in TARGETED_VERBS:
        if not target:
            raise ActionFormatError(f"'{verb}' action needs a target")
        return f"{verb}:{target}"

    if verb == CUSTOM_VERB:
        if not target:
            raise ActionFormatError("custom action needs the button's action string")
        return target

    if verb in BARE_VERBS:
        return verb

    raise ActionFormatError(f"Unknown action verb {verb!r}")
