"""Pager keybindings manager."""

from __future__ import annotations

import logging
from typing import Literal, get_args

from mdless.keys import Key, KeyId

logger = logging.getLogger(__name__)

PagerAction = Literal[
    # Scrolling
    "lineDown",
    "lineUp",
    "pageDown",
    "pageUp",
    "halfPageDown",
    "halfPageUp",
    "top",
    "bottom",
    # Search
    "searchForward",
    "searchBackward",
    "nextMatch",
    "prevMatch",
    # Session
    "quit",
]

PAGER_ACTIONS: tuple[str, ...] = get_args(PagerAction)

PagerKeybindingsConfig = dict[PagerAction, KeyId | list[KeyId]]

DEFAULT_PAGER_KEYBINDINGS: dict[PagerAction, KeyId | list[KeyId]] = {
    # Scrolling
    "lineDown": ["j", Key.down, Key.enter, Key.ctrl("n"), "e"],
    "lineUp": ["k", Key.up, Key.ctrl("p"), "y"],
    "pageDown": [Key.space, "f", Key.page_down, Key.ctrl("f")],
    "pageUp": ["b", Key.page_up, Key.ctrl("b")],
    "halfPageDown": "d",
    "halfPageUp": "u",
    "top": ["g", Key.home, "<"],
    "bottom": ["G", Key.end, ">"],
    # Search
    "searchForward": "/",
    "searchBackward": "?",
    "nextMatch": "n",
    "prevMatch": "N",
    # Session
    "quit": ["q", "Q", Key.ctrl("c")],
}


class PagerKeybindingsManager:
    """Maps key identifiers to pager actions.

    User config replaces the whole key list of the actions it names; the
    first action (in declaration order) bound to a key wins.
    """

    def __init__(self, config: PagerKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[PagerAction, list[KeyId]] = {}
        self._key_to_action: dict[KeyId, PagerAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PagerKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        for action, keys in DEFAULT_PAGER_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            if action not in PAGER_ACTIONS:
                logger.warning("Ignoring keybinding for unknown action %r", action)
                continue
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, key_array in self._action_to_keys.items():
            for key in key_array:
                self._key_to_action.setdefault(key, action)

    def action_for(self, key: KeyId | None) -> PagerAction | None:
        """Return the action bound to *key*, if any."""
        if key is None:
            return None
        return self._key_to_action.get(key)
