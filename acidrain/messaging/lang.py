"""Translator: keyed player-facing strings.

Keys are namespaced (``acidrain:warning-msg``).  Values use positional
``{0}`` placeholders filled from the arguments to ``get``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_STRINGS: dict[str, str] = {
    "acidrain:warning-msg": "Acid rain! Your skin burns. Find shelter now!",
    "acidrain:safe-msg": "You are out of the acid rain.",
    "acidrain:death-msg": "{0} was dissolved by acid rain.",
}


@dataclass
class Translator:
    """Resolve string keys to display text.

    Attributes:
        strings: Key to format-string table.
    """

    strings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STRINGS))

    def get(self, key: str, *args: object) -> str:
        """Return the text for ``key`` formatted with ``args``.

        Unknown keys come back unchanged so a missing translation shows
        up in chat instead of failing.
        """
        template = self.strings.get(key)
        if template is None:
            return key
        if not args:
            return template
        return template.format(*args)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Translator:
        """Load a language file on top of the built-in English table.

        Raises:
            FileNotFoundError: If the language file does not exist.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        strings = dict(DEFAULT_STRINGS)
        strings.update({str(k): str(v) for k, v in data.items()})
        return cls(strings=strings)
