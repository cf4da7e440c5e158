"""Key bindings: translate key tokens into pagination events."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .models import SortMode
from .pagination.machine import (
    ChangeSort,
    Event,
    MoveSelection,
    NavigateBackward,
    NavigateForward,
    OpenSelected,
    Quit,
)


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single event factory."""

    combos: tuple[str, ...]
    build_event: Callable[[], Event]


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._bindings: dict[str, Callable[[], Event]] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._bindings[self._normalize(combo)] = binding.build_event
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> Event | None:
        """Return the event bound to ``key``, or ``None`` when unbound."""
        build_event = self._bindings.get(self._normalize(key))
        if build_event is None:
            return None
        return build_event()


def default_key_registry() -> KeyComboRegistry:
    return KeyComboRegistry().register_bindings(
        KeyComboBinding(("DOWN", "j"), lambda: MoveSelection(1)),
        KeyComboBinding(("UP", "k"), lambda: MoveSelection(-1)),
        KeyComboBinding(("LEFT", "h"), NavigateBackward),
        KeyComboBinding(("RIGHT", "l"), NavigateForward),
        KeyComboBinding(("s",), lambda: ChangeSort(SortMode.STARGAZERS)),
        KeyComboBinding(("u",), lambda: ChangeSort(SortMode.UPDATED_AT)),
        KeyComboBinding(("ENTER",), OpenSelected),
        KeyComboBinding(("q", "CTRL_C"), Quit),
    )


__all__ = ["KeyComboBinding", "KeyComboRegistry", "default_key_registry"]
