from __future__ import annotations

import unittest

from forkview.keys import KeyComboBinding, KeyComboRegistry, default_key_registry
from forkview.models import SortMode
from forkview.pagination.machine import (
    ChangeSort,
    MoveSelection,
    NavigateBackward,
    NavigateForward,
    OpenSelected,
    Quit,
)


class DefaultKeyRegistryTests(unittest.TestCase):
    def test_bindings(self) -> None:
        registry = default_key_registry()
        expected = {
            "DOWN": MoveSelection(1),
            "j": MoveSelection(1),
            "UP": MoveSelection(-1),
            "k": MoveSelection(-1),
            "LEFT": NavigateBackward(),
            "h": NavigateBackward(),
            "RIGHT": NavigateForward(),
            "l": NavigateForward(),
            "s": ChangeSort(SortMode.STARGAZERS),
            "u": ChangeSort(SortMode.UPDATED_AT),
            "ENTER": OpenSelected(),
            "q": Quit(),
            "CTRL_C": Quit(),
        }
        for key, event in expected.items():
            with self.subTest(key=key):
                self.assertEqual(registry.dispatch(key), event)

    def test_unbound_keys_dispatch_nothing(self) -> None:
        registry = default_key_registry()
        for key in ("x", "ESC", "Q", ""):
            with self.subTest(key=key):
                self.assertIsNone(registry.dispatch(key))


class KeyComboRegistryTests(unittest.TestCase):
    def test_later_binding_overrides_earlier(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("x",), Quit),
            KeyComboBinding(("x",), OpenSelected),
        )
        self.assertEqual(registry.dispatch("x"), OpenSelected())

    def test_normalizer_applies_to_registration_and_dispatch(self) -> None:
        registry = KeyComboRegistry(normalize=str.lower).register_binding(KeyComboBinding(("Q",), Quit))
        self.assertEqual(registry.dispatch("q"), Quit())
        self.assertEqual(registry.dispatch("Q"), Quit())


if __name__ == "__main__":
    unittest.main()
