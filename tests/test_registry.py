import unittest

from domain.models import NXT, Transferable, TransferableKind
from domain.registry import DuplicateUnitError, TransferableRegistry


def _currency(name):
    return Transferable(kind=TransferableKind.CURRENCY, name=name, decimals=0, ledger_id=name)


class TransferableRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = TransferableRegistry()

    def test_native_is_always_first(self):
        self.registry.register(_currency("GOLD"))
        self.registry.register(_currency("SILVER"))

        self.assertEqual([t.name for t in self.registry.all()], ["NXT", "GOLD", "SILVER"])
        self.assertIs(self.registry.native, NXT)

    def test_resolve_is_case_insensitive(self):
        gold = _currency("Gold")
        self.registry.register(gold)

        for name in ("gold", "GOLD", "gOlD"):
            self.assertIs(self.registry.resolve(name), gold)
        self.assertIs(self.registry.resolve("nxt"), NXT)

    def test_resolve_unknown_returns_none(self):
        self.assertIsNone(self.registry.resolve("BRONZE"))
        self.assertIsNone(self.registry.resolve(""))
        self.assertIsNone(self.registry.resolve(None))

    def test_duplicate_names_rejected(self):
        self.registry.register(_currency("GOLD"))

        with self.assertRaises(DuplicateUnitError):
            self.registry.register(_currency("gold"))
        with self.assertRaises(DuplicateUnitError):
            self.registry.register(_currency("Nxt"))
        self.assertEqual(len(self.registry.all()), 2)

    def test_all_returns_a_copy(self):
        self.registry.all().append(_currency("GOLD"))
        self.assertEqual(len(self.registry.all()), 1)


if __name__ == "__main__":
    unittest.main()
