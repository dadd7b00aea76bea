import unittest

from infrastructure.ledger import reed_solomon
from infrastructure.ledger.reed_solomon import ALPHABET, AddressError


class ReedSolomonTests(unittest.TestCase):
    ACCOUNT_IDS = [0, 1, 31, 32, 123456789, 1739068987193023818, 2 ** 63, 2 ** 64 - 1]

    def test_encoded_address_shape(self):
        address = reed_solomon.encode(1739068987193023818)

        self.assertTrue(address.startswith("NXT-"))
        groups = address[4:].split("-")
        self.assertEqual([len(g) for g in groups], [4, 4, 4, 5])
        self.assertTrue(all(c in ALPHABET for c in "".join(groups)))

    def test_decode_reverses_encode(self):
        for account_id in self.ACCOUNT_IDS:
            with self.subTest(account_id=account_id):
                address = reed_solomon.encode(account_id)
                self.assertTrue(reed_solomon.is_valid(address))
                self.assertEqual(reed_solomon.decode(address), account_id)

    def test_decode_accepts_lowercase(self):
        address = reed_solomon.encode(123456789)
        self.assertEqual(reed_solomon.decode(address.lower()), 123456789)

    def test_single_symbol_error_is_detected(self):
        address = reed_solomon.encode(123456789)
        body = list(address[4:])
        index = 5
        body[index] = ALPHABET[(ALPHABET.index(body[index]) + 1) % len(ALPHABET)]
        corrupted = "NXT-" + "".join(body)

        self.assertFalse(reed_solomon.is_valid(corrupted))
        with self.assertRaises(AddressError):
            reed_solomon.decode(corrupted)

    def test_malformed_addresses(self):
        for address in ("", "NXT-", "ABCD-1234", "NXT-ABCD-1234-EFGH", "NXT-ABCD-EFGH-JKLM-NPQRS-TUV", "NXT-0000-0000-0000-00000"):
            with self.subTest(address=address):
                self.assertFalse(reed_solomon.is_valid(address))

    def test_out_of_range_id(self):
        with self.assertRaises(AddressError):
            reed_solomon.encode(2 ** 64)
        with self.assertRaises(AddressError):
            reed_solomon.encode(-1)


if __name__ == "__main__":
    unittest.main()
