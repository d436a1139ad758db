"""
Test suite for signet_core.normalizers and the path helpers in signet_core.utils.
"""

import unittest

from signet_core.errors import ValidationError
from signet_core.normalizers import (
    address_normalizer,
    derivation_path_normalizer,
    hex_sequence_normalizer,
    int_to_hex,
    multiple_of_two_hex_value_normalizer,
    recovery_param_normalizer,
    strip_hex_prefix,
)
from signet_core.utils import derivation_path_from_array, derivation_path_to_array
from signet_core.validators import big_number_validator, derivation_path_validator

from conftest import CHECKSUM_ADDRESSES


class TestAddressNormalizer(unittest.TestCase):

    def test_eip55_vectors_from_lowercase(self):
        for address in CHECKSUM_ADDRESSES:
            self.assertEqual(address_normalizer(address.lower()), address)

    def test_idempotent(self):
        for address in CHECKSUM_ADDRESSES:
            self.assertEqual(address_normalizer(address), address)

    def test_without_prefix(self):
        address = CHECKSUM_ADDRESSES[3]
        self.assertEqual(address_normalizer(address, prefix=False), address[2:])


class TestHexNormalizers(unittest.TestCase):

    def test_multiple_of_two(self):
        self.assertEqual(multiple_of_two_hex_value_normalizer("3"), "03")
        self.assertEqual(multiple_of_two_hex_value_normalizer("12c"), "012c")
        self.assertEqual(multiple_of_two_hex_value_normalizer("ff"), "ff")
        self.assertEqual(multiple_of_two_hex_value_normalizer(""), "")

    def test_adds_prefix(self):
        self.assertEqual(hex_sequence_normalizer("abcd"), "0xabcd")

    def test_strips_prefix(self):
        self.assertEqual(hex_sequence_normalizer("0xabcd", prefix=False), "abcd")

    def test_odd_length_padded_same_value(self):
        for odd in ("0x1", "0xabc", "f", "0x12345"):
            normalized = hex_sequence_normalizer(odd)
            self.assertTrue(normalized.startswith("0x"))
            self.assertEqual(len(normalized[2:]) % 2, 0)
            self.assertEqual(int(normalized, 16), int(odd, 16))

    def test_bytes_input(self):
        self.assertEqual(hex_sequence_normalizer(b"\x00\x0f"), "0x000f")
        self.assertEqual(hex_sequence_normalizer(bytearray(b"\xff"), prefix=False), "ff")

    def test_strip_prefix_upper(self):
        self.assertEqual(strip_hex_prefix("0XAB"), "AB")
        self.assertEqual(strip_hex_prefix("ab"), "ab")

    def test_int_round_trip(self):
        for value in (0, 1, 15, 16, 255, 256, 300, 9_000_000_000, 2**64 + 3, 2**255):
            encoded = int_to_hex(value, prefix=True)
            self.assertEqual(len(encoded[2:]) % 2, 0)
            self.assertEqual(big_number_validator(encoded), value)

    def test_int_to_hex_unprefixed(self):
        self.assertEqual(int_to_hex(3), "03")
        self.assertEqual(int_to_hex(300), "012c")

    def test_recovery_param(self):
        self.assertEqual(recovery_param_normalizer(0), 27)
        self.assertEqual(recovery_param_normalizer(1), 28)
        self.assertEqual(recovery_param_normalizer(37), 37)


class TestDerivationPaths(unittest.TestCase):

    H = 0x80000000

    def test_normalizer_fills_index(self):
        self.assertEqual(derivation_path_normalizer("m/44'/60'/0'/0"), "m/44'/60'/0'/0/0")

    def test_normalizer_cleans_whitespace_and_header(self):
        self.assertEqual(
            derivation_path_normalizer(" M / 44'/60' / 1'/0/ 7 "), "m/44'/60'/1'/0/7",
        )

    def test_normalizer_keeps_full_path(self):
        self.assertEqual(derivation_path_normalizer("m/44'/1'/0'/0/3"), "m/44'/1'/0'/0/3")

    def test_to_array(self):
        self.assertEqual(
            derivation_path_to_array("m/44'/60'/0'/0/0"),
            (44 + self.H, 60 + self.H, 0 + self.H, 0, 0),
        )

    def test_round_trip(self):
        for path in ("m/44'/60'/0'/0/0", "m/44'/1'/5'/1/42", "m/44'/60'/2147483647'/0/2147483647"):
            self.assertEqual(derivation_path_from_array(derivation_path_to_array(path)), path)

    def test_index_with_hardened_bit_rejected(self):
        with self.assertRaises(ValueError):
            derivation_path_to_array("m/44'/60'/0'/0/2147483648")

    def test_out_of_range_segment(self):
        for path in ("m/44'/60'/2147483648'/0/0", "m/44'/60'/0'/0/4294967296"):
            with self.assertRaises(ValidationError):
                derivation_path_validator(path)
            with self.assertRaises(ValueError):
                derivation_path_to_array(path)
