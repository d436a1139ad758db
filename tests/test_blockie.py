"""
Tests for signet_core.blockie - identicons rendered by pydenticon.
"""

import base64
import unittest

from signet_core.blockie import IconGenerator, PydenticonGenerator, blockie_data_uri

from conftest import CHECKSUM_ADDRESSES, FakeIconGenerator

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


class TestPydenticonGenerator(unittest.TestCase):

    def test_png_output(self):
        png = PydenticonGenerator().create(CHECKSUM_ADDRESSES[0])
        self.assertTrue(png.startswith(PNG_MAGIC))

    def test_deterministic(self):
        gen = PydenticonGenerator()
        self.assertEqual(gen.create(CHECKSUM_ADDRESSES[0]), gen.create(CHECKSUM_ADDRESSES[0]))

    def test_case_insensitive_seed(self):
        gen = PydenticonGenerator()
        address = CHECKSUM_ADDRESSES[1]
        self.assertEqual(gen.create(address), gen.create(address.lower()))

    def test_distinct_addresses(self):
        gen = PydenticonGenerator()
        self.assertNotEqual(gen.create(CHECKSUM_ADDRESSES[0]), gen.create(CHECKSUM_ADDRESSES[1]))

    def test_satisfies_protocol(self):
        self.assertIsInstance(PydenticonGenerator(), IconGenerator)
        self.assertIsInstance(FakeIconGenerator(), IconGenerator)


class TestDataUri(unittest.TestCase):

    def test_encoding(self):
        uri = blockie_data_uri(CHECKSUM_ADDRESSES[2], PydenticonGenerator(size=32))
        prefix = "data:image/png;base64,"
        self.assertTrue(uri.startswith(prefix))
        self.assertTrue(base64.b64decode(uri[len(prefix):]).startswith(PNG_MAGIC))
