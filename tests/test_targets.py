"""Unit tests for netquality.targets -- target model and validation."""

import unittest

from netquality.errors import ConfigurationError
from netquality.targets import (
    Target,
    default_targets,
    targets_from_config,
    validate_targets,
)


class TestTarget(unittest.TestCase):
    SAMPLE = {
        "name": "Google DNS",
        "address": "8.8.8.8",
        "url": "https://dns.google/resolve?name=example.com",
    }

    def test_from_dict(self):
        t = Target.from_dict(self.SAMPLE)
        self.assertEqual(t.name, "Google DNS")
        self.assertEqual(t.address, "8.8.8.8")
        self.assertEqual(t.url, self.SAMPLE["url"])

    def test_to_dict_roundtrip(self):
        self.assertEqual(Target.from_dict(self.SAMPLE).to_dict(), self.SAMPLE)

    def test_from_spec(self):
        t = Target.from_spec("Router = http://192.168.1.1/status")
        self.assertEqual(t.name, "Router")
        self.assertEqual(t.address, "192.168.1.1")
        self.assertEqual(t.url, "http://192.168.1.1/status")

    def test_from_spec_without_separator(self):
        with self.assertRaises(ConfigurationError):
            Target.from_spec("https://example.com")

    def test_validate_ok(self):
        Target.from_dict(self.SAMPLE).validate()

    def test_validate_bad_scheme(self):
        with self.assertRaises(ConfigurationError):
            Target("X", "", "ftp://example.com").validate()

    def test_validate_missing_host(self):
        with self.assertRaises(ConfigurationError):
            Target("X", "", "https://").validate()

    def test_validate_empty_name(self):
        with self.assertRaises(ConfigurationError):
            Target("", "", "https://example.com").validate()

    def test_configuration_error_is_value_error(self):
        with self.assertRaises(ValueError):
            Target("X", "", "nope").validate()


class TestHelpers(unittest.TestCase):
    def test_default_targets(self):
        targets = default_targets()
        self.assertEqual([t.address for t in targets], ["8.8.8.8", "1.1.1.1"])
        validate_targets(targets)

    def test_cloudflare_default_asks_for_json(self):
        cloudflare = default_targets()[1]
        self.assertIn("ct=application/dns-json", cloudflare.url)

    def test_validate_targets_empty(self):
        with self.assertRaises(ConfigurationError):
            validate_targets([])

    def test_targets_from_config_default(self):
        self.assertEqual(targets_from_config({"targets": []}), default_targets())

    def test_targets_from_config_custom(self):
        cfg = {"targets": [{"name": "A", "address": "10.0.0.1", "url": "http://10.0.0.1/"}]}
        targets = targets_from_config(cfg)
        self.assertEqual(len(targets), 1)
        self.assertEqual(targets[0].name, "A")

    def test_targets_from_config_wrong_type(self):
        with self.assertRaises(ConfigurationError):
            targets_from_config({"targets": "8.8.8.8"})


if __name__ == "__main__":
    unittest.main()
