"""
Tests for the command-line interface.
"""

import json
import logging
import unittest
from pathlib import Path

from click.testing import CliRunner

from protein_hash.cli import cli
from protein_hash.core.config import Config

ADD_FUNCTION = "function add(a, b) { return a + b; }"
ADD_ARROW = "const add = (x, y) => x + y;"
MULTIPLY_FUNCTION = "function add(a, b) { return a * b; }"


class TestCli(unittest.TestCase):
    """Tests for phash commands."""

    def setUp(self):
        Config.reset()
        self.runner = CliRunner()

    def tearDown(self):
        Config.reset()
        # Handlers installed by the command point at the runner's closed streams
        logging.getLogger().handlers.clear()

    def _write(self, name, content):
        Path(name).write_text(content)
        return name

    def test_list_languages(self):
        result = self.runner.invoke(cli, ["list-languages"], obj={})

        self.assertEqual(result.exit_code, 0)
        self.assertIn("javascript", result.output)
        self.assertIn("typescript", result.output)
        self.assertIn(".py", result.output)

    def test_hash_json(self):
        with self.runner.isolated_filesystem():
            self._write("add.js", ADD_FUNCTION)
            result = self.runner.invoke(cli, ["hash", "add.js", "--format", "json"], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data[0]["source"], "add.js")
        self.assertEqual(data[0]["language"], "javascript")
        self.assertTrue(data[0]["phash"].startswith("phash:v2:sha256:"))

    def test_hash_text(self):
        with self.runner.isolated_filesystem():
            self._write("add.py", "def add(a, b):\n    return a + b\n")
            result = self.runner.invoke(cli, ["hash", "add.py"], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("phash:v2:sha256:", result.output)
        self.assertIn("python", result.output)

    def test_hash_to_file(self):
        with self.runner.isolated_filesystem():
            self._write("add.js", ADD_FUNCTION)
            result = self.runner.invoke(
                cli, ["hash", "add.js", "-f", "json", "-o", "out/hashes.json"], obj={}
            )
            saved = json.loads(Path("out/hashes.json").read_text())

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Results saved to", result.output)
        self.assertEqual(saved[0]["source"], "add.js")

    def test_compare(self):
        with self.runner.isolated_filesystem():
            self._write("a.js", ADD_FUNCTION)
            self._write("b.js", ADD_ARROW)
            result = self.runner.invoke(cli, ["compare", "a.js", "b.js"], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Similarity", result.output)
        self.assertIn("EQUIVALENT", result.output)

    def test_compare_json(self):
        with self.runner.isolated_filesystem():
            self._write("a.js", ADD_FUNCTION)
            self._write("b.js", MULTIPLY_FUNCTION)
            result = self.runner.invoke(cli, ["compare", "a.js", "b.js", "-f", "json"], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertFalse(data["is_equivalent"])
        self.assertEqual(data["first"], "a.js")

    def test_group(self):
        with self.runner.isolated_filesystem():
            self._write("a.js", ADD_FUNCTION)
            self._write("b.js", ADD_ARROW)
            result = self.runner.invoke(cli, ["group", "a.js", "b.js", "-f", "json"], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output), [["a.js", "b.js"]])

    def test_group_invalid_threshold(self):
        with self.runner.isolated_filesystem():
            self._write("a.js", ADD_FUNCTION)
            result = self.runner.invoke(cli, ["group", "a.js", "-t", "1.5"], obj={})

        self.assertEqual(result.exit_code, 1)

    def test_init(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ["init", "-o", "phash.json"], obj={})
            data = json.loads(Path("phash.json").read_text())

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(data["fingerprint"]["eigenvalue_count"], 5)

    def test_config_file(self):
        with self.runner.isolated_filesystem():
            Path("phash.json").write_text(json.dumps({"fingerprint": {"algorithm": "blake2b"}}))
            self._write("add.js", ADD_FUNCTION)
            result = self.runner.invoke(
                cli, ["--config", "phash.json", "hash", "add.js", "-f", "json"], obj={}
            )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(json.loads(result.output)[0]["phash"].startswith("phash:v2:blake2b:"))

    def test_invalid_config_file(self):
        with self.runner.isolated_filesystem():
            Path("phash.json").write_text(json.dumps({"fingerprint": {"algorithm": "md5"}}))
            result = self.runner.invoke(cli, ["--config", "phash.json", "list-languages"], obj={})

        self.assertEqual(result.exit_code, 1)

    def test_missing_file(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ["hash", "missing.js"], obj={})

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error", result.output)

    def test_unknown_extension(self):
        with self.runner.isolated_filesystem():
            self._write("notes.txt", "hello")
            result = self.runner.invoke(cli, ["hash", "notes.txt"], obj={})

        self.assertEqual(result.exit_code, 1)

    def test_syntax_error(self):
        with self.runner.isolated_filesystem():
            self._write("broken.js", "function (")
            result = self.runner.invoke(cli, ["hash", "broken.js"], obj={})

        self.assertEqual(result.exit_code, 1)


if __name__ == "__main__":
    unittest.main()
