import os
import unittest
from unittest.mock import patch

from backend.server_runner import build_server_options


class TestServerRunner(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            options = build_server_options()
        self.assertEqual(
            options,
            {"host": "0.0.0.0", "port": 8000, "workers": 1, "timeout_keep_alive": 5, "log_level": "info"},
        )

    def test_env_overrides(self):
        env = {"HOST": "127.0.0.1", "PORT": "9000", "WEB_CONCURRENCY": "3", "UVICORN_LOG_LEVEL": "debug"}
        with patch.dict(os.environ, env, clear=True):
            options = build_server_options()
        self.assertEqual(options["host"], "127.0.0.1")
        self.assertEqual(options["port"], 9000)
        self.assertEqual(options["workers"], 3)
        self.assertEqual(options["log_level"], "debug")

    def test_invalid_numbers_fall_back(self):
        with patch.dict(os.environ, {"PORT": "abc", "WEB_CONCURRENCY": "0"}, clear=True):
            options = build_server_options()
        self.assertEqual(options["port"], 8000)
        self.assertEqual(options["workers"], 1)


if __name__ == "__main__":
    unittest.main()
