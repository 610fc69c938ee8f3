"""Tests for the netcheck CLI -- argument handling and the run sequence."""

import contextlib
import io
import json
import os
import tempfile
import unittest
from unittest import mock

from aiohttp import test_utils, web

from netquality.targets import Target


class TestMainValidation(unittest.TestCase):
    """Misconfiguration exits with status 1 before anything runs."""

    def _main(self, *argv):
        from netcheck import main
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with mock.patch("netquality.config._config_path", return_value=path), \
                    mock.patch("netcheck.configure_logging"), \
                    mock.patch("netcheck.asyncio.run") as run:
                main(list(argv))
                return run

    def test_zero_count(self):
        with self.assertRaises(SystemExit) as ctx:
            self._main("--count", "0")
        self.assertEqual(ctx.exception.code, 1)

    def test_bad_target_spec(self):
        with self.assertRaises(SystemExit) as ctx:
            self._main("--target", "no-equals-sign")
        self.assertEqual(ctx.exception.code, 1)

    def test_bad_target_url(self):
        with self.assertRaises(SystemExit) as ctx:
            self._main("--target", "X=ftp://example.com")
        self.assertEqual(ctx.exception.code, 1)

    def test_bad_target_ignored_in_speed_mode(self):
        run = self._main("--mode", "speed", "--target", "X=ftp://example.com")
        self.assertTrue(run.called)
        run.call_args[0][0].close()  # discard the un-awaited coroutine

    def test_valid_arguments_run(self):
        run = self._main("--count", "2", "--simple", "--no-ip")
        self.assertTrue(run.called)
        run.call_args[0][0].close()


class TestMainConfigFile(unittest.TestCase):
    def setUp(self):
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.path = os.path.join(tmpdir.name, "config.json")

    def _main(self, *argv):
        from netcheck import main
        with mock.patch("netquality.config._config_path", return_value=self.path), \
                mock.patch("netcheck.configure_logging"), \
                mock.patch("netcheck.asyncio.run") as run:
            main(list(argv))
            return run

    def test_save_config_writes_settings(self):
        run = self._main("--count", "10", "--target", "Home=https://router.lan/", "--save-config")
        self.assertFalse(run.called)
        with open(self.path, encoding="utf-8") as fh:
            stored = json.load(fh)
        self.assertEqual(stored["ping_count"], 10)
        self.assertEqual(stored["targets"], [
            {"name": "Home", "address": "router.lan", "url": "https://router.lan/"},
        ])

    def test_saved_settings_become_defaults(self):
        self._main("--interval", "0.5", "--save-config")
        with mock.patch("netcheck.run_check") as run_check:
            self._main("--simple", "--no-ip")
        self.assertEqual(run_check.call_args.kwargs["interval"], 0.5)

    def test_fractional_count_in_file_exits(self):
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump({"ping_count": 4.5}, fh)
        with self.assertRaises(SystemExit) as ctx:
            self._main("--simple")
        self.assertEqual(ctx.exception.code, 1)


class TestRunCheck(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        app = web.Application()
        app.router.add_get("/ok", self._ok)
        app.router.add_get("/down", self._down)
        self.server = test_utils.TestServer(app)
        await self.server.start_server()

    async def asyncTearDown(self):
        await self.server.close()

    async def _ok(self, request):
        return web.Response(text="ok")

    async def _down(self, request):
        return web.Response(status=503)

    def _target(self, name, path):
        return Target(name, "127.0.0.1", str(self.server.make_url(path)))

    async def test_ping_mode_simple(self):
        from netcheck import run_check
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            result = await run_check(
                mode="ping",
                targets=[self._target("Up", "/ok"), self._target("Down", "/down")],
                count=2,
                interval=0,
                timeout=2.0,
                ramp_duration=0,
                simple=True,
                lookup_ip=False,
            )
        lines = out.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("Up: "))
        self.assertEqual(lines[1], "Down: Failed (100% packet loss)")
        self.assertEqual([t["name"] for t in result["targets"]], ["Up", "Down"])
        self.assertEqual(result["targets"][1]["packet_loss"], 1.0)
        self.assertNotIn("download", result)

    async def test_speed_mode_json(self):
        from netcheck import run_check
        out = io.StringIO()
        with contextlib.redirect_stdout(out), \
                mock.patch("netcheck.RunnerTimings", return_value=_instant()):
            result = await run_check(
                mode="speed",
                count=1,
                interval=0,
                timeout=1.0,
                ramp_duration=0,
                seed=3,
                json_output=True,
                lookup_ip=False,
            )
        printed = json.loads(out.getvalue())
        self.assertEqual(printed["download"], result["download"])
        self.assertNotIn("targets", result)
        dl = result["download"]["speed_mbps"]
        self.assertEqual(dl, round(dl, 2))
        self.assertTrue(50.0 <= dl <= 850.0)


def _instant():
    from netquality.runner import RunnerTimings
    return RunnerTimings.instant()


if __name__ == "__main__":
    unittest.main()
