"""Tests for netquality.latency -- cache busting and real HTTP probes."""

import asyncio
import unittest

from aiohttp import test_utils, web

from netquality.latency import LatencyProbe, Sample, cache_busted_url


class TestCacheBustedUrl(unittest.TestCase):
    def test_no_existing_query(self):
        self.assertEqual(
            cache_busted_url("https://example.com/ping", token="123"),
            "https://example.com/ping?t=123",
        )

    def test_existing_query_preserved(self):
        url = "https://cloudflare-dns.com/dns-query?name=example.com&type=A"
        self.assertEqual(
            cache_busted_url(url, token="9"),
            "https://cloudflare-dns.com/dns-query?name=example.com&type=A&t=9",
        )

    def test_tokens_are_unique(self):
        urls = {cache_busted_url("https://example.com/") for _ in range(50)}
        self.assertEqual(len(urls), 50)


class TestSample(unittest.TestCase):
    def test_failed(self):
        s = Sample.failed("boom")
        self.assertFalse(s.ok)
        self.assertEqual(s.error, "boom")

    def test_default_is_ok(self):
        self.assertTrue(Sample(latency_ms=3.0).ok)


class TestLatencyProbe(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.seen = []
        app = web.Application()
        app.router.add_get("/ok", self._ok)
        app.router.add_get("/error", self._error)
        app.router.add_get("/slow", self._slow)
        self.server = test_utils.TestServer(app)
        await self.server.start_server()

    async def asyncTearDown(self):
        await self.server.close()

    async def _ok(self, request):
        self.seen.append(dict(request.query))
        return web.Response(text="ok")

    async def _error(self, request):
        self.seen.append(dict(request.query))
        return web.Response(status=500, text="nope")

    async def _slow(self, request):
        await asyncio.sleep(0.5)
        return web.Response(text="late")

    def _url(self, path):
        return str(self.server.make_url(path))

    async def test_success(self):
        async with LatencyProbe(timeout=5.0) as probe:
            sample = await probe.probe(self._url("/ok"))
        self.assertTrue(sample.ok)
        self.assertGreater(sample.latency_ms, 0.0)
        self.assertIsNone(sample.error)

    async def test_one_request_per_call_with_unique_token(self):
        async with LatencyProbe() as probe:
            await probe.probe(self._url("/ok") + "?name=example.com")
            await probe.probe(self._url("/ok") + "?name=example.com")
        self.assertEqual(len(self.seen), 2)
        self.assertEqual(self.seen[0]["name"], "example.com")
        self.assertNotEqual(self.seen[0]["t"], self.seen[1]["t"])

    async def test_non_success_status_is_failed_sample(self):
        async with LatencyProbe() as probe:
            with self.assertLogs("netquality.latency", level="WARNING"):
                sample = await probe.probe(self._url("/error"))
        self.assertFalse(sample.ok)
        self.assertEqual(sample.error, "HTTP 500")
        # No retries
        self.assertEqual(len(self.seen), 1)

    async def test_timeout_is_failed_sample(self):
        async with LatencyProbe(timeout=0.1) as probe:
            sample = await probe.probe(self._url("/slow"))
        self.assertFalse(sample.ok)
        self.assertEqual(sample.error, "Timeout")

    async def test_connection_refused_is_failed_sample(self):
        port = test_utils.unused_port()
        async with LatencyProbe(timeout=2.0) as probe:
            sample = await probe.probe(f"http://127.0.0.1:{port}/")
        self.assertFalse(sample.ok)
        self.assertTrue(sample.error)

    async def test_requires_session(self):
        probe = LatencyProbe()
        with self.assertRaises(RuntimeError):
            await probe.probe(self._url("/ok"))


if __name__ == "__main__":
    unittest.main()
