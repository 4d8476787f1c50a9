"""
End-to-end test for the mood Server-Sent Events stream.

A real uvicorn server is started on a free port so the stream can be consumed
while moods are submitted over HTTP.
"""

import asyncio
import contextlib
import json
import socket
import tempfile
import threading
import time

import httpx
import uvicorn
from httpx_sse import aconnect_sse

from moodblog.content import ContentStore
from moodblog.server import create_app


class TestAPIStream:
    """Listeners receive every mood submitted through the API."""

    def setup_method(self):
        self.content_dir = tempfile.TemporaryDirectory()
        self.app = create_app(ContentStore(self.content_dir.name))

    def teardown_method(self):
        self.content_dir.cleanup()

    async def test_streaming_api(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind(("127.0.0.1", 0))
        host, port = sock.getsockname()
        sock.close()
        base_url = f"http://{host}:{port}"

        config = uvicorn.Config(
            app=self.app,
            host=host,
            port=port,
            loop="asyncio",
            lifespan="on",
            log_level="warning",
            ws="none",
        )
        server = uvicorn.Server(config)
        thread = threading.Thread(target=lambda: asyncio.run(server.serve()), daemon=True)
        thread.start()

        start = time.time()
        while time.time() - start < 5.0:
            try:
                if httpx.get(base_url + "/", timeout=0.2).status_code == 200:
                    break
            except httpx.HTTPError:
                pass
            time.sleep(0.05)
        else:
            server.should_exit = True
            thread.join(timeout=1.0)
            assert False, "Server did not start in time"

        async with httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(5.0, read=None)
        ) as client:
            received: list[str] = []
            connected = asyncio.Event()

            async def consume() -> None:
                async with aconnect_sse(client, "GET", "/mood/stream") as es:
                    assert es.response.headers["content-type"].startswith(
                        "text/event-stream"
                    )
                    async for sse in es.aiter_sse():
                        assert sse.event != "error", sse.data
                        received.append(json.loads(sse.data)["prompt"])
                        connected.set()
                        if len(received) >= 3:
                            break

            consumer_task = asyncio.create_task(consume())

            try:
                await asyncio.wait_for(connected.wait(), timeout=3.0)
                assert (await client.put("/mood", json={"mood": "so bored"})).status_code == 200
                assert (await client.put("/mood", json={"mood": ""})).status_code == 200
                await asyncio.wait_for(consumer_task, timeout=3.0)
            finally:
                consumer_task.cancel()
                with contextlib.suppress(BaseException):
                    await consumer_task
                server.should_exit = True
                thread.join(timeout=2.0)

            assert received == ["", "so bored", ""]
