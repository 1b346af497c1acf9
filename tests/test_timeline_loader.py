import asyncio

import httpx

from app.clients.erp_api import ErpApiClient
from app.schemas.common import RequestDomain, StepStatus
from app.services.timeline_loader import TimelineLoader


STEPS = [
    {"levelNo": 1, "levelName": "Manager", "approverNo": 5, "approverName": "Ali", "status": "COMPLETED"},
    {"levelNo": 2, "levelName": "HR", "approverNo": 6, "approverName": "Mona", "status": "PENDING"},
]


def make_client(handler):
    return ErpApiClient(base_url="http://erp.test/api", transport=httpx.MockTransport(handler))


def test_load_parses_steps():
    def handler(request: httpx.Request):
        assert request.url.path == "/api/loans/9/timeline"
        return httpx.Response(200, json={"success": True, "data": STEPS})

    async def go():
        client = make_client(handler)
        try:
            return await TimelineLoader(client).load(RequestDomain.loan, 9, "t")
        finally:
            await client.aclose()

    steps = asyncio.run(go())
    assert [s.status for s in steps] == [StepStatus.completed, StepStatus.pending]


def test_load_failure_returns_none():
    def handler(request: httpx.Request):
        return httpx.Response(500, json={"message": "boom"})

    async def go():
        client = make_client(handler)
        try:
            return await TimelineLoader(client).load(RequestDomain.leave, 9, "t")
        finally:
            await client.aclose()

    assert asyncio.run(go()) is None


def test_labor_has_no_history():
    async def go():
        client = make_client(lambda request: httpx.Response(200, json=[]))
        try:
            loader = TimelineLoader(client)
            return loader.has_history(RequestDomain.labor), await loader.load(RequestDomain.labor, 1)
        finally:
            await client.aclose()

    assert asyncio.run(go()) == (False, None)


def test_latest_request_wins():
    async def go():
        first_started = asyncio.Event()
        release_first = asyncio.Event()

        async def handler(request: httpx.Request):
            if request.url.path == "/api/leaves/1/timeline":
                first_started.set()
                await release_first.wait()
            return httpx.Response(200, json=STEPS)

        client = make_client(handler)
        loader = TimelineLoader(client)
        try:
            first = asyncio.create_task(loader.load(RequestDomain.leave, 1, view_key="detail-panel"))
            await first_started.wait()
            second = await loader.load(RequestDomain.leave, 2, view_key="detail-panel")
            release_first.set()
            return await first, second, loader._latest
        finally:
            await client.aclose()

    stale, fresh, pending = asyncio.run(go())
    assert stale is None
    assert len(fresh) == 2
    assert pending == {}


def test_reloading_same_request_keeps_only_newest():
    async def go():
        first_started = asyncio.Event()
        release_first = asyncio.Event()
        calls = []

        async def handler(request: httpx.Request):
            calls.append(request.url.path)
            if len(calls) == 1:
                first_started.set()
                await release_first.wait()
            return httpx.Response(200, json=STEPS)

        client = make_client(handler)
        loader = TimelineLoader(client)
        try:
            first = asyncio.create_task(loader.load(RequestDomain.loan, 3))
            await first_started.wait()
            second = await loader.load(RequestDomain.loan, 3)
            release_first.set()
            return await first, second, loader._latest
        finally:
            await client.aclose()

    stale, fresh, pending = asyncio.run(go())
    assert stale is None
    assert len(fresh) == 2
    assert pending == {}


def test_finished_loads_leave_no_state():
    async def go():
        client = make_client(lambda request: httpx.Response(500, json={"message": "down"}))
        loader = TimelineLoader(client)
        try:
            await loader.load(RequestDomain.leave, 1, view_key="a")
            await loader.load(RequestDomain.leave, 2, view_key="b")
            return loader._latest
        finally:
            await client.aclose()

    assert asyncio.run(go()) == {}
