from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport

from railcrash.api import app

DATA_DIR = Path(__file__).parents[1] / "railcrash" / "data"

PAYLOAD = {
    "station_count": 3,
    "engine_count": 2,
    "branches": [
        {"from": 0, "to": 1, "length": 1},
        {"from": 1, "to": 2, "length": 1},
    ],
    "routes": [
        {"engine": 0, "stations": [0, 1, 2]},
        {"engine": 1, "stations": [2, 1, 0]},
    ],
}


@pytest.mark.asyncio
async def test_demo_endpoint():
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        r = await client.get("/demo", params={"policy": "branch"})
        assert r.status_code == 200
        data = r.json()
        assert data["count"] == 1
        assert data["crashes"][0] == {"kind": "branch", "stations": [1, 2], "engines": [0, 1], "time": 3.0}


@pytest.mark.asyncio
async def test_detect_endpoint_head_on():
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        r = await client.post("/detect", params={"policy": "branch"}, json=PAYLOAD)
        assert r.status_code == 200
        data = r.json()
        assert data["policy"] == "branch"
        assert data["count"] == 2
        assert [c["stations"] for c in data["crashes"]] == [[0, 1], [1, 2]]
        assert all(c["time"] == 1.0 for c in data["crashes"])


@pytest.mark.asyncio
async def test_detect_endpoint_station_policy():
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        r = await client.post("/detect", params={"policy": "station"}, json=PAYLOAD)
        assert r.status_code == 200
        # engines pass station 1 at the same time
        assert r.json()["crashes"] == [{"kind": "station", "station": 1, "time": 1, "engines": [0, 1]}]


@pytest.mark.asyncio
async def test_detect_endpoint_rejects_invalid_network():
    transport = ASGITransport(app=app)
    payload = dict(PAYLOAD, routes=[{"engine": 0, "stations": [0, 2]}, {"engine": 1, "stations": [1]}])
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        r = await client.post("/detect", json=payload)
        assert r.status_code == 400
        assert r.json()["detail"] == "Branch 0 -> 2 doesn't exist"

        r = await client.post("/detect", params={"policy": "nearest"}, json=PAYLOAD)
        assert r.status_code == 400


@pytest.mark.asyncio
async def test_detect_endpoint_rejects_non_integer_values():
    transport = ASGITransport(app=app)
    bool_length = dict(PAYLOAD, branches=[{"from": 0, "to": 1, "length": True}, {"from": 1, "to": 2, "length": 1}])
    str_station = dict(PAYLOAD, routes=[{"engine": 0, "stations": [0, "1"]}, {"engine": 1, "stations": [1]}])
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        for payload in (bool_length, str_station):
            r = await client.post("/detect", json=payload)
            assert 400 <= r.status_code < 500
            r = await client.post("/timeline", json=payload)
            assert 400 <= r.status_code < 500


@pytest.mark.asyncio
async def test_detect_xml_endpoint():
    transport = ASGITransport(app=app)
    body = (DATA_DIR / "sample_network.xml").read_bytes()
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        r = await client.post("/detect/xml", params={"policy": "both"}, content=body,
                              headers={"content-type": "application/xml"})
        assert r.status_code == 200
        assert r.json()["count"] == 3

        r = await client.post("/detect/xml", content=b"<rail_net")
        assert r.status_code == 400


@pytest.mark.asyncio
async def test_timeline_endpoint():
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        r = await client.post("/timeline", json=PAYLOAD)
        assert r.status_code == 200
        data = r.json()
        assert data["count"] == 2
        e1 = data["engines"][1]
        assert e1["passes"] == [
            {"from": 2, "to": 1, "start": 0, "end": 1},
            {"from": 1, "to": 0, "start": 1, "end": 2},
        ]
        assert [a["time"] for a in e1["arrivals"]] == [0, 1, 2]
