from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from railcrash.core.config import DetectorConfig
from railcrash.core.models import ConfigError, RailNetConfig
from railcrash.core.policies import POLICY_IDS
from railcrash.sim.loader import load_file, load_payload, load_xml_string
from railcrash.sim.scenario import run_scenario, scenario_json, timeline_json

DATA_DIR = Path(__file__).parent / "data"

app = FastAPI(title="Railway Crash Detector API")


class BranchIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: StrictInt = Field(alias="from")
    to: StrictInt
    length: StrictInt


class RouteIn(BaseModel):
    engine: StrictInt
    stations: List[StrictInt]


class NetworkIn(BaseModel):
    # StrictInt: true or "3" is not an integer
    station_count: StrictInt
    engine_count: StrictInt
    branches: List[BranchIn]
    routes: List[RouteIn]


def _options(policy: str | None, strict_stations: bool | None, include_trivial_routes: bool | None) -> Dict[str, Any]:
    cfg = DetectorConfig()
    choice = (policy or cfg.policy).lower()
    if choice not in POLICY_IDS:
        raise HTTPException(status_code=400, detail=f"Unknown policy {choice!r}, expected one of {', '.join(POLICY_IDS)}")
    return {
        "policy": choice,
        "strict_stations": cfg.strict_stations if strict_stations is None else strict_stations,
        "include_trivial_routes": cfg.include_trivial_routes if include_trivial_routes is None else include_trivial_routes,
    }


def _detect(cfg: RailNetConfig, opts: Dict[str, Any]) -> Dict[str, Any]:
    result = run_scenario(cfg, policy=opts["policy"], include_trivial_routes=opts["include_trivial_routes"])
    return scenario_json(result)


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError) -> Response:
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.get("/")
async def root() -> RedirectResponse:
    # Redirect base URL to interactive docs to avoid 404 confusion
    return RedirectResponse(url="/docs")


@app.get("/favicon.ico")
async def favicon() -> Response:
    return Response(status_code=204)


@app.get("/demo")
async def demo(policy: str | None = None) -> Dict[str, Any]:
    opts = _options(policy, None, None)
    cfg = load_file(DATA_DIR / "sample_network.xml", strict_stations=opts["strict_stations"])
    return _detect(cfg, opts)


@app.post("/detect")
async def detect(
    body: NetworkIn,
    policy: str | None = None,
    strict_stations: bool | None = None,
    include_trivial_routes: bool | None = None,
) -> Dict[str, Any]:
    """Detect crashes for a JSON network definition.

    Query parameters override the environment configuration.
    """
    opts = _options(policy, strict_stations, include_trivial_routes)
    cfg = load_payload(body.model_dump(by_alias=True), strict_stations=opts["strict_stations"])
    return _detect(cfg, opts)


@app.post("/detect/xml")
async def detect_xml(
    request: Request,
    policy: str | None = None,
    strict_stations: bool | None = None,
    include_trivial_routes: bool | None = None,
) -> Dict[str, Any]:
    """Detect crashes for a raw ``<rail_net>`` XML document sent as the request body."""
    opts = _options(policy, strict_stations, include_trivial_routes)
    cfg = load_xml_string(await request.body(), strict_stations=opts["strict_stations"])
    return _detect(cfg, opts)


@app.post("/timeline")
async def timeline(body: NetworkIn, strict_stations: bool | None = None) -> Dict[str, Any]:
    opts = _options(None, strict_stations, None)
    cfg = load_payload(body.model_dump(by_alias=True), strict_stations=opts["strict_stations"])
    engines = timeline_json(cfg)
    return {"count": len(engines), "engines": engines}
