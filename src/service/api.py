from __future__ import annotations

import logging
import time
import uuid
from collections import defaultdict, deque
from typing import Any, Union

from fastapi import FastAPI, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, Field

from service.interior import InteriorAnalyzer
from service.logging_config import configure_logging, correlation_id
from service.pricing import BasePriceClient
from service.settings import ServiceSettings
from service.vision import GeminiVisionClient
from valuation.coercion import parse_int_with_default, parse_price_with_default
from valuation.config import ValuationConfig
from valuation.data_models import InteriorAssessment
from valuation.errors import InputError, InputErrorKind
from valuation.pipeline import build_valuation
from valuation.rules import map_mileage

logger = logging.getLogger(__name__)

Amount = Union[int, float]


# ── Request / Response Models ───────────────────────────────────────

class InteriorRequest(BaseModel):
    filename: str | None = None
    base_price: Any = Field(default=None, alias="basePrice")


class InteriorResponse(BaseModel):
    condition: str
    score_delta: int = Field(alias="scoreDelta")
    value_delta: int = Field(alias="valueDelta")
    reasons: list[str]
    degraded: bool


class CostItem(BaseModel):
    part: str
    cost: Any = 0


class ValuationRequest(BaseModel):
    base_price: Any = Field(default=None, alias="basePrice")
    car_model: str | None = Field(default=None, alias="carModel")
    car_year: Any = Field(default=None, alias="carYear")
    mileage: Any = None
    cost_breakdown: list[CostItem] = Field(default_factory=list, alias="costBreakdown")
    interior_filename: str | None = Field(default=None, alias="interiorFilename")


class AdjustmentOut(BaseModel):
    label: str
    category: str
    score_delta: int = Field(alias="scoreDelta")
    value_delta: int = Field(alias="valueDelta")


class ValueRangeOut(BaseModel):
    min: Amount
    max: Amount


class LegError(BaseModel):
    leg: str
    field: str
    kind: str
    message: str


class ValuationResponse(BaseModel):
    session_id: str = Field(alias="sessionId")
    base_price: Amount = Field(alias="basePrice")
    adjustments: list[AdjustmentOut]
    preliminary_value: Amount = Field(alias="preliminaryValue")
    value_range: ValueRangeOut = Field(alias="valueRange")
    interior_condition: str | None = Field(default=None, alias="interiorCondition")
    degraded: bool
    errors: list[LegError]


class MileageAdjustmentResponse(BaseModel):
    adjustment: AdjustmentOut | None


class HealthResponse(BaseModel):
    status: str
    vision_configured: bool
    pricing_configured: bool


# ── Metrics ─────────────────────────────────────────────────────────

_counters: dict[str, int] = defaultdict(int)
# Recent samples only, so long-running processes stay bounded.
_LATENCY_WINDOW = 1000
_latencies: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=_LATENCY_WINDOW))


def _record_latency(name: str, seconds: float) -> None:
    _latencies[name].append(seconds)
    _counters[f"{name}_count"] += 1


def _percentile_ms(values: deque[float], q: float) -> float:
    if not values:
        return 0
    ordered = sorted(values)
    return round(ordered[min(int(len(ordered) * q), len(ordered) - 1)] * 1000, 1)


def _input_error_status(exc: InputError) -> int:
    if exc.kind is InputErrorKind.RESOURCE_NOT_FOUND:
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


# ── App Factory ─────────────────────────────────────────────────────

def create_app() -> FastAPI:
    settings = ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    config = ValuationConfig(
        default_base_price=settings.default_base_price,
        value_range_half_width=settings.value_range_half_width,
    )
    vision = GeminiVisionClient(
        api_key=settings.gemini_api_key,
        model=settings.vision_model,
        base_url=settings.gemini_base_url,
        timeout=settings.vision_timeout_seconds,
    )
    pricing = BasePriceClient(
        base_url=settings.pricing_base_url,
        default_base_price=settings.default_base_price,
        timeout=settings.pricing_timeout_seconds,
    )
    analyzer = InteriorAnalyzer(upload_dir=settings.upload_dir, vision=vision, config=config)

    app = FastAPI(title="Car Valuation API", version="0.1.0")
    app.state.settings = settings
    app.state.vision = vision
    app.state.pricing = pricing

    logger.info(
        "Valuation service configured",
        extra={
            "extra_data": {
                "vision_configured": vision.enabled,
                "vision_model": settings.vision_model,
                "pricing_configured": bool(settings.pricing_base_url),
            }
        },
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Response:
        cid = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex[:12]
        correlation_id.set(cid)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    # ── Interior Wear ───────────────────────────────────────────────

    @app.post("/api/interior", response_model=InteriorResponse)
    async def analyze_interior(payload: InteriorRequest) -> InteriorResponse:
        base_price = parse_price_with_default(payload.base_price, config.default_base_price)
        try:
            analyzer.resolve_upload(payload.filename)
        except InputError as exc:
            raise HTTPException(status_code=_input_error_status(exc), detail=str(exc))
        if not vision.enabled:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="GEMINI_API_KEY not configured",
            )

        assessment = await analyzer.analyze(payload.filename, base_price)
        _counters["interior_count"] += 1
        if assessment.degraded:
            _counters["interior_fallback"] += 1
        return InteriorResponse(**assessment.to_dict())

    # ── Valuation ───────────────────────────────────────────────────

    @app.post("/api/valuation", response_model=ValuationResponse)
    async def valuate(payload: ValuationRequest) -> ValuationResponse:
        t0 = time.monotonic()
        degraded = False
        errors: list[dict[str, str]] = []

        if payload.base_price is None:
            lookup = await pricing.get_base_price(payload.car_model, payload.car_year)
            base_price = lookup.base_price
            degraded = lookup.is_fallback
        else:
            base_price = parse_price_with_default(payload.base_price, config.default_base_price)

        km = parse_int_with_default(payload.mileage, 0)

        interior: InteriorAssessment | None = None
        if payload.interior_filename is not None:
            try:
                interior = await analyzer.analyze(payload.interior_filename, base_price)
            except InputError as exc:
                errors.append({"leg": "interior", "field": exc.field, "kind": exc.kind.value, "message": str(exc)})
            else:
                degraded = degraded or interior.degraded

        valuation = build_valuation(
            base_price=base_price,
            mileage_km=km,
            cost_breakdown=[item.model_dump() for item in payload.cost_breakdown],
            interior=interior,
            config=config,
        )

        _record_latency("valuation", time.monotonic() - t0)
        if degraded:
            _counters["valuation_degraded"] += 1

        return ValuationResponse(
            sessionId=f"session-{int(time.time() * 1000)}",
            interiorCondition=interior.condition if interior else None,
            degraded=degraded,
            errors=errors,
            **valuation.to_dict(),
        )

    @app.get("/api/mileage-adjustment", response_model=MileageAdjustmentResponse)
    async def mileage_adjustment(
        km: str = "", base_price: str = Query(default="", alias="basePrice"),
    ) -> MileageAdjustmentResponse:
        base_price = parse_price_with_default(base_price, config.default_base_price)
        adjustment = map_mileage(parse_int_with_default(km, 0), base_price)
        return MileageAdjustmentResponse(adjustment=adjustment.to_dict() if adjustment else None)

    # ── Health / Metrics ────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            vision_configured=vision.enabled,
            pricing_configured=bool(settings.pricing_base_url),
        )

    @app.get("/metrics")
    async def get_metrics() -> dict[str, Any]:
        latencies = _latencies.get("valuation", deque())
        return {
            "counters": dict(_counters),
            "valuation_latency": {
                "count": len(latencies),
                "p50_ms": _percentile_ms(latencies, 0.5),
                "p95_ms": _percentile_ms(latencies, 0.95),
            },
        }

    return app


app = create_app()
