"""
app.py — ArgBlazer: Argumentation Semantics API

Endpoints:
  GET  /v1/health      — liveness, version, enumeration cap
  POST /v1/extensions  — the six extension families of one framework
  POST /v1/rank        — BFS rank map from roots or a fallback argument
  POST /v1/steps       — per-step extensions and ranks of a document
  POST /v1/report      — HTML report rendered from YAML text

Validation errors come back as structured JSON:
  {"status": "error", "code": "...", "message": "..."}

Usage:
  argblazer serve
  # or: python -m argblazer.app
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from argblazer import __version__
from argblazer.argumentation import (
    ArgumentationError,
    AttackGraph,
    RankEngine,
    SemanticsEngine,
    StepDecomposer,
)
from argblazer.argumentation.engine import DEFAULT_MAX_ARGUMENTS
from argblazer.models import (
    ErrorResponse,
    ExtensionsRequest,
    ExtensionsResponse,
    FrameworkDocument,
    HealthResponse,
    RankRequest,
    RankResponse,
    ReportRequest,
    StepResponse,
    StepsResponse,
)
from argblazer.report import load_document, render_html

# ── Logging ──────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(name)-22s │ %(levelname)-7s │ %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("argblazer.server")

# ── Configuration ────────────────────────────────────────────────

HOST = os.environ.get("ARGBLAZER_HOST", "0.0.0.0")
PORT = int(os.environ.get("ARGBLAZER_PORT", "8787"))
MAX_ARGUMENTS = DEFAULT_MAX_ARGUMENTS
SERVER_START_TIME = time.time()

# ── Engines ──────────────────────────────────────────────────────

semantics_engine = SemanticsEngine(max_arguments=MAX_ARGUMENTS)
rank_engine = RankEngine()
decomposer = StepDecomposer(engine=semantics_engine, ranker=rank_engine)


# ── App Lifecycle ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("=" * 60)
    log.info("  ArgBlazer — Argumentation Semantics API")
    log.info(f"  Version:       {__version__}")
    log.info(f"  Max arguments: {MAX_ARGUMENTS}")
    log.info("=" * 60)

    yield

    log.info("ArgBlazer server stopped.")


# ── FastAPI App ──────────────────────────────────────────────────

app = FastAPI(
    title="ArgBlazer API",
    description="Extension-based semantics and step-by-step reports for abstract argumentation frameworks.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(ArgumentationError)
async def argumentation_error_handler(request: Request, exc: ArgumentationError):
    log.warning(f"{request.url.path} | {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(code=exc.code, message=exc.message).model_dump(),
    )


def _step_responses(steps) -> list[StepResponse]:
    return [
        StepResponse(
            step=r.step,
            arguments=list(r.framework.arguments),
            attacks=r.framework.attack_pairs,
            extensions=r.extensions.to_dict(),
            rank_top=dict(r.rank_top),
            rank_bottom=dict(r.rank_bottom),
        )
        for r in steps
    ]


# ═════════════════════════════════════════════════════════════════
#  ENDPOINTS
# ═════════════════════════════════════════════════════════════════


# ── Health ───────────────────────────────────────────────────────

@app.get("/v1/health", response_model=HealthResponse, tags=["System"])
async def health():
    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=int(time.time() - SERVER_START_TIME),
        max_arguments=MAX_ARGUMENTS,
    )


# ── Extensions ───────────────────────────────────────────────────

@app.post("/v1/extensions", response_model=ExtensionsResponse, tags=["Semantics"])
async def extensions(req: ExtensionsRequest):
    start = time.perf_counter()
    af = AttackGraph.build(req.arguments, req.attacks)
    result = semantics_engine.compute_extensions(af)
    elapsed = (time.perf_counter() - start) * 1000

    log.info(f"Extensions | {len(af)} args | {len(af.attacks)} attacks | {elapsed:.1f}ms")
    return ExtensionsResponse(
        **result.to_dict(),
        num_arguments=len(af),
        num_attacks=len(af.attacks),
        computation_ms=round(elapsed, 3),
    )


# ── Rank ─────────────────────────────────────────────────────────

@app.post("/v1/rank", response_model=RankResponse, tags=["Semantics"])
async def rank(req: RankRequest):
    rank_map = rank_engine.compute_rank(
        req.attacks,
        req.roots,
        req.fallback_first,
        req.fallback_last,
        req.is_top_side,
    )
    return RankResponse(rank=dict(rank_map))


# ── Steps ────────────────────────────────────────────────────────

@app.post("/v1/steps", response_model=StepsResponse, tags=["Steps"])
async def steps(doc: FrameworkDocument):
    start = time.perf_counter()
    results = decomposer.decompose(doc.arguments, doc.attacks)
    elapsed = (time.perf_counter() - start) * 1000

    return StepsResponse(
        steps=_step_responses(results),
        total_steps=len(results),
        computation_ms=round(elapsed, 3),
    )


# ── Report ───────────────────────────────────────────────────────

@app.post("/v1/report", response_class=HTMLResponse, tags=["Report"])
async def report(req: ReportRequest):
    document = load_document(req.yaml)
    results = decomposer.decompose(document.arguments, document.attacks)
    log.info(f"Report | {len(document.arguments)} declarations | {len(results)} steps")
    return HTMLResponse(
        render_html(document, results, title=req.title or "ArgBlazer Report")
    )


# ── Entrypoint ───────────────────────────────────────────────────

def main(host: str = HOST, port: int = PORT):
    uvicorn.run(
        "argblazer.app:app",
        host=host,
        port=port,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    main()
