# saas_architect/app.py
import time
from typing import List

# Load .env BEFORE any package imports (adapters read credentials when built)
from dotenv import load_dotenv
load_dotenv(override=True)

from fastapi import FastAPI, Request, Path
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, PlainTextResponse

from saas_architect import config
from saas_architect import monitoring
from saas_architect import db as dbmod
from saas_architect.orchestrator import build_orchestrator
from saas_architect.schemas import GenerateRequest, GenerateResponse, GenerationRecordOut

app = FastAPI(title="SaaS Architect API")

# Initialize DB tables on startup
dbmod.init_db()

# instantiate orchestrator once (provider clients are built here)
orchestrator = build_orchestrator()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Metrics middleware
# ---------------------------------------------------------------------------
@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.time()
    endpoint = request.url.path
    method = request.method
    status = "500"
    try:
        response = await call_next(request)
        status = str(response.status_code)
        return response
    except Exception:
        monitoring.logger.exception("Unhandled exception in request", extra={"path": endpoint})
        raise
    finally:
        # collapse per-id lookups into one label
        if endpoint.startswith("/api/generation/"):
            endpoint = "/api/generation/{id}"
        monitoring.observe_request(start, endpoint, method, status)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    monitoring.logger.info("Rejected invalid request", extra={"path": request.url.path, "errors": errors})
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "error_code": "E_VALIDATION",
            "message": "Request validation failed",
            "details": {"errors": errors},
        },
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@app.post("/api/generate", response_model=GenerateResponse, status_code=201)
async def generate(req: GenerateRequest):
    """
    POST /api/generate
    Body: { "idea": "...", "roles": [...], "monetization": "...", "tenantType": "...", "techStack": [...] }
    """
    monitoring.logger.info(
        "Received /api/generate request",
        extra={"idea_preview": req.idea[:200], "monetization": req.monetization.value,
               "tenant_type": req.tenant_type.value},
    )
    try:
        resp = await orchestrator.generate(req)
    except Exception as e:
        monitoring.logger.exception("Generation failed")
        return JSONResponse(
            status_code=400,
            content={
                "status": "error",
                "error_code": "E_GENERATION_FAILED",
                "message": str(e) or "Failed to generate architecture",
            },
        )
    return resp


@app.get("/api/generation/{generation_id}", response_model=GenerationRecordOut)
async def get_generation(generation_id: str = Path(..., description="Generation ID to fetch")):
    """
    GET /api/generation/{generation_id}
    Fetch a stored generation with tech_stack and ai_response decoded.
    """
    try:
        rec = await orchestrator.get_generation(generation_id)
    except dbmod.PersistenceError as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "error_code": "E_INTERNAL", "message": str(e)},
        )
    if not rec:
        return JSONResponse(
            status_code=404,
            content={
                "status": "error",
                "error_code": "E_NOT_FOUND",
                "message": "Generation not found",
            },
        )
    return rec


@app.get("/api/generations", response_model=List[GenerationRecordOut])
async def list_generations():
    try:
        records = await orchestrator.list_generations()
    except dbmod.PersistenceError as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "error_code": "E_INTERNAL", "message": str(e)},
        )
    return records


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    if not monitoring.PROMETHEUS_ENABLED:
        return PlainTextResponse("Prometheus disabled", status_code=404)
    payload, content_type = monitoring.prometheus_metrics_response()
    return Response(content=payload, media_type=content_type)
