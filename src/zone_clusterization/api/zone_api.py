# ============================================================
# 📦 src/zone_clusterization/api/zone_api.py
# ============================================================

import json
import math

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from zone_clusterization.config import settings
from zone_clusterization.api.routes import router as zone_router

# ============================================================
# 🚀 App
# ============================================================

app = FastAPI(
    title="GapMap Zone Clusterization API",
    description="Competitor clustering, market-gap search and density heatmaps",
    version="1.0.0",
    openapi_url="/openapi.json",
    docs_url="/docs",
)

# ============================================================
# 🌍 CORS
# ============================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# 🧹 Middleware: sanitize JSON (NaN / Infinity)
# ============================================================


def _clean(obj):
    if isinstance(obj, dict):
        return {k: _clean(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_clean(i) for i in obj]
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return None
    return obj


@app.middleware("http")
async def sanitize_json_response(request: Request, call_next):
    response = await call_next(request)

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return response

    raw_body = b"".join([chunk async for chunk in response.body_iterator])
    try:
        content = json.loads(raw_body)
    except ValueError:
        return Response(
            content=raw_body,
            status_code=response.status_code,
            media_type=content_type,
        )

    return JSONResponse(content=_clean(content), status_code=response.status_code)


# ============================================================
# 🔀 Routes
# ============================================================

app.include_router(
    zone_router,
    prefix="/zones",
    tags=["Zones"],
)


@app.get("/")
def root():
    return {"status": "GapMap Zone Clusterization API online 🚀"}


# ============================================================
# 🚀 Standalone (dev)
# ============================================================

if __name__ == "__main__":
    uvicorn.run(
        "zone_clusterization.api.zone_api:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True,
    )
