import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


from .db import init_db
from .routers import workouts, planned, auth as auth_router


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Liftplan")

# ---- CORS for the mobile/web client ----
origins = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081",
    ).split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
   init_db()


# ---- Metrics ----
REQUEST_COUNT = Counter(
   "http_requests_total",
   "Total HTTP requests",
   ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
   "http_request_latency_seconds",
   "Request latency",
   ["method", "path"],
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
   start = time.perf_counter()
   response = await call_next(request)
   route = request.scope.get("route")
   path = getattr(route, "path", request.url.path)
   method = request.method
   REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
   REQUEST_LATENCY.labels(method=method, path=path).observe(time.perf_counter() - start)
   return response


# ---- APIs ----
app.include_router(workouts.router)
app.include_router(planned.router)
app.include_router(auth_router.router)  # uses /api/auth/*


# ---- Health & Metrics ----
@app.get("/health")
def health():
   return {"status": "ok"}


@app.get("/metrics")
def metrics():
   data = generate_latest()  # type: ignore
   return PlainTextResponse(data.decode("utf-8"), media_type=CONTENT_TYPE_LATEST)
