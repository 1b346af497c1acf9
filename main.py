from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.api.v1.requests import router as requests_router
from app.clients.erp_api import close_erp_client, get_erp_client

app = FastAPI(title="ERP Approval Views")

# CORS for the dashboard
# Build CORS allowlist from local dev + configured origins
_base_origins = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
}
if settings.FRONTEND_BASE_URL:
    _base_origins.add(settings.FRONTEND_BASE_URL)
for o in settings.ALLOWED_ORIGINS:
    _base_origins.add(o)
# Normalize by stripping trailing slashes to match Origin header format
_allowed_origins = sorted({o.rstrip('/') for o in _base_origins if o})

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_origin_regex=r"^http(s)?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {"message": "Welcome to ERP Approval Views"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Mount API routers
app.include_router(requests_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup():
    get_erp_client()


@app.on_event("shutdown")
async def on_shutdown():
    await close_erp_client()
