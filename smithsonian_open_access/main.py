"""FastAPI application for the Smithsonian Open Access integration."""

import json
import logging
from datetime import datetime
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from jinja2 import Environment, FileSystemLoader, select_autoescape

from smithsonian_open_access.client import OpenAccessClient
from smithsonian_open_access.config import SettingsStore, get_settings
from smithsonian_open_access.dependencies import get_api_client, get_settings_store
from smithsonian_open_access.exceptions import ConfigurationError, PreconditionError
from smithsonian_open_access.middleware.request_logging import RequestLoggingMiddleware
from smithsonian_open_access.models import (
    CATEGORY_LABELS,
    ENDPOINT_LABELS,
    SETTINGS_ENDPOINT_LABELS,
    TERM_LABELS,
    EndpointCheckResult,
    OperationRequest,
    OperationResult,
    SettingsForm,
)
from smithsonian_open_access.services import ENDPOINT_CHECKS, check_endpoint, run_operation
from smithsonian_open_access.utils.logging import setup_logging

logger = logging.getLogger(__name__)

settings = get_settings()
setup_logging(level=settings.log_level, json_format=settings.log_json, log_file=settings.log_file)

app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="Settings and test screens for the Smithsonian Open Access API",
)
app.add_middleware(RequestLoggingMiddleware)

templates_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=select_autoescape(["html", "xml"]),
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    _ = request
    logger.error(f"Configuration error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "configuration_error", "message": str(exc)},
    )


@app.exception_handler(PreconditionError)
async def precondition_error_handler(request: Request, exc: PreconditionError) -> JSONResponse:
    _ = request
    return JSONResponse(
        status_code=400,
        content={"error": "precondition_failed", "message": str(exc)},
    )


def _keep_saved_key(form: SettingsForm, store: SettingsStore) -> SettingsForm:
    """The settings page only ever shows the masked key; map it back to the saved one."""
    saved = store.load()
    if saved.api_key and form.api_key == saved.masked()["api_key"]:
        return form.model_copy(update={"api_key": saved.api_key})
    return form


@app.get("/health")
def health_check(store: SettingsStore = Depends(get_settings_store)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "smithsonian_open_access",
        "version": settings.app_version,
        "api_configured": bool(store.load().api_key),
    }


@app.get("/ready")
def readiness_check(
    store: SettingsStore = Depends(get_settings_store),
    api: OpenAccessClient = Depends(get_api_client),
):
    """Readiness check: the stats endpoint must answer."""
    checks = {}
    try:
        stats_endpoint = store.load().stats_endpoint
    except ConfigurationError as e:
        checks["settings"] = f"error: {e}"
        stats_endpoint = ""
    else:
        checks["settings"] = "ready"

    if stats_endpoint and api.fetch(stats_endpoint) is not None:
        checks["open_access_api"] = "reachable"
    else:
        checks["open_access_api"] = "unreachable"

    ready = all(value in ("ready", "reachable") for value in checks.values())
    return Response(
        content=json.dumps({
            "ready": ready,
            "status": "ready" if ready else "not_ready",
            "version": settings.app_version,
            "checks": checks,
            "timestamp": datetime.now().isoformat(),
        }),
        media_type="application/json",
        status_code=200 if ready else 503,
    )


@app.get("/", response_class=HTMLResponse)
def root():
    """Send visitors to the interactive test screen."""
    return RedirectResponse(url="/admin/test", status_code=302)


@app.get("/admin/settings", response_class=HTMLResponse)
def settings_page(store: SettingsStore = Depends(get_settings_store)):
    """Settings screen with one test action per endpoint."""
    template = templates_env.get_template("settings.html")
    return HTMLResponse(
        content=template.render(
            title=settings.app_title,
            values=store.load().masked(),
            endpoints=SETTINGS_ENDPOINT_LABELS,
        )
    )


@app.get("/api/settings")
def read_settings(store: SettingsStore = Depends(get_settings_store)):
    """Current API settings with the key masked."""
    return store.load().masked()


@app.post("/api/settings")
def save_settings(form: SettingsForm, store: SettingsStore = Depends(get_settings_store)):
    """Validate and persist the API settings."""
    form = _keep_saved_key(form, store)
    store.save(form)
    return {"ok": True, "message": "The configuration options have been saved.", "settings": form.masked()}


@app.post("/api/settings/test/{endpoint}", response_model=EndpointCheckResult)
def test_endpoint(
    endpoint: str,
    form: SettingsForm,
    store: SettingsStore = Depends(get_settings_store),
    api: OpenAccessClient = Depends(get_api_client),
):
    """Save the submitted settings, then run the canned call for one endpoint."""
    if endpoint not in ENDPOINT_CHECKS:
        raise HTTPException(status_code=404, detail=f"Unknown endpoint: {endpoint}")
    store.save(_keep_saved_key(form, store))
    return check_endpoint(api, endpoint)


@app.get("/admin/test", response_class=HTMLResponse)
def test_page():
    """Interactive screen for trying endpoints."""
    template = templates_env.get_template("test.html")
    return HTMLResponse(
        content=template.render(
            title=settings.app_title,
            endpoints=ENDPOINT_LABELS,
            categories=CATEGORY_LABELS,
            terms=TERM_LABELS,
            defaults={"endpoint": "search", "category": "art_design", "term": "topic"},
        )
    )


@app.post("/api/test", response_model=OperationResult)
def perform_test(operation: OperationRequest, api: OpenAccessClient = Depends(get_api_client)):
    """Run one interactive call and return the raw and rendered response."""
    return run_operation(api, operation)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("smithsonian_open_access.main:app", host="0.0.0.0", port=8000)
