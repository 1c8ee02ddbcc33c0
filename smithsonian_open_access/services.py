"""Handlers behind the settings and interactive test screens."""

import json
import logging
from typing import Any, Callable

from smithsonian_open_access.client import OpenAccessClient
from smithsonian_open_access.exceptions import PreconditionError, SmithsonianAppError
from smithsonian_open_access.models import EndpointCheckResult, OperationRequest, OperationResult

logger = logging.getLogger(__name__)

NO_RESULTS = "No results found."
TEST_CONTENT_ID = "ld1-1643398738600-1643398750158-0"

# Canned calls run by the "Test ... Endpoint" buttons on the settings screen
ENDPOINT_CHECKS: dict[str, tuple[str, Callable[[OpenAccessClient], Any]]] = {
    "search": ("Search", lambda api: api.search("smithsonian", 0, 1)),
    "content": ("Object Content", lambda api: api.get_content(TEST_CONTENT_ID)),
    "stats": ("Stats", lambda api: api.get_stats()),
    "category": ("Category search", lambda api: api.category_search("smithsonian", "art_design")),
    "terms": ("Terms search", lambda api: api.terms_search("culture")),
}


def check_endpoint(api: OpenAccessClient, endpoint: str) -> EndpointCheckResult:
    """Run the canned test for one endpoint and describe the outcome."""
    if endpoint not in ENDPOINT_CHECKS:
        raise KeyError(endpoint)
    label, call = ENDPOINT_CHECKS[endpoint]

    try:
        call(api)
    except SmithsonianAppError as e:
        logger.warning(f"{label} endpoint test failed: {e}")
        return EndpointCheckResult(
            endpoint=endpoint,
            ok=False,
            message=f"{label} endpoint test failed. Error: {e}",
        )
    return EndpointCheckResult(
        endpoint=endpoint,
        ok=True,
        message=f"{label} endpoint test was successful. All API settings saved.",
    )


def render_results(results: dict[str, Any] | None) -> str:
    """Pretty-print a response for display, or the empty-result message."""
    if not results:
        return NO_RESULTS
    return json.dumps(results, indent=4, ensure_ascii=False)


def run_operation(api: OpenAccessClient, request: OperationRequest) -> OperationResult:
    """Perform the call picked on the interactive test screen.

    Upstream and configuration failures become an empty result; a missing
    required argument is the caller's error and is raised.
    """
    logger.info(f"Interactive test: endpoint={request.endpoint} query={request.query!r}")

    try:
        if request.endpoint == "search":
            results = api.search(
                request.query,
                start=0,
                rows=25,
                sort=None,
                type="edanmdm",
                row_group="objects",
                images_only=True,
                filters=[],
            )
        elif request.endpoint == "content":
            results = api.get_content(request.query)
        elif request.endpoint == "stats":
            results = api.get_stats()
        elif request.endpoint == "category":
            results = api.category_search(request.query, request.category)
        else:
            results = api.terms_search(request.term)
    except PreconditionError:
        raise
    except SmithsonianAppError as e:
        logger.error(f"Interactive {request.endpoint} call failed: {e}")
        return OperationResult(
            endpoint=request.endpoint,
            ok=False,
            rendered=NO_RESULTS,
            error=str(e),
        )

    return OperationResult(
        endpoint=request.endpoint,
        ok=True,
        results=results,
        rendered=render_results(results),
    )
