"""Tests for the settings-screen checks and the interactive handler."""

import json
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from smithsonian_open_access.exceptions import PreconditionError
from smithsonian_open_access.models import ApiSettings, OperationRequest
from smithsonian_open_access.services import (
    NO_RESULTS,
    TEST_CONTENT_ID,
    check_endpoint,
    render_results,
    run_operation,
)


@pytest.mark.parametrize(
    "endpoint,path",
    [
        ("search", "/openaccess/api/v1.0/search"),
        ("content", f"/openaccess/api/v1.0/content/{TEST_CONTENT_ID}"),
        ("stats", "/openaccess/api/v1.0/stats"),
        ("category", "/openaccess/api/v1.0/category/art_design/search"),
        ("terms", "/openaccess/api/v1.0/terms/culture"),
    ],
)
def test_check_endpoint_success(api, stub_api, endpoint, path):
    """Test each canned endpoint check hits the expected path."""
    result = check_endpoint(api, endpoint)

    assert result.ok is True
    assert result.message.endswith("endpoint test was successful. All API settings saved.")
    assert stub_api.last.url.path == path


def test_check_search_uses_one_row(api, stub_api):
    check_endpoint(api, "search")

    assert stub_api.last.url.params["q"].startswith("smithsonian")
    assert stub_api.last.url.params["rows"] == "1"


def test_check_endpoint_failure_reports_error(api, stub_api):
    stub_api.status_code = 403

    result = check_endpoint(api, "stats")

    assert result.ok is False
    assert result.message.startswith("Stats endpoint test failed. Error: ")
    assert "403" in result.message


def test_check_endpoint_configuration_error(make_client):
    result = check_endpoint(make_client(ApiSettings(api_key="k")), "terms")

    assert result.ok is False
    assert "not configured" in result.message


def test_check_unknown_endpoint(api):
    with pytest.raises(KeyError):
        check_endpoint(api, "metrics")


def test_render_results():
    assert render_results(None) == NO_RESULTS
    assert render_results({}) == NO_RESULTS
    assert json.loads(render_results({"a": [1, 2]})) == {"a": [1, 2]}
    assert "\n    " in render_results({"a": 1})


def test_run_search(api, stub_api):
    """Test the interactive search call uses its fixed parameters."""
    stub_api.payload = {"response": {"rows": [{"id": "r1"}]}}

    result = run_operation(api, OperationRequest(endpoint="search", query="quilt"))

    params = stub_api.last.url.params
    assert params["q"] == "quilt AND online_visual_material:true"
    assert params["start"] == "0"
    assert params["rows"] == "25"
    assert params["type"] == "edanmdm"
    assert params["row_group"] == "objects"
    assert "sort" not in params
    assert "fq" not in params
    assert result.ok is True
    assert result.results == {"response": {"rows": [{"id": "r1"}]}}
    assert json.loads(result.rendered) == result.results


@pytest.mark.parametrize(
    "request_kwargs,path",
    [
        ({"endpoint": "content", "query": "nmah_1234"}, "/openaccess/api/v1.0/content/nmah_1234"),
        ({"endpoint": "stats"}, "/openaccess/api/v1.0/stats"),
        (
            {"endpoint": "category", "query": "quilt", "category": "science_technology"},
            "/openaccess/api/v1.0/category/science_technology/search",
        ),
        ({"endpoint": "terms", "term": "unit_code"}, "/openaccess/api/v1.0/terms/unit_code"),
    ],
)
def test_run_other_endpoints(api, stub_api, request_kwargs, path):
    result = run_operation(api, OperationRequest(**request_kwargs))

    assert result.ok is True
    assert result.endpoint == request_kwargs["endpoint"]
    assert stub_api.last.url.path == path


def test_run_failure_renders_no_results(api, stub_api):
    """Test that an upstream failure shows the empty-result message."""
    stub_api.status_code = 500

    result = run_operation(api, OperationRequest(endpoint="stats"))

    assert result.ok is False
    assert result.rendered == NO_RESULTS
    assert result.results is None
    assert "500" in result.error


def test_run_empty_response(api, stub_api):
    stub_api.payload = {}

    result = run_operation(api, OperationRequest(endpoint="stats"))

    assert result.ok is True
    assert result.rendered == NO_RESULTS


@pytest.mark.parametrize("endpoint", ["search", "content", "category"])
def test_query_required(endpoint):
    with pytest.raises(ValidationError):
        OperationRequest(endpoint=endpoint, query="  ")


def test_query_length_limit():
    with pytest.raises(ValidationError):
        OperationRequest(endpoint="search", query="x" * 65)


def test_run_missing_argument_is_raised(api, stub_api):
    """Test that a precondition failure is not turned into an empty result."""
    with patch.object(api, "category_search", side_effect=PreconditionError("no category")):
        with pytest.raises(PreconditionError):
            run_operation(api, OperationRequest(endpoint="category", query="quilt"))

    assert stub_api.requests == []
