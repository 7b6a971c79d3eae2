# This file checks that the app serves every route of the public route table.
# A failure here means a client of the content API would hit a missing endpoint.

from __future__ import annotations

from cleo.api.app import app
from cleo.api.route_table import (
    ROUTE_CATEGORIES,
    RouteSpec,
    detect_route_drift,
    registered_routes,
    unique_routes,
)


def test_app_serves_every_contract_route_with_expected_method() -> None:
    findings = detect_route_drift(expected=unique_routes(), registered=registered_routes(app))
    assert findings == []


def test_every_category_is_served() -> None:
    registered_paths = {route.path for route in registered_routes(app)}
    for category, paths in ROUTE_CATEGORIES.items():
        missing = [path for path in paths if path not in registered_paths]
        assert missing == [], f"{category} is missing {missing}"


def test_placeholder_routes_are_get_routes() -> None:
    registered = registered_routes(app)
    assert RouteSpec(method="GET", path="/email/{token}") in registered
    assert RouteSpec(method="GET", path="/files/serve/{filename}") in registered


def test_instance_info_route_is_served_outside_the_contract() -> None:
    assert RouteSpec(method="GET", path="/instance/info") in registered_routes(app)


def test_openapi_documents_upload_and_mail_failure_statuses() -> None:
    paths = app.openapi()["paths"]
    upload_statuses = set(paths["/files/create"]["post"]["responses"])
    signup_statuses = set(paths["/user/create"]["post"]["responses"])

    assert {"413", "503"} <= upload_statuses
    assert {"409", "502", "503"} <= signup_statuses
    assert "502" not in paths["/health"]["get"]["responses"]
