"""
Unit tests for the route table helpers.
"""

import pytest

from cleo.api.route_table import (
    ROUTE_CATEGORIES,
    RouteSpec,
    categories_for,
    detect_route_drift,
    method_for,
    placeholder_names,
    render_path,
    unique_routes,
)


def test_unique_routes_lists_shared_paths_once() -> None:
    routes = unique_routes()
    paths = [route.path for route in routes]
    assert len(paths) == len(set(paths))
    assert paths.count("/posts/all") == 1
    assert len(routes) == 32


def test_shared_listing_paths_belong_to_two_categories() -> None:
    assert categories_for("/posts/all") == ["General", "Posts"]
    assert categories_for("/files/all") == ["Files", "General"]


def test_methods() -> None:
    assert method_for("/email/{token}") == "GET"
    assert method_for("/files/serve/{filename}") == "GET"
    assert method_for("/user/create") == "POST"


def test_placeholder_names() -> None:
    assert placeholder_names("/files/serve/{filename}") == ["filename"]
    assert placeholder_names("/keys/all") == []


def test_render_path_quotes_values() -> None:
    assert render_path("/files/serve/{filename}", filename="my file.txt") == "/files/serve/my%20file.txt"
    assert render_path("/email/{token}", token="a/b") == "/email/a%2Fb"


def test_render_path_rejects_missing_and_unknown_placeholders() -> None:
    with pytest.raises(ValueError, match="Missing value"):
        render_path("/email/{token}")
    with pytest.raises(ValueError, match="Unknown placeholder"):
        render_path("/keys/all", token="x")


def test_detect_route_drift_reports_missing_and_wrong_method() -> None:
    expected = [RouteSpec("POST", "/keys/all"), RouteSpec("GET", "/email/{token}")]
    registered = {RouteSpec("POST", "/email/{token}")}
    findings = detect_route_drift(expected=expected, registered=registered)
    assert findings == [
        "Missing route: POST /keys/all",
        "Route /email/{token} is served with POST, expected GET",
    ]


def test_every_category_is_listed() -> None:
    assert list(ROUTE_CATEGORIES) == [
        "Admin",
        "ECF",
        "Email",
        "Files",
        "General",
        "Keys",
        "Posts",
        "API Tokens",
        "Users",
    ]
