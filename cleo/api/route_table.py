# This file holds the public route contract: every path the API serves, grouped by category.
# Routers register exactly these templates, and tests plus `scripts/check_route_contract.py`
# compare the table against what a built app actually exposes.

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final
from urllib.parse import quote

from fastapi import FastAPI
from fastapi.routing import APIRoute

_PLACEHOLDER_RE = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}")


@dataclass(frozen=True)
class RouteSpec:
    method: str
    path: str


ROUTE_CATEGORIES: Final[dict[str, tuple[str, ...]]] = {
    "Admin": (
        "/instance/admins",
        "/instance/users",
        "/instance/edit/name",
        "/instance/edit/hostname",
        "/instance/edit/smtp/server",
        "/instance/edit/smtp/username",
        "/instance/edit/smtp/pass",
    ),
    "ECF": (
        "/ecf/create",
        "/ecf/delete",
        "/ecf/edit/key",
        "/ecf/edit/value",
    ),
    "Email": ("/email/{token}",),
    "Files": (
        "/files/create",
        "/files/delete",
        "/files/serve/{filename}",
        "/files/all",
    ),
    "General": (
        "/posts/all",
        "/files/all",
    ),
    "Keys": (
        "/keys/create",
        "/keys/delete",
        "/keys/all",
    ),
    "Posts": (
        "/posts/create",
        "/posts/update",
        "/posts/delete",
        "/posts/all",
    ),
    "API Tokens": (
        "/token/create",
        "/token/delete",
    ),
    "Users": (
        "/user/create",
        "/user/delete",
        "/user/update/password",
        "/user/update/picture",
        "/user/update/email",
        "/user/update/name",
        "/user/update/username",
    ),
}

GET_PATHS: Final[frozenset[str]] = frozenset({"/email/{token}", "/files/serve/{filename}"})


def method_for(path: str) -> str:
    return "GET" if path in GET_PATHS else "POST"


def unique_routes(categories: Mapping[str, Iterable[str]] = ROUTE_CATEGORIES) -> list[RouteSpec]:
    """Flatten the category table, keeping first-seen order and dropping repeats."""

    seen: set[str] = set()
    routes: list[RouteSpec] = []
    for paths in categories.values():
        for path in paths:
            if path in seen:
                continue
            seen.add(path)
            routes.append(RouteSpec(method=method_for(path), path=path))
    return routes


def categories_for(path: str) -> list[str]:
    return [category for category, paths in ROUTE_CATEGORIES.items() if path in paths]


def placeholder_names(path: str) -> list[str]:
    return _PLACEHOLDER_RE.findall(path)


def render_path(path: str, **values: str) -> str:
    """Substitute `{placeholder}` segments with URL-quoted values."""

    names = placeholder_names(path)
    missing = [name for name in names if name not in values]
    if missing:
        raise ValueError(f"Missing value for placeholder(s) {missing} in {path!r}.")
    unknown = sorted(set(values) - set(names))
    if unknown:
        raise ValueError(f"Unknown placeholder(s) {unknown} for {path!r}.")
    return _PLACEHOLDER_RE.sub(lambda match: quote(str(values[match.group(1)]), safe=""), path)


def registered_routes(app: FastAPI) -> set[RouteSpec]:
    registered: set[RouteSpec] = set()
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        for method in route.methods:
            registered.add(RouteSpec(method=method, path=route.path))
    return registered


def detect_route_drift(*, expected: Iterable[RouteSpec], registered: set[RouteSpec]) -> list[str]:
    """List contract routes the app does not serve, plus paths served with the wrong method."""

    findings: list[str] = []
    registered_paths = {route.path: route.method for route in registered}
    for route in expected:
        if route in registered:
            continue
        if route.path in registered_paths:
            findings.append(
                f"Route {route.path} is served with {registered_paths[route.path]}, expected {route.method}"
            )
        else:
            findings.append(f"Missing route: {route.method} {route.path}")
    return findings
