from collections import Counter

from fastapi.routing import APIRoute


def route_keys(routes):
    keys = []
    for route in routes:
        if not isinstance(route, APIRoute):
            continue
        for method in sorted(route.methods or ()):
            keys.append((method, route.path))
    return keys


def assert_unique_routes(app) -> None:
    """Fail app construction when two handlers claim the same method and path."""
    duplicates = sorted(key for key, count in Counter(route_keys(app.routes)).items() if count > 1)
    if duplicates:
        formatted = ", ".join(f"{method} {path}" for method, path in duplicates)
        raise RuntimeError(f"Duplicate route registrations: {formatted}")


__all__ = ["assert_unique_routes", "route_keys"]
