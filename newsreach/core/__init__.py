"""NNTP protocol engine for newsreach."""

# Lazy imports keep `import newsreach.core` cheap for the CLI

__all__ = [
    "LineTransport",
    "BodyLimits",
    "AuthHandshake",
    "AuthState",
    "OperationResult",
    "FailureKind",
    "NewsClient",
    "authenticate",
    "list_groups",
    "list_articles_in_group",
    "get_headers",
    "get_article",
]

_LOCATIONS = {
    "LineTransport": ".transport",
    "BodyLimits": ".multiline",
    "AuthHandshake": ".auth",
    "AuthState": ".auth",
    "OperationResult": ".operations",
    "FailureKind": ".errors",
    "NewsClient": ".client",
    "authenticate": ".operations",
    "list_groups": ".operations",
    "list_articles_in_group": ".operations",
    "get_headers": ".operations",
    "get_article": ".operations",
}


def __getattr__(name):
    """Lazy import engine modules on first attribute access."""
    module_name = _LOCATIONS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib
    module = importlib.import_module(module_name, __name__)
    return getattr(module, name)
