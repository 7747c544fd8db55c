"""querycomplete - context-aware completion for SQL and MongoDB queries."""

from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "complete_sql",
    "complete_mongo",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from querycomplete.domains.mongo.completion.completion import complete as complete_mongo
    from querycomplete.domains.sql.completion.completion import complete as complete_sql

    from .cli import main


def __getattr__(name: str) -> Any:
    """Lazy import so that importing the package stays cheap."""
    if name == "main":
        from .cli import main

        return main
    if name == "complete_sql":
        from querycomplete.domains.sql.completion.completion import complete

        return complete
    if name == "complete_mongo":
        from querycomplete.domains.mongo.completion.completion import complete

        return complete
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
