"""Core engine package for Set & Seize."""

__all__ = [
    "actions",
    "builds",
    "cards",
    "deck",
    "encode",
    "errors",
    "events",
    "game",
    "logging_utils",
    "obligation",
    "partition",
    "repository",
    "resolver",
    "rules_schema",
    "scoring",
    "service",
    "state",
    "subsets",
]
