"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses
(DB wiring, settings, logging, error types). Keep feature-specific SQL and
business rules in the corresponding feature package (e.g. `pets/`).
"""
