"""Flashgate - FastAPI REST API layer.

Modules
-------
main
    FastAPI application factory, routes and the ``main()`` CLI entry point.
handlers
    Per-endpoint request handlers (text, image, document, audio).
models
    Pydantic models for API request and response bodies.
"""
