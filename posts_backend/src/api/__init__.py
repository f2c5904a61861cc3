"""
FastAPI Posts Backend package.

The ASGI application lives in ``src.api.main:app``; it is not imported here
so that importing submodules (schemas, repositories, seed) has no
application-level side effects.
"""
