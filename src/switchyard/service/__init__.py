"""Service — provider registry and request dispatch.

Providers register under a unique name and expose a fixed set of
actions. Requests are executed inline, on the service's worker pool,
or awaited through anyio, always answering with a ``Response``.
"""
