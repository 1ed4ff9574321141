"""Routing — URL grammar, page descriptors, and the URL router.

URLs are parsed into path segments and query parameters, looked up in
the route table, and fall through to the Service for
``provider/action`` URLs.
"""
