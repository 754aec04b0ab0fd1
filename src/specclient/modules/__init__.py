"""Request-construction modules.

Catalog, binding, templating, server resolution and assembly are pure
and synchronous; only the document loader and executor do I/O.
"""
