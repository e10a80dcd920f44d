"""
storegate - Store Sales API Proxy

A FastAPI service that proxies store-sales CRUD requests to a remote
backend, gating every call behind a cached health check so a sleeping
free-tier backend can be woken up without hammering it.
"""

from importlib.metadata import version

__version__ = version("storegate")
