"""
Asana upstream.

Components:
- client.py: httpx-based JSON client (bearer auth, UpstreamError)
- pagination.py: request builders + cursor-paginated task fetcher
"""
