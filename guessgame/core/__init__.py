"""Player-facing presentation helpers (feedback text, hints, win message).

Kept free of FastAPI concerns so it can be reused by API routes, other front ends, and tests.
"""
