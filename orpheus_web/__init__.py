"""
Orpheus Web - FastAPI service exposing the content RPC surface.
"""
