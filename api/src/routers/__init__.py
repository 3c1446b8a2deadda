"""API routers (controllers)."""
