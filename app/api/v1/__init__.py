"""API routes mounted under /api."""
