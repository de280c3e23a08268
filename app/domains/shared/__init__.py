"""Shared domain components."""

from app.domains.shared.repository import GenericRepository

__all__ = ["GenericRepository"]
