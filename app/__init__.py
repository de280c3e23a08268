"""Wayfarer - AI travel itinerary API."""
