"""Itinerary domain - trip validation, synthesis, regeneration and storage."""
