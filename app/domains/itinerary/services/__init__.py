"""Itinerary services: synthesis, regeneration and the service facade."""

from app.domains.itinerary.services.itinerary_service import (
    ItineraryService,
    format_total_cost,
)
from app.domains.itinerary.services.regeneration import (
    RegenerationOrchestrator,
    resolve_scope,
    splice_days,
)
from app.domains.itinerary.services.synthesizer import (
    ItinerarySynthesizer,
    LLMItinerarySynthesizer,
    SynthesisErr,
    SynthesisErrorKind,
    SynthesisOk,
    get_llm,
    parse_synthesis_output,
)

__all__ = [
    "ItineraryService",
    "ItinerarySynthesizer",
    "LLMItinerarySynthesizer",
    "RegenerationOrchestrator",
    "SynthesisErr",
    "SynthesisErrorKind",
    "SynthesisOk",
    "format_total_cost",
    "get_llm",
    "parse_synthesis_output",
    "resolve_scope",
    "splice_days",
]
