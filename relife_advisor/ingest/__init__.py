"""Ingest Module - archetype data from the ReLIFE forecasting service."""

from .forecasting_client import (
    ArchetypeServiceError,
    ArchetypeSource,
    ForecastingArchetypeSource,
    ForecastingClient,
    NotFoundError,
    RetrievalError,
)

__all__ = [
    'ArchetypeServiceError',
    'ArchetypeSource',
    'ForecastingArchetypeSource',
    'ForecastingClient',
    'NotFoundError',
    'RetrievalError',
]
