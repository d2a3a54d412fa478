"""Business logic services."""

from .model_catalog_service import ModelCatalogService
from .ports import BookRepository, InMemoryBookRepository
from .speech_service import SpeechService
from .structured_summary_service import StructuredSummaryService
from .summary_expansion_service import ExpansionOutcome, SummaryExpansionService
from .summary_pipeline_service import SummaryOutcome, SummaryPipelineService

__all__ = [
    "ModelCatalogService",
    "BookRepository",
    "InMemoryBookRepository",
    "SpeechService",
    "StructuredSummaryService",
    "ExpansionOutcome",
    "SummaryExpansionService",
    "SummaryOutcome",
    "SummaryPipelineService",
]
