# 🎵 trackbot/infrastructure/music/__init__.py
"""
🎵 Сервіси отримання й доставки треків.
"""

from .acquisition_pipeline import STAGE_MESSAGES, AcquisitionPipeline, Stage
from .delivery_retrier import DeliveryRetrier, DeliveryState
from .progress_reporter import ProgressProducer, ProgressReporter
from .search_service import SearchCommand, SearchService
from .selection_service import SelectionService

__all__ = [
    "STAGE_MESSAGES",
    "AcquisitionPipeline",
    "Stage",
    "DeliveryRetrier",
    "DeliveryState",
    "ProgressProducer",
    "ProgressReporter",
    "SearchCommand",
    "SearchService",
    "SelectionService",
]
