"""DDD application layer."""

from .event_publisher import EventPublisher, NullEventPublisher
from .latest_result import LatestResultRunner
from .mix_service import AnalyzeMixerSnapshot, GenerateRecommendation, ImportMixerSnapshot

__all__ = [
    "EventPublisher",
    "NullEventPublisher",
    "LatestResultRunner",
    "AnalyzeMixerSnapshot",
    "GenerateRecommendation",
    "ImportMixerSnapshot",
]
