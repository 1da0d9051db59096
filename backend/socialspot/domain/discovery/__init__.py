"""Proximity search and filtering pipeline."""

from .coordinator import SearchCoordinator, SearchSnapshot, SearchState
from .filters import AttributeFilterChain
from .pipeline import SearchPipeline
from .proximity import ProximityFilter
from .ranking import rank
from .schemas import SearchQuery, SearchResponse
from .service import DiscoveryService

__all__ = [
	"AttributeFilterChain",
	"DiscoveryService",
	"ProximityFilter",
	"SearchCoordinator",
	"SearchPipeline",
	"SearchQuery",
	"SearchResponse",
	"SearchSnapshot",
	"SearchState",
	"rank",
]
