from .connectivity import ConnectionFailure, ConnectionState, ConnectivityGuard, FailureReason
from .facade import MutationFacade
from .persistence import JsonSlotStore, LocalStateAdapter, PersistenceMode, RemoteStateAdapter, STORAGE_KEY
from .session import DashboardSummary, PortalSession
from .store import EntityStore

__all__ = [
	"ConnectionFailure",
	"ConnectionState",
	"ConnectivityGuard",
	"DashboardSummary",
	"EntityStore",
	"FailureReason",
	"JsonSlotStore",
	"LocalStateAdapter",
	"MutationFacade",
	"PersistenceMode",
	"PortalSession",
	"RemoteStateAdapter",
	"STORAGE_KEY",
]
