"""
Decides whether the portal runs against the API server or the local slot.

    loading -> ready            remote fetch succeeded, or demo mode
    loading -> failed           remote fetch failed
    failed  -> loading          retry()
    failed  -> ready (local)    enter_demo_mode()
    loading -> failed           local slot unreadable (demo mode)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from ..errors import BackendUnreachable, ConnectivityStateError, HttpError, LocalStoreError
from ..schemas import AppState
from .persistence import LocalStateAdapter, PersistenceMode, RemoteStateAdapter, StateAdapter

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
	LOADING = "loading"
	READY = "ready"
	FAILED = "failed"


class FailureReason(str, Enum):
	UNREACHABLE = "unreachable"
	# Page served over https while the API is plain http; browsers block it
	MIXED_CONTENT = "mixed_content"
	SERVER_ERROR = "server_error"
	# Local slot unreadable or corrupt
	LOCAL_STORE_ERROR = "local_store_error"


@dataclass(frozen=True)
class ConnectionFailure:
	reason: FailureReason
	detail: str


def classify_unreachable(app_origin: Optional[str], api_base_url: str) -> FailureReason:
	if not app_origin:
		return FailureReason.UNREACHABLE
	try:
		origin_scheme = httpx.URL(app_origin).scheme
		api_scheme = httpx.URL(api_base_url).scheme
	except httpx.InvalidURL:
		return FailureReason.UNREACHABLE
	if origin_scheme == "https" and api_scheme == "http":
		return FailureReason.MIXED_CONTENT
	return FailureReason.UNREACHABLE


class ConnectivityGuard:
	def __init__(
		self,
		remote: RemoteStateAdapter,
		local: LocalStateAdapter,
		*,
		demo_mode: bool = False,
		app_origin: Optional[str] = None,
		api_base_url: str = "",
	) -> None:
		self._remote = remote
		self._local = local
		self._demo_mode = demo_mode
		self._app_origin = app_origin
		self._api_base_url = api_base_url
		self._state = ConnectionState.LOADING
		self._failure: Optional[ConnectionFailure] = None

	@property
	def state(self) -> ConnectionState:
		return self._state

	@property
	def failure(self) -> Optional[ConnectionFailure]:
		return self._failure

	@property
	def demo_mode(self) -> bool:
		return self._demo_mode

	@property
	def mode(self) -> PersistenceMode:
		return PersistenceMode.LOCAL if self._demo_mode else PersistenceMode.REMOTE

	@property
	def adapter(self) -> StateAdapter:
		if self._state is not ConnectionState.READY:
			raise ConnectivityStateError(f"portal is not ready (state: {self._state.value})")
		return self._local if self._demo_mode else self._remote

	async def start(self) -> Optional[AppState]:
		"""Run the initial load. Returns the loaded state, or None on failure."""
		if self._state is not ConnectionState.LOADING:
			raise ConnectivityStateError(f"start() called in state {self._state.value}")
		return await self._load()

	async def retry(self) -> Optional[AppState]:
		if self._state is not ConnectionState.FAILED:
			raise ConnectivityStateError(f"retry() is only valid after a failure, not in state {self._state.value}")
		self._state = ConnectionState.LOADING
		self._failure = None
		return await self._load()

	async def enter_demo_mode(self) -> Optional[AppState]:
		"""Switch to the local slot. Returns None and stays on the previous
		store, in state failed, when the slot cannot be loaded."""
		if self._state is ConnectionState.LOADING:
			raise ConnectivityStateError("cannot switch to demo mode while loading")
		logger.info("entering demo mode, state is kept in the local slot")
		previous_mode = self._demo_mode
		self._demo_mode = True
		self._failure = None
		self._state = ConnectionState.LOADING
		state = await self._load_local()
		if state is None:
			self._demo_mode = previous_mode
		return state

	async def _load_local(self) -> Optional[AppState]:
		try:
			state = await self._local.load()
		except LocalStoreError as exc:
			self._fail(ConnectionFailure(reason=FailureReason.LOCAL_STORE_ERROR, detail=str(exc)))
			return None
		self._state = ConnectionState.READY
		return state

	async def _load(self) -> Optional[AppState]:
		if self._demo_mode:
			return await self._load_local()
		try:
			state = await self._remote.load()
		except BackendUnreachable as exc:
			reason = classify_unreachable(self._app_origin, self._api_base_url)
			self._fail(ConnectionFailure(reason=reason, detail=str(exc)))
			return None
		except HttpError as exc:
			self._fail(ConnectionFailure(reason=FailureReason.SERVER_ERROR, detail=str(exc)))
			return None
		self._state = ConnectionState.READY
		return state

	def _fail(self, failure: ConnectionFailure) -> None:
		logger.warning("could not load portal data (%s): %s", failure.reason.value, failure.detail)
		self._failure = failure
		self._state = ConnectionState.FAILED
