from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..activity import ActivityRecorder
from ..assist import RemoteTextGenerator, TextAssist
from ..schemas import ActivityEntry, AppState, Course, resolve_teacher_name
from ..settings import Settings, settings as default_settings
from .connectivity import ConnectionState, ConnectivityGuard
from .facade import MutationFacade
from .persistence import JsonSlotStore, LocalStateAdapter, PersistenceMode, RemoteStateAdapter
from .store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSummary:
	students: int
	teachers: int
	courses: int
	recent_activity: Tuple[ActivityEntry, ...]


class PortalSession:
	"""Owns the portal state for one user session.

	Usage::

		async with PortalSession(settings) as session:
			if session.connection is ConnectionState.FAILED:
				await session.enter_demo_mode()
			await session.records.add_student(...)
	"""

	def __init__(
		self,
		config: Optional[Settings] = None,
		*,
		remote: Optional[RemoteStateAdapter] = None,
		local: Optional[LocalStateAdapter] = None,
		recorder: Optional[ActivityRecorder] = None,
	) -> None:
		config = config or default_settings
		self._remote = remote or RemoteStateAdapter.from_settings(config)
		self._local = local or LocalStateAdapter(JsonSlotStore(config.local_store_dir))
		self.store = EntityStore()
		self.guard = ConnectivityGuard(
			self._remote,
			self._local,
			demo_mode=config.demo_mode,
			app_origin=config.app_origin,
			api_base_url=config.api_base_url,
		)
		self.records = MutationFacade(self.store, recorder or ActivityRecorder(), lambda: self.guard.adapter)
		self._remote_assist = TextAssist(RemoteTextGenerator(self._remote.client))
		self._local_assist = TextAssist()

	@property
	def connection(self) -> ConnectionState:
		return self.guard.state

	@property
	def snapshot(self) -> AppState:
		return self.store.snapshot

	@property
	def assist(self) -> TextAssist:
		# Demo mode never touches the network, text included
		if self.guard.mode is PersistenceMode.LOCAL:
			return self._local_assist
		return self._remote_assist

	async def open(self) -> ConnectionState:
		self._install(await self.guard.start())
		return self.guard.state

	async def retry(self) -> ConnectionState:
		self._install(await self.guard.retry())
		return self.guard.state

	async def enter_demo_mode(self) -> ConnectionState:
		self._install(await self.guard.enter_demo_mode())
		return self.guard.state

	async def close(self) -> None:
		await self._remote.aclose()
		await self._local.aclose()

	async def __aenter__(self) -> "PortalSession":
		await self.open()
		return self

	async def __aexit__(self, exc_type, exc, tb) -> None:
		await self.close()

	def summary(self) -> DashboardSummary:
		state = self.store.snapshot
		return DashboardSummary(
			students=len(state.students),
			teachers=len(state.teachers),
			courses=len(state.courses),
			recent_activity=state.activities,
		)

	def teacher_name(self, course: Course) -> str:
		return resolve_teacher_name(self.store.snapshot, course.teacher_id)

	def _install(self, state: Optional[AppState]) -> None:
		if state is not None:
			self.store.replace(state)
			logger.info("portal ready in %s mode", self.guard.mode.value)
