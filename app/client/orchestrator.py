"""
Update Orchestrator
Owns the client's one-time initialization and serializes database updates
"""

import asyncio
from typing import Optional

import structlog

from app.client.api_client import ApiClient
from app.client.update_service import DatabaseUpdateService, UpdateCheck, UpdateResult
from app.config import Settings, settings as default_settings

logger = structlog.get_logger(__name__)


class UpdateOrchestrator:
    """
    Process-scoped owner of the update workflow.

    - ``start()`` runs initialization exactly once: a soft backend probe
      (GET /stats), the update check and, when enabled or when the backend
      is empty, the update itself. Concurrent callers await the same
      in-flight task. After success later calls return immediately; after a
      failure the next call starts over.
    - ``update()`` attaches to a running update instead of starting a second
      import.
    - ``reset()`` cancels in-flight work and forgets all state.

    Usage:
        orchestrator = build_orchestrator()
        await orchestrator.start()
        orchestrator.last_check.is_update_available
    """

    def __init__(self, service: DatabaseUpdateService, auto_update: bool = False):
        self.service = service
        self.auto_update = auto_update
        self.logger = logger.bind(service="update_orchestrator")
        self._reset_state()

    def _reset_state(self) -> None:
        self._initialized = False
        self._init_task: Optional[asyncio.Task] = None
        self._update_task: Optional[asyncio.Task] = None
        self.database_empty: Optional[bool] = None
        self.last_check: Optional[UpdateCheck] = None
        self.last_result: Optional[UpdateResult] = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def phase(self):
        return self.service.phase

    async def start(self) -> None:
        """Initialize once; concurrent calls share the in-flight run."""
        if self._initialized:
            return

        if self._init_task is None:
            self.logger.info("initialization_started")
            self._init_task = asyncio.ensure_future(self._initialize())
        else:
            self.logger.debug("initialization_in_flight_attached")

        task = self._init_task
        try:
            # shield: one cancelled caller must not cancel the shared run
            await asyncio.shield(task)
        except Exception as e:
            if self._init_task is task:
                self._init_task = None
            self.logger.warning("initialization_failed", error=str(e))
            raise

        self._initialized = True

    async def update(self) -> UpdateResult:
        """Run the update, or wait for the one already running."""
        if self._update_task is None or self._update_task.done():
            self._update_task = asyncio.ensure_future(self.service.perform_update())
        else:
            self.logger.info("update_in_flight_attached")

        result = await asyncio.shield(self._update_task)
        self.last_result = result
        return result

    async def check(self) -> UpdateCheck:
        self.last_check = await self.service.check_for_update()
        return self.last_check

    def reset(self) -> None:
        for task in (self._init_task, self._update_task):
            if task is not None and not task.done():
                task.cancel()
        self._reset_state()
        self.logger.info("orchestrator_reset")

    async def _initialize(self) -> None:
        self.database_empty = await self._probe_backend()
        check = await self.check()

        if check.update_error:
            self.logger.warning("initial_update_check_failed", error=check.update_error)

        if check.is_update_available and (self.auto_update or self.database_empty):
            self.logger.info(
                "initial_update_triggered",
                auto_update=self.auto_update,
                database_empty=self.database_empty,
            )
            await self.update()

        self.logger.info("initialization_completed", database_empty=self.database_empty)

    async def _probe_backend(self) -> Optional[bool]:
        """True if the backend holds no participants, None if it could not be asked."""
        try:
            stats = await self.service.api.get("/stats")
        except Exception as e:
            self.logger.warning("backend_probe_failed", error=str(e))
            return None

        empty = not stats or stats.get("participants", 0) == 0
        self.logger.info("backend_probed", database_empty=empty)
        return empty


def build_orchestrator(config: Optional[Settings] = None, transport=None) -> UpdateOrchestrator:
    """Wire an orchestrator from settings."""
    config = config or default_settings
    api = ApiClient(
        config.api_base_url,
        timeout=config.http_timeout_seconds,
        deadline=config.request_deadline_seconds,
        transport=transport,
    )
    service = DatabaseUpdateService(api, config.manifest_url, config.snapshot_sources)
    return UpdateOrchestrator(service, auto_update=config.auto_update)
