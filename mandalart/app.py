"""Wires configuration, storage, auth and generation together."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from mandalart.auth.service import AuthService, BaseAuthService, LocalAuthService
from mandalart.config import AppConfig
from mandalart.controller.controller import MandalartController
from mandalart.db.mandalarts import MandalartRepository
from mandalart.db.migrations import run_migrations
from mandalart.generation.generator import MandalartGenerator
from mandalart.generation.providers import GenerationClient, get_provider
from mandalart.logging import MandalartLogger
from mandalart.storage.history import HistoryStore, LocalHistoryStore
from mandalart.storage.kv import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass
class App:
    """The collaborators one session needs."""

    config: AppConfig
    auth: BaseAuthService
    history: HistoryStore
    events: MandalartLogger = field(default_factory=MandalartLogger)
    client: Optional[GenerationClient] = None

    def generator(self) -> MandalartGenerator:
        if self.client is None:
            self.config.validate(require_generation=True)
            self.client = get_provider(self.config)
        return MandalartGenerator(self.client, locale=self.config.locale, events=self.events)

    def controller(self) -> MandalartController:
        return MandalartController(
            self.generator(),
            history=self.history,
            user=self.auth.current_user(),
            locale=self.config.locale,
            events=self.events,
        )


def build_app(config: Optional[AppConfig] = None, client: Optional[GenerationClient] = None) -> App:
    """Build an App for the configured backend.

    Generation settings are validated lazily, so history and auth commands
    work without an API key.
    """
    config = (config or AppConfig.from_env()).validate(require_generation=False)

    if config.backend == "local":
        store = JsonFileStore(config.home_dir / "local")
        auth = LocalAuthService(store, locale=config.locale)
        history = LocalHistoryStore(store)
    else:
        run_migrations(config.db_path)
        session = JsonFileStore(config.home_dir / "session")
        auth = AuthService(
            config.db_path,
            session,
            secret=config.jwt_secret,
            ttl_days=config.token_ttl_days,
            locale=config.locale,
        )
        history = MandalartRepository(config.db_path)

    logger.debug(f"Using {config.backend} backend")
    return App(config=config, auth=auth, history=history, client=client)
