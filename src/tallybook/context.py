"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelSettingsRepository,
    SQLModelTemplateRepository,
    SQLModelTransactionRepository,
)
from .logging_config import get_logger
from .services.categories import default_categories
from .services.dashboard import DashboardView, build_dashboard
from .services.filters import FilterSpec
from .services.preferences import PreferenceService
from .services.templates import default_templates

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Centralized application context with repositories and preferences."""

    config: BaseConfig
    session_factory: SessionFactory

    transaction_repo: SQLModelTransactionRepository
    category_repo: SQLModelCategoryRepository
    template_repo: SQLModelTemplateRepository
    settings_repo: SQLModelSettingsRepository
    preferences: PreferenceService

    engine: Optional[Engine] = None

    @property
    def user_id(self) -> str:
        return self.config.USER_ID

    def require_engine(self) -> Engine:
        """Return the database engine or raise if the context was built without one."""

        if self.engine is None:
            raise RuntimeError("Database engine not initialised")
        return self.engine

    def seed_defaults(self) -> int:
        """Create starter categories and templates for a user with none."""

        created = 0
        if not self.category_repo.list_categories(user_id=self.user_id):
            for category in default_categories(user_id=self.user_id):
                self.category_repo.create(category, user_id=self.user_id)
                created += 1
        if not self.template_repo.list_all(user_id=self.user_id):
            for template in default_templates(user_id=self.user_id):
                self.template_repo.create(template, user_id=self.user_id)
                created += 1
        if created:
            logger.info("Seeded defaults", extra={"user_id": self.user_id, "created": created})
        return created

    def dashboard(self, spec: Optional[FilterSpec] = None, **kwargs) -> DashboardView:
        """Load the ledger and run the dashboard pipeline over it."""

        return build_dashboard(
            self.transaction_repo.list_transactions(user_id=self.user_id),
            self.category_repo.list_categories(user_id=self.user_id),
            spec if spec is not None else self.preferences.load_last_filter(),
            config=self.config,
            **kwargs,
        )


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    settings_repo = SQLModelSettingsRepository(session_factory)
    return AppContext(
        config=config,
        session_factory=session_factory,
        transaction_repo=SQLModelTransactionRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        template_repo=SQLModelTemplateRepository(session_factory),
        settings_repo=settings_repo,
        preferences=PreferenceService(settings_repo, user_id=config.USER_ID),
        engine=engine,
    )
