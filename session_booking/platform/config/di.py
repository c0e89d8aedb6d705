"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from session_booking.platform.config.core_setting import Settings, settings
from session_booking.service.booking.driven_adapter.repo.session_repo_impl import SessionRepoImpl
from session_booking.service.booking.driven_adapter.store.session_item_store_in_memory_impl import (
    SessionItemStoreInMemoryImpl,
)
from session_booking.service.booking.driven_adapter.store.session_item_store_scylla_impl import (
    SessionItemStoreScyllaImpl,
)


def _store_backend() -> str:
    return settings.SESSION_STORE_BACKEND


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Session item store, chosen by SESSION_STORE_BACKEND
    session_item_store = providers.Selector(
        _store_backend,
        scylla=providers.Singleton(SessionItemStoreScyllaImpl),
        memory=providers.Singleton(SessionItemStoreInMemoryImpl),
    )

    # Repositories (stateless apart from the store they wrap)
    session_repo = providers.Singleton(SessionRepoImpl, store=session_item_store)


container = Container()
