"""
Dependency injection container for the counter dashboard
"""

from dependency_injector import containers, providers

from .managers.ledger_manager import EventLedger
from .managers.state_manager import StateManager
from .managers.websocket_manager import WebSocketManager
from .services.event_service import EventService
from .services.logging_service import LoggingService
from .services.metrics_service import MetricsService
from .services.transaction_service import TransactionService


class Container(containers.DeclarativeContainer):
    """Main DI container for the application"""

    # Configuration - will be overridden with actual Config object
    config = providers.Object(None)

    # Services (Singletons)
    logging_service = providers.Singleton(LoggingService, level=config.provided.log_level)

    # Ledger owned by this application context; tests build their own
    ledger = providers.Singleton(EventLedger, max_capacity=config.provided.max_capacity)

    # Managers (Singletons - shared across the app)
    state_manager = providers.Singleton(
        StateManager,
        default_window=config.provided.window,
        max_event_logs=config.provided.max_event_logs,
    )

    websocket_manager = providers.Singleton(WebSocketManager, config=config)

    # Services
    metrics_service = providers.Singleton(MetricsService, ledger=ledger)

    transaction_service = providers.Singleton(
        TransactionService,
        config=config,
        ledger=ledger,
        logging_service=logging_service,
    )

    event_service = providers.Singleton(
        EventService,
        config=config,
        ledger=ledger,
        state_manager=state_manager,
        websocket_manager=websocket_manager,
        logging_service=logging_service,
    )
