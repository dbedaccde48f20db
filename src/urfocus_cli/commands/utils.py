"""Service wiring shared by the command modules.

Commands build their services here from the cached config service and the
active storage strategy, so the services themselves never reach for
globals.
"""

from urfocus_cli.repositories import RecordStore
from urfocus_cli.services import (
    LeaderboardService,
    ProfileService,
    SessionStateMachine,
    SharedGoalAggregator,
    ShopService,
    TerminalNotifier,
)
from urfocus_cli.services.config_service import (
    get_config_service,
    get_storage_strategy_context,
)
from urfocus_cli.utils.ui.formatters import format_warning

ONBOARDING_HINT = "Pick a username with 'urfocus profile claim <name>'"


def get_record_store() -> RecordStore:
    """Record store for the active context (SQLite or REST)."""
    return get_storage_strategy_context().record_store


def get_aggregator(store: RecordStore | None = None) -> SharedGoalAggregator:
    config = get_config_service().config
    return SharedGoalAggregator(
        store or get_record_store(), poll_interval=config.sync.poll_interval
    )


def get_profile_service(store: RecordStore | None = None) -> ProfileService:
    svc = get_config_service()
    return ProfileService(
        store or get_record_store(), svc.config.focus, svc.save_config
    )


def get_leaderboard_service(store: RecordStore | None = None) -> LeaderboardService:
    return LeaderboardService(store or get_record_store())


def get_shop_service() -> ShopService:
    svc = get_config_service()
    return ShopService(svc.config.focus, svc.save_config, svc.config.shop.item_costs)


def get_session_machine(store: RecordStore | None = None) -> SessionStateMachine:
    """Build the session state machine with all of its collaborators."""
    svc = get_config_service()
    store = store or get_record_store()
    return SessionStateMachine(
        preferences=svc.config.focus,
        save_preferences=svc.save_config,
        aggregator=get_aggregator(store),
        profile_service=get_profile_service(store),
        notifier=TerminalNotifier(),
    )


def warn_if_onboarding(profiles: ProfileService) -> None:
    """Remind users without a username that they are anonymous on the board."""
    if profiles.needs_onboarding:
        format_warning(ONBOARDING_HINT)
