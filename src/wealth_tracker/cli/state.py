"""Shared loaders for CLI commands."""

from ..core.calculator import PortfolioCalculator
from ..core.models import PortfolioSnapshot
from ..data.repositories.accounts_repo import AccountsRepository
from ..data.repositories.positions_repo import PositionsRepository
from ..data.repositories.settings_repo import SettingsRepository


def load_snapshot() -> PortfolioSnapshot:
    """Recompute every derived figure from the saved records."""
    return PortfolioCalculator.snapshot(
        PositionsRepository().list_all(),
        AccountsRepository().list_all(),
        SettingsRepository().get(),
    )
