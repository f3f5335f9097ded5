"""Wealth Tracker CLI: main entry point."""

import typer

from ..core.config import get_config
from ..core.logging_config import configure_logging
from ..data.database import get_db
from .commands import accounts, positions, rebalance, settings, summary, sync

app = typer.Typer(
    name="wt",
    help="Multi-currency portfolio tracker with rebalancing advice",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(positions.app, name="positions", help="Manage investment positions")
app.add_typer(accounts.app, name="accounts", help="Manage cash and brokerage accounts")
app.add_typer(settings.app, name="settings", help="Base currency, FX rate, contribution, data source")
app.command("refresh")(sync.refresh)
app.command("summary")(summary.summary)
app.command("rebalance")(rebalance.rebalance)


@app.callback()
def startup():
    """Initialize logging and the database on first run."""
    configure_logging(get_config().log_level)
    get_db()


if __name__ == "__main__":
    app()
