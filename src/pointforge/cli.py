import argparse
import logging
from pathlib import Path

from .definitions.catalog import DefinitionCatalog, load_catalog
from .errors import CatalogError, UnknownDefinitionError
from .formatting import format_number
from .game import GameSession
from .logging_config import configure_logging
from .persistence.storage import FileStorage
from .settings import Settings

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="pointforge",
        description="PointForge - headless driver for the incremental game progression core",
    )
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file to load/override defaults.",
    )
    parser.add_argument(
        "--save-dir",
        dest="save_dir",
        type=Path,
        default=None,
        help="Directory holding the save file (overrides settings).",
    )
    parser.add_argument(
        "--catalog",
        dest="catalog_path",
        type=Path,
        default=None,
        help="Path to a JSON definition catalog replacing the built-in one.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("status", help="Show points, rates, upgrades and achievements.")
    click = sub.add_parser("click", help="Click the main button.")
    click.add_argument("--count", type=int, default=1, help="Number of clicks (default 1).")
    buy = sub.add_parser("buy", help="Buy one level of an upgrade.")
    buy.add_argument("upgrade_id")
    sub.add_parser("prestige", help="Reset the run for prestige points.")
    simulate = sub.add_parser("simulate", help="Run idle ticks without waiting.")
    simulate.add_argument("--seconds", type=int, required=True, help="Number of 1-second ticks.")
    sub.add_parser("reset", help="Delete the save and start over.")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "status"
    return args


def build_session(args) -> GameSession:
    settings = Settings.load(user_path=args.settings_path)
    catalog = load_catalog(args.catalog_path) if args.catalog_path else DefinitionCatalog.default()
    storage = FileStorage(args.save_dir) if args.save_dir else None
    return GameSession(catalog=catalog, settings=settings, storage=storage)


def print_status(session: GameSession) -> None:
    state = session.state
    assert state is not None and session.upgrades is not None and session.achievements is not None
    print(f"Points:           {format_number(state.current_points)}")
    print(f"Per click:        {format_number(state.points_per_click)}")
    print(f"Per second:       {format_number(state.points_per_second)}")
    print(f"Clicks:           {state.total_clicks}")
    print(f"Prestige level:   {state.prestige.level} ({state.prestige.current_prestige_points} pp)")
    print("Upgrades:")
    for definition in session.upgrades.all_definitions():
        level = session.upgrades.level(definition.id)
        cost = format_number(session.upgrades.current_cost(definition.id))
        print(f"  {definition.id:<18} Lv.{level:<4} next {cost}")
    achievements = session.achievements
    print(f"Achievements:     {achievements.unlocked_count()}/{achievements.total_count()}")


def run_command(session: GameSession, args) -> int:
    command = args.command
    if command == "click":
        for _ in range(max(0, args.count)):
            session.click()
        print(f"Points: {format_number(session.state.current_points)}")
    elif command == "buy":
        if session.catalog.upgrade(args.upgrade_id) is None:
            raise UnknownDefinitionError(f"Unknown upgrade: {args.upgrade_id}")
        if session.purchase_upgrade(args.upgrade_id):
            print(f"Bought {args.upgrade_id} (Lv.{session.upgrades.level(args.upgrade_id)})")
        else:
            cost = format_number(session.upgrades.current_cost(args.upgrade_id))
            print(f"Could not buy {args.upgrade_id} (cost {cost})")
            return 1
    elif command == "prestige":
        gained = session.perform_prestige()
        if gained <= 0:
            print("Prestige not available yet")
            return 1
        print(f"Prestige! Gained {gained} prestige points")
    elif command == "simulate":
        for _ in range(max(0, args.seconds)):
            session.tick(1.0)
        print(f"Points: {format_number(session.state.current_points)}")
    elif command == "reset":
        session.reset()
        print("Progress reset")
    else:
        print_status(session)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        session = build_session(args)
    except CatalogError as e:
        logger.error("Invalid catalog: %s", e)
        return 2
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 2

    session.start()
    try:
        return run_command(session, args)
    except UnknownDefinitionError as e:
        logger.error("%s", e)
        return 2
    finally:
        session.quit()
