"""Restock -- restaurant inventory tracking with AI reorder planning.

Entry point that wires the store, the Gemini client and the orchestrator
together and runs one command.

Usage::

    python main.py list --search flour --urgent
    python main.py add "All-Purpose Flour" --stock 12.5 --reorder-level 20 --unit kg --cost 40
    python main.py order <item-id> --delivery 2026-11-02
    python main.py receive <item-id> 25
    python main.py analyze
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

# Ensure project root is on sys.path so that ``src.*`` imports resolve.
_PROJECT_ROOT = Path(__file__).resolve().parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config.settings import Settings
from src.ai.client import GeminiClient
from src.ai.prompts import PromptManager
from src.inventory.service import InventoryService
from src.inventory.status import classify
from src.models.database import Database
from src.models.schemas import DerivedStatus, InventoryItem, InventoryItemDraft, Unit, WriteResult
from src.models.store import SQLiteInventoryStore
from src.orchestrator.analysis import AnalysisOrchestrator
from src.orchestrator.dashboard import InventoryDashboard
from src.utils.formatting import format_currency, format_date
from src.utils.logger import get_logger, setup_logging

log = get_logger(__name__, component="main")

console = Console()

_STATUS_STYLE: dict[DerivedStatus, str] = {
    DerivedStatus.URGENT_REORDER: "bold red",
    DerivedStatus.ORDER_PLACED: "yellow",
    DerivedStatus.WELL_STOCKED: "green",
}


def render_inventory(items: list[InventoryItem], currency: str) -> Table:
    """Return a rich table of *items* in the order given."""
    table = Table(title="Inventory", show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Item")
    table.add_column("Status")
    table.add_column("Stock", justify="right")
    table.add_column("Reorder at", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Vendor")
    table.add_column("Expected")

    for item in items:
        status = classify(item)
        expected = format_date(item.expected_delivery) if item.is_ordered else ""
        table.add_row(
            item.id[:8],
            escape(item.name),
            f"[{_STATUS_STYLE[status]}]{status.value}[/]",
            f"{item.current_stock:g} {item.unit.value}",
            f"{item.reorder_level:g} {item.unit.value}",
            format_currency(item.current_stock * item.unit_cost, currency),
            escape(" / ".join(part for part in (item.primary_vendor, item.vendor_contact) if part)),
            expected,
        )
    return table


def _report(result: WriteResult, action: str) -> None:
    if result.ok:
        console.print(f"[green]{action}[/] {result.item_id}")
    else:
        console.print(f"[red]{action} failed:[/] {escape(result.error or '')}")


def _report_invalid(exc: ValidationError) -> None:
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "item"
        console.print(f"[red]Invalid {escape(field)}:[/] {escape(error['msg'])}")


async def _resolve_item(store: SQLiteInventoryStore, ref: str) -> InventoryItem | None:
    """Find an item by full id or by a unique id prefix as shown by ``list``."""
    item = await store.get(ref)
    if item is not None:
        return item
    matches = [item for item in await store.list_items() if item.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


async def main(args: argparse.Namespace) -> int:
    """Bootstrap the components and run the selected command."""
    settings = Settings()
    setup_logging(settings.log_level)

    db = Database(str(settings.abs_db_path))
    await db.connect()
    try:
        store = SQLiteInventoryStore(db, app_id=settings.app_id, user_id=settings.user_id)
        service = InventoryService(store)
        client = GeminiClient(
            api_key=settings.gemini_api_key,
            endpoint=settings.gemini_endpoint,
            max_attempts=settings.max_attempts,
            base_delay=settings.retry_base_delay_s,
            timeout=settings.request_timeout_s,
        )
        orchestrator = AnalysisOrchestrator(
            client=client,
            prompts=PromptManager(str(_PROJECT_ROOT / "config" / "prompts.yaml")),
            restaurant_name=settings.restaurant_name,
            currency=settings.currency,
        )
        dashboard = InventoryDashboard(orchestrator)
        dashboard.apply_snapshot(await store.list_items())

        if args.command == "list":
            dashboard.set_search_term(args.search)
            dashboard.set_urgent_only(args.urgent)
            console.print(render_inventory(dashboard.visible, settings.currency))
            return 0

        if args.command == "analyze":
            with console.status("Analyzing urgent items..."):
                result = await dashboard.analyze()
            console.print(result, markup=False)
            return 0

        if args.command == "add":
            try:
                draft = InventoryItemDraft(
                    name=args.name,
                    current_stock=args.stock,
                    reorder_level=args.reorder_level,
                    unit=args.unit,
                    unit_cost=args.cost,
                    primary_vendor=args.vendor,
                    vendor_contact=args.contact,
                )
            except ValidationError as exc:
                _report_invalid(exc)
                return 1
            result = await service.save_item(draft)
            _report(result, "Added")
            return 0 if result.ok else 1

        item = await _resolve_item(store, args.item_id)
        if item is None:
            console.print(f"[red]No unique item matches[/] {args.item_id}")
            return 1

        if args.command == "edit":
            overrides = {
                "name": args.name,
                "current_stock": args.stock,
                "reorder_level": args.reorder_level,
                "unit": args.unit,
                "unit_cost": args.cost,
                "primary_vendor": args.vendor,
                "vendor_contact": args.contact,
            }
            try:
                draft = InventoryItemDraft.model_validate(
                    {
                        **item.to_draft().model_dump(),
                        **{k: v for k, v in overrides.items() if v is not None},
                    }
                )
            except ValidationError as exc:
                _report_invalid(exc)
                return 1
            result = await service.save_item(draft, item)
            _report(result, "Updated")
        elif args.command == "order":
            result = await service.mark_as_ordered(item.id, args.delivery)
            _report(result, "Marked as ordered")
        elif args.command == "receive":
            result = await service.receive_delivery(item.id, args.quantity)
            _report(result, "Received")
        else:
            result = await service.delete_item(item.id)
            _report(result, "Deleted")
        return 0 if result.ok else 1
    finally:
        await db.close()


def _add_item_fields(parser: argparse.ArgumentParser, for_create: bool) -> None:
    """Add the editable item fields; on edit every field is optional and unset."""
    parser.add_argument("--stock", type=float, required=for_create)
    parser.add_argument("--reorder-level", type=float, required=for_create)
    parser.add_argument(
        "--unit", choices=[u.value for u in Unit], default=Unit.KG.value if for_create else None
    )
    parser.add_argument("--cost", type=float, default=0.0 if for_create else None)
    parser.add_argument("--vendor", default="" if for_create else None)
    parser.add_argument("--contact", default="" if for_create else None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restock",
        description="Restock - restaurant inventory tracking with AI reorder planning",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show inventory, most urgent first")
    list_cmd.add_argument("--search", default="", help="Match item name or vendor")
    list_cmd.add_argument("--urgent", action="store_true", help="Only urgent items")

    sub.add_parser("analyze", help="Ask the analyst for a purchasing plan")

    add_cmd = sub.add_parser("add", help="Add an inventory item")
    add_cmd.add_argument("name")
    _add_item_fields(add_cmd, for_create=True)

    edit_cmd = sub.add_parser("edit", help="Edit an inventory item")
    edit_cmd.add_argument("item_id")
    edit_cmd.add_argument("--name")
    _add_item_fields(edit_cmd, for_create=False)

    order_cmd = sub.add_parser("order", help="Mark an item as ordered")
    order_cmd.add_argument("item_id")
    order_cmd.add_argument("--delivery", type=date.fromisoformat, help="YYYY-MM-DD")

    receive_cmd = sub.add_parser("receive", help="Record a delivery")
    receive_cmd.add_argument("item_id")
    receive_cmd.add_argument("quantity", type=float)

    delete_cmd = sub.add_parser("delete", help="Delete an inventory item")
    delete_cmd.add_argument("item_id")

    return parser


def cli() -> None:
    """Parse CLI arguments and run the event loop."""
    args = build_parser().parse_args()
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    cli()
