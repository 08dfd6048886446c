"""
Apply filter matches to the entry store.

One filter run becomes a RunSummary; accounts and the whole document roll
those up. A failure on one filter or account is counted and never stops the
others.
"""

from functools import lru_cache
import logging

from gmail_order_status.models.accounts import Account
from gmail_order_status.models.messages import MatchResult
from gmail_order_status.models.summary import (
    AccountSummary,
    RunCounters,
    RunSummary,
    UpdateReport,
)
from gmail_order_status.services.parser_service import ParserService, get_parser_service
from gmail_order_status.settings import Settings, get_settings
from gmail_order_status.stores.entry_store import EntryStore
from gmail_order_status.utils.logging_config import log_operation, log_task_end, log_task_start

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int | None:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


class EntryUpdateCoordinator:
    """Propagate matched statuses (and extra values) into entry fields."""

    def __init__(
        self,
        parser_service: ParserService,
        entry_store: EntryStore,
        settings: Settings | None = None,
        task_logger: logging.Logger | None = None,
    ):
        self.parser_service = parser_service
        self.entry_store = entry_store
        self.settings = settings or get_settings()
        self.task_logger = task_logger or logger

    def set_value(self, entry_id: int, field_id: int, value: str) -> bool:
        """Write one entry field directly; exceptions count as a failed write."""
        try:
            ok = self.entry_store.upsert(entry_id, field_id, value)
        except Exception as e:
            logger.error(f"Upsert raised for entry {entry_id}: {e}")
            ok = False
        log_operation(
            logger,
            "upsert",
            f"entry {entry_id}",
            "success" if ok else "error",
            field_id=field_id,
            value=value,
        )
        return ok

    async def update_filter(self, account_id: str, filter_id: str) -> RunSummary:
        """
        Fetch one filter's matches and write their statuses.

        Skip rules, per reported item:
        - the filter has no destination field: skipped_no_status_field
        - no positive entry id was captured: skipped_no_entry_id
        - no status matched: skipped_empty_status
        """
        result = await self.parser_service.messages_by_filter(
            account_id,
            filter_id,
            batch_size=self.settings.update_batch_size,
            max_pages=self.settings.update_max_pages,
        )
        summary = RunSummary(
            account_id=account_id,
            filter_id=result.filter_id,
            parser_code=result.parser_code,
            status_field_id=result.status_field_id,
            items=result.items,
        )

        if not result.ok:
            summary.error = result.error
            summary.errors += 1
            return summary

        if summary.status_field_id <= 0:
            summary.skipped_no_status_field = len(result.items)
            return summary

        for item in result.items:
            self._apply(item, summary)

        logger.info(
            f"Filter {summary.parser_code or summary.filter_id}: "
            f"{summary.updated} updated, {summary.errors} errors"
        )
        return summary

    def _apply(self, item: MatchResult, summary: RunSummary) -> None:
        entry_id = _positive_int(item.entry_id)
        if entry_id is None:
            summary.skipped_no_entry_id += 1
            log_operation(logger, "skip", f"message {item.message_id}", "skipped", reason="no entry id")
            return

        if not item.status:
            summary.skipped_empty_status += 1
            log_operation(logger, "skip", f"entry {entry_id}", "skipped", reason="no status")
            return

        if not self.set_value(entry_id, summary.status_field_id, item.status):
            summary.errors += 1
            return
        summary.updated += 1

        for extra in item.extras:
            if not extra.value or extra.spec.entry_field_id <= 0:
                continue
            if self.set_value(entry_id, extra.spec.entry_field_id, extra.value):
                summary.extras_updated += 1
            else:
                summary.errors += 1

    async def update_account(self, account_id: str) -> AccountSummary:
        try:
            account: Account | None = self.parser_service.store.get_account(account_id)
        except Exception as e:
            logger.error(f"Could not load account {account_id}: {e}")
            return AccountSummary(account_id=account_id, error=str(e), totals=RunCounters(errors=1))

        if account is None:
            return AccountSummary(
                account_id=account_id,
                error="Account not found",
                totals=RunCounters(errors=1),
            )

        report = AccountSummary(
            account_id=account.id,
            title=account.title,
            email=account.connected_email,
            filters_count=len(account.filters),
        )
        for flt in account.filters:
            summary = await self.update_filter(account.id, flt.id)
            report.filters.append(summary)
            report.totals.add(summary)
        return report

    async def update_all(self) -> UpdateReport:
        """Update every filter of every account (the scheduled run)."""
        try:
            document = self.parser_service.store.load()
        except Exception as e:
            self.task_logger.error(f"Entry Update aborted, settings unreadable: {e}")
            return UpdateReport(error=str(e), totals=RunCounters(errors=1))

        log_task_start(self.task_logger, "Entry Update", accounts=len(document.accounts))

        report = UpdateReport()
        for account in document.accounts:
            account_report = await self.update_account(account.id)
            report.accounts.append(account_report)
            report.totals.add(account_report.totals)

        failures = [f"{a.title or a.account_id}: {a.error}" for a in report.accounts if a.error]
        failures += [
            f"{a.title or a.account_id}/{f.parser_code or f.filter_id}: {f.error}"
            for a in report.accounts
            for f in a.filters
            if f.error
        ]
        log_task_end(
            self.task_logger,
            "Entry Update",
            counters=report.totals.counters(),
            failures=failures,
        )
        return report


@lru_cache(maxsize=1)
def get_entry_update_coordinator() -> EntryUpdateCoordinator:
    """Get the singleton coordinator over the configured stores."""
    return EntryUpdateCoordinator(get_parser_service(), EntryStore())
