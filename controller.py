"""
Day counter state and the operations that change it.

The controller owns the start date, keeps the derived day count in step with
it, and writes the date through to the key-value store. Store failures are
logged and never propagate: the screen must stay usable, so in-memory state
is updated even when the write or delete fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from settings import AppConfig
from storage import KeyValueStore, StorageError
from utils import (
    calculate_days,
    format_date_label,
    parse_stored_date,
    serialize_date,
    to_local_datetime,
)

PICKER_SET = "set"


@dataclass
class CounterState:
    start_date: Optional[datetime] = None
    days_count: int = 0


class DayCounterController:
    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = "startDate",
        dismiss_policy: str = "auto",
        now: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.storage_key = storage_key
        self.dismiss_policy = dismiss_policy
        self.now = now
        self.state = CounterState()
        self.picker_visible = False
        self.initialized = False

    @classmethod
    def from_config(cls, config: AppConfig, store: KeyValueStore, **kwargs) -> "DayCounterController":
        return cls(
            store,
            storage_key=config.storage.key,
            dismiss_policy=config.picker.dismiss_policy,
            **kwargs,
        )

    @property
    def start_date(self) -> Optional[datetime]:
        return self.state.start_date

    @property
    def days_count(self) -> int:
        return self.state.days_count

    async def initialize(self) -> None:
        """Load the stored start date, treating any failure as no date set."""
        self.initialized = True
        try:
            stored = await self.store.get_item(self.storage_key)
        except StorageError as e:
            logging.error(f"Failed to load start date: {e}")
            return

        if not stored:
            logging.debug("No start date stored")
            return

        try:
            start = parse_stored_date(stored)
        except ValueError as e:
            logging.warning(f"Ignoring unreadable start date {stored!r}: {e}")
            return

        self.state.start_date = start
        self.state.days_count = self.recompute(start)
        logging.info(f"Loaded start date {start.date()} ({self.state.days_count} days)")

    async def select_date(self, value) -> None:
        start = to_local_datetime(value)
        try:
            await self.store.set_item(self.storage_key, serialize_date(start))
        except StorageError as e:
            logging.error(f"Failed to save start date: {e}")

        self.state.start_date = start
        self.state.days_count = self.recompute(start)
        logging.info(f"Start date set to {start.date()} ({self.state.days_count} days)")

    def recompute(self, value) -> int:
        return calculate_days(value, self.now())

    def refresh(self) -> int:
        if self.state.start_date is not None:
            self.state.days_count = self.recompute(self.state.start_date)
        return self.state.days_count

    async def reset(self) -> None:
        try:
            await self.store.remove_item(self.storage_key)
        except StorageError as e:
            logging.error(f"Failed to reset start date: {e}")

        self.state.start_date = None
        self.state.days_count = 0
        logging.info("Start date reset")

    # -- picker ---------------------------------------------------------

    def open_picker(self) -> None:
        self.picker_visible = True

    def close_picker(self) -> None:
        self.picker_visible = False

    def picker_value(self) -> date:
        return (self.state.start_date or self.now()).date()

    async def on_picker_change(self, event: str, selected_date=None) -> None:
        """
        Apply a picker callback. The event name is not inspected: a missing
        selected_date (picker dismissed) falls back to the current start date.
        """
        current = selected_date or self.state.start_date
        self.picker_visible = self.dismiss_policy == "manual"
        if current is not None:
            await self.select_date(current)

    def label_text(self) -> str:
        return format_date_label(self.state.start_date)
