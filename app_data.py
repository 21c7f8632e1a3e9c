import datetime
from typing import Callable, List

from config import DEFAULT_DB_PATH, DEFAULT_YAML_PATH
from goal_service import GoalService
from localization import Translator
from models import WorkoutRecord
from period_filter import TimePeriod
from record_store import ChangeEvent, ChangeKind, RecordStore
from stats_service import DayData, StatisticsService
from transfer_service import TransferService


class AppData:
    """Wires the record store and its services together for the UI layer."""

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        yaml_path: str | None = DEFAULT_YAML_PATH,
    ) -> None:
        self.store = RecordStore(db_path, yaml_path)
        self.translator = Translator(self.store.setting("language"))
        self.stats = StatisticsService(self.translator)
        self.goals = GoalService(self.store, self.stats, self.translator)
        self.transfer = TransferService(self.store)
        self.store.subscribe(self._on_change)

    def _on_change(self, event: ChangeEvent) -> None:
        if event.kind in (ChangeKind.SETTINGS_CHANGED, ChangeKind.STORE_RESET, ChangeKind.DATA_IMPORTED):
            self.translator.set_language(self.store.setting("language"))

    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        return self.store.subscribe(callback)

    # reads

    def get_today_workouts(self, now: datetime.datetime | None = None) -> List[WorkoutRecord]:
        return self.store.filtered(TimePeriod.DAY, now)

    def get_filtered_workouts(
        self, period: TimePeriod | str, now: datetime.datetime | None = None
    ) -> List[WorkoutRecord]:
        return self.store.filtered(period, now)

    def get_total_xp(
        self, period: TimePeriod | str, now: datetime.datetime | None = None
    ) -> int:
        return self.stats.total_xp(self.store.filtered(period, now))

    def recent_workouts(self, limit: int | None = None) -> List[WorkoutRecord]:
        return self.store.recent_workouts(limit)

    def period_summary(
        self, period: TimePeriod | str, now: datetime.datetime | None = None
    ) -> dict:
        return self.stats.summary(self.store.filtered(period, now))

    def weekly_activity(self, now: datetime.datetime | None = None) -> List[DayData]:
        return self.stats.daily_histogram(self.store.records(), now)

    @property
    def user_name(self) -> str:
        return self.store.setting("user_name")

    @property
    def weekly_workout_goal(self) -> int:
        return self.store.setting("weekly_workout_goal")

    @property
    def monthly_xp_goal(self) -> int:
        return self.store.setting("monthly_xp_goal")

    def settings(self) -> dict:
        return self.store.settings()

    # writes

    def add_record(self, record: WorkoutRecord) -> WorkoutRecord:
        return self.store.add_record(record)

    def remove_record(self, record_id: str) -> None:
        self.store.remove_record(record_id)

    def clear_all(self) -> None:
        self.store.clear_all()

    def reset_all(self) -> None:
        self.store.reset_all()

    def update_setting(self, key: str, value) -> None:
        self.store.update_setting(key, value)

    def reload_settings(self) -> dict:
        return self.store.reload_settings()

    def export_data(self, now: datetime.datetime | None = None) -> str:
        return self.transfer.export(now)

    def import_data(self, blob: str | bytes, merge: bool = False) -> int:
        return self.transfer.import_data(blob, merge=merge)
