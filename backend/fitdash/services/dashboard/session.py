"""
Dashboard Session - one user's state, local mutations and remote sync.

State is held in two phases:
- pending: the local working state, where optimistic updates land
- confirmed: the last snapshot pushed by the record store subscription

Every delivered snapshot is reconciled into the pending state with
`reconcile` (last confirmed snapshot wins). Each user action applies to the
pending state first and then writes the whole aggregate to the store; a
failed write is logged and the optimistic state is kept.

Actions are serialized: an action computes its new state from the current
pending state, writes it and receives the resulting snapshot before the next
action starts, so a late snapshot can never roll back a newer write.
"""
import asyncio
from datetime import date
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from fitdash.core.logging import get_logger
from fitdash.models.forms import (
    BodyMetricsForm,
    HabitForm,
    NutritionForm,
    SetupForm,
    WorkoutForm,
)
from fitdash.models.state import (
    Goals,
    HabitRecord,
    NutritionRecord,
    Profile,
    RecordKind,
    TrendPoint,
    UserState,
    WorkoutRecord,
)
from fitdash.services.analytics import DashboardView, build_dashboard_view
from fitdash.services.external import ReportExport, ReportExportService
from fitdash.services.identity import Identity, IdentityProvider
from fitdash.services.insights import InsightService
from fitdash.services.store import DocumentStore, document_key

logger = get_logger(__name__)

Mutation = Callable[[UserState], Optional[UserState]]


class SessionStatus(str, Enum):
    LOADING = "loading"
    NEEDS_SETUP = "needs_setup"
    READY = "ready"
    # Stored document exists but cannot be read
    ERROR = "error"


class SessionNotReadyError(Exception):
    """An action was requested before the user's data was loaded."""


class SetupNotAllowedError(Exception):
    """Setup was requested for a user who already has stored data."""


def reconcile(pending: UserState, confirmed: Optional[UserState]) -> UserState:
    """
    Reconciliation policy between local and remote state.

    The last confirmed snapshot wins outright; without one, the pending
    state stands.
    """
    return confirmed if confirmed is not None else pending


class DashboardSession:
    """
    Usage:
        session = DashboardSession(store, identity, insights, exporter)
        await session.start()
        await session.log_workout(WorkoutForm(exercise_name="Squat", ...))
        view = session.view()
        session.close()
    """

    def __init__(
        self,
        store: DocumentStore,
        identity: IdentityProvider,
        insights: InsightService,
        exporter: ReportExportService,
        namespace: str = "artifacts",
        app_id: str = "default-app-id",
    ):
        self.store = store
        self.identity = identity
        self.insights = insights
        self.exporter = exporter
        self.namespace = namespace
        self.app_id = app_id

        self.pending: UserState = UserState.empty()
        self.confirmed: Optional[UserState] = None
        self.status = SessionStatus.LOADING
        self.error: Optional[str] = None
        self.key: Optional[str] = None

        self._write_lock = asyncio.Lock()
        self._unsubscribe_store: Optional[Callable[[], None]] = None
        self._unsubscribe_auth: Optional[Callable[[], None]] = None
        self._resubscribe: Optional[asyncio.Task] = None

    @property
    def state(self) -> UserState:
        return self.pending

    # ========================================
    # Lifecycle
    # ========================================

    async def start(self) -> None:
        """
        Establish identity and subscribe to the user's document.

        On failure the session stays in the loading state; nothing is retried.
        """
        try:
            identity = self.identity.current or await self.identity.sign_in_anonymous()
            self.key = self._key_for(identity)
            self._unsubscribe_auth = self.identity.on_auth_change(self._on_auth_change)
            self._unsubscribe_store = await self.store.subscribe(
                self.key, self._on_snapshot, self._on_error
            )
        except Exception as e:
            logger.error("Dashboard initialization failed", error=str(e), error_type=type(e).__name__)
            return

        logger.info("Dashboard session started", key=self.key, status=self.status.value)

    def close(self) -> None:
        self._drop_subscription()
        if self._resubscribe and not self._resubscribe.done():
            self._resubscribe.cancel()
        if self._unsubscribe_auth:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None

    def _key_for(self, identity: Identity) -> str:
        return document_key(self.namespace, self.app_id, identity.uid)

    def _drop_subscription(self) -> None:
        if self._unsubscribe_store:
            self._unsubscribe_store()
            self._unsubscribe_store = None

    def _reset(self, key: Optional[str]) -> None:
        self._drop_subscription()
        self.key = key
        self.pending = UserState.empty()
        self.confirmed = None
        self.error = None
        self.status = SessionStatus.LOADING

    def _on_auth_change(self, identity: Optional[Identity]) -> None:
        if identity is None:
            if self.key is not None:
                logger.info("Signed out, dropping document subscription", key=self.key)
                self._reset(None)
            return

        key = self._key_for(identity)
        if key == self.key:
            return

        logger.info("Identity changed, resubscribing", key=key)
        self._reset(key)
        self._resubscribe = asyncio.get_running_loop().create_task(self._subscribe(key))

    async def _subscribe(self, key: str) -> None:
        try:
            unsubscribe = await self.store.subscribe(key, self._on_snapshot, self._on_error)
        except Exception as e:
            logger.error("Document subscription failed", key=key, error=str(e))
            return

        if key != self.key:
            # Identity changed again while subscribing
            unsubscribe()
            return
        self._unsubscribe_store = unsubscribe

    def _on_snapshot(self, document: Optional[dict[str, Any]]) -> None:
        if document is None:
            # New user: nothing stored yet
            self.status = SessionStatus.NEEDS_SETUP
            return

        try:
            snapshot = UserState.from_document(document)
        except ValidationError as e:
            logger.error("Invalid state document", key=self.key, error=str(e))
            self.status = SessionStatus.ERROR
            self.error = "Stored data could not be read"
            return

        self.confirmed = snapshot
        self.pending = reconcile(self.pending, self.confirmed)
        self.status = SessionStatus.READY
        self.error = None

    def _on_error(self, error: Exception) -> None:
        logger.error("Document subscription error", key=self.key, error=str(error))

    # ========================================
    # Persistence
    # ========================================

    def _require_key(self) -> str:
        if self.key is None:
            raise SessionNotReadyError("User identity is not established yet")
        return self.key

    def _require_ready(self) -> None:
        self._require_key()
        if self.status != SessionStatus.READY:
            raise SessionNotReadyError(f"Dashboard is not ready ({self.status.value})")

    async def _commit(self, mutate: Mutation) -> Optional[UserState]:
        """
        Apply `mutate` to the pending state and persist the whole aggregate.

        `mutate` runs under the write lock against the latest pending state;
        returning None leaves everything unchanged.
        """
        key = self._require_key()
        async with self._write_lock:
            new_state = mutate(self.pending)
            if new_state is None:
                return None

            self.pending = new_state
            # The store delivers the written snapshot before set() returns
            saved = await self.store.set(key, new_state.to_document(), merge=True)
            if not saved:
                logger.warning("State not persisted, keeping local changes", key=key)

            return self.pending

    async def _append(self, kind: RecordKind, record: Any) -> None:
        self._require_ready()
        await self._commit(
            lambda state: state.model_copy(
                update={kind.value: [*getattr(state, kind.value), record]}
            )
        )

    # ========================================
    # Actions
    # ========================================

    async def complete_setup(self, form: SetupForm) -> UserState:
        """
        Create profile, goals and the first trend point for a new user.

        Raises:
            SessionNotReadyError: the stored document has not been read yet
            SetupNotAllowedError: the user already has stored data
        """
        self._require_key()

        def setup(state: UserState) -> UserState:
            if self.status == SessionStatus.LOADING:
                raise SessionNotReadyError("User data is still loading")
            if self.status != SessionStatus.NEEDS_SETUP:
                raise SetupNotAllowedError(f"Setup is only allowed for a new user ({self.status.value})")
            self.status = SessionStatus.READY
            return UserState(
                profile=Profile(display_name=form.name),
                goals=Goals(
                    target_weight_kg=form.goal_weight,
                    target_body_fat_percent=form.goal_body_fat,
                    goal_type=form.goal_type,
                ),
                trends=[
                    TrendPoint(
                        date=date.today(),
                        weight_kg=form.current_weight,
                        body_fat_percent=form.current_body_fat,
                    )
                ],
            )

        logger.info("Completing setup", goal_type=form.goal_type.value)
        return await self._commit(setup)

    async def log_workout(self, form: WorkoutForm) -> WorkoutRecord:
        record = WorkoutRecord(**form.model_dump())
        await self._append(RecordKind.WORKOUTS, record)
        logger.info("Workout logged", record_id=record.id)
        return record

    async def log_nutrition(self, form: NutritionForm) -> NutritionRecord:
        record = NutritionRecord(**form.model_dump())
        await self._append(RecordKind.NUTRITION, record)
        logger.info("Nutrition logged", record_id=record.id)
        return record

    async def log_habit(self, form: HabitForm) -> HabitRecord:
        record = HabitRecord(**form.model_dump())
        await self._append(RecordKind.HABITS, record)
        return record

    async def record_body_metrics(self, form: BodyMetricsForm) -> TrendPoint:
        point = TrendPoint(
            date=form.date or date.today(),
            weight_kg=form.weight_kg,
            body_fat_percent=form.body_fat_percent,
        )
        await self._append(RecordKind.TRENDS, point)
        return point

    async def delete_item(self, kind: RecordKind, item_id: str, confirmed: bool) -> bool:
        """
        Remove one record. Requires explicit confirmation.

        Returns:
            True if the record was removed
        """
        if not confirmed:
            logger.info("Delete not confirmed", kind=kind.value, item_id=item_id)
            return False

        self._require_ready()

        def remove(state: UserState) -> Optional[UserState]:
            items = getattr(state, kind.value)
            remaining = [item for item in items if item.id != item_id]
            if len(remaining) == len(items):
                return None
            return state.model_copy(update={kind.value: remaining})

        if await self._commit(remove) is None:
            logger.warning("Delete target not found", kind=kind.value, item_id=item_id)
            return False

        logger.info("Record deleted", kind=kind.value, item_id=item_id)
        return True

    async def generate_insights(self) -> list[str]:
        """
        Replace insights with freshly generated ones.

        No-op without at least one workout and one nutrition record.
        """
        self._require_ready()
        insights = await self.insights.generate(self.pending)
        if insights is None:
            return list(self.pending.insights)

        await self._commit(lambda state: state.model_copy(update={"insights": insights}))
        return list(self.pending.insights)

    def export_report(self, snapshots: Mapping[str, bytes]) -> ReportExport:
        return self.exporter.export_pdf(self.pending, snapshots)

    def view(self, today: Optional[date] = None) -> DashboardView:
        return build_dashboard_view(self.pending, today=today)
