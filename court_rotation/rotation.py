"""
Rotation controller: the single owner of the roster, the zones and the court
slots.

Every state change runs under one asyncio.Lock. Reads go through
``get_snapshot()``, which hands out deep copies. Persistence is handed to a
repository (anything with ``async save_players(records)`` and
``async load_players()``) in background tasks; a failed save is logged and
counted but never undoes what already happened in memory.
"""

from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .allocator import allocate_all, allocate_one
from .config import Settings
from .logging_config import get_logger
from .mmr import K_FACTOR, update_ratings
from .models import ContractViolation, Court, Player, Zone
from .zones import ZoneManager

log = get_logger(__name__)
tick_log = get_logger("court_rotation.ticker")


@dataclass(frozen=True)
class Snapshot:
    courts: tuple[Optional[Court], ...]
    waiting: tuple[Player, ...]
    resting: tuple[Player, ...]
    roster: tuple[Player, ...]
    court_count: int


@dataclass(frozen=True)
class MatchOutcome:
    """What ``complete_match`` did.

    ``completed`` is False when the slot was already empty (the match had been
    concluded before); nothing else changed in that case.
    """
    court_index: int
    winning_team: int
    completed: bool
    winner_delta: int = 0
    loser_delta: int = 0
    next_court: Optional[Court] = None

    @property
    def refilled(self) -> bool:
        return self.next_court is not None


class RotationController:
    def __init__(
        self,
        repository: Any = None,
        court_count: int = 4,
        k_factor: int = K_FACTOR,
        tick_interval: float = 60.0,
    ) -> None:
        self._repository = repository
        self._court_count = max(1, int(court_count))
        self._k = k_factor
        self._tick_interval = tick_interval

        self._lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()
        self._roster: list[Player] = []
        self._zones = ZoneManager()
        self._courts: list[Optional[Court]] = []
        self._ticker: Optional[asyncio.Task] = None
        self._pending: set[asyncio.Task] = set()

        self.persist_failures = 0
        self.last_persist_error: Optional[BaseException] = None

    @classmethod
    def from_settings(cls, settings: Settings, repository: Any = None) -> "RotationController":
        return cls(
            repository=repository,
            court_count=settings.court_count,
            k_factor=settings.k_factor,
            tick_interval=settings.tick_interval,
        )

    # --- Roster ---

    def _install_roster(self, players: list[Player]) -> None:
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise ContractViolation("Roster contains duplicate player ids")
        self._roster = players
        self._zones.reset(players)
        self._courts = []
        self._resize_slots()

    async def ingest_roster(self, players: Iterable[Player]) -> None:
        """Replace the roster with fresh players.

        Only id, name and ranking are taken from the incoming records; rating
        and counters start at their initial values. Everyone starts in Waiting
        and all courts are empty. Use ``load_roster`` to restore a saved session.
        """
        players = [Player(id=p.id, name=p.name, ranking=p.ranking) for p in players]
        async with self._lock:
            self._install_roster(players)
            self._persist()
        log.info("Roster ingested: %s players", len(players))

    async def load_roster(self) -> int:
        """Restore the roster from the repository. Returns the number of players."""
        if self._repository is None:
            return 0
        records = await self._repository.load_players()
        players = [Player.from_record(r) for r in records]
        async with self._lock:
            self._install_roster(players)
        log.info("Roster restored: %s players", len(players))
        return len(players)

    def _find(self, player_id: int) -> Optional[Player]:
        for p in self._roster:
            if p.id == player_id:
                return p
        return None

    # --- Reads ---

    def get_snapshot(self) -> Snapshot:
        courts, waiting, resting, roster = copy.deepcopy(
            (self._courts, self._zones.waiting, self._zones.resting, self._roster)
        )
        return Snapshot(
            courts=tuple(courts),
            waiting=tuple(waiting),
            resting=tuple(resting),
            roster=tuple(roster),
            court_count=self._court_count,
        )

    @property
    def court_count(self) -> int:
        return self._court_count

    # --- Courts ---

    def _resize_slots(self) -> None:
        while len(self._courts) < self._court_count:
            self._courts.append(None)
        # A running match keeps its slot until it ends, even past the count
        while len(self._courts) > self._court_count and self._courts[-1] is None:
            self._courts.pop()

    async def set_court_count(self, n: int) -> int:
        async with self._lock:
            self._court_count = max(1, int(n))
            self._resize_slots()
        log.info("Court count set to %s", self._court_count)
        return self._court_count

    async def allocate_courts(self) -> list[int]:
        """Fill every empty slot that the waiting pool can fill.

        Returns the indices of the slots that received a new court.
        """
        async with self._lock:
            self._resize_slots()
            empty = [i for i, c in enumerate(self._courts[:self._court_count]) if c is None]
            if not empty:
                return []
            courts, remaining = allocate_all(self._zones.waiting, len(empty))
            filled = []
            for index, court in zip(empty, courts):
                self._courts[index] = court
                self._zones.activate(court.players)
                filled.append(index)
            if filled:
                self._persist()
        log.info("Allocated courts %s, %s players still waiting", filled, len(remaining))
        return filled

    async def complete_match(self, court_index: int, winning_team: int) -> MatchOutcome:
        """
        Record the result on a court, send its players back to Waiting and try
        to refill the slot straight away.

        Raises:
            ContractViolation: court_index is not a slot or winning_team is not 1 or 2.
        """
        if winning_team not in (1, 2):
            raise ContractViolation(f"Winning team must be 1 or 2, got {winning_team!r}")

        async with self._lock:
            if not 0 <= court_index < len(self._courts):
                raise ContractViolation(f"No court slot {court_index} (have {len(self._courts)})")
            court = self._courts[court_index]
            if court is None:
                log.info("Court %s has no running match; nothing to complete", court_index)
                return MatchOutcome(court_index, winning_team, completed=False)

            winners = court.team(winning_team).players
            losers = court.team(3 - winning_team).players
            win_delta, lose_delta = update_ratings(winners, losers, self._k)

            finished = set(court.player_ids)
            for p in court.players:
                p.games_played += 1
                self._zones.move_to(p.id, Zone.WAITING)
            self._courts[court_index] = None

            # The same four never get the court straight back with nobody else waiting
            waiting = self._zones.waiting
            next_court = None
            if court_index < self._court_count and any(p.id not in finished for p in waiting):
                next_court, _ = allocate_one(waiting)
            if next_court is not None:
                self._courts[court_index] = next_court
                self._zones.activate(next_court.players)
            self._resize_slots()
            self._persist()

        log.info(
            "Court %s finished: team %s won (%+d / %+d), %s",
            court_index, winning_team, win_delta, lose_delta,
            "refilled" if next_court is not None else "now empty",
        )
        return MatchOutcome(court_index, winning_team, True, win_delta, lose_delta, copy.deepcopy(next_court))

    # --- Zones ---

    async def move_to(self, player_id: int, target: Zone) -> bool:
        """
        Move a player between Waiting and Resting.

        Returns False for an unknown id. Players reach Active only through
        allocation and leave it only through ``complete_match``.
        """
        if target is Zone.ACTIVE:
            raise ContractViolation("Players enter Active only through court allocation")
        async with self._lock:
            if self._zones.zone_of(player_id) is Zone.ACTIVE:
                raise ContractViolation(f"Player {player_id} is on a court; complete the match first")
            return self._zones.move_to(player_id, target)

    async def tick(self) -> int:
        """Add one unit of waiting time to every Waiting player."""
        async with self._lock:
            n = self._zones.tick_waiting()
        tick_log.debug("Tick: %s waiting players aged", n)
        return n

    async def override_rating(self, player_id: int, new_rating: float) -> bool:
        async with self._lock:
            player = self._find(player_id)
            if player is None:
                log.warning("override_rating: unknown player id=%s", player_id)
                return False
            old = player.rating
            player.rating = new_rating
            self._persist()
        log.info("Rating override for %s (id=%s): %s -> %s", player.name, player_id, old, new_rating)
        return True

    # --- Ticker lifecycle ---

    @property
    def ticker_running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def start_ticker(self) -> None:
        """Start the periodic waiting-time ticker (must be called inside a running loop)."""
        if self.ticker_running:
            return
        self._ticker = asyncio.create_task(self._run_ticker(), name="waiting-time-ticker")
        tick_log.debug("Ticker started (interval=%ss)", self._tick_interval)

    async def _run_ticker(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            await self.tick()

    async def stop(self) -> None:
        """Cancel the ticker and wait for outstanding saves."""
        if self._ticker is not None:
            self._ticker.cancel()
            try:
                await self._ticker
            except asyncio.CancelledError:
                # stop() itself was cancelled
                if asyncio.current_task().cancelling():
                    raise
            finally:
                self._ticker = None
        await self.flush()
        log.info("Rotation stopped")

    # --- Persistence ---

    def _persist(self) -> None:
        if self._repository is None:
            return
        records = [p.to_record() for p in self._roster]
        task = asyncio.create_task(self._save(records))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, records: list[dict[str, Any]]) -> None:
        # Saves run in the order they were scheduled
        async with self._save_lock:
            try:
                await self._repository.save_players(records)
            except Exception as e:
                self.persist_failures += 1
                self.last_persist_error = e
                log.exception("Saving %s players failed; in-memory state kept", len(records))

    async def flush(self) -> None:
        """Wait until every scheduled save has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
