"""
Undo/redo history for the current table.

The history is a plain value, :class:`HistoryState`, moved forward by a pure
transition function, :func:`reduce`, over five actions:

    SetData(table)   start over with `table` as the only snapshot
    UpdateData(rows) push a new snapshot with `rows`, dropping any redo tail
    Clear()          back to the unloaded state
    Undo() / Redo()  move the pointer; no-ops at either end

At most `max_states` snapshots are kept; pushing past the cap evicts the
oldest one, which then can no longer be undone to.

:class:`History` holds one state and is the object a session is given.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional, Tuple, Union

from .config import MAX_UNDO_STATES
from .records import FileStats, Row, Table


@dataclass(frozen=True)
class SetData:
    table: Table


@dataclass(frozen=True)
class UpdateData:
    rows: Tuple[Row, ...]


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


Action = Union[SetData, UpdateData, Clear, Undo, Redo]


@dataclass(frozen=True)
class HistoryState:
    current: Table
    history: Tuple[Table, ...]
    index: int

    @classmethod
    def initial(cls) -> "HistoryState":
        return cls(current=Table.empty(), history=(), index=-1)

    @property
    def can_undo(self) -> bool:
        return self.index > 0

    @property
    def can_redo(self) -> bool:
        return self.index < len(self.history) - 1


def reduce(
    state: HistoryState,
    action: Action,
    *,
    max_states: int = MAX_UNDO_STATES,
) -> HistoryState:
    """Return the state that follows `state` after `action`."""
    if isinstance(action, SetData):
        return HistoryState(current=action.table, history=(action.table,), index=0)

    if isinstance(action, UpdateData):
        table = state.current.with_rows(action.rows)
        history = state.history[: state.index + 1] + (table,)
        if len(history) > max_states:
            history = history[len(history) - max_states:]
            return HistoryState(current=table, history=history, index=len(history) - 1)
        return HistoryState(current=table, history=history, index=state.index + 1)

    if isinstance(action, Clear):
        return HistoryState.initial()

    if isinstance(action, Undo):
        if state.can_undo:
            index = state.index - 1
            return replace(state, current=state.history[index], index=index)
        return state

    if isinstance(action, Redo):
        if state.can_redo:
            index = state.index + 1
            return replace(state, current=state.history[index], index=index)
        return state

    raise TypeError(f"unknown history action: {action!r}")


class History:
    """
    Owner of the snapshot sequence.

    Construct one per session and pass it to whatever issues operations.
    """

    def __init__(self, *, max_states: int = MAX_UNDO_STATES) -> None:
        if max_states < 1:
            raise ValueError("max_states must be at least 1")
        self.max_states = max_states
        self._state = HistoryState.initial()

    @property
    def state(self) -> HistoryState:
        return self._state

    def dispatch(self, action: Action) -> HistoryState:
        self._state = reduce(self._state, action, max_states=self.max_states)
        return self._state

    # -------------------------
    # Transitions
    # -------------------------

    def load(self, table: Table) -> None:
        self.dispatch(SetData(Table.build(table.rows, table.columns, table.filename, table.file_size)))

    def mutate(self, rows: Iterable[Mapping[str, str]]) -> None:
        self.dispatch(UpdateData(tuple(dict(row) for row in rows)))

    def undo(self) -> bool:
        """Step back one snapshot. Returns False if there was nothing to undo."""
        before = self._state
        return self.dispatch(Undo()) is not before

    def redo(self) -> bool:
        before = self._state
        return self.dispatch(Redo()) is not before

    def clear(self) -> None:
        self.dispatch(Clear())

    # -------------------------
    # Views
    # -------------------------

    @property
    def current(self) -> Table:
        return self._state.current

    @property
    def can_undo(self) -> bool:
        return self._state.can_undo

    @property
    def can_redo(self) -> bool:
        return self._state.can_redo

    @property
    def index(self) -> int:
        return self._state.index

    def __len__(self) -> int:
        return len(self._state.history)

    @property
    def is_loaded(self) -> bool:
        return self.current.row_count > 0

    @property
    def file_stats(self) -> Optional[FileStats]:
        if not self.is_loaded:
            return None
        current = self.current
        return FileStats(
            filename=current.filename,
            row_count=current.row_count,
            column_count=current.column_count,
            columns=current.columns,
            file_size=current.file_size,
        )
