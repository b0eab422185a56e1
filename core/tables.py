# core/tables.py
"""
Resource table renderer.

build_table() turns a ListSnapshot into a TableView: headers, one row of
formatted cells per record and, when the role may edit, an action column.
The view is plain data; screens/widgets.py draws it with Streamlit and
to_frame() gives the pandas frame behind st.dataframe.

Reference fields are resolved for display here, against the populated object
the backend sent or the side-loaded reference list, and the join is not kept
beyond the view.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from core.dates import to_display_date
from core.forms import get_path, reference_id
from core.policy import can_edit
from core.records import as_record, index_by_id, record_id


class CellStyle(str, Enum):
    PLAIN = "plain"
    SUCCESS = "success"
    PENDING = "pending"
    IMAGE = "image"


class ColumnKind(str, Enum):
    TEXT = "text"
    DATE = "date"
    BADGE = "badge"
    IMAGE = "image"


ACTION_HEADER = "Action"

Accessor = Union[str, Callable[[Mapping[str, Any]], Any]]


@dataclass(frozen=True)
class ColumnSpec:
    label: str
    accessor: Accessor
    kind: ColumnKind = ColumnKind.TEXT
    reference: Optional[str] = None      # resource the accessor's first segment points at
    success_values: Tuple[str, ...] = ("Returned",)
    missing: str = "-"


@dataclass(frozen=True)
class ActionSpec:
    """
    A row action. Edit-style actions get the full record; actions with
    pass_id=True (Delete) get only the identifier.
    """
    name: str
    on_click: Callable[[Any], Any]
    pass_id: bool = False
    danger: bool = False


@dataclass(frozen=True)
class Cell:
    text: str
    style: CellStyle = CellStyle.PLAIN


@dataclass
class Row:
    record_id: str
    cells: List[Cell]
    record: Any


@dataclass
class EmptyRow:
    message: str
    colspan: int


@dataclass
class TableView:
    headers: List[str]
    rows: List[Row]
    actions: List[ActionSpec] = field(default_factory=list)
    empty_message: str = "No records found"

    @property
    def show_actions(self) -> bool:
        return bool(self.actions)

    @property
    def colspan(self) -> int:
        return len(self.headers)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def body(self) -> List[Union[Row, EmptyRow]]:
        """Data rows, or the single informational row spanning every column."""
        if self.rows:
            return list(self.rows)
        return [EmptyRow(self.empty_message, self.colspan)]

    def invoke(self, action_name: str, rid: str) -> Any:
        action = next((a for a in self.actions if a.name == action_name), None)
        if action is None:
            raise KeyError(f"No action {action_name!r} on this table")
        row = next((r for r in self.rows if r.record_id == rid), None)
        if row is None:
            raise KeyError(f"No row with id {rid!r}")
        return action.on_click(row.record_id if action.pass_id else row.record)

    def to_frame(self) -> pd.DataFrame:
        data_headers = [h for h in self.headers if h != ACTION_HEADER]
        if self.is_empty:
            empty = self.body()[0]
            return pd.DataFrame([[empty.message] + [""] * (len(data_headers) - 1)], columns=data_headers)
        frame = pd.DataFrame([[c.text for c in r.cells] for r in self.rows], columns=data_headers)
        frame.index = [r.record_id for r in self.rows]
        return frame

    def styles_frame(self) -> pd.DataFrame:
        data_headers = [h for h in self.headers if h != ACTION_HEADER]
        return pd.DataFrame(
            [[c.style.value for c in r.cells] for r in self.rows],
            columns=data_headers,
            index=[r.record_id for r in self.rows],
        )


def resolve_reference(value: Any, path: str, references: Mapping[str, Mapping[str, Any]]) -> Any:
    """
    Display value behind a reference.

    value is either the object the backend populated or a bare identifier;
    a bare identifier is looked up in the side-loaded reference index.
    """
    if isinstance(value, Mapping):
        found = get_path(value, path)
        if found is not None:
            return found
    ref = references.get(reference_id(value))
    return get_path(ref, path) if ref else None


def _raw_value(col: ColumnSpec, rec: Mapping[str, Any], references: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> Any:
    if callable(col.accessor):
        return col.accessor(rec)
    if col.reference:
        head, _, rest = col.accessor.partition(".")
        return resolve_reference(rec.get(head), rest or "name", references.get(col.reference, {}))
    return get_path(rec, col.accessor)


def format_cell(col: ColumnSpec, raw: Any) -> Cell:
    if col.kind is ColumnKind.DATE:
        return Cell(to_display_date(raw, missing=col.missing))
    if col.kind is ColumnKind.BADGE:
        text = "" if raw is None else str(raw)
        style = CellStyle.SUCCESS if text in col.success_values else CellStyle.PENDING
        return Cell(text or col.missing, style)
    if col.kind is ColumnKind.IMAGE:
        return Cell("" if raw is None else str(raw), CellStyle.IMAGE)
    if raw is None or raw == "":
        return Cell(col.missing)
    return Cell(str(raw))


def build_table(
    records: Iterable[Any],
    role: Optional[str],
    columns: Sequence[ColumnSpec],
    actions: Sequence[ActionSpec] = (),
    read_only_roles: Iterable[str] = ("librarian",),
    references: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]] = None,
    empty_message: str = "No records found",
) -> TableView:
    """
    references maps a resource name to {id: record} for reference columns.
    The action column is dropped entirely for read-only roles.
    """
    refs = references or {}
    visible_actions = list(actions) if actions and can_edit(role, read_only_roles) else []
    headers = [c.label for c in columns]
    if visible_actions:
        headers.append(ACTION_HEADER)

    rows: List[Row] = []
    for record in records or []:
        rec = as_record(record)
        cells = [format_cell(c, _raw_value(c, rec, refs)) for c in columns]
        rows.append(Row(record_id(record), cells, record))
    return TableView(headers, rows, visible_actions, empty_message)


def badge_css(style: str) -> str:
    """Cell CSS for a pandas Styler."""
    if style == CellStyle.SUCCESS.value:
        return "background-color: #dcfce7; color: #166534"
    if style == CellStyle.PENDING.value:
        return "background-color: #fef9c3; color: #854d0e"
    return ""


def styled_frame(view: TableView):
    frame = view.to_frame()
    if view.is_empty:
        return frame
    styles = view.styles_frame().map(badge_css)
    return frame.style.apply(lambda _: styles, axis=None)


def reference_index(reference_lists: Mapping[str, Iterable[Any]]) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """{resource: [records]} -> {resource: {id: record}} for build_table."""
    return {name: index_by_id(records or []) for name, records in reference_lists.items()}
