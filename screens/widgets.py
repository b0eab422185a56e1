# screens/widgets.py
"""Streamlit drawing for TableView and FormSpec."""
from __future__ import annotations

import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import streamlit as st

from core.dates import parse_date
from core.forms import FieldKind, FieldSpec, FormSpec
from core.tables import CellStyle, ColumnKind, TableView, styled_frame

DATE_MIN = datetime.date(1900, 1, 1)
DATE_MAX = datetime.date(2100, 12, 31)


def _row_label(view: TableView, rid: str) -> str:
    row = next(r for r in view.rows if r.record_id == rid)
    texts = [c.text for c in row.cells if c.style is not CellStyle.IMAGE and c.text not in ("", "-")]
    return " · ".join(texts[:3]) or rid


def render_table(view: TableView, columns, key: str) -> Optional[Tuple[str, str]]:
    """
    Draw the table. Returns (action name, record id) when the user clicked a
    row action, else None. The action column only exists for editing roles.
    """
    if view.is_empty:
        st.dataframe(view.to_frame(), hide_index=True, use_container_width=True)
        return None

    column_config = {
        c.label: st.column_config.ImageColumn(c.label, width="small")
        for c in columns if c.kind is ColumnKind.IMAGE
    }
    st.dataframe(styled_frame(view), hide_index=True, use_container_width=True, column_config=column_config)

    if not view.show_actions:
        return None

    st.markdown("**Action**")
    ids = [r.record_id for r in view.rows]
    cols = st.columns([3] + [1] * len(view.actions))
    with cols[0]:
        rid = st.selectbox(
            "Pick a record",
            ids,
            format_func=lambda i: _row_label(view, i),
            key=f"{key}__pick",
            label_visibility="collapsed",
        )
    for col, action in zip(cols[1:], view.actions):
        with col:
            kind = "primary" if action.danger else "secondary"
            if st.button(action.name, key=f"{key}__{action.name}", type=kind, use_container_width=True):
                return action.name, rid
    return None


def _error(errors: Mapping[str, str], name: str):
    if name in errors:
        st.markdown(f":red[{errors[name]}]")


def _index(options: List[str], value: Any) -> Optional[int]:
    return options.index(value) if value in options else None


def render_field(
    f: FieldSpec,
    value: Any,
    key: str,
    reference_options: Optional[List[Tuple[str, str]]] = None,
    reference_loading: bool = False,
) -> Any:
    if f.kind in (FieldKind.TEXT, FieldKind.EMAIL, FieldKind.PHONE):
        return st.text_input(f.label, value=value or "", placeholder=f.placeholder, key=key)

    if f.kind is FieldKind.DATE:
        picked = st.date_input(
            f.label,
            value=parse_date(value),
            min_value=DATE_MIN,
            max_value=DATE_MAX,
            format="YYYY-MM-DD",
            key=key,
        )
        return picked.isoformat() if picked else ""

    if f.kind is FieldKind.SELECT:
        options = list(f.options)
        return st.selectbox(
            f.label, options, index=_index(options, value),
            placeholder=f"Select {f.label.lower()}", key=key,
        ) or ""

    if f.kind is FieldKind.REFERENCE:
        if reference_options is None:
            placeholder = f"Loading {f.reference or 'options'}…" if reference_loading else f"No {f.reference or 'options'} available"
            st.selectbox(f.label, [], placeholder=placeholder, disabled=True, key=f"{key}__pending")
            return value or ""
        labels = dict(reference_options)
        if value and value not in labels:
            labels[value] = value
        ids = list(labels)
        return st.selectbox(
            f.label, ids, index=_index(ids, value), format_func=lambda i: labels.get(i, i),
            placeholder=f"Select a {f.label.lower()}", key=key,
        ) or ""

    if f.kind is FieldKind.NUMBER:
        # streamlit refuses mixed int/float arguments
        return st.number_input(
            f.label,
            value=None if value in (None, "") else float(value),
            min_value=None if f.min_value is None else float(f.min_value),
            step=1.0,
            format="%.2f",
            placeholder=f.placeholder or None,
            key=key,
        )

    if f.kind is FieldKind.FILE:
        return st.file_uploader(f.label, type=list(f.accept) or None, key=key)

    raise ValueError(f"Unsupported field kind: {f.kind}")


def render_form_fields(
    form: FormSpec,
    draft: Mapping[str, Any],
    errors: Mapping[str, str],
    key: str,
    references: Mapping[str, Optional[List[Tuple[str, str]]]],
    reference_loading: Mapping[str, bool],
) -> Dict[str, Any]:
    """Two-column grid of inputs with inline errors. Returns the edited draft."""
    out: Dict[str, Any] = {}
    grid = st.columns(2) if len(form.fields) > 6 else [st.container()]
    for i, f in enumerate(form.fields):
        with grid[i % len(grid)]:
            out[f.name] = render_field(
                f,
                draft.get(f.name),
                key=f"{key}__{f.name}",
                reference_options=references.get(f.reference or ""),
                reference_loading=reference_loading.get(f.reference or "", False),
            )
            _error(errors, f.name)
    return out
