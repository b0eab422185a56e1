# core/forms.py
"""
Record form engine.

A FormSpec is a declarative list of FieldSpecs. The same FormSpec drives:

- empty_draft / prefill_draft: the transient FormDraft shown in the dialog,
- validate_draft: client-side rules checked before any network call,
- build_payload: the request body sent on create/update.

Fields map onto the backend record through dotted paths, so a flat draft can
edit a nested record (contactInfo.address.street) and be nested back on submit.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from PIL import Image

from core.dates import is_valid_date, to_input_date
from core.errors import FormValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_CHARS_RE = re.compile(r"^[0-9+\-() ]+$")


class FieldKind(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    SELECT = "select"
    REFERENCE = "reference"
    NUMBER = "number"
    FILE = "file"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = True
    min_length: Optional[int] = None
    message: Optional[str] = None            # format / length failure
    required_message: Optional[str] = None
    options: Tuple[str, ...] = ()
    source: Optional[str] = None             # dotted path in the record
    submit_as: Tuple[str, ...] = ()          # dotted paths in the payload
    placeholder: str = ""
    reference: Optional[str] = None          # resource name for REFERENCE fields
    min_value: Optional[float] = None
    accept: Tuple[str, ...] = ()             # file extensions
    max_bytes: Optional[int] = None

    @property
    def source_path(self) -> str:
        return self.source or self.name

    @property
    def payload_paths(self) -> Tuple[str, ...]:
        return self.submit_as or (self.source_path,)


@dataclass(frozen=True)
class FormSpec:
    fields: Tuple[FieldSpec, ...]
    multipart: bool = False

    def field(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


# ---------------------------------------------------------------------------
# Dotted path helpers
# ---------------------------------------------------------------------------

def get_path(record: Mapping[str, Any] | None, path: str, default: Any = None) -> Any:
    cur: Any = record
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


def set_path(target: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = target
    for part in parts[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[parts[-1]] = value


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------

def reference_id(value: Any) -> str:
    """Identifier of a reference, whether the backend populated it or not."""
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return str(value.get("_id") or value.get("id") or "")
    ident = getattr(value, "id", None)
    if ident is not None:
        return str(ident)
    return str(value)


def reference_options(records: Iterable[Any], label_field: str = "name") -> List[Tuple[str, str]]:
    """(id, label) pairs for a reference select."""
    out = []
    for r in records or []:
        rid = reference_id(r)
        if not rid:
            continue
        label = r.get(label_field) if isinstance(r, Mapping) else getattr(r, label_field, None)
        out.append((rid, str(label or rid)))
    return out


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------

def _blank(f: FieldSpec) -> Any:
    if f.kind in (FieldKind.FILE, FieldKind.NUMBER):
        return None
    return ""


def empty_draft(form: FormSpec) -> Dict[str, Any]:
    return {f.name: _blank(f) for f in form.fields}


def prefill_draft(form: FormSpec, record: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Project a record into a draft for the Edit dialog.

    Dates become YYYY-MM-DD, references become their identifier and file
    fields start empty (an empty file field keeps the stored file on update).
    """
    draft: Dict[str, Any] = {}
    for f in form.fields:
        value = get_path(record, f.source_path)
        if f.kind is FieldKind.FILE:
            draft[f.name] = None
        elif f.kind is FieldKind.DATE:
            draft[f.name] = to_input_date(value)
        elif f.kind is FieldKind.REFERENCE:
            draft[f.name] = reference_id(value)
        elif f.kind is FieldKind.NUMBER:
            draft[f.name] = value
        else:
            draft[f.name] = "" if value is None else str(value)
    return draft


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def is_valid_email(s: str) -> bool:
    return bool(EMAIL_RE.match(s or ""))


def is_image(handle: Any) -> bool:
    try:
        handle.seek(0)
        with Image.open(handle) as img:
            img.verify()
        return True
    except (OSError, SyntaxError, ValueError):
        return False
    finally:
        handle.seek(0)


def _file_size(handle: Any) -> int:
    size = getattr(handle, "size", None)
    if size is not None:
        return int(size)
    pos = handle.tell()
    handle.seek(0, 2)
    end = handle.tell()
    handle.seek(pos)
    return end


def _check_file(f: FieldSpec, value: Any) -> Optional[str]:
    if f.max_bytes and _file_size(value) > f.max_bytes:
        return f"{f.label} exceeds {f.max_bytes // (1024 * 1024)} MB"
    name = str(getattr(value, "name", "") or "")
    if f.accept and name and not name.lower().endswith(tuple("." + a for a in f.accept)):
        return f.message or f"{f.label} must be one of: {', '.join(f.accept)}"
    if not is_image(value):
        return f.message or f"{f.label} must be an image"
    return None


def _check_value(f: FieldSpec, value: Any, known_refs: Optional[Set[str]]) -> Tuple[Any, Optional[str]]:
    """(cleaned value, error message or None) for a non-empty value."""
    if f.kind is FieldKind.FILE:
        return value, _check_file(f, value)

    if f.kind is FieldKind.NUMBER:
        try:
            num = float(value)
        except (TypeError, ValueError):
            return value, f.message or f"{f.label} must be a number"
        if f.min_value is not None and num < f.min_value:
            return num, f.message or f"{f.label} must be at least {f.min_value:g}"
        return (int(num) if num.is_integer() else num), None

    text = str(value).strip()
    if f.min_length is not None:
        length = sum(c.isdigit() for c in text) if f.kind is FieldKind.PHONE else len(text)
        if length < f.min_length:
            unit = "digits" if f.kind is FieldKind.PHONE else "characters"
            return text, f.message or f"{f.label} must be at least {f.min_length} {unit}."
    if f.kind is FieldKind.PHONE and not PHONE_CHARS_RE.match(text):
        return text, f.message or f"{f.label} may only contain digits, spaces, +, - and parentheses."
    if f.kind is FieldKind.EMAIL and not is_valid_email(text):
        return text, f.message or "Please enter a valid email address."
    if f.kind is FieldKind.DATE:
        if not is_valid_date(text):
            return text, f.message or "Please enter a valid date."
        return to_input_date(text), None
    if f.kind is FieldKind.SELECT and f.options and text not in f.options:
        return text, f.required_message or f"Please select a valid {f.label.lower()}."
    if f.kind is FieldKind.REFERENCE and known_refs and text not in known_refs:
        return text, f.required_message or f"{f.label} is required"
    return text, None


def _is_empty(f: FieldSpec, value: Any) -> bool:
    if value is None:
        return True
    if f.kind is FieldKind.FILE:
        return False
    return str(value).strip() == ""


def validate_draft(
    form: FormSpec,
    draft: Mapping[str, Any],
    known_refs: Optional[Mapping[str, Set[str]]] = None,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Returns (clean draft, field errors). The draft is valid when errors is empty.

    known_refs maps a reference resource name to the identifiers currently
    offered; it is only enforced once that list has loaded.
    """
    clean: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    for f in form.fields:
        value = draft.get(f.name)
        if _is_empty(f, value):
            if f.required:
                errors[f.name] = f.required_message or f"{f.label} is required"
            clean[f.name] = None
            continue
        refs = (known_refs or {}).get(f.reference or "") if f.kind is FieldKind.REFERENCE else None
        cleaned, err = _check_value(f, value, refs)
        clean[f.name] = cleaned
        if err:
            errors[f.name] = err
    return clean, errors


def require_valid(form: FormSpec, draft: Mapping[str, Any], **kwargs) -> Dict[str, Any]:
    clean, errors = validate_draft(form, draft, **kwargs)
    if errors:
        raise FormValidationError(errors)
    return clean


def build_payload(form: FormSpec, clean: Mapping[str, Any]) -> Dict[str, Any]:
    """Nest a validated draft into the request body. Empty file fields are left out."""
    payload: Dict[str, Any] = {}
    for f in form.fields:
        value = clean.get(f.name)
        if f.kind is FieldKind.FILE and value is None:
            continue
        for path in f.payload_paths:
            set_path(payload, path, value)
    return payload

