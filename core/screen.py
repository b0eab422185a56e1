# core/screen.py
"""
Screen controller: the state behind one CRUD resource page.

    list:    IDLE -> LOADING -> LOADED        (fetch failures still end LOADED)
    dialog:  closed <-> open(ADD | EDIT)

mount() fetches the list and any reference lists once, concurrently.
Every successful mutation is followed by an explicit refresh(); the snapshot
is always replaced wholesale with what the server returns, never patched.
Responses that arrive after unmount(), or that belong to a superseded
fetch, are dropped.
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from core.errors import ApiError, FormValidationError, GENERIC_ERROR_MESSAGE, RecordSchemaError, user_message
from core.forms import build_payload, empty_draft, prefill_draft, require_valid
from core.http_client import ApiClient
from core.notify import Notifier
from core.policy import can_edit
from core.records import as_record, parse_record, parse_records, record_id
from core.resource_registry import ResourceDefinition, get_resource

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"


class DialogMode(str, Enum):
    ADD = "add"
    EDIT = "edit"


@dataclass
class SubmitOutcome:
    ok: bool
    message: str = ""
    errors: Dict[str, str] = field(default_factory=dict)


class ScreenController:
    def __init__(
        self,
        resource: ResourceDefinition,
        client: ApiClient,
        notifier: Notifier,
        role: str,
        read_only_roles: tuple = ("librarian",),
        close_delay: float = 1.5,
        pause: Callable[[float], None] = time.sleep,
        lookup: Callable[[str], ResourceDefinition] = get_resource,
    ):
        self.resource = resource
        self.client = client
        self.notifier = notifier
        self.role = role
        self.read_only_roles = tuple(resource.read_only_roles or read_only_roles)
        self.close_delay = close_delay
        self._pause = pause
        self._lookup = lookup

        # list state
        self.load_state = LoadState.IDLE
        self.snapshot: List[Any] = []
        self.rejected: List[RecordSchemaError] = []
        self.is_error = False
        self.is_success = False
        self.message = ""

        # reference lists: None until loaded
        self.references: Dict[str, Optional[List[Any]]] = {name: None for name in resource.references}
        self.reference_loading: Dict[str, bool] = {name: False for name in resource.references}

        # dialog state
        self.dialog_mode: Optional[DialogMode] = None
        self.draft: Optional[Dict[str, Any]] = None
        self.editing_id: Optional[str] = None
        self.dialog_seq = 0
        self.field_errors: Dict[str, str] = {}

        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix=f"screen-{resource.name}")
        self._pending: Set[Future] = set()
        self._pending_lock = threading.Lock()
        self._list_seq = 0
        self._mounted = False
        self._disposed = False

    # ------------------------------------------------------------------
    # derived state
    # ------------------------------------------------------------------

    @property
    def can_edit(self) -> bool:
        return can_edit(self.role, self.read_only_roles)

    @property
    def is_loading(self) -> bool:
        return self.load_state is LoadState.LOADING

    @property
    def dialog_open(self) -> bool:
        return self.dialog_mode is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def known_refs(self) -> Dict[str, Set[str]]:
        return {
            name: {record_id(r) for r in records}
            for name, records in self.references.items()
            if records
        }

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """One-shot fetch of the list and the reference lists."""
        if self._mounted or self._disposed:
            return
        self._mounted = True
        self.refresh()
        for name in self.resource.references:
            self.reference_loading[name] = True
            self._submit(self._fetch_reference, name)

    def unmount(self) -> None:
        with self._lock:
            self._disposed = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until in-flight fetches settle. Returns False on timeout."""
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def refresh(self) -> Optional[Future]:
        if self._disposed:
            return None
        with self._lock:
            self._list_seq += 1
            seq = self._list_seq
            self.load_state = LoadState.LOADING
        return self._submit(self._fetch_list, seq)

    def _forget(self, fut: Future) -> None:
        with self._pending_lock:
            self._pending.discard(fut)

    def _submit(self, fn: Callable, *args) -> Optional[Future]:
        try:
            fut = self._executor.submit(fn, *args)
        except RuntimeError:
            # executor already shut down by unmount()
            return None
        with self._pending_lock:
            self._pending.add(fut)
        fut.add_done_callback(self._forget)
        return fut

    # ------------------------------------------------------------------
    # fetches (run on the executor)
    # ------------------------------------------------------------------

    def _fetch_list(self, seq: int) -> None:
        name = self.resource.name
        try:
            env = self.client.get(self.resource.endpoints.list)
            if not env.success:
                raise ApiError(env.message or GENERIC_ERROR_MESSAGE)
            records, rejected = parse_records(self.resource.model, env.data, name)
        except (ApiError, RecordSchemaError) as e:
            message = user_message(e, f"Unexpected {name} data from server")
            with self._lock:
                if self._stale(seq):
                    return
                self.load_state = LoadState.LOADED
                self.is_error, self.is_success, self.message = True, False, message
            logger.warning("Fetching %s failed: %s", name, message)
            self.notifier.error(message)
            return

        with self._lock:
            if self._stale(seq):
                logger.debug("Dropped stale %s response (seq %d)", name, seq)
                return
            self.snapshot = records
            self.rejected = rejected
            self.load_state = LoadState.LOADED
            self.is_error, self.is_success, self.message = False, True, env.message or ""
        if rejected:
            self.notifier.error(f"{len(rejected)} {name} record(s) were incomplete and are not shown")

    def _stale(self, seq: int) -> bool:
        return self._disposed or seq != self._list_seq

    def _fetch_reference(self, name: str) -> None:
        ref = self._lookup(name)
        try:
            env = self.client.get(ref.endpoints.list)
            if not env.success:
                raise ApiError(env.message or f"Error fetching {name}")
            records, _ = parse_records(ref.model, env.data, name)
        except (ApiError, RecordSchemaError) as e:
            message = user_message(e, f"Error fetching {name}")
            with self._lock:
                if self._disposed:
                    return
                self.reference_loading[name] = False
            logger.warning("Fetching reference list %s failed: %s", name, message)
            self.notifier.error(message)
            return
        with self._lock:
            if self._disposed:
                return
            self.references[name] = records
            self.reference_loading[name] = False

    # ------------------------------------------------------------------
    # dialog
    # ------------------------------------------------------------------

    def open_add(self) -> bool:
        if not self.can_edit:
            logger.warning("Role %r may not add %s", self.role, self.resource.name)
            return False
        self.dialog_mode = DialogMode.ADD
        self.dialog_seq += 1
        self.editing_id = None
        self.draft = empty_draft(self.resource.form)
        self.field_errors = {}
        return True

    def open_edit(self, record: Any) -> bool:
        """Open the dialog pre-filled from the full record."""
        if not self.can_edit:
            logger.warning("Role %r may not edit %s", self.role, self.resource.name)
            return False
        rid = record_id(record)
        if self.resource.fetch_detail_on_edit:
            try:
                env = self.client.get(self.resource.endpoints.detail_path(rid))
                if not env.success:
                    raise ApiError(env.message or GENERIC_ERROR_MESSAGE)
                record = parse_record(self.resource.model, env.data, self.resource.name)
            except ApiError as e:
                self.notifier.error(e.message)
                return False
            except RecordSchemaError as e:
                logger.warning("Detail for %s/%s rejected: %s", self.resource.name, rid, e.detail)
                self.notifier.error(f"Unexpected {self.resource.singular.lower()} data from server")
                return False
        self.dialog_mode = DialogMode.EDIT
        self.dialog_seq += 1
        self.editing_id = rid
        self.draft = prefill_draft(self.resource.form, as_record(record))
        self.field_errors = {}
        return True

    def close_dialog(self) -> None:
        self.dialog_mode = None
        self.editing_id = None
        self.draft = None
        self.field_errors = {}

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    def submit(self, draft: Dict[str, Any]) -> SubmitOutcome:
        """
        Validate then create or update. On failure the dialog stays open with
        the user's input; on success the dialog closes after close_delay and
        the list is re-fetched.
        """
        if not self.dialog_open:
            raise RuntimeError("submit() called with no open dialog")
        form = self.resource.form
        self.draft = dict(draft)

        try:
            clean = require_valid(form, draft, known_refs=self.known_refs())
        except FormValidationError as e:
            self.field_errors = e.errors
            self.notifier.error(str(e))
            return SubmitOutcome(False, str(e), e.errors)
        self.field_errors = {}

        editing = self.dialog_mode is DialogMode.EDIT
        endpoints = self.resource.endpoints
        payload = build_payload(form, clean)
        try:
            if editing:
                env = self.client.put(endpoints.update_path(self.editing_id), payload, multipart=form.multipart)
            else:
                env = self.client.post(endpoints.create, payload, multipart=form.multipart)
        except ApiError as e:
            self.notifier.error(e.message)
            return SubmitOutcome(False, e.message)

        if not env.success:
            message = env.message or GENERIC_ERROR_MESSAGE
            self.notifier.error(message)
            return SubmitOutcome(False, message)

        verb = "updated" if editing else "added"
        message = env.message or f"{self.resource.singular} {verb} successfully"
        logger.info("%s %s (%s)", self.resource.singular, verb, self.editing_id or "new")
        self.notifier.success(message)
        self.draft = None
        if self.close_delay > 0:
            self._pause(self.close_delay)
        self.close_dialog()
        self.refresh()
        return SubmitOutcome(True, message)

    def delete(self, rid: str) -> bool:
        """Delete straight from the table. The snapshot is only changed by the refresh that follows."""
        if not self.can_edit:
            logger.warning("Role %r may not delete %s", self.role, self.resource.name)
            return False
        try:
            env = self.client.delete(self.resource.endpoints.delete_path(rid))
        except ApiError as e:
            self.notifier.error(e.message or "Error deleting record")
            return False
        if not env.success:
            self.notifier.error(env.message or "Error deleting record")
            return False
        self.notifier.success(env.message or f"{self.resource.singular} deleted")
        self.refresh()
        return True
