"""
Form / Edit Controller Module

Create and edit dialogs share one pattern: seed a draft, let the user change
fields, validate locally, then send either the whole draft (create) or only the
fields that differ from the fetched snapshot (edit). Status flags such as
block/unblock and KYC verify/pending are separate single-field calls.
"""

import inspect
import logging
from dataclasses import dataclass, field
from decimal import InvalidOperation
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from .envelope import extract_message
from .errors import ConsoleError
from .logging_config import log_action
from .notifications import Notifier, LogNotifier
from .validators import Validator

logger = logging.getLogger("admin_console.forms")


Record = Dict[str, Any]
Guard = Callable[[Record], Union[Optional[str], Awaitable[Optional[str]]]]
Callback = Callable[[], Awaitable[Any]]


def to_text(value: Any) -> str:
    return "" if value is None else str(value)


def to_number(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("Boolean is not a number")
    return float(str(value).strip())


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class FieldSpec:
    """One editable field of a form"""
    name: str
    default: Any = ""
    validators: List[Validator] = field(default_factory=list)
    coerce: Optional[Callable[[Any], Any]] = to_text
    submit: bool = True  # False for status flags sent through their own endpoint

    def seed(self, record: Record) -> Any:
        value = record.get(self.name)
        if value is None:
            return self.default
        return self.normalize(value)

    def normalize(self, value: Any) -> Any:
        """Coerce user input; values that cannot be coerced are kept for validation to flag"""
        if self.coerce is None:
            return value
        try:
            return self.coerce(value)
        except (TypeError, ValueError, InvalidOperation):
            return value


@dataclass
class ToggleSpec:
    """A single-field status endpoint, e.g. PUT /retailer/update/block"""
    name: str
    field: str
    payload_key: str
    success_message: str
    failure_message: str


@dataclass
class FormSchema:
    """Editable fields and status toggles of one entity"""
    label: str
    id_field: str
    fields: List[FieldSpec]
    toggles: List[ToggleSpec] = field(default_factory=list)

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"Unknown field: {name}")

    def get_toggle(self, name: str) -> ToggleSpec:
        for spec in self.toggles:
            if spec.name == name:
                return spec
        raise KeyError(f"Unknown toggle: {name}")

    def defaults(self) -> Record:
        return {spec.name: spec.default for spec in self.fields}

    def seed(self, record: Record) -> Record:
        return {spec.name: spec.seed(record) for spec in self.fields}


class SubmitOutcome(Enum):
    """What happened to a submit"""
    INVALID = "invalid"          # local validation failed, nothing sent
    NO_CHANGES = "no_changes"    # diff was empty, nothing sent
    REJECTED = "rejected"        # a pre-submit guard refused, nothing sent
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"            # transport or server error


@dataclass
class SubmitResult:
    """Result of a create or edit submit"""
    outcome: SubmitOutcome
    payload: Optional[Record] = None
    errors: Dict[str, str] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (SubmitOutcome.CREATED, SubmitOutcome.UPDATED)

    @property
    def sent(self) -> bool:
        """Whether a request reached the network layer"""
        return self.outcome in (SubmitOutcome.CREATED, SubmitOutcome.UPDATED, SubmitOutcome.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "payload": self.payload,
            "errors": self.errors,
            "message": self.message
        }


def validate_draft(schema: FormSchema, draft: Record,
                   snapshot: Optional[Record] = None) -> Dict[str, str]:
    """
    Run every field's validators and return the first error per field.

    When a snapshot is given, format validators are skipped for fields whose
    value is unchanged from it.
    """
    errors: Dict[str, str] = {}
    for spec in schema.fields:
        value = draft.get(spec.name)
        unchanged = snapshot is not None and value == snapshot.get(spec.name)
        for validator in spec.validators:
            if validator.is_format and unchanged:
                continue
            message = validator(value)
            if message:
                errors[spec.name] = message
                break
    return errors


def compute_diff(schema: FormSchema, record_id: Any, draft: Record, snapshot: Record) -> Record:
    """Identifier plus every submittable field whose draft value differs from the snapshot"""
    payload: Record = {schema.id_field: record_id}
    for spec in schema.fields:
        if not spec.submit:
            continue
        if draft.get(spec.name) != snapshot.get(spec.name):
            payload[spec.name] = draft.get(spec.name)
    return payload


class _FormBase:
    def __init__(self, schema: FormSchema, notifier: Optional[Notifier], on_success: Optional[Callback],
                 actor: Optional[str]):
        self.schema = schema
        self.notifier = notifier or LogNotifier()
        self.on_success = on_success
        self.actor = actor
        self.draft: Record = {}
        self.errors: Dict[str, str] = {}
        self.submitting = False

    def change(self, name: str, value: Any) -> None:
        """Update one field of the draft and clear its recorded error"""
        spec = self.schema.get_field(name)
        self.draft[name] = spec.normalize(value)
        self.errors.pop(name, None)

    def update(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            self.change(name, value)

    async def _notify_success(self) -> None:
        if self.on_success is not None:
            await self.on_success()


class EditController(_FormBase):
    """
    Edit dialog controller.

    Args:
        schema: Editable fields and toggles of the entity
        fetch: Loads the authoritative record by id
        update: Sends the diff payload
        toggle: Sends a single status flag: (toggle spec, record id, value)
        notifier: Sink for user-facing notices
        on_success: Awaited after a successful update or toggle (list refresh)
        actor: Admin id, for the action log
    """

    def __init__(
        self,
        schema: FormSchema,
        fetch: Callable[[Any], Awaitable[Optional[Record]]],
        update: Callable[[Record], Awaitable[Any]],
        toggle: Optional[Callable[[ToggleSpec, Any, Any], Awaitable[Any]]] = None,
        notifier: Optional[Notifier] = None,
        on_success: Optional[Callback] = None,
        actor: Optional[str] = None,
    ):
        super().__init__(schema, notifier, on_success, actor)
        self._fetch = fetch
        self._update = update
        self._toggle = toggle
        self.record: Optional[Record] = None
        self.record_id: Any = None
        self.snapshot: Record = {}
        self.loading = False
        self._sequence = 0

    @property
    def is_open(self) -> bool:
        return self.record is not None

    async def open(self, record_id: Any) -> bool:
        """Fetch the current record and seed the draft from it"""
        self._sequence += 1
        sequence = self._sequence
        self.loading = True
        try:
            record = await self._fetch(record_id)
        except ConsoleError as e:
            if sequence == self._sequence:
                self.loading = False
                self.notifier.error(e.message or "Failed to load profile")
            return False

        if sequence != self._sequence:
            logger.debug(f"Discarding stale {self.schema.label} profile #{sequence}")
            return False
        self.loading = False

        if not record:
            self.notifier.error("Invalid profile data")
            return False

        self.record = record
        self.record_id = record.get(self.schema.id_field, record_id)
        self.snapshot = self.schema.seed(record)
        self.draft = dict(self.snapshot)
        self.errors = {}
        return True

    def close(self) -> None:
        """Discard the draft; any in-flight open is ignored when it settles"""
        self._sequence += 1
        self.loading = False
        self.record = None
        self.record_id = None
        self.snapshot = {}
        self.draft = {}
        self.errors = {}

    def validate(self) -> Dict[str, str]:
        self.errors = validate_draft(self.schema, self.draft, self.snapshot)
        return dict(self.errors)

    def diff(self) -> Record:
        return compute_diff(self.schema, self.record_id, self.draft, self.snapshot)

    @property
    def is_dirty(self) -> bool:
        return len(self.diff()) > 1

    async def submit(self) -> SubmitResult:
        """Validate, diff and send a partial update"""
        if not self.is_open:
            raise RuntimeError(f"No {self.schema.label.lower()} is open for editing")

        errors = self.validate()
        if errors:
            self.notifier.error("Please fix form errors")
            return SubmitResult(SubmitOutcome.INVALID, errors=errors)

        payload = self.diff()
        if len(payload) == 1:
            self.notifier.info("No changes detected")
            return SubmitResult(SubmitOutcome.NO_CHANGES, payload=payload, message="No changes detected")

        sequence = self._sequence
        self.submitting = True
        try:
            response = await self._update(payload)
        except ConsoleError as e:
            self.notifier.error(e.message or "Update failed")
            return SubmitResult(SubmitOutcome.FAILED, payload=payload, message=e.message)
        finally:
            self.submitting = False

        message = extract_message(response, default=f"{self.schema.label} updated successfully")
        if sequence != self._sequence:
            # Dialog closed or reopened while the update was in flight
            logger.debug(f"{self.schema.label} {payload[self.schema.id_field]} updated after close")
            return SubmitResult(SubmitOutcome.UPDATED, payload=payload, message=message)

        for name, value in payload.items():
            if name != self.schema.id_field:
                self.snapshot[name] = value

        self.notifier.success(message)
        log_action(
            logger, "info", f"{self.schema.label} {self.record_id} updated",
            user_id=self.actor, action="update", resource=self.schema.label.lower(),
            details={"fields": sorted(k for k in payload if k != self.schema.id_field)}
        )
        await self._notify_success()
        return SubmitResult(SubmitOutcome.UPDATED, payload=payload, message=message)

    async def toggle(self, name: str, value: Any) -> bool:
        """Send one status flag immediately; draft and snapshot change only on success"""
        if not self.is_open:
            raise RuntimeError(f"No {self.schema.label.lower()} is open for editing")
        if self._toggle is None:
            raise RuntimeError(f"{self.schema.label} has no status toggles")

        spec = self.schema.get_toggle(name)
        try:
            await self._toggle(spec, self.record_id, value)
        except ConsoleError as e:
            self.notifier.error(e.message or spec.failure_message)
            return False

        self.draft[spec.field] = value
        self.snapshot[spec.field] = value
        self.notifier.success(spec.success_message)
        log_action(
            logger, "info", f"{self.schema.label} {self.record_id} {spec.name} set to {value}",
            user_id=self.actor, action=spec.name, resource=self.schema.label.lower()
        )
        await self._notify_success()
        return True


class CreateController(_FormBase):
    """
    Create form controller.

    Guards run after validation and before the network call; a guard returns
    an error message to refuse the submit.
    """

    def __init__(
        self,
        schema: FormSchema,
        create: Callable[[Record], Awaitable[Any]],
        build_payload: Optional[Callable[[Record], Record]] = None,
        guards: Sequence[Guard] = (),
        notifier: Optional[Notifier] = None,
        on_success: Optional[Callback] = None,
        actor: Optional[str] = None,
        success_message: Optional[str] = None,
    ):
        super().__init__(schema, notifier, on_success, actor)
        self._create = create
        self.success_message = success_message or f"{schema.label} created successfully"
        self._build_payload = build_payload
        self.guards = list(guards)
        self.reset()

    def reset(self) -> None:
        self.draft = self.schema.defaults()
        self.errors = {}

    def validate(self) -> Dict[str, str]:
        self.errors = validate_draft(self.schema, self.draft)
        return dict(self.errors)

    async def _run_guards(self) -> Optional[str]:
        for guard in self.guards:
            result = guard(self.draft)
            if inspect.isawaitable(result):
                result = await result
            if result:
                return result
        return None

    async def submit(self) -> SubmitResult:
        """Validate, run guards and send the whole draft"""
        errors = self.validate()
        if errors:
            self.notifier.error("Please fix form errors")
            return SubmitResult(SubmitOutcome.INVALID, errors=errors)

        refusal = await self._run_guards()
        if refusal:
            self.notifier.error(refusal)
            return SubmitResult(SubmitOutcome.REJECTED, message=refusal)

        payload = self._build_payload(self.draft) if self._build_payload else dict(self.draft)

        self.submitting = True
        try:
            response = await self._create(payload)
        except ConsoleError as e:
            self.notifier.error(e.message or f"Failed to create {self.schema.label.lower()}")
            return SubmitResult(SubmitOutcome.FAILED, payload=payload, message=e.message)
        finally:
            self.submitting = False

        message = extract_message(response, default=self.success_message)
        self.notifier.success(message)
        log_action(
            logger, "info", f"{self.schema.label} created",
            user_id=self.actor, action="create", resource=self.schema.label.lower()
        )
        self.reset()
        await self._notify_success()
        return SubmitResult(SubmitOutcome.CREATED, payload=payload, message=message)
