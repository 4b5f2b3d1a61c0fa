# modules/vehicles/mutations.py
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from rest_client import BackendError

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


class MutationState(enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class MutationStatus(enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    INVALID = "invalid"
    NOT_PERFORMED = "not_performed"


@dataclass
class MutationResult:
    status: MutationStatus
    record: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status is MutationStatus.SUCCESS


class MutationDispatcher:
    """
    create / update / delete for one entity type.

    Validation and delete confirmation happen before any backend call.
    A successful write drops the cached lists of the entity types it affects;
    a failed one changes nothing locally.
    """

    def __init__(self, client, cache, resource, confirm: Optional[ConfirmFn] = None):
        self.client = client
        self.cache = cache
        self.resource = resource
        self.confirm = confirm
        self.state = MutationState.IDLE
        self.last_result: Optional[MutationResult] = None

    def validate(self, data: Mapping[str, Any]) -> Dict[str, str]:
        errors = {}
        for name, label in self.resource.required_fields.items():
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[name] = f"{label} is required"
        for name in self.resource.int_fields:
            if name in errors:
                continue
            try:
                int(data.get(name))
            except (TypeError, ValueError):
                errors[name] = f"{self.resource.required_fields.get(name, name)} must be a number"
        return errors

    def _payload(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = {}
        for name in self.resource.editable_fields:
            value = data.get(name)
            if name in self.resource.int_fields:
                value = int(value)
            elif isinstance(value, str) or value is None:
                value = (value or "").strip()
            payload[name] = value
        return payload

    def _run(
        self,
        action: str,
        call: Callable[[], Optional[Dict[str, Any]]],
        error_message: str,
        require_record: bool = False,
    ) -> MutationResult:
        self.state = MutationState.SUBMITTING
        try:
            record = call()
        except BackendError as e:
            logger.warning("%s %s failed: %s", action, self.resource.table, e)
            result = MutationResult(MutationStatus.FAILED, message=error_message)
        else:
            self.cache.invalidate(*self.resource.invalidates)
            if record is None and require_record:
                # the row is gone: nothing matched the id
                logger.warning("%s %s matched no row", action, self.resource.table)
                result = MutationResult(MutationStatus.FAILED, message=self.resource.not_found_message)
            else:
                result = MutationResult(MutationStatus.SUCCESS, record=record)
        finally:
            self.state = MutationState.IDLE
        self.last_result = result
        return result

    def _invalid(self, errors: Dict[str, str]) -> MutationResult:
        self.last_result = MutationResult(
            MutationStatus.INVALID,
            message=next(iter(errors.values())),
            errors=errors,
        )
        return self.last_result

    def create(self, data: Mapping[str, Any]) -> MutationResult:
        errors = self.validate(data)
        if errors:
            return self._invalid(errors)
        payload = self._payload(data)
        return self._run(
            "create",
            lambda: self.client.insert(self.resource.table, payload),
            self.resource.save_error_message,
        )

    def update(self, record_id: int, data: Mapping[str, Any]) -> MutationResult:
        errors = self.validate(data)
        if errors:
            return self._invalid(errors)
        payload = self._payload(data)
        return self._run(
            "update",
            lambda: self.client.update(self.resource.table, record_id, payload),
            self.resource.save_error_message,
            require_record=True,
        )

    def delete(self, record_id: int, confirm: Optional[ConfirmFn] = None) -> MutationResult:
        confirm = confirm or self.confirm
        if confirm is None or not confirm(self.resource.confirm_delete_message):
            self.last_result = MutationResult(MutationStatus.NOT_PERFORMED)
            return self.last_result
        return self._run(
            "delete",
            lambda: self.client.delete(self.resource.table, record_id) or {"id": record_id},
            self.resource.delete_error_message,
        )
