# src/fleetform/forms/controller.py
"""Form controller: one plugin configuration form and its lifecycle.

State machine:

    LOADING --initialize()--> READY --save()/test()--> SUBMITTING --settle--> READY
       |                        ^
       +--load() fails--> LOAD_ERROR --initialize()--+

Every field operation returns the whole updated configuration value and
reruns validation synchronously, so errors always match the current value.
Field operations stay available while SUBMITTING; a second save (or test)
while one is in flight is ignored.
"""

import copy
import threading
from collections.abc import Callable, Mapping
from typing import Any

from fleetform.contracts import (
    FieldIssue,
    FieldState,
    FormState,
    FormStateError,
    SchemaLoadError,
    SubmissionKind,
    SubmissionTicket,
    WidgetHint,
)
from fleetform.core.canonical import pretty_json
from fleetform.core.logging import get_logger
from fleetform.forms.events import FormHooks
from fleetform.forms.mutations import (
    AddArrayItem,
    FormSnapshot,
    Mutation,
    RemoveArrayItem,
    ReplaceValue,
    SetArrayItem,
    SetField,
    apply_mutation,
)
from fleetform.schema.codec import encode, widget_for
from fleetform.schema.defaults import generate_defaults, seed_declared_defaults
from fleetform.schema.model import Schema, parse_schema
from fleetform.schema.validator import collect_issues

logger = get_logger(__name__)

Listener = Callable[[dict[str, Any]], None]


class FormController:
    """Stateful orchestrator for one plugin's configuration form.

    Usage:
        controller = FormController("gitops", hooks=hooks)
        controller.load()                      # or initialize(schema, config)
        controller.set_field("repository", "git@example.com:fleet.git")
        if controller.is_valid():
            controller.save()

    Each instance is independent; nothing is shared between forms.
    """

    def __init__(self, plugin_name: str, hooks: FormHooks | None = None) -> None:
        self.plugin_name = plugin_name
        self._hooks = hooks or FormHooks()
        self._lock = threading.Lock()
        self._state = FormState.LOADING
        self._schema: Schema | None = None
        self._stored: dict[str, Any] | None = None
        self._snapshot = FormSnapshot()
        self._issues: list[FieldIssue] = []
        self._in_flight: set[SubmissionKind] = set()
        self._load_error: Exception | None = None
        self._listeners: list[Listener] = []

    # === Lifecycle ===

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def load_error(self) -> Exception | None:
        """The failure that put the form in LOAD_ERROR, if any."""
        return self._load_error

    @property
    def schema(self) -> Schema:
        self._require_schema()
        assert self._schema is not None
        return self._schema

    def initialize(
        self,
        schema: Schema | Mapping[str, Any],
        existing_config: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Open the form on a schema.

        The value starts as the stored configuration when one exists, with
        declared defaults filled in for keys it lacks, else the synthesized
        defaults. Edit state is cleared.

        Args:
            schema: Parsed Schema or raw schema document
            existing_config: Stored configuration, None if never configured

        Returns:
            The initial configuration value
        """
        self._schema = parse_schema(schema)
        self._stored = None
        if existing_config is not None:
            self._stored = seed_declared_defaults(self._schema, existing_config)
        initial = self._stored if self._stored is not None else generate_defaults(self._schema)
        self._load_error = None
        with self._lock:
            self._in_flight.clear()
            self._state = FormState.READY
        logger.debug(
            "Form initialized",
            plugin=self.plugin_name,
            fields=len(self._schema),
            from_stored=self._stored is not None,
        )
        return self._commit(FormSnapshot(value=copy.deepcopy(initial)))

    def load(self) -> dict[str, Any]:
        """Fetch schema and stored configuration through the load hooks.

        Raises:
            SchemaLoadError: If either lookup fails; the form enters LOAD_ERROR
        """
        self._state = FormState.LOADING
        try:
            document = self._hooks.load_schema(self.plugin_name)
            if document is None:
                raise LookupError("no schema returned")
            existing = self._hooks.load_configuration(self.plugin_name)
        except Exception as e:
            self.fail_loading(e)
            raise SchemaLoadError(self.plugin_name, str(e)) from e
        return self.initialize(document, existing)

    def fail_loading(self, error: Exception) -> None:
        """Record a schema retrieval failure; no field operations until initialize()."""
        self._state = FormState.LOAD_ERROR
        self._load_error = error
        self._schema = None
        self._snapshot = FormSnapshot()
        self._issues = []
        logger.warning("Schema load failed", plugin=self.plugin_name, error=str(error))

    def close(self) -> None:
        """Discard the value and edit state. The form returns to LOADING."""
        self._state = FormState.LOADING
        self._schema = None
        self._stored = None
        self._snapshot = FormSnapshot()
        self._issues = []
        self._in_flight.clear()

    # === Observation ===

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every new whole value. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def value(self) -> dict[str, Any]:
        """Deep copy of the current configuration value."""
        return copy.deepcopy(self._snapshot.value)

    @property
    def errors(self) -> list[str]:
        return [issue.message for issue in self._issues]

    @property
    def issues(self) -> list[FieldIssue]:
        return list(self._issues)

    def is_valid(self) -> bool:
        return self._schema is not None and not self._issues

    @property
    def is_dirty(self) -> bool:
        return any(state.is_dirty for state in self._snapshot.field_states.values())

    @property
    def is_submitting(self) -> bool:
        return self._state is FormState.SUBMITTING

    def field_state(self, name: str) -> FieldState:
        self.schema.field(name)
        return self._snapshot.state_of(name)

    def display_value(self, name: str) -> Any:
        """What the editing surface should show: the edit buffer, else the encoding."""
        spec = self.schema.field(name)
        state = self._snapshot.state_of(name)
        if state.edited_text is not None:
            return state.edited_text
        return encode(spec, self._snapshot.value.get(name))

    def widget(self, name: str) -> WidgetHint:
        spec = self.schema.field(name)
        return widget_for(spec, self._snapshot.value.get(name))

    def preview(self) -> str:
        """Pretty JSON of the configuration that would be submitted."""
        return pretty_json(self._snapshot.value)

    # === Mutations ===

    def set_field(self, name: str, raw: Any) -> dict[str, Any]:
        return self.apply(SetField(name, raw))

    def add_array_item(self, name: str) -> dict[str, Any]:
        return self.apply(AddArrayItem(name))

    def remove_array_item(self, name: str, index: int) -> dict[str, Any]:
        return self.apply(RemoveArrayItem(name, index))

    def set_array_item(self, name: str, index: int, raw: Any) -> dict[str, Any]:
        return self.apply(SetArrayItem(name, index, raw))

    def apply_template(self, example: Mapping[str, Any]) -> dict[str, Any]:
        """Replace the whole value with an example/template configuration."""
        return self.apply(ReplaceValue(example))

    def apply_example(self, index: int) -> dict[str, Any]:
        """Apply one of the schema's bundled examples.

        Raises:
            IndexError: If the schema has no example at that index
        """
        examples = self.schema.examples
        if not 0 <= index < len(examples):
            raise IndexError(f"Schema has {len(examples)} example(s), no index {index}")
        return self.apply_template(examples[index])

    def generate_defaults(self) -> dict[str, Any]:
        """Destructively replace the value with synthesized defaults."""
        return self.apply(ReplaceValue(generate_defaults(self.schema)))

    def reset(self) -> dict[str, Any]:
        """Restore the stored configuration, else the synthesized defaults."""
        if self._stored is None:
            return self.apply(ReplaceValue(generate_defaults(self.schema), mark_dirty=False))
        return self.apply(ReplaceValue(self._stored, mark_dirty=False))

    def apply(self, mutation: Mutation) -> dict[str, Any]:
        """Apply a mutation and revalidate. Returns the whole new value."""
        schema = self.schema
        return self._commit(apply_mutation(schema, self._snapshot, mutation))

    def _commit(self, snapshot: FormSnapshot) -> dict[str, Any]:
        assert self._schema is not None
        self._snapshot = snapshot
        self._issues = collect_issues(self._schema, snapshot.value, snapshot.field_states)
        current = self.value
        for listener in list(self._listeners):
            listener(copy.deepcopy(current))
        return current

    def _require_schema(self) -> None:
        if self._schema is None or self._state in (FormState.LOADING, FormState.LOAD_ERROR):
            raise FormStateError(
                f"Form for '{self.plugin_name}' has no schema (state: {self._state.value})"
            )

    # === Submission ===

    def begin_submission(self, kind: SubmissionKind) -> SubmissionTicket | None:
        """Enter SUBMITTING for one save or test.

        Returns None, and changes nothing, when the value is invalid or a
        submission of the same kind is already in flight.
        """
        self._require_schema()
        with self._lock:
            if not self.is_valid():
                logger.info(
                    "Submission blocked by validation",
                    plugin=self.plugin_name,
                    kind=kind.value,
                    errors=len(self._issues),
                )
                return None
            if kind in self._in_flight:
                logger.debug("Submission already in flight", plugin=self.plugin_name, kind=kind.value)
                return None
            self._in_flight.add(kind)
            self._state = FormState.SUBMITTING
        return SubmissionTicket(kind=kind, plugin_name=self.plugin_name, config=self.value)

    def settle(self, ticket: SubmissionTicket, error: BaseException | None = None) -> None:
        """Record that a submission finished, successfully or not."""
        with self._lock:
            self._in_flight.discard(ticket.kind)
            if not self._in_flight and self._state is FormState.SUBMITTING:
                self._state = FormState.READY
        if error is not None:
            logger.warning(
                "Submission failed",
                plugin=self.plugin_name,
                kind=ticket.kind.value,
                error=str(error),
            )
        else:
            logger.info("Submission settled", plugin=self.plugin_name, kind=ticket.kind.value)

    def save(self) -> Any:
        """Hand the configuration to the save collaborator.

        Returns:
            The collaborator's result, or None when nothing was submitted

        Raises:
            Whatever the collaborator raised, unchanged
        """
        return self._submit(SubmissionKind.SAVE, self._hooks.save_configuration)

    def test(self) -> Any:
        """Hand the configuration to the test collaborator.

        Returns:
            The collaborator's PluginTestResult, or None when nothing was submitted
        """
        return self._submit(SubmissionKind.TEST, self._hooks.test_configuration)

    def _submit(self, kind: SubmissionKind, call: Callable[[str, dict[str, Any]], Any]) -> Any:
        ticket = self.begin_submission(kind)
        if ticket is None:
            return None
        try:
            result = call(ticket.plugin_name, ticket.config)
        except BaseException as e:
            self.settle(ticket, error=e)
            raise
        self.settle(ticket)
        if kind is SubmissionKind.SAVE:
            # The saved value is now the baseline for reset()
            self._stored = copy.deepcopy(ticket.config)
            if self._snapshot.value == ticket.config:
                self._snapshot = FormSnapshot(
                    value=self._snapshot.value,
                    field_states={
                        name: FieldState(edited_text=state.edited_text)
                        for name, state in self._snapshot.field_states.items()
                    },
                )
        return result
