"""AG-UI document synchronization events

These types keep a browser renderer in lock-step with the session document:
- JsonPatchOp: RFC 6902 JSON Patch operation describing one change
- document_delta: Patch ops turning one wire document into the next
- DocumentBroadcaster: Fan-out of STATE_SNAPSHOT / STATE_DELTA events to SSE subscribers
- encode_event: SSE encoding with millisecond timestamps
"""

import asyncio
import time
from typing import Any, Literal

from ag_ui.core import BaseEvent, StateDeltaEvent, StateSnapshotEvent
from ag_ui.encoder import EventEncoder
from pydantic import BaseModel

encoder = EventEncoder()


class JsonPatchOp(BaseModel):
    """RFC 6902 JSON Patch operation for incremental document updates.

    Used in STATE_DELTA events and edit responses so the renderer can update
    its copy of the document without refetching it.
    """

    op: Literal["add", "remove", "replace"]
    path: str
    value: Any = None

    def to_patch(self) -> dict[str, Any]:
        """Plain RFC 6902 dict (remove ops carry no value)."""
        if self.op == "remove":
            return {"op": self.op, "path": self.path}
        return {"op": self.op, "path": self.path, "value": self.value}


def _keyed_list_delta(
    path: str,
    old_items: list[dict[str, Any]],
    new_items: list[dict[str, Any]],
    key: str,
) -> list[JsonPatchOp]:
    """Patch ops for a list of keyed items.

    Handles removals, in-place changes and appends. Any other reshaping
    (reordering, insertion in the middle) falls back to replacing the list.
    """
    old_by_key = {item[key]: item for item in old_items}
    new_by_key = {item[key]: item for item in new_items}
    old_keys = [item[key] for item in old_items]
    new_keys = [item[key] for item in new_items]

    survivors = [k for k in old_keys if k in new_by_key]
    added = [k for k in new_keys if k not in old_by_key]
    if new_keys != survivors + added or len(new_by_key) != len(new_keys):
        return [JsonPatchOp(op="replace", path=path, value=new_items)]

    ops: list[JsonPatchOp] = []
    # Remove from the end so earlier indices stay valid
    for index in reversed(range(len(old_keys))):
        if old_keys[index] not in new_by_key:
            ops.append(JsonPatchOp(op="remove", path=f"{path}/{index}"))
    for index, k in enumerate(survivors):
        if old_by_key[k] != new_by_key[k]:
            ops.append(JsonPatchOp(op="replace", path=f"{path}/{index}", value=new_by_key[k]))
    for k in added:
        ops.append(JsonPatchOp(op="add", path=f"{path}/-", value=new_by_key[k]))
    return ops


def document_delta(old: dict[str, Any] | None, new: dict[str, Any] | None) -> list[JsonPatchOp]:
    """Patch ops transforming wire document old into new.

    A missing old document yields a single whole-document replacement.
    """
    if old is None or new is None:
        return [] if old == new else [JsonPatchOp(op="replace", path="", value=new)]

    ops = _keyed_list_delta("/graph/nodes", old["graph"]["nodes"], new["graph"]["nodes"], "id")
    ops += _keyed_list_delta("/graph/edges", old["graph"]["edges"], new["graph"]["edges"], "key")
    if old["echelons"] != new["echelons"]:
        ops.append(JsonPatchOp(op="replace", path="/echelons", value=new["echelons"]))
    return ops


def snapshot_event(document: dict[str, Any] | None) -> StateSnapshotEvent:
    return StateSnapshotEvent(snapshot=document)


def delta_event(ops: list[JsonPatchOp]) -> StateDeltaEvent:
    return StateDeltaEvent(delta=[op.to_patch() for op in ops])


def encode_event(event: BaseEvent) -> str:
    """Encode an AG-UI event as SSE, stamping a millisecond timestamp.

    The original event is not modified.
    """
    stamped = event.model_copy(update={"timestamp": int(time.time() * 1000)})
    return encoder.encode(stamped)


class DocumentBroadcaster:
    """Fan-out of document events to every connected SSE subscriber."""

    def __init__(self) -> None:
        self._subscribers: set[asyncio.Queue[BaseEvent]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> "asyncio.Queue[BaseEvent]":
        queue: asyncio.Queue[BaseEvent] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: "asyncio.Queue[BaseEvent]") -> None:
        self._subscribers.discard(queue)

    def publish(self, event: BaseEvent) -> None:
        for queue in list(self._subscribers):
            queue.put_nowait(event)
