"""Persistence – Serializer port and the default MessagePack implementation."""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import msgpack

from snapreg.kernel.errors import DecodeError, EncodeError, NotFoundError
from snapreg.kernel.snapshot import SnapshotModel
from snapreg.registry.catalog import ModelCatalog, default_catalog

#: Type tag → models of that type, in save order.
ModelGroups = Mapping[str, Sequence[SnapshotModel]]


@runtime_checkable
class Serializer(Protocol):
    """Port: turn type-grouped models into bytes and back."""

    def encode(self, groups: ModelGroups) -> bytes: ...

    def decode(self, data: bytes) -> dict[str, list[SnapshotModel]]: ...


@functools.cache
def _field_types(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable string annotations: keep the ones that are real types.
        return {f.name: f.type for f in dataclasses.fields(cls) if not isinstance(f.type, str)}


def _revive(value: Any, hint: Any) -> Any:
    """Rebuild dataclasses and tuples that MessagePack flattened on encode."""
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return hint(**_revive_fields(hint, value)) if isinstance(value, dict) else value
    if hint is tuple:
        return tuple(value) if isinstance(value, list) else value

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (typing.Union, types.UnionType):
        if value is None:
            return None
        for arg in args:
            if isinstance(arg, type) and dataclasses.is_dataclass(arg) and isinstance(value, dict):
                return _revive(value, arg)
        return value
    if origin is list and args and isinstance(value, list):
        return [_revive(item, args[0]) for item in value]
    if origin is tuple and isinstance(value, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_revive(item, args[0]) for item in value)
        if len(args) == len(value):
            return tuple(_revive(item, arg) for item, arg in zip(value, args))
        return tuple(value)
    if origin is dict and len(args) == 2 and isinstance(value, dict):
        return {key: _revive(item, args[1]) for key, item in value.items()}
    return value


def _revive_fields(cls: type, record: Mapping[str, Any]) -> dict[str, Any]:
    hints = _field_types(cls)
    return {name: _revive(value, hints.get(name)) for name, value in record.items()}


class MsgpackSerializer:
    """MessagePack serializer driven by a :class:`ModelCatalog`.

    Artifact layout::

        {"version": 1, "groups": [[tag, [record, ...]], ...]}

    ``groups`` is a list of pairs so the group order survives any decoder.
    Each record is the dataclass field mapping of one model.  On decode,
    nested dataclass and tuple fields are rebuilt from the model's type
    hints.
    """

    FORMAT_VERSION = 1

    def __init__(self, catalog: ModelCatalog | None = None) -> None:
        self._catalog = catalog if catalog is not None else default_catalog

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog

    def encode(self, groups: ModelGroups) -> bytes:
        payload = {
            "version": self.FORMAT_VERSION,
            "groups": [[tag, [self._to_record(tag, m) for m in models]] for tag, models in groups.items()],
        }
        try:
            return msgpack.packb(payload, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as exc:
            raise EncodeError(f"Could not pack snapshot models: {exc}", cause=exc) from exc

    def decode(self, data: bytes) -> dict[str, list[SnapshotModel]]:
        try:
            payload = msgpack.unpackb(data, raw=False, strict_map_key=False)
        except (ValueError, TypeError, msgpack.UnpackException) as exc:
            raise DecodeError(f"Could not unpack snapshot artifact: {exc}", cause=exc) from exc

        if not isinstance(payload, dict) or payload.get("version") != self.FORMAT_VERSION:
            raise DecodeError("Unsupported snapshot artifact format")
        raw_groups = payload.get("groups")
        if not isinstance(raw_groups, list):
            raise DecodeError("Snapshot artifact has no groups")

        groups: dict[str, list[SnapshotModel]] = {}
        for entry in raw_groups:
            if not (
                isinstance(entry, list)
                and len(entry) == 2
                and isinstance(entry[0], str)
                and isinstance(entry[1], list)
            ):
                raise DecodeError("Malformed model group")
            tag, records = entry
            groups.setdefault(tag, []).extend(self._from_record(tag, r) for r in records)
        return groups

    def _to_record(self, tag: str, model: SnapshotModel) -> dict[str, Any]:
        if tag not in self._catalog:
            raise EncodeError(f"Model type '{tag}' is not registered", payload_type=tag)
        if not dataclasses.is_dataclass(model):
            raise EncodeError(f"Model type '{tag}' is not a dataclass", payload_type=tag)
        try:
            return dataclasses.asdict(model)
        except TypeError as exc:
            raise EncodeError(f"Could not convert '{tag}' model: {exc}", payload_type=tag, cause=exc) from exc

    def _from_record(self, tag: str, record: Any) -> SnapshotModel:
        try:
            model_type = self._catalog.by_tag(tag)
        except NotFoundError as exc:
            raise DecodeError(f"Unknown model type '{tag}'", payload_type=tag, cause=exc) from exc
        if not isinstance(record, dict):
            raise DecodeError(f"Malformed '{tag}' record", payload_type=tag)
        try:
            model = model_type.model_cls(**_revive_fields(model_type.model_cls, record))
        except TypeError as exc:
            raise DecodeError(f"Record does not match '{tag}': {exc}", payload_type=tag, cause=exc) from exc
        model.ref_smris = list(model.ref_smris)
        return model


__all__ = ["ModelGroups", "MsgpackSerializer", "Serializer"]
