"""Unit tests for the MessagePack serializer."""

from __future__ import annotations

import dataclasses

import msgpack
import pytest
from hypothesis import given

from snapreg.kernel.errors import DecodeError, EncodeError
from snapreg.kernel.snapshot import SnapshotModel
from snapreg.persistence import MsgpackSerializer, Serializer
from snapreg.registry import ModelCatalog, order_and_group
from snapreg.testing.generators import reference_graph_strategy


@dataclasses.dataclass
class ShipModel(SnapshotModel):
    name: str = ""
    crew: int = 0
    cargo: dict[str, int] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class PortModel(SnapshotModel):
    harbour: str = ""
    blob: bytes = b""


@dataclasses.dataclass
class GhostModel(SnapshotModel):
    pass


@dataclasses.dataclass
class HandleModel(SnapshotModel):
    handle: object = None


@dataclasses.dataclass
class Berth:
    pier: int = 0
    tide: tuple[int, int] = (0, 0)


@dataclasses.dataclass
class DockModel(SnapshotModel):
    main: Berth = dataclasses.field(default_factory=Berth)
    spare: Berth | None = None
    extra: list[Berth] = dataclasses.field(default_factory=list)
    by_name: dict[str, Berth] = dataclasses.field(default_factory=dict)
    bounds: tuple[int, ...] = ()


def _catalog() -> ModelCatalog:
    catalog = ModelCatalog()
    catalog.register(ShipModel, tag="ship", order=2)
    catalog.register(PortModel, tag="port", order=1)
    catalog.register(HandleModel, tag="handle")
    catalog.register(DockModel, tag="dock")
    return catalog


@pytest.fixture
def serializer() -> MsgpackSerializer:
    return MsgpackSerializer(_catalog())


class TestEncodeDecode:
    def test_satisfies_port(self, serializer: MsgpackSerializer) -> None:
        assert isinstance(serializer, Serializer)

    def test_round_trip_preserves_fields_and_group_order(self, serializer: MsgpackSerializer) -> None:
        groups = {
            "port": [PortModel(smri=2, harbour="Oslo", blob=b"\x00\x01")],
            "ship": [
                ShipModel(smri=1, ref_smris=[2], name="Ada", crew=3, cargo={"tea": 4}),
                ShipModel(smri=3, ref_smris=[1, 3], name="Bo"),
            ],
        }
        decoded = serializer.decode(serializer.encode(groups))
        assert list(decoded) == ["port", "ship"]
        assert decoded == groups

    def test_empty_groups(self, serializer: MsgpackSerializer) -> None:
        assert serializer.decode(serializer.encode({})) == {}

    def test_payload_layout(self, serializer: MsgpackSerializer) -> None:
        raw = msgpack.unpackb(serializer.encode({"port": [PortModel(smri=5)]}), raw=False)
        assert raw["version"] == 1
        assert raw["groups"][0][0] == "port"
        assert raw["groups"][0][1][0]["smri"] == 5

    @given(reference_graph_strategy())
    def test_round_trip_of_any_reference_graph(self, graph: dict[int, list[int]]) -> None:
        serializer = MsgpackSerializer(_catalog())
        models = {smri: ShipModel(smri=smri, ref_smris=refs, name=f"s{smri}") for smri, refs in graph.items()}
        groups = order_and_group(models, serializer.catalog)

        decoded = serializer.decode(serializer.encode(groups))

        restored = {m.smri: m for group in decoded.values() for m in group}
        assert restored == models


class TestEncodeErrors:
    def test_unregistered_type(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(EncodeError) as exc_info:
            serializer.encode({"ghost": [GhostModel()]})
        assert exc_info.value.payload_type == "ghost"

    def test_unpackable_field(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(EncodeError):
            serializer.encode({"handle": [HandleModel(handle=object())]})


class TestDecodeErrors:
    def test_garbage(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError):
            serializer.decode(b"\xc1\xc1\xc1")

    def test_truncated(self, serializer: MsgpackSerializer) -> None:
        data = serializer.encode({"port": [PortModel(smri=1)]})
        with pytest.raises(DecodeError):
            serializer.decode(data[:-3])

    def test_wrong_version(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError):
            serializer.decode(msgpack.packb({"version": 99, "groups": []}))

    def test_missing_groups(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError):
            serializer.decode(msgpack.packb({"version": 1}))

    def test_malformed_group(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError):
            serializer.decode(msgpack.packb({"version": 1, "groups": [["port"]]}))

    def test_unknown_tag(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError) as exc_info:
            serializer.decode(msgpack.packb({"version": 1, "groups": [["ghost", [{"smri": 1}]]]}))
        assert exc_info.value.payload_type == "ghost"

    def test_record_with_unknown_field(self, serializer: MsgpackSerializer) -> None:
        data = msgpack.packb({"version": 1, "groups": [["port", [{"smri": 1, "bogus": 2}]]]})
        with pytest.raises(DecodeError):
            serializer.decode(data)

    def test_record_not_a_map(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError):
            serializer.decode(msgpack.packb({"version": 1, "groups": [["port", [1]]]}))

    def test_group_tag_must_be_a_string(self, serializer: MsgpackSerializer) -> None:
        with pytest.raises(DecodeError):
            serializer.decode(msgpack.packb({"version": 1, "groups": [[[1, 2], []]]}))

    def test_nested_record_with_unknown_field(self, serializer: MsgpackSerializer) -> None:
        record = {"smri": 1, "main": {"pier": 1, "bogus": 2}}
        with pytest.raises(DecodeError):
            serializer.decode(msgpack.packb({"version": 1, "groups": [["dock", [record]]]}))


class TestNestedFields:
    def test_nested_dataclasses_are_rebuilt(self, serializer: MsgpackSerializer) -> None:
        dock = DockModel(
            smri=4,
            main=Berth(pier=7, tide=(1, 2)),
            spare=Berth(pier=8),
            extra=[Berth(pier=9), Berth(pier=10, tide=(3, 4))],
            by_name={"north": Berth(pier=11)},
            bounds=(5, 6, 7),
        )
        (decoded,) = serializer.decode(serializer.encode({"dock": [dock]}))["dock"]

        assert decoded == dock
        assert isinstance(decoded.main, Berth)
        assert decoded.main.tide == (1, 2)
        assert isinstance(decoded.spare, Berth)
        assert all(isinstance(b, Berth) for b in decoded.extra)
        assert isinstance(decoded.by_name["north"], Berth)
        assert decoded.bounds == (5, 6, 7)

    def test_optional_nested_none(self, serializer: MsgpackSerializer) -> None:
        (decoded,) = serializer.decode(serializer.encode({"dock": [DockModel(smri=1)]}))["dock"]
        assert decoded.spare is None
        assert decoded.main == Berth()
