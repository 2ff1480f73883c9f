"""Tests for type descriptors, tagged unions and pydantic targets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

import pytest

from tests.samples import (
    Address,
    Circle,
    Color,
    Count,
    Empty,
    Figure,
    Lenient,
    Message,
    Open,
    Point,
    Port,
    Renamed,
    Server,
    Square,
    UserId,
    ValueB,
)
from yamlshape import (
    BoolParseError,
    CustomError,
    InvalidTypeError,
    NumberParseError,
    Tagged,
    YamlShapeError,
    decode,
    encode,
    newtype,
    u8,
)
from yamlshape.parser.literals import NumberWidth
from yamlshape.shapes import ContentDeserializer, ShapeRegistry, describe, infer
from yamlshape.shapes.content import MapContent, ScalarContent, SeqContent
from yamlshape.shapes.shape import (
    AnyShape,
    EnumShape,
    IntShape,
    MapShape,
    NewtypeShape,
    OptionShape,
    SeqShape,
    StrShape,
    StructShape,
    TupleStructShape,
    UnionShape,
    UnitShape,
    UnitStructShape,
    VariantKind,
)


@dataclass
class Node:
    label: str
    children: list[Node]


class TestDescribe:
    def test_builtin_scalars(self) -> None:
        assert isinstance(describe(str), StrShape)
        assert isinstance(describe(None), UnitShape)
        assert isinstance(describe(Any), AnyShape)

    def test_int_defaults_to_i64(self) -> None:
        shape = describe(int)
        assert isinstance(shape, IntShape)
        assert shape.width is NumberWidth.I64

    def test_width_marker(self) -> None:
        shape = describe(u8)
        assert isinstance(shape, IntShape)
        assert shape.width is NumberWidth.U8

    def test_optional(self) -> None:
        shape = describe(str | None)
        assert isinstance(shape, OptionShape)
        assert isinstance(shape.inner, StrShape)

    def test_collections(self) -> None:
        assert isinstance(describe(list[int]), SeqShape)
        assert isinstance(describe(frozenset[str]), SeqShape)
        assert isinstance(describe(dict[str, int]), MapShape)

    def test_class_kinds(self) -> None:
        assert isinstance(describe(Address), StructShape)
        assert isinstance(describe(Server), StructShape)
        assert isinstance(describe(ValueB), UnitStructShape)
        assert isinstance(describe(Point), TupleStructShape)
        assert isinstance(describe(Color), EnumShape)
        assert isinstance(describe(UserId), NewtypeShape)

    def test_cached(self) -> None:
        assert describe(list[Address]) is describe(list[Address])

    def test_reset(self) -> None:
        first = describe(Address)
        ShapeRegistry.reset()
        assert describe(Address) is not first

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError, match="cannot describe type"):
            describe(complex)

    def test_struct_wire_names(self) -> None:
        assert describe(Address).wire_names == ["street", "state"]
        assert describe(Server).wire_names == ["host", "port", "tags", "displayName"]

    def test_self_referencing_dataclass(self) -> None:
        text = "label: root\nchildren:\n  - label: leaf\n    children: []\n"
        tree = decode(text, Node)
        assert tree == Node(label="root", children=[Node(label="leaf", children=[])])
        assert encode(tree) == text


class TestUnionShapes:
    def test_variant_kinds(self) -> None:
        shape = describe(Message)
        assert isinstance(shape, UnionShape)
        assert shape.tag is None
        assert [v.kind for v in shape.variants] == [
            VariantKind.STRUCT,
            VariantKind.UNIT,
            VariantKind.NEWTYPE,
            VariantKind.TUPLE,
        ]
        assert shape.names == ["ValueA", "ValueB", "Count", "Point"]

    def test_variant_name_override(self) -> None:
        union = Annotated[Renamed | ValueB, Tagged()]
        assert decode("renamed-variant:\n  note: hi\n", union) == Renamed(note="hi")
        assert encode(Renamed(note="hi"), union) == "renamed-variant:\n  note: hi\n"

    def test_plain_union_is_externally_tagged(self) -> None:
        assert decode("ValueB", ValueB | Count) == ValueB()

    def test_optional_union(self) -> None:
        assert decode("~", ValueB | Count | None) is None
        assert decode("Count: 2\n", ValueB | Count | None) == Count(2)

    def test_newtype_requires_single_field(self) -> None:
        with pytest.raises(TypeError, match="exactly one field"):

            @newtype
            @dataclass
            class Pair:
                left: int
                right: int

    def test_internal_tag_rejects_tuple_variants(self) -> None:
        with pytest.raises(TypeError, match="cannot hold tuple variant Point"):
            describe(Annotated[Circle | Point, Tagged(tag="kind")])

    def test_internal_tag_rejects_scalar_newtype(self) -> None:
        with pytest.raises(TypeError, match="cannot hold newtype variant Count"):
            describe(Annotated[Circle | Count, Tagged(tag="kind")])

    def test_member_must_be_class(self) -> None:
        with pytest.raises(TypeError):
            describe(Annotated[int | str, Tagged()])


class TestInternallyTagged:
    def test_tag_first(self) -> None:
        assert decode("type: Circle\nradius: 2.5\n", Figure) == Circle(radius=2.5)

    def test_tag_last(self) -> None:
        assert decode("radius: 2.5\ntype: Circle\n", Figure) == Circle(radius=2.5)

    def test_defaults_apply(self) -> None:
        assert decode("type: Square\nside: 3\n", Figure) == Square(side=3.0)

    def test_replay_applies_literal_policy(self) -> None:
        assert decode("type: Square\nside: 1\nfilled: on\n", Figure) == Square(1.0, True)

    def test_unit_variant(self) -> None:
        assert decode("type: Empty\n", Figure) == Empty()

    def test_unit_variant_with_payload(self) -> None:
        with pytest.raises(CustomError, match="unknown field `radius`"):
            decode("type: Empty\nradius: 1\n", Figure)

    def test_missing_tag(self) -> None:
        with pytest.raises(CustomError, match="missing field `type`"):
            decode("radius: 1\n", Figure)

    def test_unknown_tag(self) -> None:
        with pytest.raises(CustomError, match="unknown variant `Triangle`"):
            decode("type: Triangle\n", Figure)

    def test_not_a_mapping(self) -> None:
        with pytest.raises(InvalidTypeError, match="expected internally tagged"):
            decode("Circle", Figure)

    def test_replayed_number_error(self) -> None:
        with pytest.raises(NumberParseError) as exc_info:
            decode("type: Circle\nradius: big\n", Figure)
        err = exc_info.value
        assert err.text == "big"
        assert err.type_name == "f64"
        assert err.path == "radius"

    def test_replayed_bool_error(self) -> None:
        with pytest.raises(BoolParseError):
            decode("type: Square\nside: 1\nfilled: maybe\n", Figure)

    def test_unknown_payload_field(self) -> None:
        with pytest.raises(CustomError, match="unknown field `colour`"):
            decode("type: Circle\nradius: 1\ncolour: red\n", Figure)

    def test_newtype_struct_variant(self) -> None:
        @newtype
        @dataclass
        class Wrapped:
            inner: Circle

        union = Annotated[Wrapped | Empty, Tagged(tag="type")]
        assert decode("type: Wrapped\nradius: 4\n", union) == Wrapped(Circle(4.0))
        assert encode(Wrapped(Circle(4.0)), union) == "type: Wrapped\nradius: 4.0\n"


class TestPydanticModels:
    def test_decode_with_alias_and_defaults(self) -> None:
        server = decode("host: db\nport: 5432\ndisplayName: Main\n", Server)
        assert server == Server(host="db", port=5432, displayName="Main")
        assert server.tags == []

    def test_width_marker_enforced(self) -> None:
        with pytest.raises(NumberParseError) as exc_info:
            decode("host: db\nport: 70000\n", Server)
        assert exc_info.value.type_name == "u16"
        assert exc_info.value.path == "port"

    def test_forbids_unknown_by_default(self) -> None:
        with pytest.raises(CustomError, match="unknown field `display_name`"):
            decode("host: db\nport: 1\ndisplay_name: x\n", Server)

    def test_missing_required(self) -> None:
        with pytest.raises(CustomError, match="missing field `port`"):
            decode("host: db\n", Server)

    def test_extra_ignore_skips_nested(self) -> None:
        text = "name: a\nother:\n  nested:\n    - 1\n    - 2\n"
        assert decode(text, Lenient) == Lenient(name="a")

    def test_extra_allow_round_trips(self) -> None:
        model = decode("name: a\nnote: hello\n", Open)
        assert model.model_extra == {"note": "hello"}
        assert encode(model) == "name: a\nnote: hello\n"

    def test_validation_error_wrapped(self) -> None:
        with pytest.raises(CustomError, match="port must be non-zero"):
            decode("number: 0\n", Port)

    def test_model_in_dataclass_field(self) -> None:
        servers = decode("- host: a\n  port: 1\n- host: b\n  port: 2\n", list[Server])
        assert [s.host for s in servers] == ["a", "b"]


class TestContentReplay:
    def test_scalar(self) -> None:
        assert describe(bool).deserialize(ContentDeserializer(ScalarContent("Yes"))) is True
        assert describe(u8).deserialize(ContentDeserializer(ScalarContent("7"))) == 7

    def test_option(self) -> None:
        shape = describe(int | None)
        assert shape.deserialize(ContentDeserializer(ScalarContent("~"))) is None

    def test_sequence_and_map(self) -> None:
        content = MapContent(
            ((ScalarContent("a"), SeqContent((ScalarContent("1"), ScalarContent("2")))),)
        )
        result = describe(dict[str, list[int]]).deserialize(ContentDeserializer(content))
        assert result == {"a": [1, 2]}

    def test_type_mismatch(self) -> None:
        with pytest.raises(InvalidTypeError, match="expected a sequence"):
            describe(list[int]).deserialize(ContentDeserializer(ScalarContent("x")))

    def test_enum_from_single_entry_map(self) -> None:
        content = MapContent(((ScalarContent("Count"), ScalarContent("9")),))
        assert describe(Message).deserialize(ContentDeserializer(content)) == Count(9)


class TestInfer:
    def test_runtime_types(self) -> None:
        assert isinstance(infer(None), UnitShape)
        assert isinstance(infer(Address(street="s", state="t")), StructShape)
        assert isinstance(infer(Point(1, 2)), TupleStructShape)
        assert isinstance(infer({"a": 1}), MapShape)
        assert isinstance(infer((1, 2)), SeqShape)

    def test_named_tuple_encoded_positionally(self) -> None:
        assert encode(Point(3, 4)) == "- 3\n- 4\n"


class TestErrorFactory:
    def test_shape_errors_built_by_custom(self, monkeypatch: pytest.MonkeyPatch) -> None:
        messages: list[str] = []
        build = YamlShapeError.custom.__func__  # type: ignore[attr-defined]

        def recording(cls: type[YamlShapeError], message: object) -> CustomError:
            messages.append(str(message))
            return build(cls, message)  # type: ignore[no-any-return]

        monkeypatch.setattr(YamlShapeError, "custom", classmethod(recording))
        with pytest.raises(CustomError):
            decode("street: s\nstate: t\ncity: x\n", Address)
        with pytest.raises(CustomError):
            encode(300, u8)
        assert messages == [
            "unknown field `city`, expected one of `street`, `state`",
            "value 300 out of range for u8",
        ]
