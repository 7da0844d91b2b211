"""Tests for structype.extends: core relation properties and primitive rules."""

import pytest

from structype.config import ExtendsSettings
from structype.errors import DereferenceError, UnknownTypeError
from structype.extends import ExtendsEngine, extends
from structype.types import (
    AnyType,
    ArrayType,
    BigIntType,
    BooleanType,
    ConstructorType,
    DateType,
    FunctionType,
    IntegerType,
    IntersectType,
    LiteralType,
    NeverType,
    NullType,
    NumberType,
    ObjectType,
    PromiseType,
    RecordType,
    RefType,
    SchemaNode,
    StringType,
    SymbolType,
    TemplateLiteralType,
    TupleType,
    Uint8ArrayType,
    UndefinedType,
    UnionType,
    UnknownType,
    VoidType,
)


class ExtendsGadget(SchemaNode, kind="extends_gadget"):
    """User kind used by the extension tests."""

    version: int


class ExtendsGizmo(SchemaNode, kind="extends_gizmo"):
    pass


PRIMITIVES = [
    AnyType(),
    UnknownType(),
    NeverType(),
    VoidType(),
    NullType(),
    UndefinedType(),
    BooleanType(),
    NumberType(),
    IntegerType(),
    BigIntType(),
    StringType(),
    SymbolType(),
    DateType(),
    Uint8ArrayType(),
]

SCHEMAS = [
    *PRIMITIVES,
    LiteralType("red"),
    LiteralType(10),
    LiteralType(True),
    FunctionType((StringType(),), NumberType()),
    ConstructorType((), ObjectType({"x": NumberType()})),
    PromiseType(StringType()),
    TemplateLiteralType(("on", UnionType((LiteralType("Click"), LiteralType("Key"))))),
    TemplateLiteralType(("id-", NumberType())),
    ArrayType(StringType()),
    TupleType(),
    TupleType((StringType(), NumberType())),
    ObjectType({"a": StringType(), "b": NumberType(optional=True)}),
    ObjectType({}, additional_properties=False),
    RecordType(StringType(), NumberType()),
    RecordType(NumberType(), StringType()),
    UnionType((StringType(), NumberType())),
    IntersectType((ObjectType({"a": StringType()}), ObjectType({"b": NumberType()}))),
    UnionType((IntersectType((StringType(), LiteralType("x"))), NullType())),
    IntersectType((
        UnionType((ObjectType({"a": StringType()}), ObjectType({"b": NumberType()}))),
        ObjectType({"c": BooleanType()}),
    )),
]


class TestRelationProperties:
    """Test properties that hold for every schema."""

    @pytest.mark.parametrize("schema", SCHEMAS, ids=lambda s: str(s.kind))
    def test_reflexivity(self, schema):
        """Test that every schema extends itself."""
        assert extends(schema, schema)

    @pytest.mark.parametrize("schema", SCHEMAS, ids=lambda s: str(s.kind))
    def test_absorption(self, schema):
        """Test that Any and Unknown absorb and Never extends everything."""
        assert extends(schema, AnyType())
        assert extends(schema, UnknownType())
        assert extends(NeverType(), schema)

    @pytest.mark.parametrize("schema", SCHEMAS, ids=lambda s: str(s.kind))
    def test_nothing_but_never_extends_never(self, schema):
        """Test that only Never extends Never."""
        assert extends(schema, NeverType()) is (schema == NeverType())

    def test_non_symmetry(self):
        """Test that Integer extends Number but not the reverse."""
        assert extends(IntegerType(), NumberType())
        assert not extends(NumberType(), IntegerType())


class TestUnion:
    """Test union distribution."""

    def test_union_right_disjunction(self):
        """Test that left must extend at least one right variant."""
        assert extends(StringType(), UnionType((BooleanType(), StringType())))
        assert not extends(StringType(), UnionType((BooleanType(), NumberType())))

    def test_union_left_conjunction(self):
        """Test that every left variant must extend right."""
        left = UnionType((StringType(), NumberType()))
        assert extends(left, UnionType((StringType(), NumberType(), BooleanType())))
        assert not extends(UnionType((StringType(), BooleanType())), NumberType())

    def test_union_subset(self):
        """Test that a wider union does not extend a narrower one."""
        wide = UnionType((StringType(), NumberType(), BooleanType()))
        assert not extends(wide, UnionType((StringType(), NumberType())))

    def test_union_with_any_variant(self):
        """Test that a union containing Any accepts everything."""
        assert extends(DateType(), UnionType((AnyType(), NumberType())))

    def test_literal_union_to_primitive(self):
        """Test that a union of string literals extends String."""
        colors = UnionType((LiteralType("red"), LiteralType("green")))
        assert extends(colors, StringType())
        assert not extends(StringType(), colors)


class TestIntersect:
    """Test intersect distribution."""

    def test_intersect_left_any_part(self):
        """Test that an intersection extends what one of its parts extends."""
        left = IntersectType((ObjectType({"a": StringType()}), ObjectType({"b": NumberType()})))
        assert extends(left, ObjectType({"a": StringType()}))
        assert extends(left, ObjectType({"b": NumberType()}))
        assert not extends(left, ObjectType({"c": NumberType()}))

    def test_intersect_right_every_part(self):
        """Test that left must extend every part of a right intersection."""
        right = IntersectType((ObjectType({"a": StringType()}), ObjectType({"b": NumberType()})))
        assert extends(ObjectType({"a": StringType(), "b": NumberType()}), right)
        assert not extends(ObjectType({"a": StringType()}), right)

    def test_intersect_inside_union(self):
        """Test an intersection matched against a union holding it."""
        both = IntersectType((StringType(), LiteralType("x")))
        assert extends(both, UnionType((both, NullType())))

    def test_intersect_with_union_part(self):
        """Test that a union part of an intersection can match a right union."""
        either = UnionType((ObjectType({"a": StringType()}), ObjectType({"b": NumberType()})))
        left = IntersectType((either, ObjectType({"c": BooleanType()})))
        assert extends(left, either)
        assert extends(left, IntersectType((either, ObjectType({"c": BooleanType()}))))
        assert not extends(left, UnionType((ObjectType({"a": StringType()}), NullType())))


class TestAnyAndUnknown:
    """Test the top types on the left."""

    def test_any_left(self):
        """Test that Any on the left extends concrete schemas by default."""
        assert extends(AnyType(), StringType())
        assert extends(AnyType(), ObjectType({"a": NumberType()}))

    def test_any_left_configured(self):
        """Test that the Any-on-the-left answer is configurable."""
        settings = ExtendsSettings(any_left_result=False)
        assert not extends(AnyType(), StringType(), settings=settings)
        assert extends(AnyType(), UnknownType(), settings=settings)

    def test_unknown_left(self):
        """Test that Unknown only extends top types."""
        assert not extends(UnknownType(), StringType())
        assert not extends(UnknownType(), ObjectType())
        assert not extends(UnknownType(), ArrayType(AnyType()))
        assert extends(UnknownType(), UnionType((StringType(), UnknownType())))


class TestPrimitives:
    """Test primitive pairings."""

    @pytest.mark.parametrize("schema", PRIMITIVES[3:], ids=lambda s: str(s.kind))
    def test_primitive_self(self, schema):
        """Test that each primitive extends itself."""
        assert extends(schema, schema)

    @pytest.mark.parametrize(
        "left,right",
        [
            (StringType(), BooleanType()),
            (NumberType(), StringType()),
            (BooleanType(), NullType()),
            (StringType(), UndefinedType()),
            (NumberType(), VoidType()),
            (StringType(), DateType()),
            (NullType(), UndefinedType()),
            (BigIntType(), NumberType()),
            (SymbolType(), StringType()),
            (VoidType(), UndefinedType()),
        ],
    )
    def test_unrelated_primitives(self, left, right):
        """Test that unrelated primitives do not extend each other."""
        assert not extends(left, right)

    def test_undefined_extends_void(self):
        """Test that Undefined extends Void."""
        assert extends(UndefinedType(), VoidType())

    def test_primitive_vs_empty_object(self):
        """Test that object-shaped primitives extend the empty object."""
        for schema in (StringType(), NumberType(), BooleanType(), DateType(), BigIntType()):
            assert extends(schema, ObjectType())
        assert not extends(NullType(), ObjectType())
        assert not extends(UndefinedType(), ObjectType())

    def test_string_vs_length_object(self):
        """Test that strings extend an object requiring length."""
        assert extends(StringType(), ObjectType({"length": NumberType()}))
        assert not extends(NumberType(), ObjectType({"length": NumberType()}))

    def test_symbol_vs_description_object(self):
        """Test that symbols extend an object requiring description."""
        description = UnionType((StringType(), UndefinedType()))
        assert extends(SymbolType(), ObjectType({"description": description}))
        assert not extends(SymbolType(), ObjectType({"description": StringType()}))


class TestLiteral:
    """Test literal rules."""

    def test_literal_vs_literal(self):
        """Test that literals match by type and value."""
        assert extends(LiteralType("a"), LiteralType("a"))
        assert not extends(LiteralType("a"), LiteralType("b"))
        assert not extends(LiteralType(1), LiteralType(True))
        assert not extends(LiteralType(True), LiteralType(1))
        assert not extends(LiteralType(1), LiteralType(1.0))

    def test_literal_vs_primitive(self):
        """Test that literals extend the primitive of their value domain."""
        assert extends(LiteralType(10), NumberType())
        assert extends(LiteralType(1.5), NumberType())
        assert extends(LiteralType("x"), StringType())
        assert extends(LiteralType(False), BooleanType())
        assert not extends(LiteralType(True), NumberType())
        assert not extends(LiteralType("10"), NumberType())
        assert not extends(LiteralType(10), StringType())

    def test_literal_vs_integer(self):
        """Test that only integral number literals extend Integer."""
        assert extends(LiteralType(10), IntegerType())
        assert extends(LiteralType(10.0), IntegerType())
        assert not extends(LiteralType(10.5), IntegerType())
        assert not extends(LiteralType(True), IntegerType())

    def test_primitive_vs_literal(self):
        """Test that a primitive never extends one of its literals."""
        assert not extends(StringType(), LiteralType("x"))
        assert not extends(BooleanType(), LiteralType(True))

    def test_boolean_as_literal_union(self):
        """Test that true | false extends Boolean."""
        assert extends(UnionType((LiteralType(True), LiteralType(False))), BooleanType())


class TestTemplateLiteral:
    """Test template literal comparison through expansion."""

    def test_finite_template_vs_literals(self):
        """Test a finite template against a union of literals."""
        template = TemplateLiteralType(("on", UnionType((LiteralType("Click"), LiteralType("Key")))))
        assert extends(template, UnionType((LiteralType("onClick"), LiteralType("onKey"))))
        assert extends(LiteralType("onKey"), template)
        assert not extends(LiteralType("onBlur"), template)
        assert extends(template, StringType())

    def test_infinite_template(self):
        """Test that an unbounded template behaves as String."""
        template = TemplateLiteralType(("id-", NumberType()))
        assert extends(template, StringType())
        assert extends(StringType(), template)
        assert not extends(template, NumberType())


class TestCallables:
    """Test function, constructor and promise rules."""

    def test_function_parameter_count(self):
        """Test that fewer parameters are assignable to more."""
        short = FunctionType((StringType(),), NumberType())
        long = FunctionType((StringType(), NumberType()), NumberType())
        assert extends(short, long)
        assert not extends(long, short)

    def test_function_parameters_contravariant(self):
        """Test that parameters compare in the reverse direction."""
        wide = FunctionType((UnionType((StringType(), NumberType())),), NullType())
        narrow = FunctionType((StringType(),), NullType())
        assert extends(wide, narrow)
        assert not extends(narrow, wide)

    def test_function_returns_covariant(self):
        """Test that return types compare in the same direction."""
        specific = FunctionType((), IntegerType())
        general = FunctionType((), NumberType())
        assert extends(specific, general)
        assert not extends(general, specific)

    def test_function_vs_constructor(self):
        """Test that functions and constructors are distinct."""
        assert not extends(FunctionType((), AnyType()), ConstructorType((), AnyType()))
        assert not extends(ConstructorType((), AnyType()), FunctionType((), AnyType()))

    def test_callables_vs_objects(self):
        """Test function and constructor object-likeness."""
        fn = FunctionType((), AnyType())
        assert extends(fn, ObjectType())
        assert extends(fn, ObjectType({"length": NumberType()}))
        assert extends(ConstructorType((), AnyType()), ObjectType())
        assert not extends(ConstructorType((), AnyType()), ObjectType({"length": NumberType()}))

    def test_promise(self):
        """Test promise item covariance and thenable objects."""
        assert extends(PromiseType(IntegerType()), PromiseType(NumberType()))
        assert not extends(PromiseType(NumberType()), PromiseType(IntegerType()))
        then = FunctionType((AnyType(),), AnyType())
        assert extends(PromiseType(StringType()), ObjectType({"then": then}))
        assert not extends(PromiseType(StringType()), StringType())


class TestUserKinds:
    """Test kinds resolved through the extension registry."""

    def test_unregistered_left(self):
        """Test that an unregistered kind on the left raises."""
        with pytest.raises(UnknownTypeError):
            extends(ExtendsGadget(1), StringType())

    def test_unregistered_right(self):
        """Test that an unregistered kind on the right raises."""
        with pytest.raises(UnknownTypeError):
            extends(StringType(), ExtendsGadget(1))

    def test_registered_default_rule(self, registry):
        """Test that without a handler a user kind extends only its own kind."""
        registry.register("extends_gadget")
        registry.register("extends_gizmo")
        assert extends(ExtendsGadget(1), ExtendsGadget(2))
        assert not extends(ExtendsGadget(1), ExtendsGizmo())
        assert not extends(ExtendsGadget(1), StringType())
        assert not extends(StringType(), ExtendsGadget(1))
        assert extends(ExtendsGadget(1), AnyType())

    def test_registered_handler(self, registry):
        """Test that a registered handler decides the comparison."""

        def newer_extends_older(left, right):
            return right.kind == left.kind and left.version >= right.version

        registry.register("extends_gadget", extends=newer_extends_older)
        assert extends(ExtendsGadget(2), ExtendsGadget(1))
        assert not extends(ExtendsGadget(1), ExtendsGadget(2))

    def test_user_kind_in_union(self, registry):
        """Test user kinds inside combinators."""
        registry.register("extends_gadget")
        assert extends(ExtendsGadget(1), UnionType((StringType(), ExtendsGadget(1))))


class TestEngine:
    """Test the reusable engine object."""

    def test_engine_reuse(self):
        """Test answering several queries with one engine."""
        engine = ExtendsEngine(ExtendsSettings())
        assert engine.extends(IntegerType(), NumberType())
        assert not engine.extends(NumberType(), IntegerType())

    def test_scopes_accept_lists(self):
        """Test that scopes may be given as lists."""
        target = NumberType(id="N")
        assert extends(RefType("N"), NumberType(), [target], [])

    def test_engine_recovers_after_error(self):
        """Test that a failed query leaves no state behind."""
        engine = ExtendsEngine()
        with pytest.raises(DereferenceError):
            engine.extends(ArrayType(RefType("Missing")), ArrayType(NumberType()))
        assert engine.extends(ArrayType(IntegerType()), ArrayType(NumberType()))
