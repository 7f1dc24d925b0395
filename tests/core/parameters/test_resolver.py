import pytest

from reactgen.core.codegen_config import CodegenConfig
from reactgen.core.model import (
    Assignment,
    Instantiation,
    InstantiationTree,
    Parameter,
    ParameterInstance,
    ReactorDeclaration,
    SourceLocation,
    Value,
)
from reactgen.core.parameters import (
    EmptyInitializerError,
    ResolvedTerm,
    UnboundScopeError,
    last_assignment,
    render_resolved_initializer,
    resolve_parameter,
)

CFG = CodegenConfig(
    config_path=None,
    field_prefix="_",
    reference_suffix="_lf",
    sequence_separator=", ",
    override_injection="targeted",
    duplicate_names="warn",
    accessor_lint_comment=True,
)


def _lit(*texts: str) -> tuple[Value, ...]:
    return tuple(Value.of_literal(t) for t in texts)


def _param(name: str, *init: str, type: str | None = None) -> Parameter:
    return Parameter(name=name, type=type, init=_lit(*init))


def _assign(lhs: Parameter, *rhs: Value, line: int | None = None) -> Assignment:
    location = SourceLocation(file="demo.lf", line=line) if line is not None else None
    return Assignment(lhs=lhs, rhs=tuple(rhs), location=location)


class _Scene:
    """Main / Mid / Leaf の 3 宣言と、それを並べる木のヘルパ。"""

    def __init__(self) -> None:
        self.width = _param("width", "10", type="int")
        self.size = _param("size", "3", type="int")
        self.p = _param("p", "5", type="int")
        self.pair = _param("pair", "1", "2")
        self.main_decl = ReactorDeclaration(name="Main", parameters=(self.width,))
        self.mid_decl = ReactorDeclaration(name="Mid", parameters=(self.size,))
        self.leaf_decl = ReactorDeclaration(name="Leaf", parameters=(self.p, self.pair))

    def leaf(self, *assignments: Assignment) -> Instantiation:
        """main -> mid -> leaf を作り、leaf を返す。"""
        tree = InstantiationTree()
        root = tree.add("main", self.main_decl)
        mid = tree.add("mid", self.mid_decl, parent=root)
        return tree.add("leaf", self.leaf_decl, parent=mid, assignments=assignments)

    def shallow_leaf(self, *assignments: Assignment) -> Instantiation:
        """main -> leaf を作り、leaf を返す（祖父母が存在しない）。"""
        tree = InstantiationTree()
        root = tree.add("main", self.main_decl)
        return tree.add("leaf", self.leaf_decl, parent=root, assignments=assignments)


def test_last_assignment_wins():
    scene = _Scene()
    first = _assign(scene.p, *_lit("1"))
    second = _assign(scene.p, *_lit("2"))
    pi = ParameterInstance(parameter=scene.p, host=scene.leaf(first, second))

    assert last_assignment(pi) is second
    assert render_resolved_initializer(pi, config=CFG) == "2"


def test_assignments_to_other_parameters_are_ignored():
    scene = _Scene()
    leaf = scene.leaf(_assign(scene.p, *_lit("1")), _assign(scene.pair, *_lit("8")))

    assert render_resolved_initializer(ParameterInstance(scene.p, leaf), config=CFG) == "1"
    assert render_resolved_initializer(ParameterInstance(scene.pair, leaf), config=CFG) == "8"


def test_default_used_when_no_assignment():
    scene = _Scene()
    pi = ParameterInstance(parameter=scene.p, host=scene.leaf())

    assert last_assignment(pi) is None
    assert resolve_parameter(pi, config=CFG) == (ResolvedTerm(text="5"),)


def test_assignment_matches_by_identity_not_by_name():
    inherited_x = _param("x", "1")
    own_x = _param("x", "2")
    base = ReactorDeclaration(name="Base", parameters=(inherited_x,))
    derived = ReactorDeclaration(name="Derived", parameters=(own_x,), superclasses=(base,))
    tree = InstantiationTree()
    root = tree.add("main", ReactorDeclaration(name="Main"))
    node = tree.add("d", derived, parent=root, assignments=[_assign(inherited_x, *_lit("9"))])

    assert render_resolved_initializer(ParameterInstance(inherited_x, node), config=CFG) == "9"
    assert render_resolved_initializer(ParameterInstance(own_x, node), config=CFG) == "2"


def test_forwarded_reference_is_shifted_two_levels_up():
    scene = _Scene()
    leaf = scene.leaf(_assign(scene.p, Value.of_parameter(scene.size)))

    terms = resolve_parameter(ParameterInstance(scene.p, leaf), config=CFG)
    assert terms == (ResolvedTerm(text="main_lf.size", is_reference=True),)


def test_forwarded_reference_above_root_is_unbound():
    scene = _Scene()
    leaf = scene.shallow_leaf(_assign(scene.p, Value.of_parameter(scene.width), line=7))

    with pytest.raises(UnboundScopeError) as excinfo:
        resolve_parameter(ParameterInstance(scene.p, leaf), config=CFG)
    assert excinfo.value.location == SourceLocation(file="demo.lf", line=7)
    assert str(excinfo.value).startswith("demo.lf:7: ")


def test_literals_and_times_in_override_are_self_contained():
    scene = _Scene()
    # 祖父母が無くても、参照を含まない右辺は解決できる。
    leaf = scene.shallow_leaf(
        _assign(scene.pair, Value.of_time(20, "msec"), Value.of_literal("true"))
    )

    assert render_resolved_initializer(ParameterInstance(scene.pair, leaf), config=CFG) == (
        "(MSEC(20), True)"
    )


def test_arity_follows_selected_source():
    scene = _Scene()
    plain = scene.leaf()
    assert render_resolved_initializer(ParameterInstance(scene.pair, plain), config=CFG) == "(1, 2)"
    assert render_resolved_initializer(ParameterInstance(scene.p, plain), config=CFG) == "5"

    # 上書きが 1 項なら既定の 2 項とは混ぜずに裸で出す。
    overridden = scene.leaf(_assign(scene.pair, *_lit("7")))
    assert render_resolved_initializer(ParameterInstance(scene.pair, overridden), config=CFG) == "7"


def test_reference_in_default_resolves_in_own_scope():
    p = _param("p", "5")
    alias = Parameter(name="alias", type=None, init=(Value.of_parameter(p),))
    decl = ReactorDeclaration(name="Leaf", parameters=(p, alias))
    tree = InstantiationTree()
    root = tree.add("main", ReactorDeclaration(name="Main"))
    leaf = tree.add("leaf", decl, parent=root)

    terms = resolve_parameter(ParameterInstance(alias, leaf), config=CFG)
    assert terms == (ResolvedTerm(text="main_leaf_lf.p", is_reference=True),)


def test_empty_override_rhs_is_rejected():
    scene = _Scene()
    leaf = scene.leaf(_assign(scene.p))

    with pytest.raises(EmptyInitializerError):
        resolve_parameter(ParameterInstance(scene.p, leaf), config=CFG)


def test_empty_default_is_rejected():
    empty = Parameter(name="e", type=None, init=())
    tree = InstantiationTree()
    root = tree.add("main", ReactorDeclaration(name="Main", parameters=(empty,)))

    with pytest.raises(EmptyInitializerError):
        resolve_parameter(ParameterInstance(empty, root), config=CFG)


def test_resolution_is_idempotent():
    scene = _Scene()
    leaf = scene.leaf(_assign(scene.pair, Value.of_parameter(scene.size), *_lit("4")))
    pi = ParameterInstance(scene.pair, leaf)

    first = render_resolved_initializer(pi, config=CFG)
    second = render_resolved_initializer(pi, config=CFG)
    assert first == second == "(main_lf.size, 4)"


def test_end_to_end_example():
    p = _param("p", "5", type="int")
    foo = ReactorDeclaration(name="Foo", parameters=(p,))
    parent_param = _param("parentParam", "1")
    top = ReactorDeclaration(name="Top", parameters=(parent_param,))
    wrapper = ReactorDeclaration(name="Wrapper")

    tree = InstantiationTree()
    root = tree.add("top", top)
    mid = tree.add("wrapper", wrapper, parent=root)
    bar = tree.add("bar", foo, parent=mid)
    baz = tree.add("baz", foo, parent=mid, assignments=[_assign(p, Value.of_parameter(parent_param))])

    assert render_resolved_initializer(ParameterInstance(p, bar), config=CFG) == "5"
    assert render_resolved_initializer(ParameterInstance(p, baz), config=CFG) == "top_lf.parentParam"
