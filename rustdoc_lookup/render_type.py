"""Rendering of type expressions as Rust source text."""

from rustdoc_lookup.errors import UnsupportedConstruct
from rustdoc_lookup.models import (
    AngleBracketed,
    Array,
    BorrowedRef,
    ConstArg,
    DynTrait,
    FunctionPointer,
    Generic,
    GenericArg,
    GenericArgs,
    GenericBound,
    ImplTrait,
    InferArg,
    LifetimeArg,
    OutlivesBound,
    Parenthesized,
    Primitive,
    QualifiedPath,
    RawPointer,
    ResolvedPath,
    Slice,
    TraitBound,
    Tuple,
    TypeArg,
    TypeExpr,
    UnknownType,
)


def lifetime(name: str) -> str:
    """Return a lifetime with exactly one leading quote."""
    return name if name.startswith("'") else f"'{name}"


def render_type(ty: TypeExpr) -> str:
    """Render a type expression, e.g. `&'a mut Vec<T>`."""
    if isinstance(ty, (Primitive, Generic)):
        return ty.name
    if isinstance(ty, ResolvedPath):
        return render_path(ty)
    if isinstance(ty, BorrowedRef):
        out = "&"
        if ty.lifetime:
            out += lifetime(ty.lifetime) + " "
        if ty.mutable:
            out += "mut "
        return out + render_type(ty.type)
    if isinstance(ty, RawPointer):
        return ("*mut " if ty.mutable else "*const ") + render_type(ty.type)
    if isinstance(ty, Slice):
        return f"[{render_type(ty.type)}]"
    if isinstance(ty, Array):
        return f"[{render_type(ty.type)}; {ty.len}]"
    if isinstance(ty, Tuple):
        return "(" + ", ".join(render_type(t) for t in ty.types) + ")"
    if isinstance(ty, DynTrait):
        bounds = [render_path(t.trait) for t in ty.traits]
        if ty.lifetime:
            bounds.append(lifetime(ty.lifetime))
        return "dyn " + " + ".join(bounds)
    if isinstance(ty, ImplTrait):
        return "impl " + " + ".join(render_bound(b) for b in ty.bounds)
    if isinstance(ty, FunctionPointer):
        return "fn()"
    if isinstance(ty, QualifiedPath):
        return ty.name
    if isinstance(ty, UnknownType):
        raise UnsupportedConstruct(f"type `{ty.tag}`")
    raise UnsupportedConstruct(f"type `{type(ty).__name__}`")


def render_path(path: ResolvedPath) -> str:
    """Render a path's short name followed by its generic arguments."""
    if path.args is None:
        return path.name
    return path.name + render_generic_args(path.args)


def render_generic_args(args: GenericArgs) -> str:
    if isinstance(args, AngleBracketed):
        if not args.args:
            return ""
        return "<" + ", ".join(render_generic_arg(a) for a in args.args) + ">"
    if isinstance(args, Parenthesized):
        out = "(" + ", ".join(render_type(t) for t in args.inputs) + ")"
        if args.output is not None:
            out += " -> " + render_type(args.output)
        return out
    raise UnsupportedConstruct(f"generic arguments `{type(args).__name__}`")


def render_generic_arg(arg: GenericArg) -> str:
    if isinstance(arg, LifetimeArg):
        return lifetime(arg.name)
    if isinstance(arg, InferArg):
        return "_"
    if isinstance(arg, TypeArg):
        return render_type(arg.type)
    if isinstance(arg, ConstArg):
        if arg.type is None:
            return f"const {arg.expr}"
        return f"const {arg.expr}: {render_type(arg.type)}"
    raise UnsupportedConstruct(f"generic argument `{type(arg).__name__}`")


def render_bound(bound: GenericBound) -> str:
    if isinstance(bound, TraitBound):
        return render_path(bound.trait)
    if isinstance(bound, OutlivesBound):
        return lifetime(bound.lifetime)
    raise UnsupportedConstruct(f"bound `{type(bound).__name__}`")
