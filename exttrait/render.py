# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust text for AST nodes.

Output is deterministic and plain: headers on one line, one member per line
inside braces with a tab indent, attributes on their own lines. Opaque slices
(bodies, values, macro tokens, patterns) come out exactly as they were read.
No other formatting is attempted.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from exttrait.parser.ast import (
	AngleArgs,
	ArrayType,
	AssociatedType,
	Attribute,
	BareFnArg,
	BindingArg,
	Bound,
	ConstArg,
	ConstParam,
	Constant,
	ConstraintArg,
	FnArg,
	FnPtrType,
	ForeignItem,
	GenericArg,
	GenericArgs,
	GenericParam,
	Generics,
	ImplTraitType,
	ImplementationBlock,
	InferType,
	LifetimeArg,
	LifetimeBound,
	LifetimeParam,
	LifetimePredicate,
	MacroInvocation,
	MacroType,
	Method,
	NeverType,
	ParenArgs,
	ParenType,
	PathSegment,
	PathType,
	PtrType,
	RefType,
	SelfArg,
	Signature,
	SliceType,
	TraitBound,
	TraitConst,
	TraitDecl,
	TraitMethod,
	TraitObjectType,
	TraitType,
	TupleType,
	TypeArg,
	TypeExpr,
	TypeParam,
	TypePredicate,
	TypedArg,
	VariadicArg,
	Verbatim,
	Visibility,
	VIS_CRATE,
	VIS_PUB,
	VIS_RESTRICTED,
	WhereClause,
	WherePredicate,
)

INDENT = "\t"


# --- Types -------------------------------------------------------------------


def render_type(ty: TypeExpr) -> str:
	if isinstance(ty, PathType):
		return render_path(ty)
	if isinstance(ty, RefType):
		parts = ["&"]
		if ty.lifetime:
			parts.append(ty.lifetime + " ")
		if ty.mutable:
			parts.append("mut ")
		parts.append(render_type(ty.inner))
		return "".join(parts)
	if isinstance(ty, PtrType):
		return ("*mut " if ty.mutable else "*const ") + render_type(ty.inner)
	if isinstance(ty, SliceType):
		return f"[{render_type(ty.inner)}]"
	if isinstance(ty, ArrayType):
		return f"[{render_type(ty.inner)}; {ty.length.text}]"
	if isinstance(ty, TupleType):
		if len(ty.elems) == 1:
			return f"({render_type(ty.elems[0])},)"
		return "(" + ", ".join(render_type(t) for t in ty.elems) + ")"
	if isinstance(ty, ParenType):
		return f"({render_type(ty.inner)})"
	if isinstance(ty, NeverType):
		return "!"
	if isinstance(ty, InferType):
		return "_"
	if isinstance(ty, TraitObjectType):
		prefix = "dyn " if ty.dyn else ""
		return prefix + render_bounds(ty.bounds)
	if isinstance(ty, ImplTraitType):
		return "impl " + render_bounds(ty.bounds)
	if isinstance(ty, FnPtrType):
		return _render_fn_ptr(ty)
	if isinstance(ty, MacroType):
		return f"{ty.path}!{ty.tokens.text}"
	raise TypeError(f"cannot render type node {type(ty).__name__}")


def render_path(path: PathType) -> str:
	prefix = ""
	if path.qself is not None:
		inner = render_type(path.qself.ty)
		if path.qself.trait_ is not None:
			inner += " as " + render_path(path.qself.trait_)
		prefix = f"<{inner}>::"
	elif path.leading_colon:
		prefix = "::"
	return prefix + "::".join(_render_segment(s) for s in path.segments)


def _render_segment(seg: PathSegment) -> str:
	if seg.args is None:
		return seg.name
	return seg.name + render_generic_args(seg.args)


def render_generic_args(args: GenericArgs) -> str:
	if isinstance(args, AngleArgs):
		body = "<" + ", ".join(render_generic_arg(a) for a in args.args) + ">"
		return ("::" + body) if args.turbofish else body
	if isinstance(args, ParenArgs):
		text = "(" + ", ".join(render_type(t) for t in args.inputs) + ")"
		if args.output is not None:
			text += " -> " + render_type(args.output)
		return text
	raise TypeError(f"cannot render generic arguments {type(args).__name__}")


def render_generic_arg(arg: GenericArg) -> str:
	if isinstance(arg, TypeArg):
		return render_type(arg.ty)
	if isinstance(arg, LifetimeArg):
		return arg.name
	if isinstance(arg, ConstArg):
		return arg.expr.text
	if isinstance(arg, BindingArg):
		args = render_generic_args(arg.args) if arg.args is not None else ""
		return f"{arg.name}{args} = {render_type(arg.ty)}"
	if isinstance(arg, ConstraintArg):
		args = render_generic_args(arg.args) if arg.args is not None else ""
		return f"{arg.name}{args}: {render_bounds(arg.bounds)}"
	raise TypeError(f"cannot render generic argument {type(arg).__name__}")


def _render_fn_ptr(ty: FnPtrType) -> str:
	parts: List[str] = []
	if ty.lifetimes:
		parts.append(_render_for(ty.lifetimes))
	if ty.unsafe:
		parts.append("unsafe ")
	if ty.abi is not None:
		parts.append(_render_abi(ty.abi))
	inputs = [_render_bare_arg(a) for a in ty.inputs]
	if ty.variadic:
		inputs.append("...")
	parts.append("fn(" + ", ".join(inputs) + ")")
	if ty.output is not None:
		parts.append(" -> " + render_type(ty.output))
	return "".join(parts)


def _render_bare_arg(arg: BareFnArg) -> str:
	if arg.name is not None:
		return f"{arg.name}: {render_type(arg.ty)}"
	return render_type(arg.ty)


def _render_abi(abi: str) -> str:
	return f"extern {abi} " if abi else "extern "


# --- Bounds & generics -----------------------------------------------------


def render_bound(bound: Bound) -> str:
	if isinstance(bound, LifetimeBound):
		return bound.name
	if isinstance(bound, TraitBound):
		text = ""
		if bound.lifetimes:
			text += _render_for(bound.lifetimes)
		text += bound.modifier + render_path(bound.path)
		return f"({text})" if bound.parenthesized else text
	raise TypeError(f"cannot render bound {type(bound).__name__}")


def render_bounds(bounds: Iterable[Bound]) -> str:
	return " + ".join(render_bound(b) for b in bounds)


def _render_for(lifetimes: Sequence[LifetimeParam]) -> str:
	return "for<" + ", ".join(_render_lifetime_param(p) for p in lifetimes) + "> "


def _render_lifetime_param(param: LifetimeParam) -> str:
	if param.bounds:
		return f"{param.name}: " + " + ".join(param.bounds)
	return param.name


def _render_attrs_inline(attrs: Sequence[Attribute]) -> str:
	return "".join(a.text + " " for a in attrs)


def render_generic_param(param: GenericParam) -> str:
	prefix = _render_attrs_inline(param.attrs)
	if isinstance(param, LifetimeParam):
		return prefix + _render_lifetime_param(param)
	if isinstance(param, TypeParam):
		text = param.name
		if param.bounds:
			text += ": " + render_bounds(param.bounds)
		if param.default is not None:
			text += " = " + render_type(param.default)
		return prefix + text
	if isinstance(param, ConstParam):
		text = f"const {param.name}: {render_type(param.ty)}"
		if param.default is not None:
			text += " = " + param.default.text
		return prefix + text
	raise TypeError(f"cannot render generic parameter {type(param).__name__}")


def render_params(params: Sequence[GenericParam]) -> str:
	"""`<...>` parameter list, or "" when there are no parameters."""
	if not params:
		return ""
	return "<" + ", ".join(render_generic_param(p) for p in params) + ">"


def render_predicate(pred: WherePredicate) -> str:
	if isinstance(pred, LifetimePredicate):
		if not pred.bounds:
			return f"{pred.lifetime}:"
		return f"{pred.lifetime}: " + " + ".join(pred.bounds)
	if isinstance(pred, TypePredicate):
		head = _render_for(pred.lifetimes) if pred.lifetimes else ""
		head += render_type(pred.bounded) + ":"
		if pred.bounds:
			head += " " + render_bounds(pred.bounds)
		return head
	raise TypeError(f"cannot render where predicate {type(pred).__name__}")


def render_where(where: Optional[WhereClause]) -> str:
	"""` where A: B, ...` with a leading space, or "" for no clause."""
	if where is None:
		return ""
	if not where.predicates:
		return " where"
	return " where " + ", ".join(render_predicate(p) for p in where.predicates)


def render_visibility(vis: Visibility) -> str:
	"""Visibility keyword(s) with a trailing space, "" when inherited."""
	if vis.kind == VIS_PUB:
		return "pub "
	if vis.kind == VIS_CRATE:
		return "crate "
	if vis.kind == VIS_RESTRICTED:
		return f"pub({vis.scope}) "
	return ""


# --- Signatures & members ----------------------------------------------------


def render_fn_arg(arg: FnArg) -> str:
	prefix = _render_attrs_inline(getattr(arg, "attrs", []))
	if isinstance(arg, SelfArg):
		if arg.reference:
			text = "&"
			if arg.lifetime:
				text += arg.lifetime + " "
			if arg.mutable:
				text += "mut "
			return prefix + text + "self"
		text = ("mut " if arg.mutable else "") + "self"
		if arg.ty is not None:
			text += ": " + render_type(arg.ty)
		return prefix + text
	if isinstance(arg, TypedArg):
		return prefix + f"{arg.pattern.text}: {render_type(arg.ty)}"
	if isinstance(arg, VariadicArg):
		if arg.pattern is not None:
			return prefix + f"{arg.pattern.text}: ..."
		return prefix + "..."
	raise TypeError(f"cannot render function argument {type(arg).__name__}")


def render_signature(sig: Signature) -> str:
	parts: List[str] = []
	if sig.constness:
		parts.append("const ")
	if sig.asyncness:
		parts.append("async ")
	if sig.unsafety:
		parts.append("unsafe ")
	if sig.abi is not None:
		parts.append(_render_abi(sig.abi))
	parts.append("fn " + sig.name + render_params(sig.generics.params))
	parts.append("(" + ", ".join(render_fn_arg(a) for a in sig.inputs) + ")")
	if sig.output is not None:
		parts.append(" -> " + render_type(sig.output))
	parts.append(render_where(sig.generics.where_clause))
	return "".join(parts)


def _render_macro(mac: MacroInvocation) -> str:
	tokens = mac.tokens.text
	sep = " " if tokens[:1].isidentifier() else ""
	return f"{mac.path}!{sep}{tokens}" + (";" if mac.semi else "")


def _member_prefix(vis: Visibility, defaultness: bool) -> str:
	return render_visibility(vis) + ("default " if defaultness else "")


def _item_lines(attrs: Sequence[Attribute], line: str) -> List[str]:
	return [a.text for a in attrs] + [line]


def render_item(item: object) -> List[str]:
	"""Lines (unindented) for one impl or trait member."""
	if isinstance(item, Method):
		line = _member_prefix(item.vis, item.defaultness) + render_signature(item.sig) + " " + item.body.text
		return _item_lines(item.attrs, line)
	if isinstance(item, Constant):
		line = _member_prefix(item.vis, item.defaultness)
		line += f"const {item.name}: {render_type(item.ty)} = {item.value.text};"
		return _item_lines(item.attrs, line)
	if isinstance(item, AssociatedType):
		line = _member_prefix(item.vis, item.defaultness) + "type " + item.name + render_params(item.generics.params)
		if item.bounds:
			line += ": " + render_bounds(item.bounds)
		line += " = " + render_type(item.definition) + render_where(item.generics.where_clause) + ";"
		return _item_lines(item.attrs, line)
	if isinstance(item, MacroInvocation):
		return _item_lines(item.attrs, _render_macro(item))
	if isinstance(item, (Verbatim, ForeignItem)):
		return [item.tokens.text]
	if isinstance(item, TraitMethod):
		return _item_lines(item.attrs, render_signature(item.sig) + ";")
	if isinstance(item, TraitConst):
		return _item_lines(item.attrs, f"const {item.name}: {render_type(item.ty)};")
	if isinstance(item, TraitType):
		line = "type " + item.name + render_params(item.generics.params)
		if item.bounds:
			line += ": " + render_bounds(item.bounds)
		line += render_where(item.generics.where_clause) + ";"
		return _item_lines(item.attrs, line)
	raise TypeError(f"cannot render member {type(item).__name__}")


def _render_body(inner_attrs: Sequence[Attribute], items: Sequence[object]) -> List[str]:
	lines = [INDENT + a.text for a in inner_attrs]
	for item in items:
		lines.extend(INDENT + line for line in render_item(item))
	return lines


def _wrap(header: str, attrs: Sequence[Attribute], body: List[str]) -> str:
	lines = [a.text for a in attrs]
	if body:
		lines.append(header + " {")
		lines.extend(body)
		lines.append("}")
	else:
		lines.append(header + " {}")
	return "\n".join(lines)


# --- Items -------------------------------------------------------------------


def render_trait(decl: TraitDecl) -> str:
	header = render_visibility(decl.vis) + ("unsafe " if decl.unsafety else "") + "trait " + decl.name
	header += render_params(decl.generics.params) + render_where(decl.generics.where_clause)
	return _wrap(header, decl.attrs, _render_body(decl.inner_attrs, decl.items))


def render_impl(block: ImplementationBlock) -> str:
	header = ("default " if block.defaultness else "") + ("unsafe " if block.unsafety else "") + "impl"
	header += render_params(block.generics.params) + " "
	if block.trait_ is not None:
		header += ("!" if block.trait_.negative else "") + render_path(block.trait_.path) + " for "
	header += render_type(block.self_ty) + render_where(block.generics.where_clause)
	return _wrap(header, block.attrs, _render_body(block.inner_attrs, block.items))


def render_expansion(expansion: Iterable[object]) -> str:
	"""Declaration and implementation, in that order, separated by a newline."""
	parts: List[str] = []
	for node in expansion:
		if isinstance(node, TraitDecl):
			parts.append(render_trait(node))
		elif isinstance(node, ImplementationBlock):
			parts.append(render_impl(node))
		else:
			raise TypeError(f"cannot render item {type(node).__name__}")
	return "\n".join(parts)


__all__ = [
	"render_bound",
	"render_bounds",
	"render_expansion",
	"render_fn_arg",
	"render_generic_arg",
	"render_generic_args",
	"render_generic_param",
	"render_impl",
	"render_item",
	"render_params",
	"render_path",
	"render_predicate",
	"render_signature",
	"render_trait",
	"render_type",
	"render_visibility",
	"render_where",
]
