# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark front end for implementation blocks.

The grammar keeps every token (`keep_all_tokens=True`) so builders can slice
opaque regions such as function bodies straight out of the source text. The
builders below walk the raw parse tree and produce `exttrait.parser.ast` nodes;
anything the grammar accepts but the AST cannot represent raises
`MalformedInput` with a pinned location.

Earley parsing costs roughly linear time in the size of one impl block, but
with a large constant: an impl with a few hundred members takes seconds.
The expander only hands single ext impl blocks to the parser, never whole files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedEOF, UnexpectedInput

from exttrait.core.errors import AmbiguousNameArguments, MalformedInput

from .ast import (
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
	ExtArgs,
	FnArg,
	FnPtrType,
	ForeignItem,
	GenericArg,
	GenericParam,
	Generics,
	ImplItem,
	ImplTraitType,
	ImplementationBlock,
	InferType,
	LifetimeArg,
	LifetimeBound,
	LifetimeParam,
	LifetimePredicate,
	Located,
	MacroInvocation,
	MacroType,
	Method,
	NeverType,
	Opaque,
	ParenArgs,
	ParenType,
	PathSegment,
	PathType,
	PtrType,
	QSelf,
	RefType,
	SelfArg,
	Signature,
	SliceType,
	TraitBound,
	TraitObjectType,
	TraitRef,
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

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start=["impl_block", "ext_args", "type_root"],
	propagate_positions=True,
	keep_all_tokens=True,
	maybe_placeholders=False,
)

# Rule names produced for type expressions (`?type_expr` inlines its alternatives).
_TYPE_RULES = {
	"path_type",
	"qpath_type",
	"ref_type",
	"ptr_type",
	"slice_type",
	"array_type",
	"tuple_type",
	"paren_type",
	"never_type",
	"infer_type",
	"fn_ptr_type",
	"macro_type",
	"impl_trait_type",
	"dyn_type",
}

_BOUND_RULES = ("bound", "lifetime_bound", "trait_bound", "paren_bound")


class _Source:
	"""Text being parsed plus the slicing helper builders share."""

	def __init__(self, text: str) -> None:
		self.text = text

	def slice(self, *nodes: object) -> str:
		"""Verbatim source covering all tokens under `nodes`."""
		start: Optional[int] = None
		end: Optional[int] = None
		for node in nodes:
			for tok in _iter_tokens(node):
				if start is None or tok.start_pos < start:
					start = tok.start_pos
				if end is None or tok.end_pos > end:
					end = tok.end_pos
		if start is None or end is None:
			return ""
		return self.text[start:end]


def _iter_tokens(node: object) -> Iterable[Token]:
	if isinstance(node, Token):
		yield node
	elif isinstance(node, Tree):
		for child in node.children:
			yield from _iter_tokens(child)


def _name(node: object) -> str:
	if isinstance(node, Tree):
		return str(node.data)
	return ""


def _trees(tree: Optional[Tree], *names: str) -> List[Tree]:
	if tree is None:
		return []
	return [c for c in tree.children if isinstance(c, Tree) and (not names or _name(c) in names)]


def _first(tree: Optional[Tree], *names: str) -> Optional[Tree]:
	if tree is None:
		return None
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) in names), None)


def _tok(tree: Optional[Tree], *types: str) -> Optional[Token]:
	if tree is None:
		return None
	return next((c for c in tree.children if isinstance(c, Token) and c.type in types), None)


def _has(tree: Optional[Tree], ttype: str) -> bool:
	return _tok(tree, ttype) is not None


def _type_child(tree: Tree) -> Optional[Tree]:
	return _first(tree, *_TYPE_RULES)


def _loc(node: object) -> Located:
	if isinstance(node, Token):
		return Located(line=node.line or 0, column=node.column or 0)
	if isinstance(node, Tree):
		meta = node.meta
		if not getattr(meta, "empty", True):
			return Located(line=meta.line, column=meta.column)
		tok = next(iter(_iter_tokens(node)), None)
		if tok is not None:
			return _loc(tok)
	return Located(line=0, column=0)


def _err(message: str, node: object) -> MalformedInput:
	return MalformedInput(message, loc=_loc(node))


def _unexpected_to_error(err: UnexpectedInput, what: str) -> MalformedInput:
	if isinstance(err, UnexpectedEOF):
		return MalformedInput(f"unexpected end of input while parsing {what}", loc=None)
	tok = getattr(err, "token", None)
	if tok is not None and str(tok):
		message = f"unexpected token '{tok}' while parsing {what}"
	else:
		char = getattr(err, "char", None)
		message = f"unexpected character '{char}' while parsing {what}" if char else f"invalid {what}"
	return MalformedInput(message, loc=_error_loc(err))


def _error_loc(err: UnexpectedInput) -> Optional[Located]:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	if isinstance(line, int) and line > 0 and isinstance(column, int):
		return Located(line=line, column=column)
	return None


# --- Entry points ------------------------------------------------------------


def parse_impl_block(source: str) -> ImplementationBlock:
	"""Parse a single `impl` item (attributes included)."""
	try:
		tree = _PARSER.parse(source, start="impl_block")
	except UnexpectedInput as err:
		raise _unexpected_to_error(err, "implementation block") from err
	return _build_impl_block(tree, _Source(source))


def parse_type(source: str) -> TypeExpr:
	try:
		tree = _PARSER.parse(source, start="type_root")
	except UnexpectedInput as err:
		raise _unexpected_to_error(err, "type") from err
	inner = _type_child(tree)
	if inner is None:
		raise _err("expected a type", tree)
	return _build_type(inner, _Source(source))


def parse_ext_args(source: str) -> ExtArgs:
	"""
	Parse the contents of `#[ext(...)]`: `[visibility] [Name]`.

	Anything else (two names, stray tokens, a lone `(`) is rejected as
	`AmbiguousNameArguments`; the attribute form is the user's only way to
	name the trait, so a malformed argument list must not silently fall back
	to a derived name.
	"""
	if not source.strip():
		return ExtArgs()
	try:
		tree = _PARSER.parse(source, start="ext_args")
	except UnexpectedInput as err:
		raise AmbiguousNameArguments(
			f"expected `[visibility] [Name]` in ext arguments, got `{source.strip()}`",
			loc=_error_loc(err),
			notes=["pass at most one trait name, optionally preceded by a visibility such as `pub` or `pub(crate)`"],
		) from err
	src = _Source(source)
	vis_node = _first(tree, "visibility")
	name_tok = _tok(tree, "NAME")
	return ExtArgs(
		vis=_build_visibility(vis_node, src) if vis_node is not None else None,
		name=name_tok.value if name_tok is not None else None,
	)


def lex(source: str) -> List[Token]:
	"""Tokens of `source` (whitespace and plain comments dropped)."""
	try:
		return list(_PARSER.lex(source))
	except UnexpectedInput as err:
		raise _unexpected_to_error(err, "tokens") from err


def token_text(source: str) -> str:
	"""
	Raw token content of `source`: its tokens joined by single spaces.

	Whitespace and plain comments do not contribute; doc comments do (they are
	attributes). Raises `MalformedInput` on text the lexer cannot tokenize.
	"""
	return " ".join(tok.value for tok in lex(source))


# --- Items -------------------------------------------------------------------


def _build_impl_block(tree: Tree, src: _Source) -> ImplementationBlock:
	attrs = [_build_attr(a, src) for a in _trees(tree, "outer_attr")]
	default_node = _first(tree, "impl_defaultness")
	if default_node is not None:
		_expect_default_kw(default_node)
	target = _first(tree, "inherent_target", "trait_target")
	if target is None:
		raise _err("implementation block missing self type", tree)
	trait_ref: Optional[TraitRef] = None
	if _name(target) == "trait_target":
		trait_node = _first(target, "path_type")
		self_node = _trees(target, *_TYPE_RULES)[-1]
		trait_ref = TraitRef(path=_build_path_type(trait_node, src), negative=_has(target, "BANG"))
		self_ty = _build_type(self_node, src)
	else:
		self_ty = _build_type(_type_child(target), src)
	body = _first(tree, "impl_body")
	inner_attrs = [_build_attr(a, src) for a in _trees(body, "inner_attr")]
	items = [_build_impl_item(item, src) for item in _trees(body) if _name(item) != "inner_attr"]
	return ImplementationBlock(
		self_ty=self_ty,
		items=items,
		generics=_build_generics(_first(tree, "generics"), _first(tree, "where_clause"), src),
		attrs=attrs,
		inner_attrs=inner_attrs,
		unsafety=_has(tree, "UNSAFE"),
		defaultness=default_node is not None,
		trait_=trait_ref,
		source=src.text,
		loc=_loc(tree),
	)


def _expect_default_kw(node: Tree) -> None:
	tok = _tok(node, "NAME")
	if tok is None or tok.value != "default":
		raise _err(f"unexpected identifier '{tok}' before item", node)


def _item_prefix(tree: Tree, src: _Source) -> Tuple[List[Attribute], Visibility, bool]:
	attrs = [_build_attr(a, src) for a in _trees(tree, "outer_attr")]
	vis_node = _first(tree, "visibility")
	vis = _build_visibility(vis_node, src) if vis_node is not None else Visibility()
	default_node = _first(tree, "item_defaultness")
	if default_node is not None:
		_expect_default_kw(default_node)
	return attrs, vis, default_node is not None


def _build_impl_item(tree: Tree, src: _Source) -> ImplItem:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "method_item":
		attrs, vis, default = _item_prefix(tree, src)
		fn_node = _first(tree, "fn_item")
		tail = _first(fn_node, "fn_tail")
		body = _first(tail, "brace_tree")
		if body is None:
			return Verbatim(tokens=Opaque(src.slice(tree)), loc=loc)
		return Method(
			sig=_build_signature(fn_node, src),
			body=Opaque(src.slice(body)),
			attrs=attrs,
			vis=vis,
			defaultness=default,
			loc=loc,
		)
	if kind == "const_member":
		attrs, vis, default = _item_prefix(tree, src)
		node = _first(tree, "const_item")
		init = _first(node, "const_init")
		if init is None:
			return Verbatim(tokens=Opaque(src.slice(tree)), loc=loc)
		name_node = _first(node, "const_name")
		return Constant(
			name=src.slice(name_node),
			ty=_build_type(_type_child(node), src),
			value=Opaque(src.slice(*_trees(init, "value_tok"))),
			attrs=attrs,
			vis=vis,
			defaultness=default,
			loc=loc,
		)
	if kind == "type_member":
		attrs, vis, default = _item_prefix(tree, src)
		node = _first(tree, "type_item")
		type_def = _first(node, "type_def")
		if type_def is None:
			return Verbatim(tokens=Opaque(src.slice(tree)), loc=loc)
		where_nodes = [w for w in (_first(node, "where_clause"), _first(type_def, "where_clause")) if w is not None]
		bounds_node = _first(node, "type_bounds")
		bounds: List[Bound] = []
		if bounds_node is not None and _first(bounds_node, "bounds") is not None:
			bounds = _build_bounds(_first(bounds_node, "bounds"), src)
		return AssociatedType(
			name=_tok(node, "NAME").value,
			definition=_build_type(_type_child(type_def), src),
			generics=_build_generics(_first(node, "generics"), where_nodes, src),
			bounds=bounds,
			attrs=attrs,
			vis=vis,
			defaultness=default,
			loc=loc,
		)
	if kind == "macro_member":
		attrs = [_build_attr(a, src) for a in _trees(tree, "outer_attr")]
		node = _first(tree, "macro_item")
		path_node = _first(node, "macro_path")
		after_bang = [c for c in node.children if not (isinstance(c, Token) and c.type in ("BANG", "SEMI")) and c is not path_node]
		return MacroInvocation(
			path=src.slice(path_node),
			tokens=Opaque(src.slice(*after_bang)),
			semi=_has(node, "SEMI"),
			attrs=attrs,
			loc=loc,
		)
	if kind == "foreign_member":
		node = _first(tree, "foreign_item")
		head = _first(node, "foreign_head")
		return ForeignItem(kind=src.slice(head), tokens=Opaque(src.slice(tree)), loc=loc)
	raise _err(f"unsupported implementation item node: {kind}", tree)


def _build_signature(tree: Tree, src: _Source) -> Signature:
	quals = _first(tree, "fn_qualifiers")
	abi: Optional[str] = None
	abi_node = _first(quals, "fn_abi")
	if abi_node is not None:
		abi = _build_abi(abi_node, src)
	inputs: List[FnArg] = []
	params = _first(tree, "fn_params")
	if params is not None:
		inputs = [_build_fn_arg(p, src) for p in _trees(params, "fn_param")]
	output: Optional[TypeExpr] = None
	ret = _first(tree, "fn_ret")
	if ret is not None:
		output = _build_type(_type_child(ret), src)
	return Signature(
		name=_tok(tree, "NAME").value,
		generics=_build_generics(_first(tree, "generics"), _first(tree, "where_clause"), src),
		inputs=inputs,
		output=output,
		constness=_has(quals, "CONST"),
		asyncness=_has(quals, "ASYNC"),
		unsafety=_has(quals, "UNSAFE"),
		abi=abi,
	)


def _build_abi(tree: Tree, src: _Source) -> str:
	abi_string = _first(tree, "abi_string")
	return src.slice(abi_string) if abi_string is not None else ""


def _build_fn_arg(tree: Tree, src: _Source) -> FnArg:
	attrs = [_build_attr(a, src) for a in _trees(tree, "outer_attr")]
	pat_nodes = _trees(tree, "pat_tok")
	ty_node = _type_child(tree)
	# Self receivers are recognised from their token shape; everything else is an
	# opaque pattern followed by a mandatory type.
	shape = [tok.type for node in pat_nodes for tok in _iter_tokens(node)]
	values = [tok.value for node in pat_nodes for tok in _iter_tokens(node)]
	if shape in (["SELF_LOWER"], ["MUT", "SELF_LOWER"]):
		return SelfArg(
			mutable=shape[0] == "MUT",
			ty=_build_type(ty_node, src) if ty_node is not None else None,
			attrs=attrs,
		)
	if shape and shape[0] == "AMP" and shape[-1] == "SELF_LOWER":
		middle = shape[1:-1]
		if middle in ([], ["MUT"], ["LIFETIME"], ["LIFETIME", "MUT"]):
			if ty_node is not None:
				raise _err("reference receiver cannot carry an explicit type", tree)
			return SelfArg(
				reference=True,
				lifetime=values[1] if middle[:1] == ["LIFETIME"] else None,
				mutable=bool(middle) and middle[-1] == "MUT",
				attrs=attrs,
			)
	if shape == ["DOTDOTDOT"] and ty_node is None:
		return VariadicArg(attrs=attrs)
	if ty_node is None:
		raise _err(f"parameter '{src.slice(*pat_nodes)}' requires a type", tree)
	return TypedArg(pattern=Opaque(src.slice(*pat_nodes)), ty=_build_type(ty_node, src), attrs=attrs)


def _build_attr(tree: Tree, src: _Source) -> Attribute:
	return Attribute(text=src.slice(tree), inner=_name(tree) == "inner_attr")


def _build_visibility(tree: Tree, src: _Source) -> Visibility:
	if _has(tree, "CRATE"):
		return Visibility(kind=VIS_CRATE)
	restriction = _first(tree, "vis_restriction")
	if restriction is None:
		return Visibility(kind=VIS_PUB)
	scope_node = _first(restriction, "vis_scope")
	path_node = _first(scope_node, "vis_path")
	if path_node is not None:
		scope = f"in {src.slice(path_node)}"
	else:
		scope = src.slice(scope_node)
	return Visibility(kind=VIS_RESTRICTED, scope=scope)


# --- Generics ----------------------------------------------------------------


def _build_generics(tree: Optional[Tree], where: object, src: _Source) -> Generics:
	params: List[GenericParam] = []
	if tree is not None:
		params = [_build_generic_param(p, src) for p in _trees(tree, "generic_param")]
	where_nodes: List[Tree]
	if where is None:
		where_nodes = []
	elif isinstance(where, Tree):
		where_nodes = [where]
	else:
		where_nodes = list(where)  # type: ignore[arg-type]
	where_clause: Optional[WhereClause] = None
	if where_nodes:
		predicates: List[WherePredicate] = []
		for node in where_nodes:
			predicates.extend(_build_where_predicate(p, src) for p in _trees(node, "lifetime_predicate", "type_predicate"))
		where_clause = WhereClause(predicates=predicates)
	return Generics(params=params, where_clause=where_clause)


def _build_generic_param(tree: Tree, src: _Source) -> GenericParam:
	attrs = [_build_attr(a, src) for a in _trees(tree, "outer_attr")]
	node = _first(tree, "lifetime_param", "type_param", "const_param")
	kind = _name(node)
	if kind == "lifetime_param":
		param = _build_lifetime_param(node)
		param.attrs = attrs
		return param
	if kind == "type_param":
		bounds_node = _first(node, "bounds")
		default_node = _type_child(node)
		return TypeParam(
			name=_tok(node, "NAME").value,
			bounds=_build_bounds(bounds_node, src) if bounds_node is not None else [],
			default=_build_type(default_node, src) if default_node is not None else None,
			attrs=attrs,
		)
	default_value = _first(node, "const_value")
	return ConstParam(
		name=_tok(node, "NAME").value,
		ty=_build_type(_type_child(node), src),
		default=Opaque(src.slice(default_value)) if default_value is not None else None,
		attrs=attrs,
	)


def _build_lifetime_param(tree: Tree) -> LifetimeParam:
	bounds_node = _first(tree, "lifetime_bounds")
	return LifetimeParam(
		name=_tok(tree, "LIFETIME").value,
		bounds=_lifetime_list(bounds_node),
	)


def _lifetime_list(tree: Optional[Tree]) -> List[str]:
	if tree is None:
		return []
	return [tok.value for tok in tree.children if isinstance(tok, Token) and tok.type == "LIFETIME"]


def _build_for_lifetimes(tree: Optional[Tree]) -> List[LifetimeParam]:
	if tree is None:
		return []
	return [_build_lifetime_param(p) for p in _trees(tree, "lifetime_param")]


def _build_bounds(tree: Tree, src: _Source) -> List[Bound]:
	return [_build_bound(b, src) for b in _trees(tree, *_BOUND_RULES)]


def _build_bound(tree: Tree, src: _Source) -> Bound:
	kind = _name(tree)
	if kind == "bound":
		# Unaliased `trait_bound` alternative.
		return _build_bound(_first(tree, "trait_bound"), src)
	if kind == "lifetime_bound":
		return LifetimeBound(name=_tok(tree, "LIFETIME").value)
	if kind == "paren_bound":
		inner = _build_trait_bound(_first(tree, "trait_bound"), src)
		inner.parenthesized = True
		return inner
	return _build_trait_bound(tree, src)


def _build_trait_bound(tree: Tree, src: _Source) -> TraitBound:
	return TraitBound(
		path=_build_path_type(_first(tree, "path_type"), src),
		modifier="?" if _has(tree, "QMARK") else "",
		lifetimes=_build_for_lifetimes(_first(tree, "for_lifetimes")),
	)


def _build_where_predicate(tree: Tree, src: _Source) -> WherePredicate:
	if _name(tree) == "lifetime_predicate":
		return LifetimePredicate(
			lifetime=_tok(tree, "LIFETIME").value,
			bounds=_lifetime_list(_first(tree, "lifetime_bounds")),
		)
	bounds_node = _first(tree, "bounds")
	return TypePredicate(
		bounded=_build_type(_type_child(tree), src),
		bounds=_build_bounds(bounds_node, src) if bounds_node is not None else [],
		lifetimes=_build_for_lifetimes(_first(tree, "for_lifetimes")),
	)


# --- Types -------------------------------------------------------------------


def _build_type(tree: Optional[Tree], src: _Source) -> TypeExpr:
	if tree is None:
		raise MalformedInput("expected a type", loc=None)
	kind = _name(tree)
	if kind == "path_type":
		return _build_path_type(tree, src)
	if kind == "qpath_type":
		return _build_qpath_type(tree, src)
	if kind == "ref_type":
		lifetime = _tok(tree, "LIFETIME")
		return RefType(
			inner=_build_type(_type_child(tree), src),
			lifetime=lifetime.value if lifetime is not None else None,
			mutable=_has(tree, "MUT"),
		)
	if kind == "ptr_type":
		return PtrType(inner=_build_type(_type_child(tree), src), mutable=_has(tree, "MUT"))
	if kind == "slice_type":
		return SliceType(inner=_build_type(_type_child(tree), src))
	if kind == "array_type":
		return ArrayType(
			inner=_build_type(_type_child(tree), src),
			length=Opaque(src.slice(*_trees(tree, "value_tok"))),
		)
	if kind == "tuple_type":
		return TupleType(elems=[_build_type(t, src) for t in _trees(tree, *_TYPE_RULES)])
	if kind == "paren_type":
		return ParenType(inner=_build_type(_type_child(tree), src))
	if kind == "never_type":
		return NeverType()
	if kind == "infer_type":
		return InferType()
	if kind == "fn_ptr_type":
		return _build_fn_ptr_type(tree, src)
	if kind == "macro_type":
		return MacroType(
			path=src.slice(_first(tree, "path_type")),
			tokens=Opaque(src.slice(_first(tree, "token_tree"))),
		)
	if kind == "impl_trait_type":
		return ImplTraitType(bounds=_build_dyn_bounds(tree, src))
	if kind == "dyn_type":
		return TraitObjectType(bounds=_build_dyn_bounds(tree, src), dyn=True)
	raise _err(f"unsupported type node: {kind}", tree)


def _build_dyn_bounds(tree: Tree, src: _Source) -> List[Bound]:
	bounds_node = _first(tree, "bounds")
	if bounds_node is not None:
		return _build_bounds(bounds_node, src)
	single = _first(tree, *_BOUND_RULES)
	if single is None:
		raise _err("expected a bound", tree)
	return [_build_bound(single, src)]


def _build_path_type(tree: Tree, src: _Source) -> PathType:
	segments = [_build_path_segment(s, src) for s in _trees(tree, "path_segment", "turbofish_segment")]
	leading = bool(tree.children) and isinstance(tree.children[0], Token) and tree.children[0].type == "DCOLON"
	return PathType(segments=segments, leading_colon=leading)


def _build_path_segment(tree: Tree, src: _Source) -> PathSegment:
	ident = _first(tree, "path_ident")
	name = src.slice(ident)
	if _name(tree) == "turbofish_segment":
		args = _build_angle_args(_first(tree, "angle_args"), src)
		args.turbofish = True
		return PathSegment(name=name, args=args)
	angle = _first(tree, "angle_args")
	if angle is not None:
		return PathSegment(name=name, args=_build_angle_args(angle, src))
	paren = _first(tree, "paren_args")
	if paren is not None:
		return PathSegment(name=name, args=_build_paren_args(paren, src))
	return PathSegment(name=name)


def _build_angle_args(tree: Tree, src: _Source) -> AngleArgs:
	return AngleArgs(args=[_build_generic_arg(a, src) for a in _trees(tree)])


def _build_paren_args(tree: Tree, src: _Source) -> ParenArgs:
	inputs: List[TypeExpr] = []
	output: Optional[TypeExpr] = None
	after_arrow = False
	for child in tree.children:
		if isinstance(child, Token):
			after_arrow = after_arrow or child.type == "ARROW"
			continue
		if after_arrow:
			output = _build_type(child, src)
		else:
			inputs.append(_build_type(child, src))
	return ParenArgs(inputs=inputs, output=output)


def _build_generic_arg(tree: Tree, src: _Source) -> GenericArg:
	kind = _name(tree)
	if kind == "type_arg":
		return TypeArg(ty=_build_type(_type_child(tree), src))
	if kind == "lifetime_arg":
		return LifetimeArg(name=_tok(tree, "LIFETIME").value)
	if kind == "const_arg":
		return ConstArg(expr=Opaque(src.slice(tree)))
	angle = _first(tree, "angle_args")
	args = _build_angle_args(angle, src) if angle is not None else None
	name = _tok(tree, "NAME").value
	if kind == "binding_arg":
		return BindingArg(name=name, ty=_build_type(_type_child(tree), src), args=args)
	if kind == "constraint_arg":
		return ConstraintArg(name=name, bounds=_build_bounds(_first(tree, "bounds"), src), args=args)
	raise _err(f"unsupported generic argument node: {kind}", tree)


def _build_qpath_type(tree: Tree, src: _Source) -> PathType:
	# LT type (AS path_type)? GT DCOLON path_segment (DCOLON path_segment)*
	qself_ty: Optional[TypeExpr] = None
	trait_path: Optional[PathType] = None
	segments: List[PathSegment] = []
	closed = False
	saw_as = False
	for child in tree.children:
		if isinstance(child, Token):
			if child.type == "AS":
				saw_as = True
			elif child.type == "GT" and not closed:
				closed = True
			continue
		if closed:
			segments.append(_build_path_segment(child, src))
		elif saw_as:
			trait_path = _build_path_type(child, src)
		else:
			qself_ty = _build_type(child, src)
	if qself_ty is None:
		raise _err("qualified path missing self type", tree)
	return PathType(segments=segments, qself=QSelf(ty=qself_ty, trait_=trait_path))


def _build_fn_ptr_type(tree: Tree, src: _Source) -> FnPtrType:
	abi_node = _first(tree, "fn_abi")
	inputs: List[BareFnArg] = []
	variadic = False
	args_node = _first(tree, "bare_fn_args")
	if args_node is not None:
		variadic = _has(args_node, "DOTDOTDOT")
		for arg in _trees(args_node, "bare_fn_arg"):
			name_node = _first(arg, "bare_fn_name")
			inputs.append(
				BareFnArg(
					ty=_build_type(_type_child(arg), src),
					name=src.slice(name_node) if name_node is not None else None,
				)
			)
	output: Optional[TypeExpr] = None
	after_arrow = False
	for child in tree.children:
		if isinstance(child, Token):
			after_arrow = after_arrow or child.type == "ARROW"
			continue
		if after_arrow and _name(child) in _TYPE_RULES:
			output = _build_type(child, src)
	return FnPtrType(
		inputs=inputs,
		output=output,
		lifetimes=_build_for_lifetimes(_first(tree, "for_lifetimes")),
		unsafe=_has(tree, "UNSAFE"),
		abi=_build_abi(abi_node, src) if abi_node is not None else None,
		variadic=variadic,
	)


__all__ = ["lex", "parse_ext_args", "parse_impl_block", "parse_type", "token_text"]
