# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Surface AST for Rust implementation blocks and trait declarations.

Only the parts of an item the ext transformation needs to understand are
modelled structurally: generics, bounds, where-clauses, types and member
signatures. Everything else (function bodies, constant values, macro bodies,
attribute contents, parameter patterns) is kept as `Opaque` source text and
re-emitted verbatim.

Nodes are plain dataclasses. Transformation stages never mutate a node they
were given; they build new ones with `dataclasses.replace`. Source locations
are excluded from equality so structurally identical types compare equal no
matter where they were written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


@dataclass(frozen=True)
class Opaque:
	"""Verbatim source slice (a body, an initializer, a pattern, ...)."""

	text: str


@dataclass
class Attribute:
	"""
	Outer (`#[...]`, `///`) or inner (`#![...]`, `//!`) attribute.

	Doc comments are attributes in Rust; they are kept as written so the
	generated trait carries the same documentation as the inherent item.
	"""

	text: str
	inner: bool = False


# Visibility kinds.
VIS_INHERITED = "inherited"
VIS_PUB = "pub"
VIS_CRATE = "crate"  # legacy `crate fn`
VIS_RESTRICTED = "restricted"  # pub(crate), pub(super), pub(self), pub(in path)


@dataclass(frozen=True)
class Visibility:
	kind: str = VIS_INHERITED
	# Restriction for VIS_RESTRICTED: "crate", "super", "self" or "in a::b".
	scope: Optional[str] = None

	@property
	def is_inherited(self) -> bool:
		return self.kind == VIS_INHERITED

	@staticmethod
	def inherited() -> "Visibility":
		return Visibility()

	@staticmethod
	def public() -> "Visibility":
		return Visibility(kind=VIS_PUB)


# --- Types -------------------------------------------------------------------


class TypeExpr:
	"""Base class for type expressions."""


class GenericArg:
	"""Base class for generic arguments (`<...>` contents)."""


class GenericArgs:
	"""Base class for the arguments attached to a path segment."""


@dataclass
class AngleArgs(GenericArgs):
	args: List[GenericArg] = field(default_factory=list)
	# `Vec::<u8>` form.
	turbofish: bool = False


@dataclass
class ParenArgs(GenericArgs):
	"""`Fn(A, B) -> C` sugar."""

	inputs: List[TypeExpr] = field(default_factory=list)
	output: Optional[TypeExpr] = None


@dataclass
class PathSegment:
	name: str
	args: Optional[GenericArgs] = None


@dataclass
class QSelf:
	"""`<ty as trait_>` prefix of a qualified path."""

	ty: TypeExpr
	trait_: Optional["PathType"] = None


@dataclass
class PathType(TypeExpr):
	segments: List[PathSegment]
	qself: Optional[QSelf] = None
	leading_colon: bool = False

	@staticmethod
	def simple(name: str, args: Optional[GenericArgs] = None) -> "PathType":
		return PathType(segments=[PathSegment(name=name, args=args)])

	@property
	def is_self_alias(self) -> bool:
		"""True for the bare `Self` type."""
		return (
			self.qself is None
			and not self.leading_colon
			and len(self.segments) == 1
			and self.segments[0].name == "Self"
			and self.segments[0].args is None
		)


@dataclass
class RefType(TypeExpr):
	inner: TypeExpr
	lifetime: Optional[str] = None
	mutable: bool = False


@dataclass
class PtrType(TypeExpr):
	inner: TypeExpr
	mutable: bool = False


@dataclass
class SliceType(TypeExpr):
	inner: TypeExpr


@dataclass
class ArrayType(TypeExpr):
	inner: TypeExpr
	length: Opaque


@dataclass
class TupleType(TypeExpr):
	elems: List[TypeExpr] = field(default_factory=list)


@dataclass
class ParenType(TypeExpr):
	inner: TypeExpr


@dataclass
class NeverType(TypeExpr):
	pass


@dataclass
class InferType(TypeExpr):
	pass


@dataclass
class TraitObjectType(TypeExpr):
	bounds: List["Bound"]
	dyn: bool = True


@dataclass
class ImplTraitType(TypeExpr):
	bounds: List["Bound"]


@dataclass
class BareFnArg:
	ty: TypeExpr
	name: Optional[str] = None


@dataclass
class FnPtrType(TypeExpr):
	inputs: List[BareFnArg] = field(default_factory=list)
	output: Optional[TypeExpr] = None
	lifetimes: List["LifetimeParam"] = field(default_factory=list)
	unsafe: bool = False
	# `None` means no `extern`; "" means `extern` without an explicit ABI string.
	abi: Optional[str] = None
	variadic: bool = False


@dataclass
class MacroType(TypeExpr):
	path: str
	tokens: Opaque


# --- Generic arguments -------------------------------------------------------


@dataclass
class TypeArg(GenericArg):
	ty: TypeExpr


@dataclass
class LifetimeArg(GenericArg):
	name: str


@dataclass
class ConstArg(GenericArg):
	"""Const argument; `expr` is the verbatim expression (`N`, `3`, `{ N + 1 }`)."""

	expr: Opaque


@dataclass
class BindingArg(GenericArg):
	"""`Item = T` (optionally `Item<'a> = T`)."""

	name: str
	ty: TypeExpr
	args: Optional[AngleArgs] = None


@dataclass
class ConstraintArg(GenericArg):
	"""`Item: Bound`."""

	name: str
	bounds: List["Bound"]
	args: Optional[AngleArgs] = None


# --- Bounds ------------------------------------------------------------------


class Bound:
	"""Base class for bounds in `T: A + B + 'a` lists."""


@dataclass
class TraitBound(Bound):
	path: PathType
	# "" or "?" (`?Sized`).
	modifier: str = ""
	lifetimes: List["LifetimeParam"] = field(default_factory=list)
	parenthesized: bool = False


@dataclass
class LifetimeBound(Bound):
	name: str


# --- Generic parameters & where-clauses ---------------------------------------


class GenericParam:
	"""Base class for `<...>` parameter declarations."""

	name: str
	attrs: List[Attribute]


@dataclass
class TypeParam(GenericParam):
	name: str
	bounds: List[Bound] = field(default_factory=list)
	default: Optional[TypeExpr] = None
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class LifetimeParam(GenericParam):
	name: str
	bounds: List[str] = field(default_factory=list)
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class ConstParam(GenericParam):
	name: str
	ty: TypeExpr
	default: Optional[Opaque] = None
	attrs: List[Attribute] = field(default_factory=list)


class WherePredicate:
	"""Base class for where-clause predicates (the constraint set)."""


@dataclass
class TypePredicate(WherePredicate):
	bounded: TypeExpr
	bounds: List[Bound] = field(default_factory=list)
	lifetimes: List[LifetimeParam] = field(default_factory=list)


@dataclass
class LifetimePredicate(WherePredicate):
	lifetime: str
	bounds: List[str] = field(default_factory=list)


@dataclass
class WhereClause:
	predicates: List[WherePredicate] = field(default_factory=list)


@dataclass
class Generics:
	params: List[GenericParam] = field(default_factory=list)
	where_clause: Optional[WhereClause] = None

	@property
	def is_empty(self) -> bool:
		return not self.params and self.where_clause is None


# --- Members -----------------------------------------------------------------


class FnArg:
	"""Base class for function parameters."""


@dataclass
class SelfArg(FnArg):
	"""`self`, `mut self`, `&self`, `&'a mut self`, `self: Box<Self>`."""

	reference: bool = False
	lifetime: Optional[str] = None
	mutable: bool = False
	ty: Optional[TypeExpr] = None
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class TypedArg(FnArg):
	pattern: Opaque
	ty: TypeExpr
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class VariadicArg(FnArg):
	"""`...` (optionally `args: ...`) in foreign-ABI signatures."""

	pattern: Optional[Opaque] = None
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class Signature:
	name: str
	generics: Generics = field(default_factory=Generics)
	inputs: List[FnArg] = field(default_factory=list)
	output: Optional[TypeExpr] = None
	constness: bool = False
	asyncness: bool = False
	unsafety: bool = False
	abi: Optional[str] = None


class ImplItem:
	"""Anything found inside an implementation body."""

	loc: Optional[Located]


@dataclass
class Method(ImplItem):
	sig: Signature
	body: Opaque
	attrs: List[Attribute] = field(default_factory=list)
	vis: Visibility = field(default_factory=Visibility)
	defaultness: bool = False
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class Constant(ImplItem):
	name: str
	ty: TypeExpr
	value: Opaque
	attrs: List[Attribute] = field(default_factory=list)
	vis: Visibility = field(default_factory=Visibility)
	defaultness: bool = False
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class AssociatedType(ImplItem):
	name: str
	definition: TypeExpr
	generics: Generics = field(default_factory=Generics)
	bounds: List[Bound] = field(default_factory=list)
	attrs: List[Attribute] = field(default_factory=list)
	vis: Visibility = field(default_factory=Visibility)
	defaultness: bool = False
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class MacroInvocation(ImplItem):
	path: str
	tokens: Opaque
	semi: bool = True
	attrs: List[Attribute] = field(default_factory=list)
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class Verbatim(ImplItem):
	"""Structurally valid item the transformation passes through untouched."""

	tokens: Opaque
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class ForeignItem(ImplItem):
	"""
	An item kind that has no place in an implementation body (`struct`, `use`,
	`static`, ...). It parses, but it is not a member: classification rejects it.
	"""

	kind: str
	tokens: Opaque
	loc: Optional[Located] = field(default=None, compare=False)


Member = Union[Method, Constant, AssociatedType, MacroInvocation, Verbatim]


# --- Trait-side members --------------------------------------------------------


class TraitItem:
	"""Member of a trait declaration."""


@dataclass
class TraitMethod(TraitItem):
	sig: Signature
	attrs: List[Attribute] = field(default_factory=list)
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class TraitConst(TraitItem):
	name: str
	ty: TypeExpr
	attrs: List[Attribute] = field(default_factory=list)
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass
class TraitType(TraitItem):
	name: str
	generics: Generics = field(default_factory=Generics)
	bounds: List[Bound] = field(default_factory=list)
	attrs: List[Attribute] = field(default_factory=list)
	loc: Optional[Located] = field(default=None, compare=False)


# --- Top-level items -----------------------------------------------------------


@dataclass
class TraitRef:
	"""The `Trait<...>` in `impl Trait<...> for Type`."""

	path: PathType
	negative: bool = False


@dataclass
class ImplementationBlock:
	"""
	`impl<...> [Trait for] Type where ... { items }`.

	`source` is the raw text the block was parsed from; it is the input to the
	name fingerprint and is not part of structural equality.
	"""

	self_ty: TypeExpr
	items: List[ImplItem] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	attrs: List[Attribute] = field(default_factory=list)
	inner_attrs: List[Attribute] = field(default_factory=list)
	unsafety: bool = False
	defaultness: bool = False
	trait_: Optional[TraitRef] = None
	source: Optional[str] = field(default=None, compare=False)
	loc: Optional[Located] = field(default=None, compare=False)

	@property
	def is_inherent(self) -> bool:
		return self.trait_ is None


@dataclass
class TraitDecl:
	name: str
	items: List[Union[TraitItem, MacroInvocation, Verbatim]] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	vis: Visibility = field(default_factory=Visibility)
	attrs: List[Attribute] = field(default_factory=list)
	inner_attrs: List[Attribute] = field(default_factory=list)
	unsafety: bool = False
	loc: Optional[Located] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExtArgs:
	"""Arguments of the `#[ext(...)]` attribute."""

	vis: Optional[Visibility] = None
	name: Optional[str] = None


__all__ = [
	"AngleArgs",
	"ArrayType",
	"AssociatedType",
	"Attribute",
	"BareFnArg",
	"BindingArg",
	"Bound",
	"ConstArg",
	"ConstParam",
	"Constant",
	"ConstraintArg",
	"ExtArgs",
	"FnArg",
	"FnPtrType",
	"ForeignItem",
	"GenericArg",
	"GenericArgs",
	"GenericParam",
	"Generics",
	"ImplItem",
	"ImplTraitType",
	"ImplementationBlock",
	"InferType",
	"LifetimeArg",
	"LifetimeBound",
	"LifetimeParam",
	"LifetimePredicate",
	"Located",
	"MacroInvocation",
	"MacroType",
	"Member",
	"Method",
	"NeverType",
	"Opaque",
	"ParenArgs",
	"ParenType",
	"PathSegment",
	"PathType",
	"PtrType",
	"QSelf",
	"RefType",
	"SelfArg",
	"Signature",
	"SliceType",
	"TraitBound",
	"TraitConst",
	"TraitDecl",
	"TraitItem",
	"TraitMethod",
	"TraitObjectType",
	"TraitRef",
	"TraitType",
	"TupleType",
	"TypeArg",
	"TypeExpr",
	"TypeParam",
	"TypePredicate",
	"Verbatim",
	"VariadicArg",
	"Visibility",
	"VIS_CRATE",
	"VIS_INHERITED",
	"VIS_PUB",
	"VIS_RESTRICTED",
	"WhereClause",
	"WherePredicate",
]
