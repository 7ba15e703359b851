"""
Type-expression rewrite passes (deimplify / deselfify / supersuperfy).
"""

from .type_rewrite import (
	Deselfify,
	RewritePass,
	Supersuperfy,
	TypeRewriter,
	apply_pass,
	deimplify,
	deselfify,
	has_impl_trait,
	supersuperfy,
)

__all__ = [
	"Deselfify",
	"RewritePass",
	"Supersuperfy",
	"TypeRewriter",
	"apply_pass",
	"deimplify",
	"deselfify",
	"has_impl_trait",
	"supersuperfy",
]
