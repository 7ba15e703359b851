"""
mockgen signature passes: everything derived from one method declaration.

Modules:
  - normalize: argument binding validation (`demutify_inputs`)
  - generics: generic parameter list union (`merge_generics`)
  - visibility: re-rooted visibility for nested items (`expectation_visibility`)
  - classify: call-shape classification (`classify_method`)
  - idents: mock struct/module naming
"""

from .classify import CallKind, MethodTypes, classify_method
from .generics import merge_generics
from .idents import gen_mock_ident, gen_mod_ident
from .normalize import demutify_inputs
from .visibility import expectation_visibility

__all__ = [
	"CallKind",
	"MethodTypes",
	"classify_method",
	"demutify_inputs",
	"expectation_visibility",
	"gen_mock_ident",
	"gen_mod_ident",
	"merge_generics",
]
