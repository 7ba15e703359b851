"""
mocksynth.mockgen.core: shared span/diagnostic types used by every pass.

Modules:
  - span: best-effort source location
  - diagnostics: Diagnostic record plus the `report` helper
"""

__all__ = [
	"diagnostics",
	"span",
]
