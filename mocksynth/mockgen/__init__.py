# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Mock synthesis engine (`mockgen`).

Pipeline for one declaration:

  source -> parser (DeclFile) -> per method:
     classify (demutify inputs, merge generics, deimplify return)
     -> deselfify return -> supersuperfy argument and return types
     -> expectation visibility

The CLI entrypoint is `mocksynth.mockgen.mockgen:main`.
"""

__all__ = []
