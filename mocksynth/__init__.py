# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
mocksynth package: mock (test double) synthesis front-end.

Subpackages:
  mockgen: declaration parser, signature passes and the `mockgen` driver
"""

__all__ = ["mockgen"]
