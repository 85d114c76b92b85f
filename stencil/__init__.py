# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
stencil package: template language front end.

Packages:
  stencilc: compiler front end (tree, parser, passes, driver)
"""

__all__ = ["stencilc"]
