# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stencil compiler front end (`stencilc`).

Front-end modules live under this package. The CLI entrypoint is
`stencil.stencilc.stencilc:main`.
"""

__all__ = []
