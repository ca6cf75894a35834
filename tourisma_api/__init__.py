"""
Top-level package for the Tourisma API.

The package provides no public exports; all functionality lives in
submodules under ``app``, imported with fully qualified names such as
``tourisma_api.app.main``.
"""

__all__ = []
