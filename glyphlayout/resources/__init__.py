"""
Containers for buffers and textures.

Glyphlayout produces data for a renderer, but never uploads it itself. The
data is stored in buffers and textures. We collectively call these resources.
A renderer finds resources with pending changes via the
``resource_update_registry``.

.. currentmodule:: glyphlayout.resources

.. autosummary::
    :toctree: resources/
    :template: ../_templates/custom_layout.rst

    Resource
    Buffer
    Texture
    create_texture

"""

# ruff: noqa: F401

from ._base import Resource, resource_update_registry
from ._buffer import Buffer
from ._texture import Texture, create_texture

__all__ = ["Buffer", "Resource", "Texture", "create_texture", "resource_update_registry"]
