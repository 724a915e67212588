"""Model generator -- resolve a parsed document into the intermediate model.

This sub-package is the second half of the clientsynth pipeline: it takes an
:class:`~clientsynth.models.ApiDocument` (produced by the parser) and builds
the :class:`~clientsynth.models.Model` of named type declarations and
namespaced operations that renderers consume.

Typical usage::

    from clientsynth.generator import assemble

    model = assemble(document)
    model.model_dump(mode="json")

Sub-modules:

* :mod:`~clientsynth.generator.naming` -- Identifier normalization for type
  names, property keys, method names and namespace paths.
* :mod:`~clientsynth.generator.type_resolver` -- Maps schema nodes to type
  expressions (references, compositions, nullability, enums).
* :mod:`~clientsynth.generator.docs` -- Description records with ordered
  constraint lists.
* :mod:`~clientsynth.generator.operations` -- Parameter classification,
  response selection and the namespace tree.
* :mod:`~clientsynth.generator.assembler` -- The driver that ties the above
  together.
"""

from clientsynth.generator.assembler import ModelAssembler, assemble
from clientsynth.generator.naming import IdentifierNormalizer
from clientsynth.generator.type_resolver import TypeResolver

__all__ = ["assemble", "ModelAssembler", "IdentifierNormalizer", "TypeResolver"]
