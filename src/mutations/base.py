"""
Normal Field Mutations Architecture
===================================

This module defines how geometric post-processing of a normal field is structured
and applied.

- :class:`~container_models.normal_field.NormalField` holds the unit normals.
- :class:`NormalFieldMutation` is an abstract interface for transforming a field.
- Concrete mutations live in the ``mutations`` folder, grouped per concern.
- Stateless numerics (solvers, rotations) live in the ``computations`` folder.

High-level Design
-----------------

                        +---------------------------------+
                        |           NormalField           |
                        |---------------------------------|
                        | data : VectorField (H, W, 3)    |
                        +---------------+-----------------+
                                        |
                                        v
                    +-------------------+----------------------+
                    |              <<abstract>>                |
                    |           NormalFieldMutation            |
                    |------------------------------------------|
                    | + apply_on_field(NormalField)            |
                    +--------------------+---------------------+
                                         ^
                                         |
              +--------------------------+-------------------------+
              |                          |                         |
     +--------+--------+       +---------+---------+     +---------+---------+
     |    Reorient     |       |    EdgeFlatten    |     |   CornerFlatten   |
     |-----------------|       |-------------------|     |-------------------|
     | target : (3,)   |       | edge means        |     | corner means      |
     +-----------------+       +-------------------+     +-------------------+


Example
-------

    from returns.pipeline import flow
    from returns.pointfree import bind
    from returns.result import Success

    from container_models import NormalField
    from mutations import CornerFlatten, Reorient

    result = flow(
        Success(NormalField.dome(64, 64)),
        bind(CornerFlatten()),
        bind(Reorient()),
    )
"""

from abc import ABC, abstractmethod

from returns.result import safe

from container_models.normal_field import NormalField


class NormalFieldMutation(ABC):
    """
    Represents a single transformation applied to a
    :class:`~container_models.normal_field.NormalField`.

    A mutation never modifies its input: it returns a new field that is valid input
    for another mutation, which enables safe chaining in pipelines.

    All parameters required for the mutation should be provided via the constructor.
    """

    @safe
    def __call__(self, field: NormalField) -> NormalField:
        """
        Callable interface used by pipelines (e.g. `flow(...)` with `bind` from
        the `returns` library).

        :param field: The `NormalField` to be transformed.
        :return NormalField: The transformed field wrapped in a `Result`.
        """
        return self.apply_on_field(field)

    @abstractmethod
    def apply_on_field(self, field: NormalField) -> NormalField:
        """
        Applies the mutation to the given `NormalField`.

        :param field: The input `NormalField`.
        :return NormalField: A new `NormalField`.
        """
