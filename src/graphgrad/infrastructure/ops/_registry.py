"""
Operator registry and dispatch.

This module defines `OpId`, the closed set of built-in operator ids, and
`OperatorRegistry`, which maps ids to shared operator instances for O(1)
lookup during graph construction and backward traversal.

Design
------
- Built-in operators are registered by id via a class decorator:

      @OperatorRegistry.register(OpId.ADD)
      class Add(Operator):
          ...

  The decorator records the class in a class-level catalogue and stamps
  `op_id` on it. Importing the operator modules is what populates the
  catalogue (see the package `__init__`).
- A registry *instance* is built once from the catalogue (plus any extra
  operator instances supplied by the caller) and is read-only afterward, so
  it can be shared by any number of graphs.
- Adding an operator never touches the graph scheduler: the graph only ever
  calls `registry.get(op_id)`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import (
    Callable,
    ClassVar,
    Dict,
    Hashable,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from ...domain._errors import UnknownOperatorError
from ...domain._operator import Operator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Type[Operator])


class OpId(Enum):
    """
    Ids of the built-in operators.
    """

    ADD = "add"
    ADD_BROADCAST = "add_broadcast"
    SUB = "sub"
    MUL = "mul"
    MATMUL = "matmul"
    RELU = "relu"
    SIGMOID = "sigmoid"
    SOFTMAX = "softmax"
    SUM = "sum"
    LOG = "log"


class OperatorRegistry:
    """
    Id -> operator lookup table.

    Parameters
    ----------
    extra : Iterable[Operator], optional
        Additional operator instances to register on top of the built-in
        catalogue. Each must carry a hashable `op_id` not already in use.
    include_builtins : bool, optional
        If False, only `extra` is registered. Defaults to True.

    Raises
    ------
    ValueError
        If two operators share an id, or an extra operator has no id.
    """

    CATALOGUE: ClassVar[Dict[Hashable, Type[Operator]]] = {}

    def __init__(
        self,
        extra: Optional[Iterable[Operator]] = None,
        *,
        include_builtins: bool = True,
    ) -> None:
        self._ops: Dict[Hashable, Operator] = {}
        if include_builtins:
            for op_id, op_cls in self.CATALOGUE.items():
                self._ops[op_id] = op_cls()
        for op in extra or ():
            if not isinstance(op, Operator):
                raise TypeError(f"expected an Operator, got {type(op)!r}")
            if op.op_id is None:
                raise ValueError(f"{type(op).__name__} has no op_id")
            if op.op_id in self._ops:
                raise ValueError(f"Operator already registered: {op.op_id!r}")
            self._ops[op.op_id] = op

    @classmethod
    def register(
        cls, op_id: Hashable, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Class decorator registering an operator class under `op_id`.

        Parameters
        ----------
        op_id:
            Registry key. Built-ins use `OpId` members.
        overwrite:
            If False (default), raises if `op_id` is already registered.
        """

        def decorator(op_cls: T) -> T:
            if not (isinstance(op_cls, type) and issubclass(op_cls, Operator)):
                raise TypeError(f"expected an Operator subclass, got {op_cls!r}")
            if not overwrite and op_id in cls.CATALOGUE:
                raise ValueError(f"Operator already registered: {op_id!r}")
            op_cls.op_id = op_id
            cls.CATALOGUE[op_id] = op_cls
            logger.debug("registered operator %s as %r", op_cls.__name__, op_id)
            return op_cls

        return decorator

    def get(self, op_id: Hashable) -> Operator:
        """
        Return the operator registered under `op_id`.

        Raises
        ------
        UnknownOperatorError
            If no operator is registered under `op_id`.
        """
        try:
            return self._ops[op_id]
        except (KeyError, TypeError) as e:
            raise UnknownOperatorError(op_id) from e

    def available(self) -> Tuple[Hashable, ...]:
        """Return the registered ids, in registration order."""
        return tuple(self._ops)

    def __contains__(self, op_id: object) -> bool:
        try:
            return op_id in self._ops
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[Operator]:
        return iter(self._ops.values())

    def __repr__(self) -> str:
        names = ", ".join(type(op).__name__ for op in self._ops.values())
        return f"OperatorRegistry([{names}])"
