import numpy as np
from typing import Mapping, Optional, Union

from ..core.node import Node
from .validator import ExpressionValidator
from ...logging_system import log_debug

ArrayLike = Union[float, np.ndarray]


def evaluate(node: Node, bindings: Mapping[str, float], max_depth: Optional[int] = None) -> float:
  """
  Evaluate a tree to a number.

  Raises UnboundVariable for names missing from `bindings`, DivisionByZero when
  a divisor is exactly zero and DomainError for ln of a non-positive value.
  """
  ExpressionValidator.check_depth(node, max_depth)
  result = node.evaluate(bindings)
  log_debug("evaluate %s -> %s", node, result)
  return result


def evaluate_batch(node: Node, bindings: Mapping[str, ArrayLike],
                   max_depth: Optional[int] = None) -> np.ndarray:
  """
  Evaluate a tree over many points at once.

  Binding values are scalars or 1-D arrays and are broadcast against each
  other; the result has the broadcast length. Error semantics match
  `evaluate`: a single offending point fails the whole batch.
  """
  ExpressionValidator.check_depth(node, max_depth)

  arrays = {name: np.asarray(value, dtype=np.float64) for name, value in bindings.items()}
  for name, array in arrays.items():
    if array.ndim > 1:
      raise ValueError(f"Binding for {name!r} must be a scalar or 1-D array, got shape {array.shape}")

  shape = np.broadcast_shapes(*(array.shape for array in arrays.values())) if arrays else ()
  n_samples = shape[0] if shape else 1

  columns = {
    name: np.ascontiguousarray(np.broadcast_to(array, (n_samples,)), dtype=np.float64)
    for name, array in arrays.items()
  }
  log_debug("evaluate_batch %s over %d samples", node, n_samples)
  return np.asarray(node.evaluate_batch(columns, n_samples), dtype=np.float64)
