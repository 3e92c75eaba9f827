import numpy as np
import numba
from enum import IntEnum
from typing import Union

from ...errors import DivisionByZero, DomainError

class NodeType(IntEnum):
  VARIABLE = 0
  CONSTANT = 1
  BINARY_OP = 2
  UNARY_OP = 3

class OpType(IntEnum):
  # Binary ops
  ADD = 0
  SUB = 1
  MUL = 2
  DIV = 3
  POW = 4
  # Unary ops
  NEG = 5
  SIN = 6
  COS = 7
  LN = 8
  EXP = 9

BINARY_OPS = frozenset({OpType.ADD, OpType.SUB, OpType.MUL, OpType.DIV, OpType.POW})
UNARY_OPS = frozenset({OpType.NEG, OpType.SIN, OpType.COS, OpType.LN, OpType.EXP})

# Mapping dictionaries
BINARY_OP_MAP = {'+': OpType.ADD, '-': OpType.SUB, '*': OpType.MUL, '/': OpType.DIV, '^': OpType.POW}
UNARY_OP_MAP = {'neg': OpType.NEG, 'sin': OpType.SIN, 'cos': OpType.COS, 'ln': OpType.LN, 'exp': OpType.EXP}

BINARY_SYMBOLS = {op: symbol for symbol, op in BINARY_OP_MAP.items()}
UNARY_NAMES = {op: name for name, op in UNARY_OP_MAP.items()}

# Names the tokenizer classifies as function calls
FUNCTION_NAMES = frozenset({'sin', 'cos', 'ln', 'exp'})

assert set(BINARY_SYMBOLS) == BINARY_OPS and set(UNARY_NAMES) == UNARY_OPS


def to_binary_op(operator: Union[str, OpType]) -> OpType:
  if isinstance(operator, str):
    if operator not in BINARY_OP_MAP:
      raise ValueError(f"Unknown binary operator: {operator!r}")
    return BINARY_OP_MAP[operator]
  op = OpType(operator)
  if op not in BINARY_OPS:
    raise ValueError(f"{op.name} is not a binary operator")
  return op


def to_unary_op(operator: Union[str, OpType]) -> OpType:
  if isinstance(operator, str):
    if operator not in UNARY_OP_MAP:
      raise ValueError(f"Unknown unary operator: {operator!r}")
    return UNARY_OP_MAP[operator]
  op = OpType(operator)
  if op not in UNARY_OPS:
    raise ValueError(f"{op.name} is not a unary operator")
  return op


def format_constant(value: float) -> str:
  """Positional decimal text, integral values without a fractional part"""
  return np.format_float_positional(value, trim='-')


def real_power(base: float, exponent: float) -> float:
  """Real exponentiation with IEEE results (nan/inf) instead of exceptions"""
  with np.errstate(all='ignore'):
    return float(np.power(np.float64(base), np.float64(exponent)))


def evaluate_binary_op(left_val: float, right_val: float, operator: OpType) -> float:
  if operator == OpType.ADD:
    return left_val + right_val
  elif operator == OpType.SUB:
    return left_val - right_val
  elif operator == OpType.MUL:
    return left_val * right_val
  elif operator == OpType.DIV:
    if right_val == 0:
      raise DivisionByZero()
    return left_val / right_val
  elif operator == OpType.POW:
    return real_power(left_val, right_val)
  raise ValueError(f"Unknown binary operator: {operator!r}")


def evaluate_unary_op(operand_val: float, operator: OpType) -> float:
  with np.errstate(all='ignore'):
    if operator == OpType.NEG:
      return -operand_val
    elif operator == OpType.SIN:
      return float(np.sin(operand_val))
    elif operator == OpType.COS:
      return float(np.cos(operand_val))
    elif operator == OpType.LN:
      if operand_val <= 0:
        raise DomainError(f"ln undefined for non-positive value {operand_val}")
      return float(np.log(operand_val))
    elif operator == OpType.EXP:
      return float(np.exp(operand_val))
  raise ValueError(f"Unknown unary operator: {operator!r}")


# Plain ints so the compiled kernels see compile-time constants
_ADD = int(OpType.ADD)
_SUB = int(OpType.SUB)
_MUL = int(OpType.MUL)
_DIV = int(OpType.DIV)
_NEG = int(OpType.NEG)
_SIN = int(OpType.SIN)
_COS = int(OpType.COS)
_LN = int(OpType.LN)


@numba.njit(cache=True, inline='always')
def evaluate_constant(n_samples, value):
  return np.full(n_samples, value, dtype=np.float64)

@numba.njit(cache=True)
def evaluate_binary_op_fast(left_val, right_val, op_code):
  if op_code == _ADD:
    return left_val + right_val
  elif op_code == _SUB:
    return left_val - right_val
  elif op_code == _MUL:
    return left_val * right_val
  elif op_code == _DIV:
    return left_val / right_val
  return np.power(left_val, right_val)

@numba.njit(cache=True)
def evaluate_unary_op_fast(operand_val, op_code):
  if op_code == _NEG:
    return -operand_val
  elif op_code == _SIN:
    return np.sin(operand_val)
  elif op_code == _COS:
    return np.cos(operand_val)
  elif op_code == _LN:
    return np.log(operand_val)
  return np.exp(operand_val)


def evaluate_binary_op_batch(left_val: np.ndarray, right_val: np.ndarray, operator: OpType) -> np.ndarray:
  """Guarded entry point for the compiled binary kernel"""
  if operator == OpType.DIV and np.any(right_val == 0):
    raise DivisionByZero()
  with np.errstate(all='ignore'):
    return evaluate_binary_op_fast(left_val, right_val, int(operator))


def evaluate_unary_op_batch(operand_val: np.ndarray, operator: OpType) -> np.ndarray:
  """Guarded entry point for the compiled unary kernel"""
  if operator == OpType.LN and np.any(operand_val <= 0):
    raise DomainError("ln undefined for non-positive values")
  with np.errstate(all='ignore'):
    return evaluate_unary_op_fast(operand_val, int(operator))
