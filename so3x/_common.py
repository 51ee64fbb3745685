# Copyright 2024 The so3x Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Common utility functions used in the so3x package."""

from typing import Literal
import jaxtyping
import numpy as np

Bool = jaxtyping.Bool
Float = jaxtyping.Float
Integer = jaxtyping.Integer


def _check_harmonic_band_limit(L: int) -> None:
  """Checks whether the harmonic band-limit is positive."""
  if L < 1:
    raise ValueError(f'L must be a positive integer, received {L}')


def _check_orientational_band_limit(N: int) -> None:
  """Checks whether the orientational band-limit is positive."""
  if N < 1:
    raise ValueError(f'N must be a positive integer, received {N}')


def _check_band_limits(L: int, N: int) -> None:
  """Checks whether the harmonic and orientational band-limits are valid."""
  _check_harmonic_band_limit(L)
  _check_orientational_band_limit(N)
  if N > L:
    raise ValueError(f'N must not be larger than L, received L={L} and N={N}')


def _check_orientational_order(n: int, N: int) -> None:
  """Checks whether -(N-1) <= n <= N-1."""
  if abs(n) >= N:
    raise ValueError(
        f'orientational order n must satisfy |n| < N, received n={n} and N={N}'
    )


def _sum_of_squares(k: int) -> int:
  """Calculates 0² + 1² + ... + k² (zero for k < 0)."""
  if k < 0:
    return 0
  return (k * (k + 1) * (2 * k + 1)) // 6


def _degrees(L: int) -> Integer[np.ndarray, 'L*L']:
  """Degree ell of every entry of a dense length L² coefficient vector."""
  ell = np.arange(L)
  return np.repeat(ell, 2 * ell + 1)


def _orders(L: int) -> Integer[np.ndarray, 'L*L']:
  """Order m of every entry of a dense length L² coefficient vector."""
  return np.arange(L * L) - _degrees(L) ** 2 - _degrees(L)


def _inverse_normalization(L: int) -> Float[np.ndarray, 'L*L']:
  """Per-entry factors sqrt((2ell+1)/(16π³)) applied before synthesis."""
  return np.sqrt((2 * _degrees(L) + 1) / (16 * np.pi**3))


def _forward_normalization(L: int, n: int) -> Float[np.ndarray, 'L*L']:
  """Per-entry factors (-1)ⁿ sqrt(4π/(2ell+1)) applied after analysis."""
  sign = -1 if n % 2 else 1
  return sign * np.sqrt(4 * np.pi / (2 * _degrees(L) + 1))


def _triangle_mask(L: int, n: int) -> Bool[np.ndarray, 'L*L']:
  """Boolean mask of the entries with ell >= |n|."""
  return _degrees(L) >= abs(n)


def _flm_2d_indices(
    L: int,
) -> tuple[Integer[np.ndarray, 'L*L'], Integer[np.ndarray, 'L*L']]:
  """Row/column indices into an (L, 2L-1) array indexed [ell, L-1+m]."""
  return _degrees(L), L - 1 + _orders(L)


valid_sht_methods = ('jax', 'numpy')

SHTMethod = Literal[valid_sht_methods]


def check_sht_method_is_valid(method: SHTMethod) -> None:
  """Checks whether method names a supported spherical harmonic backend."""
  if method not in valid_sht_methods:
    raise ValueError(
        f'method must be in {valid_sht_methods}, received {method!r}'
    )
