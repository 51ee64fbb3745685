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


r"""Indexing of flat arrays of Wigner-D coefficients :math:`f_{\ell mn}`.

Coefficients are stored in blocks of constant orientational order :math:`n`.
Within a block, the coefficient :math:`(\ell, m)` is found at position
:math:`\ell^2+\ell+m` (padded blocks) or :math:`\ell^2+\ell+m-n^2` (compact
blocks, which start at :math:`\ell=\lvert n\rvert`). The order of the blocks and
whether they are padded is determined by the :class:`Storage
<so3x._storage.Storage>` layout.
"""

import math
from typing import Optional, Tuple
import jax.numpy as jnp
import jaxtyping
import numpy as np

from ._common import _check_band_limits
from ._common import _check_harmonic_band_limit
from ._common import _check_orientational_band_limit
from ._common import _check_orientational_order
from ._common import _sum_of_squares
from ._common import _triangle_mask
from ._storage import as_storage
from ._storage import Storage
from ._storage import StorageLike
from .config import Config
# pylint: enable=g-importing-member

Array = jaxtyping.Array
Complex = jaxtyping.Complex
Integer = jaxtyping.Integer


def _resolve_storage(storage: Optional[StorageLike]) -> Storage:
  """Validates storage, falling back to Config.storage if it is None."""
  return as_storage(Config.storage if storage is None else storage)


def flmn_size(L: int, N: int, storage: Optional[StorageLike] = None) -> int:
  r"""Number of coefficients stored for band-limits ``L`` and ``N``.

  Padded layouts store :math:`(2N-1)L^2` coefficients, compact layouts store
  :math:`(2N-1)(3L^2-N(N-1))/3` coefficients.

  Args:
    L: Harmonic band-limit.
    N: Orientational band-limit.
    storage: Storage layout (defaults to ``Config.storage``).

  Returns:
    The length of a flat coefficient array.

  Raises:
    ValueError: If ``storage`` or the band-limits are invalid.
  """
  storage = _resolve_storage(storage)
  _check_band_limits(L, N)
  if storage.is_padded:
    return (2 * N - 1) * L * L
  return (2 * N - 1) * (3 * L * L - N * (N - 1)) // 3


def orientational_orders(
    N: int, storage: Optional[StorageLike] = None
) -> Tuple[int, ...]:
  """Orientational orders n in the order in which their blocks are stored."""
  storage = _resolve_storage(storage)
  _check_orientational_band_limit(N)
  if storage.ordering == 'zero_first':
    return tuple(range(N)) + tuple(range(-N + 1, 0))
  return tuple(range(-N + 1, N))


def block_size(n: int, L: int, storage: Optional[StorageLike] = None) -> int:
  """Number of coefficients stored in the block of orientational order n."""
  storage = _resolve_storage(storage)
  _check_harmonic_band_limit(L)
  if abs(n) >= L:
    raise ValueError(
        f'orientational order n must satisfy |n| < L, received n={n} and L={L}'
    )
  return L * L if storage.is_padded else L * L - n * n


def block_offset(
    n: int, L: int, N: int, storage: Optional[StorageLike] = None
) -> int:
  """Position of the first coefficient of the block of orientational order n.

  Args:
    n: Orientational order.
    L: Harmonic band-limit.
    N: Orientational band-limit.
    storage: Storage layout (defaults to ``Config.storage``).

  Returns:
    The offset of the block in a flat coefficient array.

  Raises:
    ValueError: If ``storage`` or the band-limits are invalid, or ``n`` is out
      of range.
  """
  storage = _resolve_storage(storage)
  _check_band_limits(L, N)
  _check_orientational_order(n, N)
  if storage.ordering == 'zero_first':
    position = n if n >= 0 else n + 2 * N - 1
  else:
    position = n + N - 1
  if storage.is_padded:
    return position * L * L

  # Compact blocks shrink by n² each, so subtract the squares of all orders
  # stored before n.
  if storage.ordering == 'zero_first':
    if n >= 0:
      squares = _sum_of_squares(n - 1)
    else:
      squares = 2 * _sum_of_squares(N - 1) - _sum_of_squares(-n)
  else:
    if n <= 0:
      squares = _sum_of_squares(N - 1) - _sum_of_squares(-n)
    else:
      squares = _sum_of_squares(N - 1) + _sum_of_squares(n - 1)
  return position * L * L - squares


def index_of(
    ell: int,
    m: int,
    n: int,
    L: int,
    N: int,
    storage: Optional[StorageLike] = None,
) -> int:
  r"""Position of the coefficient :math:`f_{\ell mn}` in a flat array.

  Example:
    >>> import so3x
    >>> so3x.index_of(1, 0, -1, L=4, N=2, storage='zero_first_padded')
    34
    >>> so3x.index_of(1, 0, -1, L=4, N=2, storage='negative_first_compact')
    1

  Args:
    ell: Degree :math:`\ell`, with :math:`0\leq\ell<L`.
    m: Order :math:`m`, with :math:`-\ell\leq m\leq\ell`.
    n: Orientational order :math:`n`, with :math:`-(N-1)\leq n\leq N-1` (and
      :math:`\lvert n\rvert\leq\ell` for compact layouts).
    L: Harmonic band-limit.
    N: Orientational band-limit.
    storage: Storage layout (defaults to ``Config.storage``).

  Returns:
    The index of the coefficient, a value in ``[0, flmn_size(L, N, storage))``.

  Raises:
    ValueError: If ``storage`` is invalid, the band-limits are invalid, or
      ``(ell, m, n)`` does not identify a stored coefficient.
  """
  storage = _resolve_storage(storage)
  _check_band_limits(L, N)
  if not 0 <= ell < L:
    raise ValueError(f'degree must satisfy 0 <= ell < L={L}, received {ell}')
  if abs(m) > ell:
    raise ValueError(f'order must satisfy |m| <= ell={ell}, received {m}')
  _check_orientational_order(n, N)
  if not storage.is_padded and ell < abs(n):
    raise ValueError(
        f'{storage.value} storage holds no coefficient with ell < |n|, '
        f'received ell={ell} and n={n}'
    )
  local = ell * ell + ell + m
  if not storage.is_padded:
    local -= n * n
  return block_offset(n, L, N, storage) + local


def elmn_from_index(
    index: int, L: int, N: int, storage: Optional[StorageLike] = None
) -> Tuple[int, int, int]:
  r"""Degree and orders :math:`(\ell, m, n)` of the coefficient at ``index``.

  This is the inverse of :func:`index_of`.

  Args:
    index: Position in a flat coefficient array.
    L: Harmonic band-limit.
    N: Orientational band-limit.
    storage: Storage layout (defaults to ``Config.storage``).

  Returns:
    A tuple ``(ell, m, n)``.

  Raises:
    ValueError: If ``storage`` or the band-limits are invalid, or ``index`` is
      out of range.
  """
  storage = _resolve_storage(storage)
  _check_band_limits(L, N)
  size = flmn_size(L, N, storage)
  if not 0 <= index < size:
    raise ValueError(
        f'index must satisfy 0 <= index < {size}, received {index}'
    )
  offset = 0
  for n in orientational_orders(N, storage):
    size = block_size(n, L, storage)
    if index < offset + size:
      local = index - offset
      if not storage.is_padded:
        local += n * n
      ell = math.isqrt(local)
      return ell, local - ell * ell - ell, n
    offset += size
  raise AssertionError('unreachable: index was checked against flmn_size')


def _dense_block(
    flmn: Complex[Array, 'num_coefficients'],
    n: int,
    L: int,
    N: int,
    storage: Storage,
) -> Complex[Array, 'L*L']:
  """Extracts the block of order n as a dense length L² vector.

  Entries with ell < |n| are zero, regardless of what a padded layout holds.
  """
  offset = block_offset(n, L, N, storage)
  if storage.is_padded:
    flm = flmn[offset : offset + L * L]
    return jnp.where(_triangle_mask(L, n), flm, 0)
  flm = flmn[offset : offset + L * L - n * n]
  return jnp.concatenate((jnp.zeros(n * n, dtype=flmn.dtype), flm))


def _pack_block(
    flm: Complex[Array, 'L*L'], n: int, storage: Storage
) -> Complex[Array, 'block_size']:
  """Packs a dense length L² vector into the block of order n."""
  if storage.is_padded:
    return flm
  return flm[n * n :]


def _permutation(
    L: int, N: int, source: Storage, target: Storage
) -> Integer[np.ndarray, 'num_coefficients']:
  """Source position of every target coefficient (-1 for structural zeros)."""
  indices = []
  for n in orientational_orders(N, target):
    src = np.full(L * L, -1, dtype=int)
    src[n * n :] = block_offset(n, L, N, source) + np.arange(L * L - n * n)
    if source.is_padded:
      src[n * n :] += n * n
    indices.append(src if target.is_padded else src[n * n :])
  return np.concatenate(indices)


def convert_storage(
    flmn: Complex[Array, 'num_coefficients'],
    L: int,
    N: int,
    source: StorageLike,
    target: StorageLike,
) -> Complex[Array, 'num_target_coefficients']:
  r"""Converts Wigner-D coefficients between two storage layouts.

  Coefficients with :math:`\ell<\lvert n\rvert` are set to zero when
  converting to a padded layout (they are dropped for compact layouts).

  Args:
    flmn: Flat array of coefficients stored in the ``source`` layout.
    L: Harmonic band-limit.
    N: Orientational band-limit.
    source: Storage layout of ``flmn``.
    target: Storage layout of the returned array.

  Returns:
    Flat array of the same coefficients stored in the ``target`` layout.

  Raises:
    ValueError: If a storage layout or the band-limits are invalid, or
      ``flmn`` has the wrong shape.
  """
  source = as_storage(source)
  target = as_storage(target)
  _check_band_limits(L, N)
  flmn = jnp.asarray(flmn)
  _check_flmn_shape(flmn, L, N, source)
  permutation = _permutation(L, N, source, target)
  values = flmn[np.maximum(permutation, 0)]
  return jnp.where(permutation >= 0, values, 0)


def _check_flmn_shape(
    flmn: Complex[Array, '...'], L: int, N: int, storage: Storage
) -> None:
  """Checks that flmn is a flat array of the size required by storage."""
  size = flmn_size(L, N, storage)
  if flmn.shape != (size,):
    raise ValueError(
        f'flmn must have shape ({size},) for L={L}, N={N} and '
        f'{storage.value} storage, received shape {flmn.shape}'
    )
