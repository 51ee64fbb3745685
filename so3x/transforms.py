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


r"""Wigner transforms on :math:`\mathrm{SO}(3)` with MW sampling.

A function :math:`f` on the rotation group with harmonic band-limit :math:`L`
and orientational band-limit :math:`N` is expanded in Wigner-D functions

.. math::
  f(\alpha,\beta,\gamma) = \sum_{n=-(N-1)}^{N-1}
    \sum_{\ell=\lvert n\rvert}^{L-1}
    \sum_{m=-\ell}^{\ell} \frac{2\ell+1}{8\pi^2} f_{\ell mn}
    D_{mn}^{\ell*}(\alpha,\beta,\gamma)\,.

Since :math:`D_{mn}^{\ell*}(\alpha,\beta,\gamma) = e^{im\alpha}
d_{mn}^{\ell}(\beta) e^{in\gamma}`, the sum over :math:`n` is a discrete
Fourier series in :math:`\gamma`, and each of its terms is a spin
:math:`-n` spherical harmonic expansion in :math:`(\beta,\alpha)`. Both
transforms in this module therefore reduce to :math:`2N-1` spin spherical
harmonic transforms (computed with :mod:`s2fft`) and one batched FFT of length
:math:`2N-1` along :math:`\gamma`.
"""

from typing import Optional
from absl import logging
import jax.numpy as jnp
import jaxtyping
import numpy as np
import s2fft

from ._common import _check_band_limits
from ._common import _flm_2d_indices
from ._common import _forward_normalization
from ._common import _inverse_normalization
from ._common import _triangle_mask
from ._common import check_sht_method_is_valid
from ._common import SHTMethod
from ._storage import StorageLike
from .config import Config
from .indexing import _check_flmn_shape
from .indexing import _dense_block
from .indexing import _pack_block
from .indexing import _resolve_storage
from .indexing import orientational_orders
from .sampling import f_shape
from .sampling import f_size
# pylint: enable=g-importing-member

Array = jaxtyping.Array
Complex = jaxtyping.Complex
Num = jaxtyping.Num


def _resolve_sht_method(method: Optional[SHTMethod]) -> SHTMethod:
  """Validates method, falling back to Config.sht_method if it is None."""
  method = Config.sht_method if method is None else method
  check_sht_method_is_valid(method)
  return method


def _spherical_inverse(
    flm: Complex[Array, 'L 2*L-1'], L: int, spin: int, method: SHTMethod
) -> Complex[Array, 'L 2*L-1']:
  """Spin spherical harmonic synthesis on the MW grid."""
  if method == 'numpy':
    flm = np.asarray(flm)
  f = s2fft.inverse(flm, L, spin=spin, sampling='mw', method=method)
  return jnp.asarray(f)


def _spherical_forward(
    f: Complex[Array, 'L 2*L-1'], L: int, spin: int, method: SHTMethod
) -> Complex[Array, 'L 2*L-1']:
  """Spin spherical harmonic analysis on the MW grid."""
  if method == 'numpy':
    f = np.asarray(f)
  flm = s2fft.forward(f, L, spin=spin, sampling='mw', method=method)
  return jnp.asarray(flm)


def _as_complex(x: Num[Array, '...']) -> Complex[Array, '...']:
  """Promotes x to a complex dtype (no-op for complex inputs)."""
  return x.astype(jnp.result_type(x.dtype, jnp.complex64))


def inverse(
    flmn: Complex[Array, 'num_coefficients'],
    L: int,
    N: int,
    storage: Optional[StorageLike] = None,
    method: Optional[SHTMethod] = None,
    verbosity: int = 0,
) -> Complex[Array, '(2*N-1)*L*(2*L-1)']:
  r"""Inverse Wigner transform (synthesis) with MW sampling.

  Evaluates the function :math:`f(\alpha,\beta,\gamma)` with Wigner-D
  coefficients :math:`f_{\ell mn}` on the MW grid (see :mod:`so3x.sampling`).
  Coefficients with :math:`\ell<\lvert n\rvert` do not correspond to any
  Wigner-D function and are ignored, even if a padded layout holds non-zero
  values for them.

  Example:
    >>> import jax.numpy as jnp
    >>> import so3x
    >>> flmn = jnp.zeros(so3x.flmn_size(2, 1), dtype=complex).at[0].set(1.0)
    >>> f = so3x.inverse(flmn, L=2, N=1)  # Constant 1/(8π²).

  Args:
    flmn: Flat array of Wigner-D coefficients of size ``flmn_size(L, N,
      storage)``.
    L: Harmonic band-limit.
    N: Orientational band-limit.
    storage: Storage layout of ``flmn`` (defaults to ``Config.storage``).
    method: Backend used by :mod:`s2fft` for the spherical harmonic transforms
      (defaults to ``Config.sht_method``).
    verbosity: If larger than zero, progress messages are logged. Has no
      influence on the result.

  Returns:
    Flat array of ``(2N-1)*L*(2L-1)`` function samples. Reshaping it to
    ``f_shape(L, N)`` gives an array indexed ``[gamma, beta, alpha]``.

  Raises:
    ValueError: If ``storage``, ``method`` or the band-limits are invalid, or
      ``flmn`` has the wrong shape.
  """
  storage = _resolve_storage(storage)
  method = _resolve_sht_method(method)
  _check_band_limits(L, N)
  flmn = _as_complex(jnp.asarray(flmn))
  _check_flmn_shape(flmn, L, N, storage)

  if verbosity > 0:
    logging.info(
        'Computing inverse transform using MW sampling with (L, N) = (%d, %d)'
        ' and %s storage.',
        L,
        N,
        storage.value,
    )

  normalization = jnp.asarray(_inverse_normalization(L))
  rows, cols = _flm_2d_indices(L)

  # Slices are stored in FFT mode order n = 0, 1, ..., N-1, -(N-1), ..., -1.
  fn = [None] * (2 * N - 1)
  for n in range(-N + 1, N):
    flm = _dense_block(flmn, n, L, N, storage) * normalization
    flm = jnp.zeros((L, 2 * L - 1), dtype=flm.dtype).at[rows, cols].set(flm)
    fn_slice = _spherical_inverse(flm, L, spin=-n, method=method)
    # Spin spherical harmonics and Wigner-D functions differ by (-1)ⁿ.
    if n % 2:
      fn_slice = -fn_slice
    fn[n % (2 * N - 1)] = fn_slice
    if verbosity > 1:
      logging.info('Synthesised slice for orientational order n=%d.', n)

  # Unnormalized backward DFT along gamma.
  f = jnp.fft.ifft(jnp.stack(fn), axis=0, norm='forward')

  if verbosity > 0:
    logging.info('Inverse transform computed.')
  return jnp.reshape(f, -1)


def forward(
    f: Complex[Array, '...'],
    L: int,
    N: int,
    storage: Optional[StorageLike] = None,
    method: Optional[SHTMethod] = None,
    verbosity: int = 0,
) -> Complex[Array, 'num_coefficients']:
  r"""Forward Wigner transform (analysis) with MW sampling.

  Computes the Wigner-D coefficients :math:`f_{\ell mn}` of a function sampled
  on the MW grid. For band-limited functions, this is exact up to floating
  point errors, i.e. :func:`forward` inverts :func:`inverse`. Coefficients with
  :math:`\ell<\lvert n\rvert` are zero in padded layouts.

  Args:
    f: Function samples, either as a flat array of size ``(2N-1)*L*(2L-1)`` or
      as an array of shape ``f_shape(L, N) = (2N-1, L, 2L-1)`` indexed
      ``[gamma, beta, alpha]``.
    L: Harmonic band-limit.
    N: Orientational band-limit.
    storage: Storage layout of the returned coefficients (defaults to
      ``Config.storage``).
    method: Backend used by :mod:`s2fft` for the spherical harmonic transforms
      (defaults to ``Config.sht_method``).
    verbosity: If larger than zero, progress messages are logged. Has no
      influence on the result.

  Returns:
    Flat array of ``flmn_size(L, N, storage)`` Wigner-D coefficients.

  Raises:
    ValueError: If ``storage``, ``method`` or the band-limits are invalid, or
      ``f`` is neither flat nor shaped ``f_shape(L, N)``.
  """
  storage = _resolve_storage(storage)
  method = _resolve_sht_method(method)
  _check_band_limits(L, N)
  f = _as_complex(jnp.asarray(f))
  if f.shape not in ((f_size(L, N),), f_shape(L, N)):
    raise ValueError(
        f'f must have shape {(f_size(L, N),)} or {f_shape(L, N)} for L={L} and'
        f' N={N}, received shape {f.shape}'
    )

  if verbosity > 0:
    logging.info(
        'Computing forward transform using MW sampling with (L, N) = (%d, %d)'
        ' and %s storage.',
        L,
        N,
        storage.value,
    )

  # Unnormalized forward DFT along gamma, slices end up in FFT mode order.
  fn = jnp.fft.fft(jnp.reshape(f, f_shape(L, N)), axis=0)
  fn = fn * (2 * jnp.pi / (2 * N - 1))

  rows, cols = _flm_2d_indices(L)
  blocks = {}
  for n in range(-N + 1, N):
    flm = _spherical_forward(fn[n % (2 * N - 1)], L, spin=-n, method=method)
    flm = flm[rows, cols] * jnp.asarray(_forward_normalization(L, n))
    flm = jnp.where(_triangle_mask(L, n), flm, 0)
    blocks[n] = _pack_block(flm, n, storage)
    if verbosity > 1:
      logging.info('Analysed slice for orientational order n=%d.', n)

  flmn = jnp.concatenate([blocks[n] for n in orientational_orders(N, storage)])

  if verbosity > 0:
    logging.info('Forward transform computed.')
  return flmn
