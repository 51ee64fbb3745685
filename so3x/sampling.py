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


r"""Equiangular McEwen-Wiaux (MW) sampling of :math:`\mathrm{SO}(3)`.

Samples are taken on a grid over the Euler angles :math:`(\alpha,\beta,\gamma)`
with

.. math::
  \alpha_a = \frac{2\pi a}{2L-1}\,,\qquad
  \beta_b = \frac{\pi(2b+1)}{2L-1}\,,\qquad
  \gamma_g = \frac{2\pi g}{2N-1}\,,

for :math:`a=0,\dots,2L-2`, :math:`b=0,\dots,L-1` and :math:`g=0,\dots,2N-2`.
Sampled functions are stored with :math:`\gamma` varying slowest and
:math:`\alpha` varying fastest, i.e. as arrays of shape ``(2N-1, L, 2L-1)``.
"""

from typing import Tuple
import jax.numpy as jnp
import jaxtyping

Array = jaxtyping.Array
Float = jaxtyping.Float


def grid_dimensions(L: int, N: int) -> Tuple[int, int, int]:
  """Number of samples along each Euler angle.

  Example:
    >>> import so3x
    >>> so3x.grid_dimensions(4, 2)
    (7, 4, 3)

  Args:
    L: Harmonic band-limit.
    N: Orientational band-limit.

  Returns:
    A tuple ``(nalpha, nbeta, ngamma) = (2L-1, L, 2N-1)``.
  """
  return 2 * L - 1, L, 2 * N - 1


def f_shape(L: int, N: int) -> Tuple[int, int, int]:
  """Array shape ``(ngamma, nbeta, nalpha)`` of a sampled function."""
  nalpha, nbeta, ngamma = grid_dimensions(L, N)
  return ngamma, nbeta, nalpha


def f_size(L: int, N: int) -> int:
  """Total number of samples ``(2L-1)*L*(2N-1)``."""
  nalpha, nbeta, ngamma = grid_dimensions(L, N)
  return nalpha * nbeta * ngamma


def alpha_samples(L: int) -> Float[Array, '2*L-1']:
  """Sampled values alpha_a = 2πa/(2L-1) for a = 0, ..., 2L-2."""
  return 2 * jnp.pi * jnp.arange(2 * L - 1) / (2 * L - 1)


def beta_samples(L: int) -> Float[Array, 'L']:
  """Sampled values beta_b = π(2b+1)/(2L-1) for b = 0, ..., L-1."""
  return jnp.pi * (2 * jnp.arange(L) + 1) / (2 * L - 1)


def gamma_samples(N: int) -> Float[Array, '2*N-1']:
  """Sampled values gamma_g = 2πg/(2N-1) for g = 0, ..., 2N-2."""
  return 2 * jnp.pi * jnp.arange(2 * N - 1) / (2 * N - 1)


def sampling_angles(
    L: int, N: int
) -> Tuple[Float[Array, '2*L-1'], Float[Array, 'L'], Float[Array, '2*N-1']]:
  r"""Euler angles of the MW sampling grid.

  Args:
    L: Harmonic band-limit.
    N: Orientational band-limit.

  Returns:
    A tuple ``(alphas, betas, gammas)`` with the sampled values of
    :math:`\alpha`, :math:`\beta` and :math:`\gamma` (in radians).
  """
  return alpha_samples(L), beta_samples(L), gamma_samples(N)


def sampling_grid(L: int, N: int) -> Tuple[
    Float[Array, '2*N-1 L 2*L-1'],
    Float[Array, '2*N-1 L 2*L-1'],
    Float[Array, '2*N-1 L 2*L-1'],
]:
  r"""Euler angles of every sample, broadcast to the shape of a function.

  Args:
    L: Harmonic band-limit.
    N: Orientational band-limit.

  Returns:
    A tuple ``(alpha, beta, gamma)`` of arrays with shape ``(2N-1, L, 2L-1)``,
    such that ``f[g, b, a]`` is the value of a function at
    ``(alpha[g, b, a], beta[g, b, a], gamma[g, b, a])``.
  """
  alphas, betas, gammas = sampling_angles(L, N)
  gamma, beta, alpha = jnp.meshgrid(gammas, betas, alphas, indexing='ij')
  return alpha, beta, gamma
