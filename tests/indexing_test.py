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


import itertools
import jax
import jax.numpy as jnp
import pytest
import so3x

all_storages = tuple(so3x.Storage)


def _valid_elmn(L: int, N: int, storage: so3x.Storage):
  """Yields all (ell, m, n) stored in a layout."""
  for n in range(-N + 1, N):
    for ell in range(L):
      if not storage.is_padded and ell < abs(n):
        continue
      for m in range(-ell, ell + 1):
        yield ell, m, n


@pytest.mark.parametrize(
    'L, N, storage, expected',
    [
        (4, 2, so3x.Storage.ZERO_FIRST_PADDED, 48),
        (4, 2, so3x.Storage.NEGATIVE_FIRST_PADDED, 48),
        (4, 2, so3x.Storage.ZERO_FIRST_COMPACT, 46),
        (4, 2, so3x.Storage.NEGATIVE_FIRST_COMPACT, 46),
        (1, 1, so3x.Storage.ZERO_FIRST_COMPACT, 1),
        (3, 3, so3x.Storage.ZERO_FIRST_PADDED, 45),
        (3, 3, so3x.Storage.NEGATIVE_FIRST_COMPACT, 35),
    ],
)
def test_flmn_size(
    L: int, N: int, storage: so3x.Storage, expected: int
) -> None:
  assert so3x.flmn_size(L, N, storage) == expected


@pytest.mark.parametrize(
    'storage, expected',
    [
        (so3x.Storage.ZERO_FIRST_PADDED, (0, 1, 2, -2, -1)),
        (so3x.Storage.ZERO_FIRST_COMPACT, (0, 1, 2, -2, -1)),
        (so3x.Storage.NEGATIVE_FIRST_PADDED, (-2, -1, 0, 1, 2)),
        (so3x.Storage.NEGATIVE_FIRST_COMPACT, (-2, -1, 0, 1, 2)),
    ],
)
def test_orientational_orders(
    storage: so3x.Storage, expected: tuple[int, ...]
) -> None:
  assert so3x.orientational_orders(3, storage) == expected


@pytest.mark.parametrize('storage', all_storages)
@pytest.mark.parametrize('L, N', [(1, 1), (3, 1), (3, 2), (4, 4), (6, 3)])
def test_index_of_is_bijective(L: int, N: int, storage: so3x.Storage) -> None:
  indices = [
      so3x.index_of(ell, m, n, L, N, storage)
      for ell, m, n in _valid_elmn(L, N, storage)
  ]
  assert sorted(indices) == list(range(so3x.flmn_size(L, N, storage)))


@pytest.mark.parametrize('storage', all_storages)
@pytest.mark.parametrize('L, N', [(3, 2), (5, 3)])
def test_index_of_increases_within_block(
    L: int, N: int, storage: so3x.Storage
) -> None:
  for n in range(-N + 1, N):
    indices = [
        so3x.index_of(ell, m, k, L, N, storage)
        for ell, m, k in _valid_elmn(L, N, storage)
        if k == n
    ]
    assert indices == list(range(indices[0], indices[0] + len(indices)))
    assert indices[0] == so3x.block_offset(n, L, N, storage)
    assert len(indices) == so3x.block_size(n, L, storage)


@pytest.mark.parametrize('storage', all_storages)
def test_blocks_follow_ordering(storage: so3x.Storage) -> None:
  L, N = 4, 3
  offset = 0
  for n in so3x.orientational_orders(N, storage):
    assert so3x.block_offset(n, L, N, storage) == offset
    offset += so3x.block_size(n, L, storage)
  assert offset == so3x.flmn_size(L, N, storage)


@pytest.mark.parametrize(
    'ell, m, n, storage, expected',
    [
        (0, 0, 0, 'zero_first_padded', 0),
        (1, 0, -1, 'zero_first_padded', 34),
        (3, 3, 1, 'zero_first_padded', 31),
        (0, 0, 0, 'negative_first_padded', 16),
        (1, -1, -1, 'negative_first_padded', 1),
        (1, 0, -1, 'zero_first_compact', 32),
        (1, -1, 1, 'zero_first_compact', 16),
        (1, 0, -1, 'negative_first_compact', 1),
        (0, 0, 0, 'negative_first_compact', 15),
        (3, 3, 1, 'negative_first_compact', 45),
    ],
)
def test_index_of(
    ell: int, m: int, n: int, storage: str, expected: int
) -> None:
  assert so3x.index_of(ell, m, n, L=4, N=2, storage=storage) == expected


@pytest.mark.parametrize('storage', all_storages)
@pytest.mark.parametrize('L, N', [(2, 1), (4, 2), (5, 5)])
def test_elmn_from_index(L: int, N: int, storage: so3x.Storage) -> None:
  for index in range(so3x.flmn_size(L, N, storage)):
    ell, m, n = so3x.elmn_from_index(index, L, N, storage)
    assert so3x.index_of(ell, m, n, L, N, storage) == index


@pytest.mark.parametrize(
    'ell, m, n, storage, message',
    [
        (4, 0, 0, 'zero_first_padded', 'degree must satisfy'),
        (-1, 0, 0, 'zero_first_padded', 'degree must satisfy'),
        (1, 2, 0, 'zero_first_padded', 'order must satisfy'),
        (1, 0, 2, 'zero_first_padded', 'orientational order n must satisfy'),
        (0, 0, 1, 'zero_first_compact', 'holds no coefficient with ell < |n|'),
        (1, 0, 0, 'zero_first', 'storage must be one of'),
    ],
)
def test_index_of_raises_with_invalid_inputs(
    ell: int, m: int, n: int, storage: str, message: str
) -> None:
  with pytest.raises(ValueError, match=message):
    so3x.index_of(ell, m, n, L=4, N=2, storage=storage)


@pytest.mark.parametrize('index', [-1, 46])
def test_elmn_from_index_raises_with_invalid_index(index: int) -> None:
  with pytest.raises(ValueError, match='index must satisfy'):
    so3x.elmn_from_index(index, 4, 2, 'negative_first_compact')


@pytest.mark.parametrize(
    'source, target', list(itertools.product(all_storages, repeat=2))
)
def test_convert_storage(source: so3x.Storage, target: so3x.Storage) -> None:
  L, N = 4, 3
  flmn = jax.random.normal(
      jax.random.PRNGKey(0), (so3x.flmn_size(L, N, source),)
  )
  converted = so3x.convert_storage(flmn, L, N, source, target)
  assert converted.shape == (so3x.flmn_size(L, N, target),)
  for ell, m, n in _valid_elmn(L, N, target):
    value = converted[so3x.index_of(ell, m, n, L, N, target)]
    if ell < abs(n):
      assert value == 0
    else:
      assert value == flmn[so3x.index_of(ell, m, n, L, N, source)]


def test_convert_storage_round_trip() -> None:
  L, N = 5, 3
  flmn = jax.random.normal(
      jax.random.PRNGKey(1),
      (so3x.flmn_size(L, N, 'zero_first_compact'),),
  )
  padded = so3x.convert_storage(
      flmn, L, N, 'zero_first_compact', 'negative_first_padded'
  )
  recovered = so3x.convert_storage(
      padded, L, N, 'negative_first_padded', 'zero_first_compact'
  )
  assert jnp.array_equal(recovered, flmn)


def test_convert_storage_raises_with_wrong_shape() -> None:
  with pytest.raises(ValueError, match=r'flmn must have shape \(46,\)'):
    so3x.convert_storage(
        jnp.zeros(48), 4, 2, 'zero_first_compact', 'zero_first_padded'
    )


@pytest.mark.parametrize(
    'function, args, message',
    [
        (so3x.flmn_size, (2, 3, 'zero_first_compact'), 'N must not be larger'),
        (so3x.flmn_size, (0, 1, 'zero_first_padded'), 'L must be a positive'),
        (so3x.flmn_size, (3, 0, 'zero_first_padded'), 'N must be a positive'),
        (
            so3x.orientational_orders,
            (0, 'negative_first_padded'),
            'N must be a positive',
        ),
        (so3x.block_size, (0, 0, 'zero_first_padded'), 'L must be a positive'),
        (so3x.block_size, (2, 2, 'zero_first_compact'), r'\|n\| < L'),
        (
            so3x.block_offset,
            (0, 2, 3, 'negative_first_compact'),
            'N must not be larger',
        ),
    ],
)
def test_layout_functions_raise_with_invalid_band_limits(
    function, args: tuple, message: str
) -> None:
  with pytest.raises(ValueError, match=message):
    function(*args)
