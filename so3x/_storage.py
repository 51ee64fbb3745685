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


r"""Storage layouts for Wigner-D coefficients :math:`f_{\ell mn}`."""

import enum
from typing import Literal, Union


valid_orderings = ('zero_first', 'negative_first')
valid_packings = ('padded', 'compact')

Ordering = Literal[valid_orderings]
Packing = Literal[valid_packings]


def check_ordering_is_valid(ordering: Ordering) -> None:
  """Checks whether ordering has a valid value."""
  if ordering not in valid_orderings:
    raise ValueError(
        f'ordering must be in {valid_orderings}, received {ordering!r}'
    )


def check_packing_is_valid(packing: Packing) -> None:
  """Checks whether packing has a valid value."""
  if packing not in valid_packings:
    raise ValueError(
        f'packing must be in {valid_packings}, received {packing!r}'
    )


class Storage(enum.Enum):
  r"""Memory layout of a flat array of Wigner-D coefficients.

  A layout combines an *ordering* of the orientational order blocks with a
  *packing* of each block:

  * ``zero_first``: blocks are stored for :math:`n=0,1,\dots,N-1,-(N-1),\dots,
    -1` (the natural order of FFT modes).
  * ``negative_first``: blocks are stored for :math:`n=-(N-1),\dots,N-1`.
  * ``padded``: every block holds all :math:`L^2` coefficients, entries with
    :math:`\ell<\lvert n\rvert` are zero.
  * ``compact``: entries with :math:`\ell<\lvert n\rvert` are omitted, so the
    block for :math:`n` holds :math:`L^2-n^2` coefficients.
  """

  ZERO_FIRST_PADDED = 'zero_first_padded'
  NEGATIVE_FIRST_PADDED = 'negative_first_padded'
  ZERO_FIRST_COMPACT = 'zero_first_compact'
  NEGATIVE_FIRST_COMPACT = 'negative_first_compact'

  @property
  def ordering(self) -> Ordering:
    return 'zero_first' if self.value.startswith('zero') else 'negative_first'

  @property
  def packing(self) -> Packing:
    return 'padded' if self.value.endswith('padded') else 'compact'

  @property
  def is_padded(self) -> bool:
    return self.packing == 'padded'

  @classmethod
  def from_ordering_and_packing(
      cls, ordering: Ordering, packing: Packing
  ) -> 'Storage':
    """Returns the layout with the given ordering and packing.

    Args:
      ordering: Either ``'zero_first'`` or ``'negative_first'``.
      packing: Either ``'padded'`` or ``'compact'``.

    Returns:
      The corresponding :class:`Storage` member.

    Raises:
      ValueError: If ``ordering`` or ``packing`` has an invalid value.
    """
    check_ordering_is_valid(ordering)
    check_packing_is_valid(packing)
    return cls(f'{ordering}_{packing}')


StorageLike = Union[Storage, str]


def as_storage(storage: StorageLike) -> Storage:
  """Converts a storage selector to a validated :class:`Storage` member.

  Args:
    storage: A :class:`Storage` member, or a string naming one, either by value
      (e.g. ``'zero_first_padded'``) or by member name (e.g.
      ``'ZERO_FIRST_PADDED'``).

  Returns:
    The corresponding :class:`Storage` member.

  Raises:
    ValueError: If ``storage`` does not name a valid storage layout.
  """
  if isinstance(storage, Storage):
    return storage
  if isinstance(storage, str):
    if storage in Storage.__members__:
      return Storage[storage]
    for member in Storage:
      if storage == member.value:
        return member
  raise ValueError(
      f'storage must be one of {tuple(s.value for s in Storage)}, '
      f'received {storage!r}'
  )
