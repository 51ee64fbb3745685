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


"""Global configuration options for so3x."""

from ._common import check_sht_method_is_valid
from ._common import SHTMethod
from ._storage import as_storage
from ._storage import Storage
from ._storage import StorageLike


class Config:
  """Static class for storing global configuration options for so3x.

  Attributes:
    storage: Which storage layout is assumed for Wigner-D coefficients by
      default.
    sht_method: Which s2fft backend computes the spherical harmonic transforms
      of the individual orientational order slices by default.
  """

  storage: Storage = Storage.ZERO_FIRST_PADDED
  sht_method: SHTMethod = 'jax'

  @staticmethod
  def set_storage(storage: StorageLike = Storage.ZERO_FIRST_PADDED) -> None:
    """Sets the value of Config.storage.

    Args:
      storage: New value for Config.storage (a :class:`Storage` member or a
        string naming one).

    Raises:
      ValueError: If ``storage`` has an invalid value.
    """
    Config.storage = as_storage(storage)

  @staticmethod
  def set_sht_method(sht_method: SHTMethod = 'jax') -> None:
    """Sets the value of Config.sht_method.

    Args:
      sht_method: New value for Config.sht_method.

    Raises:
      ValueError: If ``sht_method`` has an invalid value.
    """
    check_sht_method_is_valid(sht_method)
    Config.sht_method = sht_method
