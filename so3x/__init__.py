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


r"""so3x API.

Fast Wigner transforms of functions on the rotation group :math:`\mathrm{SO}(3)`
sampled on the equiangular McEwen-Wiaux grid. All public functions of the
:obj:`indexing <so3x.indexing>`, :obj:`sampling <so3x.sampling>`, and
:obj:`transforms <so3x.transforms>` submodules can be used without specifying
their full path. For example, ``so3x.inverse`` is equivalent to
``so3x.transforms.inverse``.
"""


from . import indexing
from . import sampling
from . import transforms
from ._storage import as_storage
from ._storage import Ordering
from ._storage import Packing
from ._storage import Storage
from .config import Config
from .indexing import block_offset
from .indexing import block_size
from .indexing import convert_storage
from .indexing import elmn_from_index
from .indexing import flmn_size
from .indexing import index_of
from .indexing import orientational_orders
from .sampling import f_shape
from .sampling import f_size
from .sampling import grid_dimensions
from .sampling import sampling_angles
from .sampling import sampling_grid
from .transforms import forward
from .transforms import inverse
from .version import __version__
