# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Utilities for discrete systems: backend management, automatic
differentiation, state containers and contract validation.
"""

from .backend_manager import BackendManager
from .contract_validator import (
    ContractValidator,
    DimensionMismatchError,
    InvalidArgumentError,
    ScalarContractValidator,
    ValidationError,
    test_functions,
    test_functions_1d,
    validate_system,
)
from .differentiation import (
    differentiate,
    get_backend_manager,
    jacobian_of,
    set_default_backend,
)
from .state_container import as_scalar_state, as_state_vector

__all__ = [
    "BackendManager",
    "ContractValidator",
    "ScalarContractValidator",
    "ValidationError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "test_functions",
    "test_functions_1d",
    "validate_system",
    "differentiate",
    "jacobian_of",
    "get_backend_manager",
    "set_default_backend",
    "as_scalar_state",
    "as_state_vector",
]
