# the modules behind a router and the function selectors they expose

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Sequence

from routergen.abi import FunctionFilter, function_signature, include_all, iter_functions
from routergen.exceptions import (
    DuplicateModuleName,
    EmptyModuleList,
    InvalidAddress,
    SelectorCollision,
)
from routergen.utils import checksum_encode, is_hex_address, method_id_hex, method_id_int


@dataclass(frozen=True)
class ModuleDescriptor:
    name: str
    deployed_address: str
    abi: tuple = field(default=(), repr=False)

    def __post_init__(self):
        # accept any sequence of fragments, but keep the descriptor immutable
        object.__setattr__(self, "abi", tuple(self.abi))

    @property
    def checksum_address(self) -> str:
        if not is_hex_address(self.deployed_address):
            raise InvalidAddress(
                f"Module `{self.name}` has an invalid deployed address: {self.deployed_address!r}",
                hint="expected 0x followed by 40 hex characters",
            )
        return checksum_encode(self.deployed_address.lower())


@dataclass(frozen=True)
class FunctionSelector:
    module: str
    name: str
    signature: str
    method_id: int

    @property
    def selector(self) -> str:
        return method_id_hex(self.method_id)

    def __repr__(self):
        return f"FunctionSelector({self.selector} {self.module}.{self.signature})"


def get_selectors(
    module: ModuleDescriptor, function_filter: FunctionFilter = include_all
) -> list[FunctionSelector]:
    """
    Compute the selectors of the functions a module exposes, in ABI order.
    """
    ret = []
    for fragment in iter_functions(module.abi, function_filter):
        sig = function_signature(fragment)
        ret.append(FunctionSelector(module.name, fragment["name"], sig, method_id_int(sig)))
    return ret


def check_modules(modules: Sequence[ModuleDescriptor], router_name: str = "Router") -> None:
    if len(modules) == 0:
        raise EmptyModuleList(f'No contracts found to render during "{router_name}" generation')

    seen: set[str] = set()
    for m in modules:
        if m.name in seen:
            raise DuplicateModuleName(
                f"Module `{m.name}` is given more than once to `{router_name}`",
                hint="each module needs a distinct name",
            )
        seen.add(m.name)

        # raises InvalidAddress
        m.checksum_address


def collect_selectors(
    modules: Sequence[ModuleDescriptor],
    function_filter: Optional[FunctionFilter] = None,
    router_name: str = "Router",
) -> list[FunctionSelector]:
    """
    Collect the selectors of all modules, sorted by selector value.

    Raises EmptyModuleList when ``modules`` is empty.
    """
    if len(modules) == 0:
        raise EmptyModuleList(f'No contracts found to render during "{router_name}" generation')

    function_filter = function_filter or include_all

    ret = []
    for m in modules:
        ret.extend(get_selectors(m, function_filter))

    # stable sort, so equal selectors keep module order for the error report
    ret.sort(key=lambda s: s.method_id)
    return ret


def validate_selectors(selectors: Sequence[FunctionSelector]) -> None:
    """
    Raise SelectorCollision if any selector value appears more than once.
    Every occurrence of a repeated value is reported.
    """
    counts = Counter(s.method_id for s in selectors)
    repeated = {method_id for method_id, n in counts.items() if n > 1}

    if len(repeated) == 0:
        return

    collisions = [s for s in selectors if s.method_id in repeated]
    raise SelectorCollision(
        collisions, hint="rename one of the functions in each group so the selectors differ"
    )
