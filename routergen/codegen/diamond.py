# read-only EIP-2535 ("diamond") compatibility layer for the router.
#
# the router is not a real diamond: facets can never be added, replaced or
# removed. it only records its modules as facets at construction time and
# emits the DiamondCut event a diamond would have emitted, so that loupe
# based tooling can introspect it.

import textwrap
from dataclasses import dataclass
from typing import Optional, Sequence

from routergen.abi import FunctionFilter, include_all
from routergen.codegen.constants import TAB
from routergen.module import FunctionSelector, ModuleDescriptor, get_selectors
from routergen.utils import keccak256

# the facet registry lives at keccak256(FACET_STORAGE_NAMESPACE + router name)
# so it cannot overlap with the router's own storage
FACET_STORAGE_NAMESPACE = "Router."


@dataclass(frozen=True)
class Facet:
    module: str
    address: str
    selectors: tuple[FunctionSelector, ...]


class FacetTable:
    """
    The facets a router registers, one per module, each with the module's
    full (filtered) selector set in ABI order.

    Mirrors the loupe accessors of the generated contract, except that a
    missing facet is reported as ``None`` instead of the zero address.
    """

    def __init__(self, facets: Sequence[Facet]):
        self.facets = tuple(facets)

    @classmethod
    def from_modules(
        cls, modules: Sequence[ModuleDescriptor], function_filter: FunctionFilter = include_all
    ) -> "FacetTable":
        facets = [
            Facet(m.name, m.checksum_address, tuple(get_selectors(m, function_filter)))
            for m in modules
        ]
        return cls(facets)

    def __len__(self):
        return len(self.facets)

    def __iter__(self):
        return iter(self.facets)

    def facet_addresses(self) -> list[str]:
        return [f.address for f in self.facets]

    def facet_function_selectors(self, address: str) -> Optional[list[str]]:
        address = address.lower()
        for f in self.facets:
            if f.address.lower() == address:
                return [s.selector for s in f.selectors]
        return None

    def facet_address(self, selector: str | int) -> Optional[str]:
        method_id = int(selector, 16) if isinstance(selector, str) else selector
        for f in self.facets:
            for s in f.selectors:
                if s.method_id == method_id:
                    return f.address
        return None


def facet_storage_slot(router_name: str) -> bytes:
    return keccak256(f"{FACET_STORAGE_NAMESPACE}{router_name}".encode("utf-8"))


def generate_diamond_constructor(facets: FacetTable, names: dict[str, str]) -> str:
    """
    Generate the constructor body which registers every facet and emits the
    DiamondCut event.
    """
    indent = TAB * 2
    lines = [f"{indent}bytes4[] memory selectors;"]

    for facet in facets:
        lines.append("")
        lines.append(f"{indent}selectors = new bytes4[]({len(facet.selectors)});")
        for i, s in enumerate(facet.selectors):
            lines.append(f"{indent}selectors[{i}] = {s.selector};")
        lines.append(f"{indent}_facets().push(Facet({names[facet.module]}, selectors));")

    lines.append("")
    lines.append(f"{indent}_emitDiamondCutEvent();")

    return "\n".join(lines).strip()


_DIAMOND_COMPAT = """
struct Facet {{
    address facetAddress;
    bytes4[] functionSelectors;
}}

enum FacetCutAction {{Add, Replace, Remove}}
// Add=0, Replace=1, Remove=2

struct FacetCut {{
    address facetAddress;
    FacetCutAction action;
    bytes4[] functionSelectors;
}}

/// @notice Gets all facet addresses and their four byte function selectors.
/// @return facets_ Facet
function _facets() internal view returns (Facet[] storage facets_) {{
    bytes32 s = {storage_slot}; // keccak256("{namespace}")
    assembly {{
        facets_.slot := s
    }}
}}

/// @notice Gets all the function selectors supported by a specific facet.
/// @param _facet The facet address.
/// @return facetFunctionSelectors_
function _facetFunctionSelectors(address _facet) internal view returns (bytes4[] memory facetFunctionSelectors_) {{
    Facet[] storage facets = _facets();
    for (uint256 i = 0; i < facets.length; i++) {{
        if (facets[i].facetAddress == _facet) {{
            return facets[i].functionSelectors;
        }}
    }}
}}

/// @notice Get all the facet addresses used by a diamond.
/// @return facetAddresses_
function _facetAddresses() internal pure returns (address[] memory facetAddresses_) {{
    facetAddresses_ = new address[]({n_facets});
{facet_addresses}
}}

/// @notice Gets the facet that supports the given selector.
/// @dev If facet is not found return address(0).
/// @param _functionSelector The function selector.
/// @return facetAddress_ The facet address.
function _facetAddress(bytes4 _functionSelector) internal view returns (address facetAddress_) {{
    Facet[] storage facets = _facets();
    for (uint256 i = 0; i < facets.length; i++) {{
        for (uint256 j = 0; j < facets[i].functionSelectors.length; j++) {{
            if (facets[i].functionSelectors[j] == _functionSelector) {{
                return facets[i].facetAddress;
            }}
        }}
    }}
}}

event DiamondCut(FacetCut[] _diamondCut, address _init, bytes _calldata);

/// @notice Emits the cut events that would be emitted if this was actually a diamond
function _emitDiamondCutEvent() internal returns (bool) {{
    FacetCut[] memory cuts = new FacetCut[]({n_facets});
{facet_cuts}
    emit DiamondCut(cuts, address(0), new bytes(0));
    return true;
}}
"""


def generate_diamond_compat(router_name: str, facets: FacetTable, names: dict[str, str]) -> str:
    """
    Generate the facet registry, loupe helpers and DiamondCut event, indented
    to sit directly inside the router contract.
    """
    facet_addresses = []
    facet_cuts = []
    for i, facet in enumerate(facets):
        name = names[facet.module]
        facet_addresses.append(f"{TAB}facetAddresses_[{i}] = {name};")
        cut = f"FacetCut({name}, FacetCutAction.Add, _facetFunctionSelectors({name}))"
        facet_cuts.append(f"{TAB}cuts[{i}] = {cut};")

    ret = _DIAMOND_COMPAT.format(
        storage_slot="0x" + facet_storage_slot(router_name).hex(),
        namespace=f"{FACET_STORAGE_NAMESPACE}{router_name}",
        n_facets=len(facets),
        facet_addresses="\n".join(facet_addresses),
        facet_cuts="\n".join(facet_cuts),
    )

    return textwrap.indent(ret, TAB).rstrip()
