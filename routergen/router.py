import logging
from typing import Optional, Sequence

from routergen.abi import FunctionFilter, include_all
from routergen.codegen.constants import constant_names, generate_module_constants
from routergen.codegen.diamond import (
    FacetTable,
    generate_diamond_compat,
    generate_diamond_constructor,
)
from routergen.codegen.dispatch import generate_selector_switch
from routergen.codegen.dispatch_tree import MAX_LEAF_SIZE, build_dispatch_tree, check_tree, depth
from routergen.exceptions import NoRoutableFunctions
from routergen.module import (
    ModuleDescriptor,
    check_modules,
    collect_selectors,
    get_selectors,
    validate_selectors,
)
from routergen.settings import DEFAULT_ROUTER_NAME, _is_debug_mode
from routergen.templates import ROUTER_TEMPLATE, TEMPLATE_SLOTS, render_template
from routergen.warnings import UnreachableModule, router_warn

log = logging.getLogger(__name__)


def generate_receive(can_receive_plain_eth: bool) -> str:
    # plain ETH transfers are rejected unless explicitly enabled
    if can_receive_plain_eth:
        return "\n    receive() external payable {}\n"
    return ""


def _warn_unreachable(modules: Sequence[ModuleDescriptor], function_filter: FunctionFilter):
    for m in modules:
        if len(get_selectors(m, function_filter)) == 0:
            router_warn(
                UnreachableModule(
                    f"Module `{m.name}` exposes no routable function, "
                    "it cannot be reached through the router"
                )
            )


def generate_router(
    modules: Sequence[ModuleDescriptor],
    router_name: str = DEFAULT_ROUTER_NAME,
    template: Optional[str] = None,
    can_receive_plain_eth: bool = False,
    has_diamond_compat: bool = False,
    function_filter: Optional[FunctionFilter] = None,
) -> str:
    """
    Main entry point of the router generator.

    Generate the solidity source of a router contract which forwards each
    call to the module implementing its function selector.

    Arguments
    ---------
    modules: Sequence[ModuleDescriptor]
        The modules behind the router, in the order their address constants
        (and diamond facets) are declared.
    router_name: str, optional
        Name of the generated contract. Defaults to "Router".
    template: str, optional
        Router template with the slots in `TEMPLATE_SLOTS`. Defaults to
        `ROUTER_TEMPLATE`.
    can_receive_plain_eth: bool, optional
        Add a `receive()` function so the router accepts plain ETH transfers.
    has_diamond_compat: bool, optional
        Add the read-only EIP-2535 compatibility layer.
    function_filter: Callable[[str], bool], optional
        Only functions whose name passes the filter are routed. Defaults to
        routing every function.

    Returns
    -------
    str
        The generated source code.
    """
    template = template or ROUTER_TEMPLATE
    function_filter = function_filter or include_all

    check_modules(modules, router_name)
    for m in modules:
        log.debug("%s: %s", m.name, m.checksum_address)

    selectors = collect_selectors(modules, function_filter, router_name)
    validate_selectors(selectors)

    if len(selectors) == 0:
        raise NoRoutableFunctions(
            f'None of the modules of "{router_name}" exposes a routable function',
            hint="check the module ABIs and the function filter",
        )

    _warn_unreachable(modules, function_filter)

    tree = build_dispatch_tree(selectors, MAX_LEAF_SIZE)
    if _is_debug_mode():
        check_tree(tree, MAX_LEAF_SIZE)
    log.debug("%s: %d selectors, dispatch depth %d", router_name, len(selectors), depth(tree))

    names = constant_names(m.name for m in modules)

    slots = {
        "moduleName": router_name,
        "modules": generate_module_constants(modules, names),
        "selectors": generate_selector_switch(tree, names),
        "receive": generate_receive(can_receive_plain_eth),
        "diamondConstructor": "",
        "diamondCompat": "",
    }

    if has_diamond_compat:
        facets = FacetTable.from_modules(modules, function_filter)
        slots["diamondConstructor"] = generate_diamond_constructor(facets, names)
        slots["diamondCompat"] = generate_diamond_compat(router_name, facets, names)

    assert tuple(slots) == TEMPLATE_SLOTS
    return render_template(template, **slots)
