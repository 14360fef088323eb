# codegen for the selector lookup of the router's `findImplementation`.
# walks the dispatch tree and emits an unrolled binary search in yul:
#
#     if lt(sig,0x70a08231) {
#         switch sig
#         case 0x095ea7b3 { result := _TOKEN_MODULE } // TokenModule.approve()
#         ...
#         leave
#     }
#     switch sig
#     ...
#     leave
#
# the right half of every guard is the fallthrough of the `if`, so it is
# emitted at the same level as the guard instead of being nested.

from routergen.codegen.constants import TAB
from routergen.codegen.dispatch_tree import DispatchNode, min_selector
from routergen.exceptions import CodegenPanic

# `findImplementation` body sits at this depth in the router template
BASE_INDENT = 4


def _generate_leaf(node: DispatchNode, names: dict[str, str], indent: str) -> list[str]:
    if len(node.selectors) == 0:
        raise CodegenPanic("empty leaf in dispatch tree")

    ret = [f"{indent}switch sig"]
    for s in node.selectors:
        if s.module not in names:
            raise CodegenPanic(f"no address constant for module `{s.module}`")
        case = f"case {s.selector} {{ result := {names[s.module]} }}"
        ret.append(f"{indent}{case} // {s.module}.{s.name}()")

    # nothing matched: return with result = 0
    ret.append(f"{indent}leave")
    return ret


def _generate_node(node: DispatchNode, names: dict[str, str], level: int) -> list[str]:
    indent = TAB * level

    if node.is_leaf:
        return _generate_leaf(node, names, indent)

    mid = min_selector(node.right)

    ret = [f"{indent}if lt(sig,{mid.selector}) {{"]
    ret.extend(_generate_node(node.left, names, level + 1))
    ret.append(f"{indent}}}")
    ret.extend(_generate_node(node.right, names, level))
    return ret


def generate_selector_switch(tree: DispatchNode, names: dict[str, str]) -> str:
    """
    Generate the yul which maps `sig` to the address constant of the module
    implementing it. ``names`` maps module names to their constant names.
    """
    lines = _generate_node(tree, names, BASE_INDENT)
    return "\n".join(lines).strip()
