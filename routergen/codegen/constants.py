"""
Names and declarations of the per-module address constants.

Every place in the generated router that refers to a module (the selector
switch, the diamond facet registry) goes through the mapping returned by
``constant_names`` so references always resolve to the declared constant.
"""
import re
from typing import Iterable, Sequence

from routergen.module import ModuleDescriptor

TAB = "    "

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_$]")


def to_private_constant_case(name: str) -> str:
    """
    Convert a contract name to the name of a private constant, i.e.
    ``_`` followed by SCREAMING_SNAKE_CASE.

    Word boundaries are placed before an uppercase letter that follows a
    lowercase letter or digit, and before the last capital of an acronym
    (``NFTModule`` -> ``_NFT_MODULE``). Underscores already in the name are
    doubled, so ``Owner_Module`` (``_OWNER__MODULE``) stays distinct from
    ``OwnerModule`` (``_OWNER_MODULE``).
    """
    name = _NON_IDENTIFIER_RE.sub("_", name)

    ret = []
    for i, c in enumerate(name):
        if c == "_":
            ret.append("__")
            continue

        if c.isupper() and i > 0:
            prev = name[i - 1]
            nxt = name[i + 1] if i + 1 < len(name) else ""
            if prev.islower() or prev.isdigit() or (prev.isupper() and nxt.islower()):
                ret.append("_")

        ret.append(c.upper())

    return "_" + "".join(ret)


def constant_names(module_names: Iterable[str]) -> dict[str, str]:
    """
    Map each module name to the identifier of its address constant.

    Names which only differ by letter case convert to the same identifier;
    later ones (in the given order) get the smallest free ``_2``, ``_3``, ...
    suffix, so the result is deterministic for a given module order.
    """
    ret: dict[str, str] = {}
    taken: set[str] = set()

    for name in module_names:
        if name in ret:
            continue

        candidate = base = to_private_constant_case(name)
        i = 2
        while candidate in taken:
            candidate = f"{base}_{i}"
            i += 1

        ret[name] = candidate
        taken.add(candidate)

    return ret


def generate_module_constants(modules: Sequence[ModuleDescriptor], names: dict[str, str]) -> str:
    """
    Get a string of modules constants with its deployed addresses.
    E.g.:
        address private constant _ANOTHER_MODULE = 0xAA...;
        address private constant _OWNER_MODULE = 0x5c..;
    """
    lines = [
        f"{TAB}address private constant {names[m.name]} = {m.checksum_address};"
        for m in modules
    ]
    return "\n".join(lines).strip()
