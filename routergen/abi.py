"""
Helpers for reading JSON ABI fragments: canonical parameter types, function
signatures and function filters.

cf. https://docs.soliditylang.org/en/latest/abi-spec.html#json
"""
import re
from typing import Callable, Iterator

from routergen.exceptions import InvalidABIFragment

FunctionFilter = Callable[[str], bool]

# `uint`, `int`, `fixed` and `ufixed` are aliases, the selector must be
# computed over the full type name
_TYPE_ALIASES = {
    "uint": "uint256",
    "int": "int256",
    "fixed": "fixed128x18",
    "ufixed": "ufixed128x18",
}

# base type name followed by any number of `[]` / `[k]` suffixes
_TYPE_RE = re.compile(r"^([a-z]+[0-9x]*)((?:\[[0-9]*\])*)$")

# prefix of the functions solidity-coverage injects into instrumented contracts
COVERAGE_FUNCTION_PREFIX = "c_0x"


def include_all(fn_name: str) -> bool:
    return True


def exclude_coverage_functions(fn_name: str) -> bool:
    return not fn_name.startswith(COVERAGE_FUNCTION_PREFIX)


def is_function_fragment(fragment) -> bool:
    return (
        isinstance(fragment, dict)
        and fragment.get("type") == "function"
        and isinstance(fragment.get("name"), str)
    )


def iter_functions(abi: list, function_filter: FunctionFilter = include_all) -> Iterator[dict]:
    """
    Yield the function fragments of ``abi`` which pass ``function_filter``,
    in ABI order. Events, errors, the constructor, fallback and receive
    entries are skipped.
    """
    for fragment in abi:
        if is_function_fragment(fragment) and function_filter(fragment["name"]):
            yield fragment


def canonical_type(param: dict) -> str:
    """
    Return the canonical type string of an ABI parameter.

    > The canonical type is determined until a tuple type is reached and
      the string description up to that point is stored in type prefix
      with the word tuple, i.e. it will be tuple followed by a sequence
      of [] and [k] with integers k.
    """
    type_ = param.get("type") if isinstance(param, dict) else None
    if not isinstance(type_, str):
        raise InvalidABIFragment(f"ABI parameter has no type: {param!r}")

    type_ = "".join(type_.split())

    if type_.startswith("tuple"):
        suffix = type_[len("tuple") :]
        components = param.get("components")
        if not isinstance(components, list):
            raise InvalidABIFragment(f"ABI tuple parameter has no components: {param!r}")
        if not _TYPE_RE.match(f"tuple{suffix}"):
            raise InvalidABIFragment(f"ABI parameter has an invalid type: {type_}")
        inner = ",".join(canonical_type(c) for c in components)
        return f"({inner}){suffix}"

    m = _TYPE_RE.match(type_)
    if m is None:
        raise InvalidABIFragment(f"ABI parameter has an invalid type: {type_}")

    base, suffix = m.groups()
    return _TYPE_ALIASES.get(base, base) + suffix


def function_signature(fragment: dict) -> str:
    # e.g. transfer(address,uint256)
    inputs = fragment.get("inputs") or []
    try:
        args = ",".join(canonical_type(i) for i in inputs)
    except InvalidABIFragment as e:
        raise InvalidABIFragment(f"{e._message} (in function `{fragment['name']}`)") from None
    return f"{fragment['name']}({args})"
