import dataclasses

import pytest

from routergen.abi import exclude_coverage_functions
from routergen.exceptions import (
    DuplicateModuleName,
    EmptyModuleList,
    InvalidAddress,
    RouterValidationError,
    SelectorCollision,
)
from routergen.module import (
    FunctionSelector,
    ModuleDescriptor,
    check_modules,
    collect_selectors,
    get_selectors,
    validate_selectors,
)


def test_get_selectors_in_abi_order(token_module):
    selectors = get_selectors(token_module)

    assert [s.name for s in selectors] == [
        "name",
        "symbol",
        "decimals",
        "totalSupply",
        "balanceOf",
        "transfer",
        "transferFrom",
        "approve",
        "allowance",
    ]
    assert all(s.module == "TokenModule" for s in selectors)

    transfer = selectors[5]
    assert transfer.signature == "transfer(address,uint256)"
    assert transfer.method_id == 0xA9059CBB
    assert transfer.selector == "0xa9059cbb"


def test_get_selectors_filter(make_module):
    module = make_module("M", ["foo()", "c_0xdeadbeef(bytes32)"])

    assert [s.name for s in get_selectors(module)] == ["foo", "c_0xdeadbeef"]
    assert [s.name for s in get_selectors(module, exclude_coverage_functions)] == ["foo"]


def test_collect_selectors_sorted(token_module, owner_module):
    selectors = collect_selectors([token_module, owner_module])

    assert [s.selector for s in selectors] == [
        "0x06fdde03",  # name()
        "0x095ea7b3",  # approve(address,uint256)
        "0x18160ddd",  # totalSupply()
        "0x23b872dd",  # transferFrom(address,address,uint256)
        "0x313ce567",  # decimals()
        "0x70a08231",  # balanceOf(address)
        "0x715018a6",  # renounceOwnership()
        "0x8da5cb5b",  # owner()
        "0x95d89b41",  # symbol()
        "0xa9059cbb",  # transfer(address,uint256)
        "0xdd62ed3e",  # allowance(address,address)
        "0xf2fde38b",  # transferOwnership(address)
    ]
    assert {s.module for s in selectors} == {"TokenModule", "OwnerModule"}


def test_collect_selectors_empty():
    with pytest.raises(EmptyModuleList):
        collect_selectors([])


def test_collect_selectors_does_not_validate(make_module, addresses):
    a = make_module("A", ["burn(uint256)"], addresses[0])
    b = make_module("B", ["collate_propagate_storage(bytes16)"], addresses[1])

    selectors = collect_selectors([a, b])
    assert [s.selector for s in selectors] == ["0x42966c68", "0x42966c68"]
    # stable: module order is kept for equal selectors
    assert [s.module for s in selectors] == ["A", "B"]


def test_validate_selectors_ok(token_module, owner_module):
    validate_selectors(collect_selectors([token_module, owner_module]))


def test_validate_selectors_collision_across_modules(make_module, addresses):
    a = make_module("A", ["burn(uint256)", "foo()"], addresses[0])
    b = make_module("B", ["collate_propagate_storage(bytes16)"], addresses[1])

    with pytest.raises(SelectorCollision) as e:
        validate_selectors(collect_selectors([a, b]))

    assert [(s.module, s.name) for s in e.value.collisions] == [
        ("A", "burn"),
        ("B", "collate_propagate_storage"),
    ]

    lines = str(e.value).splitlines()
    assert lines[0] == (
        "The following contracts have repeated function selectors behind the same Router:"
    )
    assert lines[1] == "  0x42966c68 // A.burn()"
    assert lines[2] == "  0x42966c68 // B.collate_propagate_storage()"
    assert "foo" not in str(e.value)


def test_validate_selectors_reports_every_occurrence(make_module, addresses):
    modules = [
        make_module("A", ["burn(uint256)", "owner()"], addresses[0]),
        make_module("B", ["burn(uint256)", "owner()"], addresses[1]),
        make_module("C", ["collate_propagate_storage(bytes16)", "symbol()"], addresses[2]),
    ]

    with pytest.raises(SelectorCollision) as e:
        validate_selectors(collect_selectors(modules))

    reported = [(s.selector, s.module) for s in e.value.collisions]
    assert reported == [
        ("0x42966c68", "A"),
        ("0x42966c68", "B"),
        ("0x42966c68", "C"),
        ("0x8da5cb5b", "A"),
        ("0x8da5cb5b", "B"),
    ]


def test_validate_selectors_same_module(make_module):
    module = make_module("A", ["burn(uint256)", "collate_propagate_storage(bytes16)"])

    with pytest.raises(SelectorCollision) as e:
        validate_selectors(collect_selectors([module]))

    assert len(e.value.collisions) == 2


def test_selector_collision_is_validation_error():
    assert issubclass(SelectorCollision, RouterValidationError)
    assert issubclass(EmptyModuleList, RouterValidationError)
    assert not issubclass(SelectorCollision, EmptyModuleList)


def test_module_descriptor_is_immutable(make_abi, addresses):
    abi = make_abi("foo()")
    module = ModuleDescriptor("M", addresses[0], abi)

    assert isinstance(module.abi, tuple)
    abi.append({"type": "function", "name": "bar", "inputs": []})
    assert len(module.abi) == 1

    with pytest.raises(dataclasses.FrozenInstanceError):
        module.name = "N"


def test_module_checksum_address(addresses):
    module = ModuleDescriptor("M", addresses[0].lower())
    assert module.checksum_address == addresses[0]


@pytest.mark.parametrize(
    "address", ["", "0x1234", "f39fd6e51aad88f6f4ce6ab8827279cfffb92266", "0x" + "zz" * 20]
)
def test_module_invalid_address(address):
    module = ModuleDescriptor("M", address)
    with pytest.raises(InvalidAddress):
        module.checksum_address


def test_check_modules(token_module, owner_module):
    check_modules([token_module, owner_module])

    with pytest.raises(EmptyModuleList):
        check_modules([])


def test_check_modules_duplicate_name(make_module, addresses):
    a = make_module("A", ["foo()"], addresses[0])
    b = make_module("A", ["bar()"], addresses[1])

    with pytest.raises(DuplicateModuleName):
        check_modules([a, b])


def test_function_selector_repr():
    s = FunctionSelector("M", "foo", "foo()", 0xC2985578)
    assert repr(s) == "FunctionSelector(0xc2985578 M.foo())"
