import json
import os
import re
from contextlib import contextmanager

import hypothesis
import pytest

from routergen.module import ModuleDescriptor
from routergen.settings import debug_mode
from routergen.utils import keccak256

############
# PATCHING #
############


# disable hypothesis deadline globally
hypothesis.settings.register_profile("ci", deadline=None)
hypothesis.settings.load_profile("ci")


def pytest_addoption(parser):
    parser.addoption(
        "--enable-routergen-debug-mode",
        action="store_true",
        help="check dispatch tree invariants on every generated router",
    )


@pytest.fixture(scope="session")
def debug(pytestconfig):
    debug = pytestconfig.getoption("enable_routergen_debug_mode")
    assert isinstance(debug, bool)
    return debug


@pytest.fixture(scope="session", autouse=True)
def global_debug_mode(debug):
    with debug_mode(debug):
        yield


@contextmanager
def working_directory(directory):
    tmp = os.getcwd()
    try:
        os.chdir(directory)
        yield
    finally:
        os.chdir(tmp)


@pytest.fixture
def chdir_tmp_path(tmp_path):
    with working_directory(tmp_path):
        yield


@pytest.fixture
def keccak():
    return keccak256


@pytest.fixture
def make_file(tmp_path):
    # writes file_contents to file_name, creating it in the
    # tmp_path directory. returns final path.
    def fn(file_name, file_contents):
        path = tmp_path / file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            f.write(file_contents)

        return path

    return fn


@pytest.fixture
def make_json_file(make_file):
    def fn(file_name, data):
        return make_file(file_name, json.dumps(data))

    return fn


#########
# ABIs  #
#########

ADDRESSES = (
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
    "0x703aef879107aDE9820A795d3a6C36d6B9CC2B97",
)

_SIG_RE = re.compile(r"^(\w+)\((.*)\)$")


def abi_from_signatures(*signatures):
    # only flat parameter lists, e.g. "transfer(address,uint256)"
    ret = []
    for sig in signatures:
        name, args = _SIG_RE.match(sig).groups()
        inputs = [{"name": "", "type": t} for t in args.split(",") if t]
        ret.append(
            {
                "type": "function",
                "name": name,
                "inputs": inputs,
                "outputs": [],
                "stateMutability": "nonpayable",
            }
        )
    return ret


ERC20_SIGNATURES = (
    "name()",
    "symbol()",
    "decimals()",
    "totalSupply()",
    "balanceOf(address)",
    "transfer(address,uint256)",
    "transferFrom(address,address,uint256)",
    "approve(address,uint256)",
    "allowance(address,address)",
)

OWNER_SIGNATURES = (
    "owner()",
    "transferOwnership(address)",
    "renounceOwnership()",
)

# noise which must never be routed
NON_FUNCTION_FRAGMENTS = [
    {"type": "constructor", "inputs": [{"name": "owner", "type": "address"}]},
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": False, "name": "value", "type": "uint256"},
        ],
    },
    {"type": "error", "name": "Unauthorized", "inputs": [{"name": "addr", "type": "address"}]},
    {"type": "fallback", "stateMutability": "payable"},
    {"type": "receive", "stateMutability": "payable"},
]


@pytest.fixture
def make_abi():
    return abi_from_signatures


@pytest.fixture
def make_module():
    def fn(name, signatures, address=ADDRESSES[0], extra_fragments=()):
        abi = abi_from_signatures(*signatures) + list(extra_fragments)
        return ModuleDescriptor(name, address, abi)

    return fn


@pytest.fixture
def token_module(make_module):
    return make_module("TokenModule", ERC20_SIGNATURES, ADDRESSES[0], NON_FUNCTION_FRAGMENTS)


@pytest.fixture
def owner_module(make_module):
    return make_module("OwnerModule", OWNER_SIGNATURES, ADDRESSES[1])


@pytest.fixture
def many_functions_module(make_module):
    signatures = [f"fn{i}(uint256)" for i in range(20)]
    return make_module("ManyModule", signatures, ADDRESSES[2])


@pytest.fixture(scope="session")
def addresses():
    return ADDRESSES
