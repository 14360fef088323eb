# loading module descriptions from deployment artifacts on disk.
#
# two shapes are understood:
#   {"contractName": ..., "deployedAddress": ..., "abi": [...]}
#       a deployed contract record
#   {"address": ..., "abi": [...]}
#       a hardhat-deploy style deployment, named after the file

import json
from pathlib import Path
from typing import Iterable, Optional

from routergen.exceptions import ModuleLoadError
from routergen.module import ModuleDescriptor

PathLike = str | Path


def module_from_dict(
    data,
    default_name: Optional[str] = None,
    name: Optional[str] = None,
    address: Optional[str] = None,
) -> ModuleDescriptor:
    if not isinstance(data, dict):
        raise ModuleLoadError(f"expected a JSON object, got {type(data).__name__}")

    abi = data.get("abi")
    if not isinstance(abi, list):
        raise ModuleLoadError("module has no `abi` list")

    name = name or data.get("contractName") or default_name
    if not name:
        raise ModuleLoadError("module has no `contractName`")

    address = address or data.get("deployedAddress") or data.get("address")
    if not address:
        raise ModuleLoadError(f"module `{name}` has no `deployedAddress`")

    return ModuleDescriptor(name, address, abi)


def load_module(
    path: PathLike, name: Optional[str] = None, address: Optional[str] = None
) -> ModuleDescriptor:
    """
    Read a module description from a JSON file. ``name`` and ``address``
    override the values found in the file.
    """
    path = Path(path)
    try:
        with path.open() as f:
            data = json.load(f)
    except OSError as e:
        raise ModuleLoadError(f"could not read {path}: {e.strerror}") from e
    except json.JSONDecodeError as e:
        raise ModuleLoadError(f"{path} is not valid JSON (line {e.lineno}: {e.msg})") from e

    try:
        return module_from_dict(data, default_name=path.stem, name=name, address=address)
    except ModuleLoadError as e:
        raise ModuleLoadError(f"{path}: {e._message}") from None


def load_modules(paths: Iterable[PathLike]) -> list[ModuleDescriptor]:
    return [load_module(p) for p in paths]
