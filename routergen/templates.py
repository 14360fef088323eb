from jinja2 import Environment, StrictUndefined

# slots every router template is rendered with
TEMPLATE_SLOTS = (
    "moduleName",
    "modules",
    "selectors",
    "receive",
    "diamondConstructor",
    "diamondCompat",
)

ROUTER_TEMPLATE = """\
//SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

// GENERATED CODE - do not edit manually!!
// --------------------------------------------------------------------------------
// --------------------------------------------------------------------------------

contract {{ moduleName }} {
    error UnknownSelector(bytes4 sel);

    {{ modules }}
{% if diamondConstructor %}

    constructor() {
        {{ diamondConstructor }}
    }
{% endif %}

    fallback() external payable {
        _forward();
    }
{{ receive }}
    function _forward() internal {
        // Lookup table: Function selector => implementation contract
        bytes4 sig4 = msg.sig;
        address implementation;

        assembly {
            let sig32 := shr(224, sig4)

            function findImplementation(sig) -> result {
                {{ selectors }}
            }

            implementation := findImplementation(sig32)
        }

        if (implementation == address(0)) {
            revert UnknownSelector(sig4);
        }

        // Delegatecall to the implementation contract
        assembly {
            calldatacopy(0, 0, calldatasize())

            let result := delegatecall(gas(), implementation, 0, calldatasize(), 0, 0)
            returndatacopy(0, 0, returndatasize())

            switch result
            case 0 {
                revert(0, returndatasize())
            }
            default {
                return(0, returndatasize())
            }
        }
    }
{% if diamondCompat %}
{{ diamondCompat }}
{% endif %}
}
"""

_env = Environment(
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)


def render_template(template: str, **slots: str) -> str:
    """
    Substitute the named slots into a router template. Errors in the
    template itself propagate as jinja2 exceptions.
    """
    return _env.from_string(template).render(**slots)
