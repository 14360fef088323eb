#!/usr/bin/env python3
# -*- coding: UTF-8 -*-
from routergen.cli import routergen_cli

if __name__ == "__main__":
    routergen_cli._parse_cli_args()
