# -*- coding: utf-8 -*-
"""Location: ./toontodo/__main__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Allow ``python -m toontodo``.
"""

# First-Party
from toontodo.cli import main

if __name__ == "__main__":
    main()
