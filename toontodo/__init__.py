# -*- coding: utf-8 -*-
"""Location: ./toontodo/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

toontodo - per-project todo lists persisted as human-editable TOON files.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
