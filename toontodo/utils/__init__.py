# -*- coding: utf-8 -*-
"""Location: ./toontodo/utils/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Filesystem and identity helpers shared by the services.
"""
