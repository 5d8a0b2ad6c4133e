# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Services package: file stores, migration and the in-memory todo/project/settings stores.
"""
