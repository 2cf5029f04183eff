# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""User account service: registration, login, token refresh and profile lookup."""

__version__ = "0.1.0"
