# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Stub generator for CCSDS MO MAL service specifications."""

__version__ = "0.1.0"
