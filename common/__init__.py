# SPDX-License-Identifier: AGPL-3.0-only

"""Shared utilities: LLM client, error taxonomy and metrics."""
