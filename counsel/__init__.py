# SPDX-License-Identifier: AGPL-3.0-only

"""Legal question answering: prompt, provider call and answer normalization."""
