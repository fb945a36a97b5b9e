# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI API layer for the Cher's Closet backend.

This package provides the REST endpoints, the authorization gates and the
central error handling shared by every route.
"""

__all__: list[str] = []
