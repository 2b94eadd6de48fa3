# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- Session stores keyed by opaque tokens, delivered as signed cookies (itsdangerous)
- User registration and credential checks against the users table
"""
