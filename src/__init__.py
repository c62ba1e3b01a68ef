"""SuperKids adaptive recommendation service.

Backend service that decides the next difficulty level and a weighted set
of learning activities for a child, from a rule-based heuristic or an
optional external ML connector.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
