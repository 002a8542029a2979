"""
Core numeric primitives, economy formulas, and domain models.

Everything here is independent of the host (UI, storage, timers).
"""
