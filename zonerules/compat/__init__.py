"""Configuration flags that change how zone rules are evaluated or decoded.

Flags are scoped with context managers backed by context variables, so a
setting applies only to the current thread or task and is restored when
the block exits.
"""
