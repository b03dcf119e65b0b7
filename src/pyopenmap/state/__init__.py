"""Mutable runtime state.

Input configuration is immutable (:mod:`pyopenmap.models`); everything
that changes while the timeline plays lives here, owned by exactly one
controller.
"""
