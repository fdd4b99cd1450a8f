"""
PassForge Core
===============

Typed records shared by every module (:mod:`passforge.core.models`) and
the :class:`~passforge.core.engine.ForgeEngine` facade used by the
command-line interface.
"""
