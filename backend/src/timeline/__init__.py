"""Show timeline engine: lane classification, time mapping, layout, ruler and drag handling.

Submodules are imported directly (``from timeline.layout import layout``);
``models.event`` depends on ``timeline.errors``, so this package does not
re-export its submodules.
"""
