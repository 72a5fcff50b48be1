"""CLI package.

The ``cli`` sub-package contains the Click application.  Commands reach
serializers only through :mod:`chanlist.host` and never print from
inside the library itself.
"""
from __future__ import annotations
