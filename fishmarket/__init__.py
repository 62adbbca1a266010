# -*- coding: utf-8 -*-
"""Fish trading classified-ads marketplace backend."""

__version__ = "1.0.0"
