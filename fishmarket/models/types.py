# -*- coding: utf-8 -*-
# fishmarket/models/types.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from sqlalchemy.types import TypeDecorator

from fishmarket.database import db


# ---------------------------------------------------------
# JSON helpers that store Python lists/dicts in TEXT columns
# ---------------------------------------------------------
class JSONList(TypeDecorator):
    """
    Store a Python list in a TEXT column as JSON.
    Always returns a Python list (empty list if null/invalid).
    """
    impl = db.Text
    cache_ok = True

    def process_bind_param(self, value: Optional[List[Any]], dialect):
        if value is None:
            return json.dumps([])
        return json.dumps(list(value))

    def process_result_value(self, value: Optional[str], dialect):
        if not value:
            return []
        try:
            v = json.loads(value)
        except ValueError:
            return []
        return v if isinstance(v, list) else []


class JSONDict(TypeDecorator):
    """
    Store a Python dict in a TEXT column as JSON.
    Null stays null so "no payload yet" is distinguishable from "{}".
    """
    impl = db.Text
    cache_ok = True

    def process_bind_param(self, value: Optional[Dict[str, Any]], dialect):
        if value is None:
            return None
        return json.dumps(value, default=str)

    def process_result_value(self, value: Optional[str], dialect):
        if value is None:
            return None
        try:
            v = json.loads(value)
        except ValueError:
            return None
        return v if isinstance(v, dict) else None
