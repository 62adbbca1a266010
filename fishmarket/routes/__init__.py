# -*- coding: utf-8 -*-
from typing import Any, Dict

from flask import request


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def query_args() -> Dict[str, Any]:
    return request.args.to_dict()
