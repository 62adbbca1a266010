# -*- coding: utf-8 -*-

import time

from flask import Blueprint, jsonify
from sqlalchemy import text

from fishmarket.infra.db import db
from fishmarket.infra.log import get_logger

logger = get_logger(__name__)
health_bp = Blueprint('health', __name__)


@health_bp.route('/healthz', methods=['GET', 'HEAD'])
def healthz():
    """Liveness check; never touches the database."""
    return jsonify({
        'status': 'healthy',
        'service': 'fishmarket-api',
        'timestamp': time.time()
    }), 200


@health_bp.route('/readyz', methods=['GET', 'HEAD'])
def readyz():
    """Readiness check: the database must answer a trivial query."""
    try:
        db.session.execute(text('SELECT 1'))
        database_ok = True
    except Exception as e:
        db.session.rollback()
        logger.error(f"Readiness check failed: {e}")
        database_ok = False

    return jsonify({
        'status': 'ready' if database_ok else 'not_ready',
        'service': 'fishmarket-api',
        'timestamp': time.time(),
        'checks': {
            'database': database_ok
        }
    }), 200 if database_ok else 503
