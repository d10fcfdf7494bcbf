from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.policy import GracePolicy, WorkWeek
from .common.datetime_utils import parse_hhmm
from .container import Container, build_container
from .core.exceptions import DomainError, InfrastructureUnavailable, NotFound, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def load_policy(settings: ModuleType) -> tuple[GracePolicy, WorkWeek]:
    """Read the attendance policy settings; bad values fail at startup."""
    grace = GracePolicy(
        workday_start=parse_hhmm(str(getattr(settings, "WORKDAY_START", "09:00"))),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 30)),
    )
    raw_weekend = str(getattr(settings, "WEEKEND_DAYS", "5,6"))
    try:
        weekend = tuple(int(p) for p in raw_weekend.split(",") if p.strip())
    except ValueError:
        raise ValidationError(f"WEEKEND_DAYS must be comma separated weekday numbers: {raw_weekend!r}")
    return grace, WorkWeek(weekend_days=weekend)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = getattr(e, "http_status", 400)
        return jsonify({"success": False, "code": getattr(e, "code", "DOMAIN_ERROR"), "message": str(e)}), status

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"success": False, "code": NotFound.code, "message": NotFound.default_message}), 404

    @app.errorhandler(InfrastructureUnavailable)
    def handle_infrastructure_error(e: InfrastructureUnavailable):
        logger.error("Infrastructure unavailable: %s", e)
        return jsonify({"success": False, "code": e.code, "message": "Service temporarily unavailable"}), e.http_status


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        policy, work_week = load_policy(settings)
        container = build_container(db_config=db_config, policy=policy, work_week=work_week)

    _register_error_handlers(app)
    register_attendance(app, container)
    register_reports(app, container)

    return app
