from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_setup import configure_logging
from .common.web import register_error_handlers
from .container import build_backend, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .database.seed import seed_if_empty
from .store.repository import CollectionBackend

from .dashboard.controller import register as register_dashboard
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications
from .projects.controller import register as register_projects
from .tasks.controller import register as register_tasks
from .timesheets.controller import register as register_timesheets
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, *, backend: Optional[CollectionBackend] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), json_output=bool(getattr(settings, "LOG_JSON", False)))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    store_backend = str(getattr(settings, "STORE_BACKEND", "json"))
    db_config = dict(getattr(settings, "DB_CONFIG", {}) or {})
    logger.info("Starting with settings=%s backend=%s", settings_module, store_backend)

    if backend is None:
        if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
            apply_schema(conn_factory)
            logger.debug("Schema ready (tables=%d)", len(list_tables(conn_factory)))
        backend = build_backend(
            store_backend,
            data_file=getattr(settings, "DATA_FILE", None),
            db_config=db_config,
        )

    container = build_container(backend=backend)
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        seed_if_empty(container.store)
    container.project_service.recompute_all()

    app.extensions["timesheet_pro"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_timesheets(app, container)
    register_leaves(app, container)
    register_projects(app, container)
    register_tasks(app, container)
    register_notifications(app, container)
    register_dashboard(app, container)

    return app
