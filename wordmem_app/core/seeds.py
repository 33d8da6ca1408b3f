"""Default data created on first start-up."""

from __future__ import annotations

from flask import Flask
from sqlalchemy import or_

from .extensions import db

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "123456"


def seed_default_data(app: Flask) -> None:
    """Ensure the demo account and the system wordbooks exist."""

    from ..models import User
    from ..modules.scraper.data import SYSTEM_WORDBOOKS
    from ..modules.scraper.services.seed_service import SystemWordbookService

    demo_user = User.query.filter(
        or_(User.username == DEMO_USERNAME, User.email == DEMO_EMAIL)
    ).first()
    if demo_user is None:
        demo = User(username=DEMO_USERNAME, email=DEMO_EMAIL)
        demo.set_password(DEMO_PASSWORD)
        db.session.add(demo)
        db.session.commit()
        app.logger.info("Created default demo user.")

    for key in SYSTEM_WORDBOOKS:
        SystemWordbookService.ensure_wordbook(key)

    cet4 = SystemWordbookService.ensure_wordbook("cet4")
    if not cet4.total_words:
        result = SystemWordbookService.import_list("cet4")
        app.logger.info("Seeded %s CET-4 words.", result["inserted"])
