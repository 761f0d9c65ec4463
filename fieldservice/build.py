#!/usr/bin/env python3
"""
Build orchestrator for the field service backend
Creates tables, ensures the administrator account and optionally loads demo data
"""

import json
from pathlib import Path

from flask import current_app

from fieldservice import db
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.build")

DEMO_DATA_FILE = Path(__file__).parent / 'data' / 'build_data_demo.json'


def build_models():
    """Create every table registered with SQLAlchemy"""
    db.create_all()
    logger.info("Database tables created")


def ensure_admin_user():
    """
    Make sure the administrator account exists.

    Uses ADMIN_USERNAME / ADMIN_PASSWORD. Without a password the step is
    skipped with a warning (run generate_env.py to create one).

    Returns:
        User or None
    """
    from fieldservice.data.core.user_info.user import User, ROLE_ADMIN

    username = current_app.config.get('ADMIN_USERNAME') or 'admin'
    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        logger.info(f"Admin user '{username}' already present")
        return existing

    password = current_app.config.get('ADMIN_PASSWORD')
    if not password:
        logger.warning("ADMIN_PASSWORD not set; administrator account not created")
        return None

    user = User.create_from_dict({'username': username, 'password': password, 'role': ROLE_ADMIN})
    logger.info(f"Admin user '{username}' created")
    return user


def insert_demo_data(data_file=DEMO_DATA_FILE):
    """
    Load demo equipment, parts and links from JSON. Skipped when equipment already exists.
    """
    from fieldservice.buisness.assets.equipment_manager import EquipmentManager
    from fieldservice.buisness.core.request_context import RequestContext
    from fieldservice.buisness.inventory.part_link_manager import PartLinkManager
    from fieldservice.buisness.inventory.part_manager import PartManager
    from fieldservice.data.assets.equipment import Equipment

    if db.session.query(Equipment).first() is not None:
        logger.info("Equipment already present, skipping demo data")
        return

    with open(data_file, 'r', encoding='utf-8') as f:
        demo = json.load(f)

    context = RequestContext.system()
    parts_by_name = {}
    for part_data in demo.get('parts', []):
        part = PartManager().create(part_data, context)
        parts_by_name[part.name] = part.id

    for equipment_data in demo.get('equipment', []):
        links = equipment_data.pop('links', {})
        equipment = EquipmentManager().create(equipment_data, context)
        if links:
            selections = {parts_by_name[name]: quantity for name, quantity in links.items()}
            PartLinkManager().replace_links(equipment.id, selections, context)

    logger.info(
        f"Demo data inserted: {len(demo.get('equipment', []))} equipment, "
        f"{len(demo.get('parts', []))} parts"
    )


def build_database(demo_data=False):
    """
    Args:
        demo_data (bool): Also insert the demo equipment and parts
    """
    build_models()
    ensure_admin_user()
    if demo_data:
        insert_demo_data()
    logger.info("Database build complete")
