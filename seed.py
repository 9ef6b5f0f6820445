"""Seed script: fills the record store with sample data."""
import os
import sys

# Ensure we're in the project root
sys.path.insert(0, os.path.dirname(__file__))

from radiotrack.config import settings
from radiotrack.dependencies import build_store, build_photo_store
from radiotrack.schemas.radio import CommentKind, CommentRequest, RadioCreate
from radiotrack.schemas.user import UserCreate
import radiotrack.services.radio_service as radio_svc
import radiotrack.services.user_service as user_svc


def seed():
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    store = build_store(settings)
    photos = build_photo_store(settings)

    # Default inventory: 1..N ICOM handhelds
    radio_svc.initialize_default_inventory(store, settings.DEFAULT_INVENTORY_SIZE, settings.DEFAULT_RADIO_NAME)

    # A few model-prefixed radios
    existing_radios = {r.radio_id for r in radio_svc.list_radios(store)}
    for radio_id, name in [("TR01", "Motorola T82"), ("TR02", "Motorola T82"), ("BS01", "Base station")]:
        if radio_id not in existing_radios:
            radio_svc.create_radio(store, RadioCreate(radio_id=radio_id, name=name))

    # Staff
    existing_names = {u.name.lower() for u in user_svc.list_users(store)}
    staff = {}
    for name in ["Alex Rivera", "Sam Chen", "Jordan Blake"]:
        if name.lower() not in existing_names:
            user, _ = user_svc.create_user(store, photos, UserCreate(name=name))
            staff[name] = user

    # Sample checkouts and a damage report
    if "Alex Rivera" in staff:
        radio_svc.check_out(store, "1", staff["Alex Rivera"].id)
    if "Sam Chen" in staff:
        radio_svc.check_out(store, "TR01", staff["Sam Chen"].id)
        radio_svc.append_comment(store, "2", CommentRequest(
            author="Sam Chen", comment="Antenna cracked", kind=CommentKind.damage,
        ))

    print("✅ Seed finished!")


if __name__ == "__main__":
    seed()
