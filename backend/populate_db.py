"""Seeds the catalog and a back-office account for local development."""
import os
import random
import re
import sys
from datetime import timedelta

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.product import Product, ProductFormat, ProductCondition
from models.users import User
from utils.clock import utc_now
from utils.hashing import get_password_hash

# Configuration
PRODUCT_COUNT = 50
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@tiendavinilos.cl")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

ALBUMS = [
    ("Dark Side of the Moon", "Pink Floyd", "Rock"),
    ("Abbey Road", "The Beatles", "Rock"),
    ("Random Access Memories", "Daft Punk", "Electrónica"),
    ("Unknown Pleasures", "Joy Division", "Post-punk"),
    ("In Rainbows", "Radiohead", "Alternativo"),
    ("Blonde", "Frank Ocean", "R&B"),
]
IMAGES = [
    "/images/blue-velvet-md-web.jpg",
    "/images/eraserhead-md-web.jpg",
    "/images/chungking-express-md-web.jpg",
    "/images/fallen-angels-md-web.jpg",
    "/images/suspiria-md-web.jpg",
    "/images/paris-texas-md-web.jpg",
]
# End Configuration


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def seed_products(session, count: int = PRODUCT_COUNT) -> int:
    if session.query(Product).count():
        print("Catálogo ya cargado, se omite.")
        return 0

    now = utc_now()
    for i in range(count):
        name, artist, category = ALBUMS[i % len(ALBUMS)]
        session.add(Product(
            sku=f"SKU-{i + 1:06d}",
            slug=f"{slugify(name)}-{i + 1}",
            name=name,
            artist=artist,
            description="Clásico en excelente estado. Imprescindible para cualquier coleccionista.",
            price=(random.randint(0, 49) + 10) * 1000 + 990,
            image=random.choice(IMAGES),
            category=category,
            format=ProductFormat.VINYL_LP if random.random() > 0.3 else ProductFormat.CD_ALBUM,
            condition=ProductCondition.SEALED if random.random() > 0.5 else ProductCondition.NEAR_MINT,
            stock=random.randint(0, 9),
            min_stock=5,
            release_year=1970 + random.randint(0, 49),
            created_at=now - timedelta(hours=i),
        ))
    session.commit()
    return count


def seed_admin(session) -> bool:
    if session.query(User).filter(User.email == ADMIN_EMAIL).first():
        return False
    session.add(User(
        email=ADMIN_EMAIL,
        password_hash=get_password_hash(ADMIN_PASSWORD),
        role="ADMIN",
        first_name="Administrador",
    ))
    session.commit()
    return True


def main():
    init_db()
    session = SessionLocal()
    try:
        created = seed_products(session)
        print(f"Productos insertados: {created}")
        if seed_admin(session):
            print(f"Administrador creado: {ADMIN_EMAIL}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
