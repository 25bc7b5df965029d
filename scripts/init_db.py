import sys
from pathlib import Path
import os

from werkzeug.security import generate_password_hash

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.imatrix.models import Category, Download, Post, Product, Solution, User
from scripts._db_utils import script_session


CATEGORIES = [
    ("Biometric Systems", "biometric-systems"),
    ("Access Control", "access-control"),
    ("Time Attendance", "time-attendance"),
    ("Security Solutions", "security-solutions"),
    ("Company News", "company-news"),
]

PRODUCTS = [
    {
        "name": "i4-AC05 Biometric Access Control Terminal",
        "slug": "i4-ac05-biometric-access-control",
        "summary": "Compact fingerprint and RFID based access control system with high speed scratch proof sensor",
        "description": (
            "i4-AC05 is a compact stand-alone device for fingerprint and RFID based access control "
            "with a high speed scratch proof sensor and colour TFT display."
        ),
        "specs": {
            "capacity": "3000 fingerprint templates",
            "transactions": "30000 transaction records",
            "display": "Color TFT Display",
            "connectivity": "TCP/IP, USB",
        },
        "featured": True,
    },
    {
        "name": "VF 780/380 Facial Recognition Terminal",
        "slug": "vf-780-380-facial-recognition",
        "summary": "Facial time attendance with access control system featuring ergonomic design",
        "description": "Stores 200 facial templates with a 3 inch touch screen display for easy operation.",
        "specs": {"capacity": "200 facial templates", "display": "3 inch touch screen"},
        "featured": True,
    },
    {
        "name": "Eagle-i PRO Home Alarm System",
        "slug": "eagle-i-pro-home-alarm",
        "summary": "Wireless home alarm system with GSM alerts and mobile app integration",
        "description": "Wireless home alarm with GSM based alerts to 5 mobiles and a companion app.",
        "specs": {"connectivity": "GSM based alerts", "alerts": "Up to 5 mobile numbers"},
        "featured": False,
    },
]

SOLUTIONS = [
    {
        "name": "Access Control + Attendance Solution",
        "slug": "access-control-attendance",
        "description": "Connect doors, turnstiles and biometric terminals for policy-driven access and accurate timekeeping.",
        "benefits": ["Role-based permissions & holiday calendars", "Shift & roster management", "Payroll-ready exports"],
        "features": ["Multi-door access control", "Biometric integration", "Report generation"],
    },
    {
        "name": "CCTV with AI Analytics",
        "slug": "cctv-ai-analytics",
        "description": "Detect people, vehicles and line crossing, and alert teams in real time on any device.",
        "benefits": ["Smart motion & perimeter protection", "Remote playback", "Scalable NVR storage"],
        "features": ["AI-powered analytics", "People counting", "Line crossing detection"],
    },
]

DOWNLOADS = [
    {"title": "i4-AC05 User Manual", "file_url": "/uploads/manuals/i4-ac05-manual.pdf", "file_name": "i4-ac05-manual.pdf", "kind": "manual"},
    {"title": "TrackZone Software v2.1", "file_url": "/uploads/software/trackzone-v2.1.zip", "file_name": "trackzone-v2.1.zip", "kind": "software"},
    {"title": "Product Catalog 2024", "file_url": "/uploads/brochures/catalog-2024.pdf", "file_name": "catalog-2024.pdf", "kind": "brochure"},
]

POSTS = [
    {
        "title": "Welcome to I-Matrix Solutions",
        "slug": "welcome-to-imatrix-solutions",
        "body": "<p>I-Matrix Solutions was set up in 2006 to develop attendance management solutions.</p>",
        "excerpt": "I-Matrix Solutions was established in 2006 to provide attendance management solutions.",
        "published": True,
    },
    {
        "title": "Latest Biometric Technology Trends",
        "slug": "latest-biometric-technology-trends",
        "body": "<p>Facial recognition, fingerprint scanning and access control keep evolving.</p>",
        "excerpt": "Exploring the latest trends in biometric technology.",
        "published": True,
    },
]


def seed_only(*, database_url: str | None = None, with_content: bool = True) -> None:
    """
    Seed the admin user and sample site content in an idempotent way.
    Does NOT overwrite an existing admin user's password or edited content.
    """
    admin_email = (os.environ.get("ADMIN_EMAIL") or "admin@imatrix.lk").strip().lower()
    admin_password = os.environ.get("ADMIN_PASSWORD") or "change-me"

    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///imatrix.db").strip()

    # Direct engine/session so this can run in release without importing app.wsgi (avoids recursion).
    with script_session(db_url) as s:
        user = s.query(User).filter(User.email == admin_email).one_or_none()
        if not user:
            user = User(
                email=admin_email,
                name="Administrator",
                password_hash=generate_password_hash(admin_password),
                role="ADMIN",
                verified=True,
                is_active=True,
            )
            s.add(user)

        if not with_content:
            return

        categories: dict[str, Category] = {}
        for name, slug in CATEGORIES:
            c = s.query(Category).filter(Category.slug == slug).one_or_none()
            if not c:
                c = Category(name=name, slug=slug)
                s.add(c)
            categories[slug] = c

        for data in PRODUCTS:
            if not s.query(Product).filter(Product.slug == data["slug"]).one_or_none():
                s.add(Product(**data))

        for data in SOLUTIONS:
            if not s.query(Solution).filter(Solution.slug == data["slug"]).one_or_none():
                s.add(Solution(**data))

        # downloads have no slug; title is the natural key
        for data in DOWNLOADS:
            if not s.query(Download).filter(Download.title == data["title"]).one_or_none():
                s.add(Download(**data))

        for data in POSTS:
            if not s.query(Post).filter(Post.slug == data["slug"]).one_or_none():
                s.add(Post(**data, categories=[categories["time-attendance"]]))

    print("Initialized database (seed_only).")
    print(f"Admin email: {admin_email}")
    print("Admin password: (from ADMIN_PASSWORD)")


def main() -> None:
    seed_only(database_url=None)


if __name__ == "__main__":
    main()
