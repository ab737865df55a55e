"""
Built-in catalog, client directory, users and brochures used when no catalog
file is configured.
"""
from datetime import datetime, timezone
from decimal import Decimal

from wholesale.domain.brochures import Brochure
from wholesale.domain.catalog import Product
from wholesale.domain.order import Client
from wholesale.domain.users import Role, User

DEFAULT_PRODUCTS = (
    Product(
        id="p1",
        name="Atlantic Salmon",
        category="Fish",
        unit="kg",
        price=Decimal("21.99"),
        image="https://images.unsplash.com/photo-1519708227418-c8fd9a32b7a2?auto=format&fit=crop&q=80&w=200&h=200",
    ),
    Product(
        id="p2",
        name="Pacific Cod",
        category="Fish",
        unit="kg",
        price=Decimal("18.50"),
        image="https://images.unsplash.com/photo-1544733422-251bdc3e1916?auto=format&fit=crop&q=80&w=200&h=200",
    ),
    Product(
        id="p3",
        name="King Crab",
        category="Shellfish",
        unit="kg",
        price=Decimal("45.99"),
        image="https://images.unsplash.com/photo-1565217488921-0c942ab9c8bf?auto=format&fit=crop&q=80&w=200&h=200",
    ),
    Product(
        id="p4",
        name="Jumbo Shrimp",
        category="Shellfish",
        unit="kg",
        price=Decimal("32.50"),
        image="https://images.unsplash.com/photo-1625943913744-8868f32496cd?auto=format&fit=crop&q=80&w=200&h=200",
    ),
    Product(
        id="p5",
        name="Oysters",
        category="Shellfish",
        unit="dozen",
        price=Decimal("24.99"),
        image="https://images.unsplash.com/photo-1572544931470-84e28c927290?auto=format&fit=crop&q=80&w=200&h=200",
    ),
    Product(
        id="p6",
        name="Yellowfin Tuna",
        category="Fish",
        unit="kg",
        price=Decimal("28.99"),
        image="https://images.unsplash.com/photo-1513125370-3460ebe3401b?auto=format&fit=crop&q=80&w=200&h=200",
    ),
)

DEFAULT_CLIENTS = (
    Client(
        id="c1",
        name="Ocean Bistro",
        address="123 Pier Street, Harbor City, CA 90001",
        contact_person="Michael Chen",
        phone="(555) 123-4567",
        email="chef@oceanbistro.com",
    ),
    Client(
        id="c2",
        name="The Fish Market",
        address="456 Coastal Highway, Bayview, CA 90002",
        contact_person="Sarah Johnson",
        phone="(555) 987-6543",
        email="orders@fishmarket.com",
    ),
    Client(
        id="c3",
        name="Seaside Restaurant",
        address="789 Beach Blvd, Sandshore, CA 90003",
        contact_person="David Wilson",
        phone="(555) 456-7890",
        email="info@seasiderestaurant.com",
    ),
)

DEFAULT_USERS = (
    User(id="1", name="John Smith", email="john@seafood.com", role=Role.SALESPERSON),
    User(id="2", name="Admin User", email="admin@seafood.com", role=Role.ADMIN),
)

DEFAULT_BROCHURES = (
    Brochure(
        id="brochure-1",
        name="How Kee Products Catalog 2023.pdf",
        size=2456789,
        content_type="application/pdf",
        upload_date=datetime(2023, 5, 15, 8, 30, tzinfo=timezone.utc),
        download_count=35,
    ),
    Brochure(
        id="brochure-2",
        name="Seasonal Products - Summer 2023.pdf",
        size=1567890,
        content_type="application/pdf",
        upload_date=datetime(2023, 6, 1, 9, 45, tzinfo=timezone.utc),
        download_count=27,
    ),
    Brochure(
        id="brochure-3",
        name="Price List Q3 2023.xlsx",
        size=976543,
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        upload_date=datetime(2023, 7, 10, 14, 20, tzinfo=timezone.utc),
        download_count=42,
    ),
)
