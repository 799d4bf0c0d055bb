"""Demo farmers, shoppers and products for local development."""

from dataclasses import dataclass, field

from loguru import logger
from sqlmodel import Session

from src.farmconnect.core.security import hash_password
from src.farmconnect.entities.core.account import Account, AccountRepository
from src.farmconnect.entities.core.profile import Profile, ProfileRepository
from src.farmconnect.entities.service.product import Product, ProductRepository

DEMO_PASSWORD = "farmconnect123"

DEMO_FARMERS = [
    {
        "full_name": "John Smith",
        "email": "john.smith@example.com",
        "location": "Karnataka, India",
        "specialties": ["Organic Vegetables", "Fruits"],
        "bio": "Third-generation farmer specializing in organic produce with sustainable practices.",
        "phone_number": "+91 98765 43210",
        "latitude": 12.9716,
        "longitude": 77.5946,
        "products": [
            ("Organic Tomatoes", 40, "vegetables", "Fresh organic tomatoes grown without pesticides."),
            ("Fresh Spinach", 30, "vegetables", "Locally grown fresh spinach leaves."),
        ],
    },
    {
        "full_name": "Priya Sharma",
        "email": "priya.sharma@example.com",
        "location": "Tamil Nadu, India",
        "specialties": ["Rice", "Spices"],
        "bio": "Passionate about traditional farming methods and heirloom crop varieties.",
        "phone_number": "+91 87654 32109",
        "latitude": 11.1271,
        "longitude": 78.6569,
        "products": [
            ("Basmati Rice", 120, "grains", "Premium quality aged basmati rice."),
            ("Turmeric Powder", 90, "spices", "Freshly ground organic turmeric powder."),
        ],
    },
    {
        "full_name": "Raj Patel",
        "email": "raj.patel@example.com",
        "location": "Gujarat, India",
        "specialties": ["Cotton", "Groundnuts"],
        "bio": "Leading sustainable agriculture initiatives in the region for over 15 years.",
        "phone_number": "+91 76543 21098",
        "latitude": 22.2587,
        "longitude": 71.1924,
        "products": [
            ("Alphonso Mangoes", 450, "fruits", "Sweet and juicy Alphonso mangoes in season."),
            ("Organic Potatoes", 60, "vegetables", "Farm-fresh organic potatoes."),
        ],
    },
]

DEMO_SHOPPERS = [
    {"full_name": "Asha Rao", "email": "asha.rao@example.com", "location": "Bengaluru"},
]


@dataclass
class SeedResult:
    created_accounts: list[str] = field(default_factory=list)
    skipped_accounts: list[str] = field(default_factory=list)
    created_products: int = 0


def seed_demo_data(session: Session, password: str = DEMO_PASSWORD) -> SeedResult:
    """Insert the demo data. Accounts whose email already exists are left alone."""
    accounts = AccountRepository(session)
    profiles = ProfileRepository(session)
    products = ProductRepository(session)
    result = SeedResult()

    people = [(row, "farmer") for row in DEMO_FARMERS] + [
        (row, "user") for row in DEMO_SHOPPERS
    ]
    for row, user_type in people:
        email = row["email"]
        if accounts.get_by_email(email) is not None:
            result.skipped_accounts.append(email)
            continue

        account = accounts.create(Account(email=email, password_hash=hash_password(password)))
        details = {k: v for k, v in row.items() if k != "products"}
        profiles.create(Profile(id=account.id, user_type=user_type, **details))
        result.created_accounts.append(email)

        for name, price, category, description in row.get("products", []):
            products.create(
                Product(
                    farmer_id=account.id,
                    name=name,
                    price=price,
                    category=category,
                    description=description,
                    quantity=100,
                    latitude=row.get("latitude"),
                    longitude=row.get("longitude"),
                )
            )
            result.created_products += 1

    session.commit()
    logger.info(
        "Seeded {} accounts and {} products ({} existing accounts skipped)",
        len(result.created_accounts),
        result.created_products,
        len(result.skipped_accounts),
    )
    return result
