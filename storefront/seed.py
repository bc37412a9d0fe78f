from decimal import Decimal
from typing import Callable, NamedTuple

from flask import current_app

from .models import (
    db, User, Company, VendorApplication, Product, ProductReview,
    FlaggedProductReview, Order, OrderProduct, UsersAddress, UserPaymentConfig,
)


class SeedError(Exception):
    def __init__(self, task):
        super().__init__(f"seeding {task} failed")
        self.task = task


class SeedTask(NamedTuple):
    name: str
    run: Callable[[], int]


USERS = [
    {"first_name": "Admin", "last_name": "User", "email": "admin@example.com", "password": "password123"},
    {"first_name": "Jane", "last_name": "Vendor", "email": "jane.vendor@example.com", "password": "secret123"},
    {"first_name": "Tom", "last_name": "Trader", "email": "tom.trader@example.com", "password": "secret123"},
    {"first_name": "Amira", "last_name": "Khan", "email": "amira.khan@example.com", "password": "secret123"},
    {"first_name": "Leo", "last_name": "Brown", "email": "leo.brown@example.com", "password": "secret123"},
]

COMPANIES = [
    {"owner": "jane.vendor@example.com", "name": "Vendor Goods Ltd", "slug": "vendor-goods-ltd",
     "phone": ("+44", "20 7946 0011"), "mobile": ("+44", "7700 900011")},
    {"owner": "tom.trader@example.com", "name": "Trader Supplies", "slug": "trader-supplies",
     "phone": ("+44", "161 496 0022"), "mobile": ("+44", "7700 900022")},
]

VENDOR_APPLICATIONS = [
    {"applicant": "amira.khan@example.com", "company": "Khan Crafts", "reason": None, "accepted": None},
    {"applicant": "leo.brown@example.com", "company": "Brown & Sons",
     "reason": "Incomplete company details provided.", "accepted": False},
]

# (nom, description courte, prix, expédiable, livraison offerte)
PRODUCTS = [
    ("Oak Desk Lamp", "Warm light for late evenings", "34.99", True, False),
    ("Linen Throw", "Hand woven, stonewashed", "49.00", True, True),
    ("Ceramic Mug Set", "Four glazed stoneware mugs", "24.50", True, False),
    ("Walnut Chopping Board", "End grain hardwood board", "59.95", True, True),
    ("Wool Beanie", "Merino, one size", "18.00", True, False),
    ("Leather Notebook", "A5 refillable journal", "29.99", True, False),
    ("Espresso Grinder", "Conical burr, 40 settings", "129.00", True, True),
    ("Gift Card", "Redeemable online", "25.00", False, True),
    ("Canvas Tote", "Heavy duty cotton bag", "15.00", True, False),
    ("Scented Candle", "Cedar and bergamot", "22.00", True, False),
    ("Bamboo Cutlery Set", "Travel set with pouch", "12.99", True, False),
    ("Photo Workshop Ticket", "Half day, in person", "85.00", False, True),
]

# (index produit, email auteur, note, commentaire)
REVIEWS = [
    (0, "amira.khan@example.com", 5, "Lovely lamp, exactly as pictured."),
    (0, "leo.brown@example.com", 4, "Good value."),
    (1, "admin@example.com", 5, "Very soft."),
    (2, "leo.brown@example.com", 2, "One mug arrived chipped."),
    (6, "amira.khan@example.com", 5, "Best grinder I have owned."),
    (6, "admin@example.com", 3, "Loud but consistent."),
]

# (index avis, ip) ; l'avis 3 dépasse le seuil de modération
FLAGGED_REVIEWS = [(3, f"203.0.113.{n}") for n in range(1, 6)] + [(5, "198.51.100.7")]

ORDERS = [
    {"reference": "ORD-000001", "customer": "amira.khan@example.com", "lines": [(0, 1), (6, 1)]},
    {"reference": "ORD-000002", "customer": "leo.brown@example.com", "lines": [(0, 2), (2, 1)]},
    {"reference": "ORD-000003", "customer": "admin@example.com", "lines": [(1, 1), (6, 1), (9, 3)]},
]

ADDRESSES = {
    "admin@example.com": ("1", "10 Downing Street", "London", "United Kingdom", "SW1A 2AA"),
    "jane.vendor@example.com": ("Unit 4", "22 Mill Lane", "Leeds", "United Kingdom", "LS1 4AB"),
    "tom.trader@example.com": (None, "5 Canal Street", "Manchester", "United Kingdom", "M1 3HE"),
    "amira.khan@example.com": ("Flat 2", "81 High Street", "Bristol", "United Kingdom", "BS1 2AW"),
    "leo.brown@example.com": (None, "14 Rose Avenue", "York", "United Kingdom", "YO1 7HH"),
}

PAYMENT_CARDS = {
    "admin@example.com": ("4242424242424242", 12, 2030),
    "amira.khan@example.com": ("4012888888881881", 6, 2029),
    "leo.brown@example.com": ("378282246310005", 1, 2031),
}


def _user(email):
    return User.query.filter_by(email=email).one()


def _products():
    return Product.query.order_by(Product.id).all()


def seed_users():
    added = 0
    for u in USERS:
        if User.query.filter_by(email=u["email"]).first():
            continue
        user = User(
            first_name=u["first_name"],
            last_name=u["last_name"],
            email=u["email"],
            slug=f"{u['first_name']}-{u['last_name']}".lower(),
        )
        user.set_password(u["password"])
        db.session.add(user)
        added += 1
    return added


def seed_companies():
    added = 0
    for c in COMPANIES:
        if Company.query.filter_by(slug=c["slug"]).first():
            continue
        db.session.add(Company(
            user_id=_user(c["owner"]).id,
            name=c["name"],
            slug=c["slug"],
            phone_number_extension=c["phone"][0],
            phone_number=c["phone"][1],
            mobile_number_extension=c["mobile"][0],
            mobile_number=c["mobile"][1],
        ))
        added += 1
    return added


def seed_vendor_applications():
    if VendorApplication.query.first():
        return 0
    for a in VENDOR_APPLICATIONS:
        db.session.add(VendorApplication(
            user_id=_user(a["applicant"]).id,
            proposed_company_name=a["company"],
            reason_given=a["reason"],
            accepted=a["accepted"],
        ))
    return len(VENDOR_APPLICATIONS)


def seed_products():
    if Product.query.first():
        return 0
    companies = Company.query.order_by(Company.id).all()
    if not companies:
        raise RuntimeError("products need at least one company")
    for i, (name, short, cost, shippable, free_delivery) in enumerate(PRODUCTS):
        db.session.add(Product(
            company_id=companies[i % len(companies)].id,
            name=name,
            short_description=short,
            long_description=f"{name}. {short}.",
            product_details=f"SKU: DEMO-{i + 1:04d}",
            cost=Decimal(cost),
            shippable=shippable,
            free_delivery=free_delivery,
        ))
    return len(PRODUCTS)


def seed_product_reviews():
    if ProductReview.query.first():
        return 0
    products = _products()
    for idx, email, score, content in REVIEWS:
        db.session.add(ProductReview(
            product_id=products[idx].id,
            user_id=_user(email).id,
            score=score,
            content=content,
        ))
    return len(REVIEWS)


def seed_flagged_reviews():
    if FlaggedProductReview.query.first():
        return 0
    reviews = ProductReview.query.order_by(ProductReview.id).all()
    for idx, ip in FLAGGED_REVIEWS:
        db.session.add(FlaggedProductReview(product_reviews_id=reviews[idx].id, flagged_from_ip=ip))
    return len(FLAGGED_REVIEWS)


def seed_orders():
    if Order.query.first():
        return 0
    products = _products()
    for o in ORDERS:
        total = sum((products[idx].cost * qty for idx, qty in o["lines"]), Decimal("0"))
        db.session.add(Order(
            user_id=_user(o["customer"]).id,
            reference_number=o["reference"],
            cost=total,
        ))
    return len(ORDERS)


def seed_order_products():
    if OrderProduct.query.first():
        return 0
    products = _products()
    added = 0
    for o in ORDERS:
        order = Order.query.filter_by(reference_number=o["reference"]).one()
        for idx, qty in o["lines"]:
            p = products[idx]
            db.session.add(OrderProduct(
                order_id=order.id,
                product_id=p.id,
                company_id=p.company_id,
                name=p.name,
                cost=p.cost,
                shippable=p.shippable,
                free_delivery=p.free_delivery,
                amount=qty,
            ))
            added += 1
    return added


def seed_addresses():
    if UsersAddress.query.first():
        return 0
    for email, (building, street, city, country, postcode) in ADDRESSES.items():
        db.session.add(UsersAddress(
            user_id=_user(email).id,
            building_name=building,
            street_address1=street,
            city=city,
            country=country,
            postcode=postcode,
            phone_number_extension="+44",
            phone_number="7700 900000",
        ))
    return len(ADDRESSES)


def seed_payments():
    if UserPaymentConfig.query.first():
        return 0
    for email, (number, month, year) in PAYMENT_CARDS.items():
        user = _user(email)
        address = UsersAddress.query.filter_by(user_id=user.id).first()
        db.session.add(UserPaymentConfig(
            user_id=user.id,
            card_holder_name=user.name,
            card_number=number,
            expiry_month=month,
            expiry_year=year,
            phone_number_extension="+44",
            phone_number="7700 900000",
            mobile_number_extension="+44",
            mobile_number="7700 900001",
            users_addresses_id=address.id if address else None,
        ))
    return len(PAYMENT_CARDS)


# L'ordre compte : chaque entité dépend des lignes créées avant elle
SEEDERS = (
    SeedTask("user", seed_users),
    SeedTask("company", seed_companies),
    SeedTask("vendor_application", seed_vendor_applications),
    SeedTask("product", seed_products),
    SeedTask("product_review", seed_product_reviews),
    SeedTask("flagged_review", seed_flagged_reviews),
    SeedTask("order", seed_orders),
    SeedTask("order_product", seed_order_products),
    SeedTask("address", seed_addresses),
    SeedTask("payment", seed_payments),
)


def seed_data(tasks=SEEDERS):
    """
    Run every seed task in order, committing after each one.

    Stops at the first failure and raises SeedError; rows committed by the
    earlier tasks are kept.
    """
    log = current_app.logger
    for task in tasks:
        try:
            added = task.run()
            db.session.commit()
        except Exception as exc:
            db.session.rollback()
            log.error("seeding %s failed: %s", task.name, exc)
            raise SeedError(task.name) from exc
        log.info("seeded %s (%d rows)", task.name, added)
