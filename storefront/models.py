from datetime import date
from decimal import Decimal

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import func, text
from werkzeug.security import check_password_hash, generate_password_hash

# Instance unique de SQLAlchemy partagée par toute l'application
db = SQLAlchemy()

DEFAULT_IMAGE_PATH = "/images/products/default/not-found.svg"


# --------------------------
# 🔹 TABLE UTILISATEUR (User)
# --------------------------
class User(db.Model):
    __tablename__ = "user"
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(191), unique=True, nullable=False)
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))

    companies = db.relationship("Company", back_populates="user")
    addresses = db.relationship("UsersAddress", back_populates="user")
    payment_configs = db.relationship("UserPaymentConfig", back_populates="user")
    orders = db.relationship("Order", back_populates="user")
    reviews = db.relationship("ProductReview", back_populates="user")

    @property
    def name(self):
        return f"{self.first_name} {self.last_name}"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)


# --------------------------------
# 🔹 TABLE ADRESSE (UsersAddress)
# --------------------------------
class UsersAddress(db.Model):
    __tablename__ = "users_address"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    building_name = db.Column(db.String(191))
    street_address1 = db.Column(db.String(191), nullable=False)
    city = db.Column(db.String(100), nullable=False)
    country = db.Column(db.String(100), nullable=False)
    postcode = db.Column(db.String(20), nullable=False)
    phone_number_extension = db.Column(db.String(8))
    phone_number = db.Column(db.String(30))

    user = db.relationship("User", back_populates="addresses")


# ----------------------------
# 🔹 TABLE ENTREPRISE (Company)
# ----------------------------
class Company(db.Model):
    __tablename__ = "company"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    name = db.Column(db.String(191), nullable=False)
    slug = db.Column(db.String(191), unique=True, nullable=False)
    phone_number_extension = db.Column(db.String(8))
    phone_number = db.Column(db.String(30))
    mobile_number_extension = db.Column(db.String(8))
    mobile_number = db.Column(db.String(30))
    # adresses seedées après les entreprises -> nullable
    users_addresses_id = db.Column(db.Integer, db.ForeignKey("users_address.id"))
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))

    user = db.relationship("User", back_populates="companies")
    products = db.relationship("Product", back_populates="company")


# ---------------------------------------------
# 🔹 TABLE CANDIDATURE VENDEUR (VendorApplication)
# ---------------------------------------------
class VendorApplication(db.Model):
    __tablename__ = "vendor_application"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    proposed_company_name = db.Column(db.String(191), nullable=False)
    users_addresses_id = db.Column(db.Integer, db.ForeignKey("users_address.id"))
    reason_given = db.Column(db.Text)
    # None = en attente, True = acceptée, False = refusée
    accepted = db.Column(db.Boolean)
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))

    user = db.relationship("User")

    @property
    def pending(self):
        return self.accepted is None


# ----------------------------
# 🔹 TABLE PRODUIT (Product)
# ----------------------------
class Product(db.Model):
    __tablename__ = "product"
    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("company.id"), nullable=False)
    name = db.Column(db.String(191), nullable=False)
    short_description = db.Column(db.String(191), nullable=False)
    long_description = db.Column(db.Text)
    product_details = db.Column(db.Text)
    cost = db.Column(db.Numeric(10, 2), nullable=False)  # prix en livres sterling
    shippable = db.Column(db.Boolean, default=True)
    free_delivery = db.Column(db.Boolean, default=False)
    image_path = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))
    deleted_at = db.Column(db.DateTime)  # suppression logique

    company = db.relationship("Company", back_populates="products")
    reviews = db.relationship("ProductReview", back_populates="product", order_by="ProductReview.id")
    order_products = db.relationship("OrderProduct", back_populates="product")

    @property
    def path(self):
        return f"/products/{self.id}"

    @property
    def formatted_cost(self):
        return "£{:,.2f}".format(Decimal(self.cost or 0))

    @property
    def image_url(self):
        return self.image_path or DEFAULT_IMAGE_PATH

    def using_default_image(self):
        return self.image_path in (None, DEFAULT_IMAGE_PATH)

    @property
    def review(self):
        """Average review score formatted with two decimals, "0.00" when unreviewed."""
        avg = (
            db.session.query(func.avg(ProductReview.score))
            .filter(ProductReview.product_id == self.id)
            .scalar()
        )
        if avg is None:
            return "0.00"
        return "{:.2f}".format(float(avg))

    def did_user_purchase_product(self, user_id):
        return (
            db.session.query(OrderProduct.id)
            .join(Order, Order.id == OrderProduct.order_id)
            .filter(OrderProduct.product_id == self.id, Order.user_id == user_id)
            .first()
            is not None
        )

    def did_user_review_product(self, user_id):
        return any(r.user_id == user_id for r in self.reviews)

    def does_user_own_product(self, user_id):
        return self.company.user_id == user_id


# ------------------------------------
# 🔹 TABLE AVIS PRODUIT (ProductReview)
# ------------------------------------
class ProductReview(db.Model):
    __tablename__ = "product_review"
    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    score = db.Column(db.Integer, nullable=False)  # 1 à 5
    content = db.Column(db.Text)
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))

    product = db.relationship("Product", back_populates="reviews")
    user = db.relationship("User", back_populates="reviews")
    flags = db.relationship("FlaggedProductReview", back_populates="product_review")


# ----------------------------------------------
# 🔹 TABLE AVIS SIGNALÉS (FlaggedProductReview)
# ----------------------------------------------
class FlaggedProductReview(db.Model):
    __tablename__ = "flagged_product_review"
    id = db.Column(db.Integer, primary_key=True)
    product_reviews_id = db.Column(db.Integer, db.ForeignKey("product_review.id"), nullable=False)
    flagged_from_ip = db.Column(db.String(45), nullable=False)
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))

    product_review = db.relationship("ProductReview", back_populates="flags")

    # au-delà de ce nombre de signalements un avis attend une modération
    MODERATION_THRESHOLD = 4

    @classmethod
    def has_ip_flagged_review(cls, ip_address, review_id):
        return cls.query.filter_by(flagged_from_ip=ip_address, product_reviews_id=review_id).first() is not None

    @classmethod
    def get_flag_count(cls, review_id):
        return cls.query.filter_by(product_reviews_id=review_id).count()

    @classmethod
    def unanswered(cls):
        """Flags belonging to reviews flagged more than MODERATION_THRESHOLD times."""
        ids = (
            db.select(cls.product_reviews_id)
            .group_by(cls.product_reviews_id)
            .having(func.count(cls.id) > cls.MODERATION_THRESHOLD)
        )
        return cls.query.filter(cls.product_reviews_id.in_(ids))

    @staticmethod
    def mod_decision_error(reason_given, accept_decision, decline_decision):
        """Return the validation message for a moderator decision, or None when it is valid."""
        if reason_given is None:
            return "Reason not provided."
        if len(reason_given) < 10:
            return "Reason must be longer than 10 characters."
        if len(reason_given) > 191:
            return "Reason exceeds maximum length 191."
        if accept_decision is None and decline_decision is None:
            return "Error processing that request. Contact system administrator."
        return None


# ------------------------------
# 🔹 TABLE COMMANDE (Order)
# ------------------------------
class Order(db.Model):
    __tablename__ = "order"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    reference_number = db.Column(db.String(32), unique=True, nullable=False)
    cost = db.Column(db.Numeric(10, 2), nullable=False)
    # paiements et adresses seedés après les commandes -> nullable
    user_payment_config_id = db.Column(db.Integer, db.ForeignKey("user_payment_config.id"))
    users_addresses_id = db.Column(db.Integer, db.ForeignKey("users_address.id"))
    created_at = db.Column(db.DateTime, server_default=text("CURRENT_TIMESTAMP"))

    user = db.relationship("User", back_populates="orders")
    products = db.relationship("OrderProduct", back_populates="order", cascade="all, delete-orphan")

    @property
    def formatted_cost(self):
        return "£{:,.2f}".format(Decimal(self.cost or 0))


# ------------------------------------------
# 🔹 TABLE LIGNES DE COMMANDE (OrderProduct)
# ------------------------------------------
class OrderProduct(db.Model):
    __tablename__ = "order_product"
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("order.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False)
    company_id = db.Column(db.Integer, db.ForeignKey("company.id"), nullable=False)
    # copie du produit au moment de l'achat
    name = db.Column(db.String(191), nullable=False)
    cost = db.Column(db.Numeric(10, 2), nullable=False)
    shippable = db.Column(db.Boolean, default=True)
    free_delivery = db.Column(db.Boolean, default=False)
    amount = db.Column(db.Integer, nullable=False, default=1)

    order = db.relationship("Order", back_populates="products")
    product = db.relationship("Product", back_populates="order_products")


# ----------------------------------------------
# 🔹 TABLE MOYEN DE PAIEMENT (UserPaymentConfig)
# ----------------------------------------------
class UserPaymentConfig(db.Model):
    __tablename__ = "user_payment_config"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    card_holder_name = db.Column(db.String(191), nullable=False)
    card_number = db.Column(db.String(19), nullable=False)
    expiry_month = db.Column(db.Integer, nullable=False)
    expiry_year = db.Column(db.Integer, nullable=False)
    phone_number_extension = db.Column(db.String(8))
    phone_number = db.Column(db.String(30))
    mobile_number_extension = db.Column(db.String(8))
    mobile_number = db.Column(db.String(30))
    users_addresses_id = db.Column(db.Integer, db.ForeignKey("users_address.id"))

    user = db.relationship("User", back_populates="payment_configs")

    @property
    def hidden_card_number(self):
        return self.card_number[-4:].rjust(16, "*")

    @property
    def expiry_date(self):
        return date(self.expiry_year, self.expiry_month, 1).strftime("%m/%Y")

    @property
    def edit_expiry_date(self):
        return date(self.expiry_year, self.expiry_month, 1).strftime("%Y-%m")

    @property
    def formatted_phone_number(self):
        return f"{self.phone_number_extension} {self.phone_number}"

    @property
    def formatted_mobile_number(self):
        return f"{self.mobile_number_extension} {self.mobile_number}"
