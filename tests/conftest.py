import sys
from decimal import Decimal
from pathlib import Path
import pytest

# s'assurer que la racine du projet est importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from run import create_app
from storefront import models


@pytest.fixture
def db_file(tmp_path):
    return str(tmp_path / "test_storefront.db")


@pytest.fixture
def app(db_file):
    config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
        "SECRET_KEY": "test-secret-key",
        "SEED_ON_STARTUP": False,
    }
    app = create_app(config)
    yield app
    with app.app_context():
        models.db.session.remove()
        models.db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def make_products(ctx):
    """Create `n` products named "Product 01".."Product nn" owned by one company."""
    def _make(n):
        owner = models.User(first_name="Owner", last_name="One", email="owner@example.com", slug="owner-one")
        owner.set_password("x")
        models.db.session.add(owner)
        models.db.session.flush()
        company = models.Company(user_id=owner.id, name="Acme", slug="acme")
        models.db.session.add(company)
        models.db.session.flush()
        products = []
        for i in range(1, n + 1):
            p = models.Product(
                company_id=company.id,
                name=f"Product {i:02d}",
                short_description=f"Short {i:02d}",
                cost=Decimal("10.00") + i,
            )
            models.db.session.add(p)
            products.append(p)
        models.db.session.commit()
        return products
    return _make
