from decimal import Decimal

from storefront import models
from storefront.seed import seed_data


def test_product_display_helpers(make_products):
    p = make_products(1)[0]
    p.cost = Decimal("1234.5")
    assert p.formatted_cost == "£1,234.50"
    assert p.path == f"/products/{p.id}"
    assert p.using_default_image()
    assert p.image_url == models.DEFAULT_IMAGE_PATH
    p.image_path = "/uploads/lamp.jpg"
    assert not p.using_default_image()
    assert p.image_url == "/uploads/lamp.jpg"


def test_product_review_average(make_products):
    p = make_products(1)[0]
    assert p.review == "0.00"
    user = models.User.query.first()
    for score in (5, 4, 4):
        models.db.session.add(models.ProductReview(product_id=p.id, user_id=user.id, score=score))
    models.db.session.commit()
    assert p.review == "4.33"
    assert p.did_user_review_product(user.id)


def test_purchase_lookup(ctx):
    seed_data()
    amira = models.User.query.filter_by(email="amira.khan@example.com").one()
    bought = models.OrderProduct.query.join(models.Order).filter(models.Order.user_id == amira.id).first().product
    assert bought.did_user_purchase_product(amira.id)
    never = models.Product.query.filter_by(name="Gift Card").one()
    assert not never.did_user_purchase_product(amira.id)


def test_password_hashing(ctx):
    u = models.User(first_name="A", last_name="B", email="a@b.c", slug="a-b")
    u.set_password("hunter22")
    assert u.password_hash != "hunter22"
    assert u.check_password("hunter22")
    assert not u.check_password("wrong")
    assert u.name == "A B"


def test_payment_config_formatting():
    cfg = models.UserPaymentConfig(
        card_number="4012888888881881",
        expiry_month=6,
        expiry_year=2029,
        phone_number_extension="+44",
        phone_number="7700 900000",
        mobile_number_extension="+33",
        mobile_number="6 12 34 56 78",
    )
    assert cfg.hidden_card_number == "************1881"
    assert cfg.expiry_date == "06/2029"
    assert cfg.edit_expiry_date == "2029-06"
    assert cfg.formatted_phone_number == "+44 7700 900000"
    assert cfg.formatted_mobile_number == "+33 6 12 34 56 78"


def test_short_card_number_is_padded():
    assert models.UserPaymentConfig(card_number="378282246310005").hidden_card_number == "************0005"


def test_flagged_review_queries(ctx):
    seed_data()
    reviews = models.ProductReview.query.order_by(models.ProductReview.id).all()
    heavily_flagged = reviews[3]
    assert models.FlaggedProductReview.get_flag_count(heavily_flagged.id) == 5
    assert models.FlaggedProductReview.has_ip_flagged_review("203.0.113.1", heavily_flagged.id)
    assert not models.FlaggedProductReview.has_ip_flagged_review("203.0.113.1", reviews[5].id)

    unanswered = models.FlaggedProductReview.unanswered().all()
    assert {f.product_reviews_id for f in unanswered} == {heavily_flagged.id}


def test_moderator_decision_validation():
    check = models.FlaggedProductReview.mod_decision_error
    assert check(None, "1", None) == "Reason not provided."
    assert check("short", "1", None) == "Reason must be longer than 10 characters."
    assert check("x" * 192, "1", None) == "Reason exceeds maximum length 191."
    assert check("Offensive language used.", None, None).startswith("Error processing")
    assert check("Offensive language used.", "1", None) is None


def test_vendor_application_pending(ctx):
    seed_data()
    apps = models.VendorApplication.query.order_by(models.VendorApplication.id).all()
    assert apps[0].pending
    assert not apps[1].pending


def test_product_ownership(ctx):
    seed_data()
    product = models.Product.query.order_by(models.Product.id).first()
    owner_id = product.company.user_id
    other = models.User.query.filter(models.User.id != owner_id).first()
    assert product.does_user_own_product(owner_id)
    assert not product.does_user_own_product(other.id)
