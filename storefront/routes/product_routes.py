from flask import Blueprint, current_app, jsonify, request

from storefront.services import CatalogError, PageRequestError
from storefront.views import ProductListView, ProductView, render_view

products_bp = Blueprint("products", __name__, url_prefix="/products")


def _catalog():
    return current_app.extensions["services"]["catalog"]


@products_bp.route("")
@products_bp.route("/")
def index():
    page = request.args.get("page", "1")
    page_size = request.args.get("page_size", str(current_app.config["PRODUCTS_PAGE_SIZE"]))
    catalog = _catalog()
    try:
        req = catalog.page_request(page, page_size)
        products = catalog.get_page(req)
        total = catalog.count_products()
    except PageRequestError:
        return jsonify({"error": "Invalid pagination parameters."}), 400
    except CatalogError:
        return jsonify({"error": "Failed to fetch products."}), 500

    view = ProductListView(
        title="Products",
        products=products,
        page=req.page,
        page_size=req.page_size,
        total=total,
    )
    return render_view("products/index", view.context())


@products_bp.route("/<int:product_id>")
def show(product_id):
    catalog = _catalog()
    try:
        product = catalog.get_product(product_id)
        if product is None:
            return jsonify({"error": "Product not found."}), 404
        reviews = catalog.get_reviews(product_id)
    except CatalogError:
        return jsonify({"error": "Failed to fetch products."}), 500

    return render_view("products/show", ProductView(product=product, reviews=reviews).context())
