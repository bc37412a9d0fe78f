from flask import Blueprint, current_app, jsonify, request

from storefront.services import CatalogError, PageRequestError
from storefront.views import HomeView, render_view

home_bp = Blueprint("home", __name__)


@home_bp.route("/")
def index():
    catalog = current_app.extensions["services"]["catalog"]
    try:
        products = catalog.get_products(
            request.args.get("page", "1"),
            request.args.get("page_size", "10"),
        )
    except PageRequestError:
        return jsonify({"error": "Invalid pagination parameters."}), 400
    except CatalogError:
        return jsonify({"error": "Failed to fetch products."}), 500

    return render_view("index", HomeView(title="Hello, World!", products=products).context())
