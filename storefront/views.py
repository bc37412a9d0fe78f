from dataclasses import dataclass, field
from typing import Any, Dict, List

from flask import current_app
from markupsafe import Markup

DEFAULT_LAYOUT = "layouts/master"


@dataclass
class HomeView:
    title: str
    products: List[Any]

    def context(self) -> Dict[str, Any]:
        return {"Title": self.title, "Products": self.products}


@dataclass
class ProductListView:
    title: str
    products: List[Any]
    page: int
    page_size: int
    total: int

    @property
    def has_prev(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page * self.page_size < self.total

    def context(self) -> Dict[str, Any]:
        return {
            "Title": self.title,
            "Products": self.products,
            "Page": self.page,
            "PageSize": self.page_size,
            "HasPrev": self.has_prev,
            "HasNext": self.has_next,
        }


@dataclass
class ProductView:
    product: Any
    reviews: List[Any] = field(default_factory=list)

    def context(self) -> Dict[str, Any]:
        return {
            "Title": self.product.name,
            "Product": self.product,
            "Reviews": self.reviews,
        }


def render_view(template_name: str, context: Dict[str, Any], layout: str = DEFAULT_LAYOUT) -> str:
    """
    Render `template_name` with `context` and embed the result in `layout`.

    Both names are given without the ".html" suffix. The layout sees the same
    context plus `embed`, the already rendered page body. Missing templates
    raise jinja2.TemplateNotFound.
    """
    env = current_app.jinja_env
    current_app.update_template_context(context)
    body = env.get_template(f"{template_name}.html").render(context)
    if not layout:
        return body
    return env.get_template(f"{layout}.html").render(dict(context, embed=Markup(body)))
