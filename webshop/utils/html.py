"""HTML views for catalog search results and carts."""
from html import escape
from typing import Iterable

from webshop.catalog.client import CatalogArticle
from webshop.utils.enrichment import CartDisplay

# Inline placeholder shown when an article image fails to load
PLACEHOLDER_IMAGE = (
    "data:image/svg+xml,%3Csvg xmlns=%27http://www.w3.org/2000/svg%27 width=%27120%27 height=%27120%27%3E"
    "%3Crect fill=%27%23ddd%27 width=%27120%27 height=%27120%27/%3E%3Ctext fill=%27%23999%27 font-family=%27sans-serif%27 "
    "font-size=%2714%27 x=%2750%25%27 y=%2750%25%27 text-anchor=%27middle%27 dy=%27.3em%27%3ENo Image%3C/text%3E%3C/svg%3E"
)

STYLES = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; padding: 20px; }
    .container { max-width: 1200px; margin: 0 auto; }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; }
    .header h1 { font-size: 28px; font-weight: 600; margin-bottom: 10px; }
    .header .subtitle { font-size: 18px; opacity: 0.9; font-weight: 300; }
    .header .count { font-size: 14px; opacity: 0.8; margin-top: 8px; }
    .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(250px, 1fr)); gap: 20px; padding: 20px 0; }
    .card { border: 1px solid #eee; border-radius: 8px; overflow: hidden; }
    .card-image { display: flex; justify-content: center; background: #f8f9fa; padding: 20px; }
    .card-image img { width: 120px; height: 120px; object-fit: contain; }
    .card-info { padding: 16px; }
    .card-info h3 { font-size: 16px; margin-bottom: 10px; }
    .details { display: flex; justify-content: space-between; font-size: 14px; color: #666; }
    .price { font-weight: 600; color: #764ba2; }
    .unavailable { font-style: italic; color: #999; }
    .empty { padding: 40px; text-align: center; color: #666; }
"""


def _format_price(price: float) -> str:
    return f"CHF {price:.2f}"


def _image_tag(image_url: str, alt: str) -> str:
    return (
        f'<img src="{escape(image_url)}" alt="{escape(alt)}" '
        f"onerror=\"this.onerror=null;this.src='{PLACEHOLDER_IMAGE}';\">"
    )


def _page(title: str, header: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  <style>{STYLES}</style>
</head>
<body>
  <div class="container">
    {header}
    {body}
  </div>
</body>
</html>"""


def generate_products_html(products: Iterable[CatalogArticle], search_term: str) -> str:
    """
    Render catalog search results as a standalone HTML page.

    Args:
        products: Search hits
        search_term: Term the user searched for

    Returns:
        HTML document
    """
    products = list(products)
    cards = "".join(
        f"""
      <div class="card">
        <div class="card-image">{_image_tag(product.image_url, product.description)}</div>
        <div class="card-info">
          <h3>{escape(product.description)}</h3>
          <div class="details">
            <span>Article: {escape(product.article_number)}</span>
            <span class="price">{_format_price(product.normal_price)}</span>
          </div>
        </div>
      </div>"""
        for product in products
    )
    header = f"""<div class="header">
      <h1>Search Results</h1>
      <div class="subtitle">&quot;{escape(search_term)}&quot;</div>
      <div class="count">{len(products)} product(s) found</div>
    </div>"""
    body = f'<div class="grid">{cards}</div>' if products else '<div class="empty">No products found.</div>'
    return _page("Catalog Search Results", header, body)


def generate_cart_html(cart: CartDisplay, username: str) -> str:
    """
    Render an enriched cart as a standalone HTML page.

    Lines whose catalog lookup failed show "Details unavailable" rather
    than a zero price.
    """
    cards = []
    for line in cart.positions:
        if line.degraded:
            title = '<h3 class="unavailable">Details unavailable</h3>'
            price = '<span class="unavailable">Price unavailable</span>'
        else:
            title = f"<h3>{escape(line.description)}</h3>"
            price = f'<span class="price">{_format_price(line.price * line.quantity)}</span>'
        cards.append(f"""
      <div class="card">
        <div class="card-image">{_image_tag(line.image_url, line.description or line.article_number)}</div>
        <div class="card-info">
          {title}
          <div class="details">
            <span>Article: {escape(line.article_number)} &times; {line.quantity}</span>
            {price}
          </div>
        </div>
      </div>""")
    header = f"""<div class="header">
      <h1>Shopping Cart</h1>
      <div class="subtitle">{escape(username)}</div>
      <div class="count">{cart.total_positions} item(s)</div>
    </div>"""
    body = f'<div class="grid">{"".join(cards)}</div>' if cards else '<div class="empty">Your cart is empty.</div>'
    return _page("Shopping Cart", header, body)
