"""ShopHub storefront API: catalog, carts, orders and checkout."""

__version__ = "1.0.0"
