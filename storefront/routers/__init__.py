from storefront.routers import auth, cart, checkout, orders, products

ROUTERS = [auth.router, products.router, cart.router, orders.router, checkout.router]
