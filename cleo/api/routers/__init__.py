# This file marks the routers package for API route modules.
# Each module serves one route category of the public contract in `cleo.api.route_table`.
