# This file marks the HTTP layer of the Cleo content API as a package.
# The app factory lives in `cleo.api.app`; routers, schemas and services sit in subpackages.
