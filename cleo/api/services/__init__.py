# This file marks the services package that holds the business rules behind each router.
