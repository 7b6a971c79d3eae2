# This file marks the schemas package for API request and response models.
# Models are grouped by route category, with shared pieces in `common`.
