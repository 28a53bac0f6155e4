"""
Common Error Constants

User-facing messages shared by the domain services.
"""

# Auth
ERROR_LOGIN_REQUIRED_WISHLIST = "Please login to add to wishlist"
ERROR_LOGIN_REQUIRED_COMPARISON = "Please login to compare products"

# Wishlist
ERROR_ALREADY_IN_WISHLIST = "Product already in wishlist"
ERROR_WISHLIST_FAILED = "Failed to update wishlist"

# Comparison
ERROR_ALREADY_IN_COMPARISON = "Product already in comparison"
ERROR_COMPARISON_LIMIT = "Maximum 4 products can be compared"
ERROR_COMPARISON_FAILED = "Failed to update comparison"

# Reviews
ERROR_LOGIN_REQUIRED_REVIEW = "Please login to submit a review"
ERROR_INVALID_RATING = "Rating must be between 1 and 5"
ERROR_REVIEW_FAILED = "Failed to submit review"
