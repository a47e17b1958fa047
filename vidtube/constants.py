"""Application constants - centralized configuration values."""

# =============================================================================
# Pagination
# =============================================================================
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# =============================================================================
# Limits
# =============================================================================
TWEET_MAX_LENGTH = 280
USERNAME_MAX_LENGTH = 50
TOP_VIDEOS_DEFAULT_LIMIT = 5
RECENT_ACTIVITY_DEFAULT_LIMIT = 20
ANALYTICS_DEFAULT_DAYS = 30

# =============================================================================
# Ranking
# =============================================================================
TRENDING_WINDOW_DAYS = 7

# engagement_score = views * 1 + likes * 5 + comments * 10
ENGAGEMENT_VIEW_WEIGHT = 1
ENGAGEMENT_LIKE_WEIGHT = 5
ENGAGEMENT_COMMENT_WEIGHT = 10

# trending_score = views * 1 + likes * 5
TRENDING_VIEW_WEIGHT = 1
TRENDING_LIKE_WEIGHT = 5

# recommendation_score = views * 0.3 + likes * 2 + noise in [0, 100)
RECOMMENDATION_VIEW_WEIGHT = 0.3
RECOMMENDATION_LIKE_WEIGHT = 2
RECOMMENDATION_NOISE_MAX = 100.0

# =============================================================================
# Sort Options
# =============================================================================
VALID_SORT_ORDERS = ["asc", "desc"]
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = "desc"

# =============================================================================
# Session & Security
# =============================================================================
SESSION_TIMEOUT_DAYS = 7
SESSION_COOKIE_NAME = "vidtube_session"
