import os


class Config:
    """Settings read from the environment each time an app is built."""

    def __init__(self):
        self.SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
        self.SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False
        self.JWT_SECRET_KEY = (
            os.environ.get("FISHMARKET_JWT_SECRET")  # preferred
            or os.environ.get("JWT_SECRET_KEY")      # legacy fallback
            or "dev-jwt-secret-change-me-in-production"
        )
        self.JWT_ALGORITHM = "HS256"
        self.TOKEN_TTL_HOURS = int(os.getenv("FISHMARKET_TOKEN_TTL_HOURS", 24))
        self.MIDTRANS_SERVER_KEY = os.getenv("MIDTRANS_SERVER_KEY")
        self.REQUIRE_GATEWAY_SIGNATURE = os.getenv("FISHMARKET_REQUIRE_GATEWAY_SIGNATURE", "1") == "1"
        self.BOOST_COST_CREDITS = int(os.getenv("FISHMARKET_BOOST_COST_CREDITS", 1))
        self.MAX_AD_IMAGES = int(os.getenv("FISHMARKET_MAX_AD_IMAGES", 10))
        self.ADS_PAGE_DEFAULT = 20
        self.ADS_PAGE_MAX = int(os.getenv("FISHMARKET_ADS_PAGE_MAX", 100))
        self.SEED_REFERENCE_DATA = os.getenv("FISHMARKET_SEED_REFERENCE_DATA", "false").lower() == "true"
        self.CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000")
        self.TESTING = os.getenv("TESTING", "false").lower() == "true"
