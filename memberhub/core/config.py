"""Application configuration"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Database Configuration
    DATABASE_USER = os.getenv("DATABASE_USER", "postgres")
    DATABASE_PASSWORD = os.getenv("DATABASE_PASSWORD", "postgres")
    DATABASE_HOST = os.getenv("DATABASE_HOST", "localhost")
    DATABASE_PORT = os.getenv("DATABASE_PORT", "5432")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "memberhub")

    @property
    def DATABASE_URL(self) -> str:
        """Full URL from the environment, else a PostgreSQL URL built from the parts"""
        url = os.getenv("DATABASE_URL")
        if url:
            return url
        return f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Development/Production Settings
    ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Project Metadata
    PROJECT_NAME = os.getenv("PROJECT_NAME", "MemberHub API")
    PROJECT_VERSION = "1.0.0"
    API_V1_STR = "/api/v1"

    # JWT Authentication
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-this-in-production-min-32-chars")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))  # 24 hours
    VERIFICATION_TOKEN_EXPIRE_MINUTES = int(os.getenv("VERIFICATION_TOKEN_EXPIRE_MINUTES", 30))

    # Password hashing
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

    # Super Admin Configuration (Initial Setup)
    SUPER_ADMIN_USERNAME = os.getenv("SUPER_ADMIN_USERNAME", "superadmin")
    SUPER_ADMIN_EMAIL = os.getenv("SUPER_ADMIN_EMAIL", "superadmin@memberhub.local")
    SUPER_ADMIN_PASSWORD = os.getenv("SUPER_ADMIN_PASSWORD", "SuperSecure@Admin123!")

    # SMTP / Email configuration
    SMTP_HOST = os.getenv("SMTP_HOST", "")
    SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", os.getenv("SMTP_PASS", ""))
    EMAIL_FROM = os.getenv("EMAIL_FROM", "")
    EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "MemberHub")
    SMTP_TIMEOUT = int(os.getenv("SMTP_TIMEOUT", 15))

    # There is no SMS provider; when enabled, phone codes are written to the log instead.
    SMS_LOG_ONLY = os.getenv("SMS_LOG_ONLY", "false").lower() == "true"

    # OTP
    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", 10))
    MEMBER_LOGIN_OTP_EXPIRE_MINUTES = int(os.getenv("MEMBER_LOGIN_OTP_EXPIRE_MINUTES", 5))
    OTP_MAX_ATTEMPTS = int(os.getenv("OTP_MAX_ATTEMPTS", 5))
    MEMBER_LOGIN_OTP = os.getenv("MEMBER_LOGIN_OTP", "true").lower() == "true"

    def missing_smtp_settings(self) -> List[str]:
        """Names of SMTP variables that are required but unset"""
        required = {
            "SMTP_HOST": self.SMTP_HOST,
            "SMTP_USER": self.SMTP_USER,
            "SMTP_PASSWORD": self.SMTP_PASSWORD,
        }
        return [name for name, value in required.items() if not value]

    @property
    def sender_address(self) -> str:
        return self.EMAIL_FROM or self.SMTP_USER


settings = Settings()
