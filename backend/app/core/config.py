# 환경변수 로딩 (.env)
from typing import List, Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 원격 이벤트 API (Next.js 백엔드)
    API_BASE_URL: str = "http://localhost:3000"
    SIGNED_URL_PATH: str = "/api/generateSignedUrls"
    # None 이면 타임아웃 없음 (네트워크 스택 기본값에 맡김)
    HTTP_TIMEOUT: Optional[float] = None

    # 이벤트 사진 제한
    MAX_UPLOAD_SIZE: int = 30 * 1024 * 1024  # 30MB
    ACCEPTED_FILE_TYPES: List[str] = [
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/gif",
        "image/webp",
    ]

    # Firebase Identity Toolkit (REST)
    FIREBASE_API_KEY: str | None = None
    IDENTITY_BASE_URL: str = "https://identitytoolkit.googleapis.com/v1"

    # 인증 쿠키
    AUTH_COOKIE_NAME: str = "token"
    COOKIE_MAX_AGE: int = 60 * 60 * 24 * 30  # 30일

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
