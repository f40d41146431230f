from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from app.core.config import settings

ACCESS_TOKEN_EXPIRE_MINUTES = 60  # Google 액세스 토큰 유효시간과 동일


class AuthService:
    """세션 토큰 관련 서비스

    세션 JWT 는 계정 ID(user_id) 와 Google OAuth 액세스 토큰(access_token) 을 담는다.
    OAuth 로그인/토큰 갱신은 이 서비스의 범위 밖이다.
    """

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
        """JWT 세션 토큰 생성"""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(
            to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
        )
        return encoded_jwt

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """JWT 토큰 검증"""
        try:
            payload = jwt.decode(
                token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
            )
            return payload
        except JWTError:
            return None


# 싱글톤 인스턴스
auth_service = AuthService()
