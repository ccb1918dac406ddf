import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from tranquil.config import Settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

NO_TOKEN_MESSAGE = "Unauthorized: No token provided"
INVALID_TOKEN_MESSAGE = "Unauthorized: Invalid token"


def verify_password(plain_password, password_hash):
    return pwd_context.verify(plain_password, password_hash)


def hash_password(password):

    if not isinstance(password, (str, bytes)):
        raise TypeError("Password must be a string or bytes.")

    return pwd_context.hash(password)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """
    Bearer 토큰 발급/검증.
    서명 키와 시계(clock)를 주입받으므로 같은 키와 시각이면 같은 토큰이 나옵니다.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], datetime] = utcnow) -> "TokenService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            lifetime=timedelta(days=settings.access_token_expire_days),
            clock=clock,
        )

    def issue_token(self, user_id: int, email: str) -> str:
        issued_at = self.clock().replace(microsecond=0)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Optional[TokenClaims]:
        """서명과 만료를 확인하고 claims를 돌려줍니다. 실패 사유와 관계없이 None."""
        try:
            # 만료 검사는 주입된 clock 기준으로 직접 수행
            payload = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug("Rejected token: %s", e)
            return None

        try:
            subject_id = int(payload["sub"])
            email = payload["email"]
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError):
            logger.debug("Rejected token: missing or malformed claims")
            return None

        if not isinstance(email, str) or self.clock() > expires_at:
            return None

        return TokenClaims(
            subject_id=subject_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Authorization: Bearer <token> 헤더를 검증하고 토큰의 신원을 핸들러에 넘기는 의존성.
    DB는 조회하지 않습니다. 보호된 라우터에서는 get_db보다 먼저 선언하세요.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized(NO_TOKEN_MESSAGE)

    claims = tokens.verify_token(credentials.credentials)
    if claims is None:
        raise _unauthorized(INVALID_TOKEN_MESSAGE)
    return claims
