
from typing import Any, Dict, Optional
from fastapi import Depends, HTTPException, Request,status
from fastapi.security import HTTPBearer , http
from jose import jwt, JWTError
from nexora.auth.constants import logger
from nexora.config.settings import config_settings


class Authentication(HTTPBearer):
    """Verifies bearer tokens issued by the auth service and returns their claims."""

    def __init__(self,auto_error=True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request:Request) -> Optional[Dict[str, Any]]:
        auth_creds: Optional[http.HTTPAuthorizationCredentials] = await super().__call__(request)
        if auth_creds is None:
            return None

        decoded_token=self.decode_token(auth_creds.credentials)

        if not decoded_token or not decoded_token.get("sub"):
            logger.warning("auth.token.invalid", extra={"path": request.url.path})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,detail="Invalid or expired token provided.")

        request.state.user_identifier = str(decoded_token["sub"])
        request.state.user_roles = list(decoded_token.get("roles") or [])
        return decoded_token

    def decode_token(self,token:str):
        """To verify the signature , expiration and user claims of token"""
        try:
            token_data=jwt.decode(
            token,
            key=config_settings.JWT_SECRET,
            algorithms=[config_settings.JWT_ALGO]
            )
            return token_data
        except JWTError:
            return None


authenticate = Authentication()


async def current_user_id(claims: Dict[str, Any] = Depends(authenticate)) -> str:
    return str(claims["sub"])


def require_roles(*roles: str):
    async def _checker(request: Request, claims: Dict[str, Any] = Depends(authenticate)) -> str:
        user_roles = set(claims.get("roles") or [])

        if not user_roles.intersection(roles):
            logger.warning("auth.role.denied", extra={"path": request.url.path, "required": list(roles),
                                                      "user_id": claims.get("sub")})
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,detail="User doesn't have the required role")

        return str(claims["sub"])

    return _checker
