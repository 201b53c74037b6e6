from fastapi import APIRouter
from nexora.api import version_prefix
from nexora.common.routes import home_router
from nexora.sellers.routes import seller_admin_router, seller_events_router, seller_router


public_routers = APIRouter(prefix=version_prefix)

public_routers.include_router(home_router,tags=["home"])
public_routers.include_router(seller_router, prefix="/sellers",tags=["sellers"])
public_routers.include_router(seller_events_router, prefix="/internal/sellers",tags=["sellers-events"])

#--------------------------------------------------------------------------------------------------------

admin_routers = APIRouter(prefix=f"{version_prefix}/admin")

admin_routers.include_router(seller_admin_router, prefix="/sellers",tags=["sellers-admin"])
