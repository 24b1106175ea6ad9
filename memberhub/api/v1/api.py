"""API v1 router aggregation"""
from fastapi import APIRouter
from memberhub.api.v1.endpoints import admin_registration, auth_endpoints, superadmin_endpoints
from memberhub.api.v1.endpoints import member_endpoints, admin_endpoints, organization_endpoints

api_router = APIRouter()

api_router.include_router(admin_registration.router,     prefix="/admin-registration", tags=["Admin Registration"])
api_router.include_router(auth_endpoints.router,         prefix="/auth",               tags=["Authentication"])
api_router.include_router(superadmin_endpoints.router,   prefix="/superadmin",         tags=["Superadmin"])
api_router.include_router(admin_endpoints.router,        prefix="/admin",              tags=["Admin"])
api_router.include_router(member_endpoints.router,       prefix="/members",            tags=["Members"])
api_router.include_router(organization_endpoints.router, prefix="/organizations",      tags=["Organizations"])
