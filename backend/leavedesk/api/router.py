from fastapi import APIRouter

from leavedesk.api.persons import persons_router
from leavedesk.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(persons_router)
api_router.include_router(requests_router)
