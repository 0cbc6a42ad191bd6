# schemas/parents/__init__.py
from .requests import ParentCreate, ParentUpdate
from .responses import ParentResponse, ParentDetailResponse
