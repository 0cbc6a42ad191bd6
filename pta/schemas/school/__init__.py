# schemas/school/__init__.py
from .requests import SchoolCreate, SchoolUpdate
from .responses import SchoolResponse
