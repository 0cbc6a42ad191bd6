# schemas/expenses/__init__.py
from .requests import ExpenseCreate, ExpenseUpdate
from .responses import ExpenseResponse
