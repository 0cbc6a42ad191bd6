# schemas/payments/__init__.py
from .requests import PaymentCreate, PaymentStatusUpdate
from .responses import (
    PaymentResponse,
    PaymentDetailResponse,
    PaymentStatusUpdateResponse,
    PaymentCategoryOption,
)
