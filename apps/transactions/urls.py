from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'transactions'

router = DefaultRouter()
router.register(r'', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # GET    /api/transactions/                 - List own transactions
    # GET    /api/transactions/{id}/            - Get transaction
    # POST   /api/transactions/link-token/      - Start bank linking
    # POST   /api/transactions/exchange-token/  - Store bank link
    # GET    /api/transactions/accounts/        - Linked bank accounts
    # POST   /api/transactions/sync/            - Import and recompute stats
    path('', include(router.urls)),
]
