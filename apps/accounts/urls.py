from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # POST   /api/auth/login/    - JWT pair for email + password
    # GET    /api/auth/user/     - Own profile with bank and visit totals
    # PATCH  /api/auth/user/     - Update display name / avatar
    path('login/', views.login, name='login'),
    path('user/', views.current_user, name='current-user'),
]
