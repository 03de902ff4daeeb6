# api/urls.py
from django.urls import path

from apps.contact import views as contact_views
from apps.orders import views as order_views
from apps.users import views as user_views

urlpatterns = [
    # Auth
    path('register', user_views.RegisterView.as_view(), name='api_register'),
    path('login', user_views.LoginView.as_view(), name='api_login'),
    path('logout', user_views.logout, name='api_logout'),
    path('user', user_views.current_user, name='api_user'),
    path('user/profile', user_views.update_profile, name='api_user_profile'),

    # Password reset
    path('forgot-password', user_views.ForgotPasswordView.as_view(), name='api_forgot_password'),
    path('verify-reset-token', user_views.VerifyResetTokenView.as_view(), name='api_verify_reset_token'),
    path('reset-password', user_views.ResetPasswordView.as_view(), name='api_reset_password'),

    # Orders
    path('orders', order_views.orders, name='api_orders'),
    path('orders/<str:order_id>', order_views.order_detail, name='api_order_detail'),
    path('guest-order', order_views.guest_order, name='api_guest_order'),

    # Contact
    path('contact', contact_views.contact, name='api_contact'),
]
