# main/urls.py
from django.urls import path, re_path

from . import views

urlpatterns = [
    path('', views.home, name='home'),
    re_path(r'^order/?$', views.order, name='order'),
    re_path(r'^contact/?$', views.contact, name='contact'),
    re_path(r'^auth/?$', views.auth, name='auth'),
    re_path(r'^auth/forgot-password/?$', views.forgot_password, name='forgot_password'),
    re_path(r'^auth/reset-password/?$', views.reset_password, name='reset_password'),
    re_path(r'^dashboard/?$', views.dashboard, name='dashboard'),
    re_path(r'^zapchasti/?$', views.catalog, name='catalog'),
    re_path(r'^zapchasti/(?P<slug>[-\w]+)/?$', views.brand_page, name='brand'),
]
