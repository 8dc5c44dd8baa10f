"""URL routes for accounts app."""

from django.urls import path

from server.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('register', views.register, name='register'),
    path('login', views.login, name='login'),
    path('google', views.google, name='google'),
    path('refresh-token', views.refresh_token, name='refresh_token'),
    path('logout', views.logout, name='logout'),
]
