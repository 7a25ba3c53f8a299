from django.urls import path

from . import views

app_name = 'dashboard'

urlpatterns = [
    path('', views.home, name='home'),
    path('home-settings/', views.home_settings, name='home_settings'),
    path('seo/', views.seo_settings, name='seo_settings'),
]
