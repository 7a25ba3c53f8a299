from django.urls import path

from . import views

app_name = 'about_me'

urlpatterns = [
    path('', views.about_view, name='about_me'),
    path('edit/', views.edit_about, name='edit_about'),
]
