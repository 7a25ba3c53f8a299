from django.urls import path

from . import views

app_name = 'popups'

urlpatterns = [
    path('', views.manage_popups, name='manage_popups'),
    path('new/', views.new_popup, name='new_popup'),
    path('<str:slug>/edit/', views.edit_popup, name='edit_popup'),
    path('<str:slug>/delete/', views.delete_popup, name='delete_popup'),
]
