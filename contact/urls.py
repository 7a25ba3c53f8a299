from django.urls import path

from . import views

app_name = 'contact'

urlpatterns = [
    path('contact/', views.contact_view, name='contact'),
    path('panel/messages/', views.message_list, name='message_list'),
    path('panel/messages/<int:pk>/', views.message_detail, name='message_detail'),
    path('panel/messages/<int:pk>/toggle-read/', views.toggle_read, name='toggle_read'),
    path('panel/messages/<int:pk>/delete/', views.delete_message, name='delete_message'),
]
