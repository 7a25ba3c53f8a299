from django.urls import path

from . import views

app_name = 'content'

urlpatterns = [
    path('admin/content/', views.content_api, name='content_api'),
    path('admin/settings/', views.settings_api, name='settings_api'),
    path('admin/upload/', views.upload_image, name='upload_image'),
    path('admin/images/', views.images_api, name='images_api'),
]
