from django.urls import path

from . import views

app_name = 'blog'

urlpatterns = [
    path('', views.post_list, name='post_list'),
    path('manage/', views.manage_posts, name='manage_posts'),
    path('new/', views.new_post, name='new_post'),
    path('<str:slug>/', views.post_detail, name='post_detail'),
    path('<str:slug>/edit/', views.edit_post, name='edit_post'),
    path('<str:slug>/delete/', views.delete_post, name='delete_post'),
]
